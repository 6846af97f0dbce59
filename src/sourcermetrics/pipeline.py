"""File loading, leaderboard pipeline assembly and output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Generic, Iterator, Sequence, TypeVar

import pendulum
import structlog
from pydantic import BaseModel, ValidationError

from . import __version__
from .core import PerformanceEngine, PlatformAnalytics
from .schemas import Candidate, Job, SourcerProfile

ModelT = TypeVar("ModelT", bound=BaseModel)


class RecordLoadError(ValueError):
    """Raised when a records file contains entries that failed to load."""

    def __init__(self, errors: list[str], partial: list[Any]):
        super().__init__("Record loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:
        return f"Record loading failed: {self.errors}"


class RecordLoader(Generic[ModelT]):
    """Load pydantic records from a JSON array or a JSON Lines file."""

    def __init__(self, model: type[ModelT]):
        self._model = model

    def load(self, path: Path) -> list[ModelT]:
        records: list[ModelT] = []
        errors: list[str] = []
        for label, raw in self._iter_raw(path, errors):
            try:
                records.append(self._model.model_validate(raw))
            except ValidationError as exc:
                errors.append(f"{label}: {exc.error_count()} validation error(s) {_first_error(exc)}")
        if errors:
            raise RecordLoadError(errors, records)
        return records

    @staticmethod
    def _iter_raw(path: Path, errors: list[str]) -> Iterator[tuple[str, Any]]:
        text = path.read_text(encoding="utf-8")
        if text.lstrip().startswith("["):
            try:
                items = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc
            for idx, item in enumerate(items, start=1):
                yield f"record {idx}", item
            return

        for idx, line in enumerate(text.splitlines(), start=1):
            raw = line.strip()
            if not raw:
                continue
            try:
                yield f"line {idx}", json.loads(raw)
            except json.JSONDecodeError as exc:
                errors.append(f"line {idx}: invalid JSON ({exc})")


class JobLoader(RecordLoader[Job]):
    def __init__(self) -> None:
        super().__init__(Job)


class CandidateLoader(RecordLoader[Candidate]):
    def __init__(self) -> None:
        super().__init__(Candidate)


class MatchScoreFile:
    """Match-score map persisted as a JSON object keyed by candidate id."""

    def __init__(self, path: Path):
        self._path = path

    def __call__(self) -> dict[str, Any]:
        with self._path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid match score JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("Match score file must contain a JSON object")
        return data


class ProfileFile:
    """Sourcer profiles stored as a JSON array of ``{"id", "name"}`` objects."""

    def __init__(self, path: Path):
        self._path = path

    def __call__(self, sourcer_ids: Sequence[str]) -> list[SourcerProfile]:
        wanted = set(sourcer_ids)
        profiles = RecordLoader(SourcerProfile).load(self._path)
        return [profile for profile in profiles if profile.id in wanted]


class OutputWriter:
    """Persist computed documents."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_json(payload), encoding="utf-8")


def render_json(payload: dict | list[dict]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


class MetricsPipeline:
    """End-to-end leaderboard and analytics orchestrator."""

    def __init__(
        self,
        *,
        engine: PerformanceEngine,
        analytics: PlatformAnalytics,
        job_loader: JobLoader | None = None,
        candidate_loader: CandidateLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._analytics = analytics
        self._jobs = job_loader or JobLoader()
        self._candidates = candidate_loader or CandidateLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run_leaderboard(
        self,
        *,
        jobs_path: Path,
        candidates_path: Path,
        output_path: Path | None = None,
        window: str | None = None,
        sort_by: str | None = None,
        query: str | None = None,
        audit_logger: "AuditLogger | None" = None,
    ) -> dict[str, Any]:
        errors: list[str] = []
        jobs = self._load(self._jobs, jobs_path, "jobs", errors)
        candidates = self._load(self._candidates, candidates_path, "candidates", errors)

        leaderboard = self._engine.leaderboard(
            jobs,
            candidates,
            window=window,
            sort_by=sort_by,
            query=query,
        )

        for record in leaderboard.records:
            if audit_logger:
                audit_logger.append(record.to_display())
            self._logger.debug(
                "leaderboard.entry",
                sourcer_id=record.sourcer_id,
                rank=record.rank,
                performance_score=record.performance_score,
            )

        self._logger.info(
            "leaderboard.computed",
            window=leaderboard.window,
            sort_by=leaderboard.sort_by,
            preset=leaderboard.preset,
            sourcers=len(leaderboard.records),
        )

        document = leaderboard.to_display()
        payload = {
            "metadata": self._metadata(jobs, candidates, errors),
            "leaderboard": document.pop("leaderboard"),
            "summary": document.pop("summary"),
        }
        payload["metadata"].update(document)
        if output_path is not None:
            self._writer.write(output_path, payload)
        return payload

    def run_analytics(
        self,
        *,
        jobs_path: Path,
        candidates_path: Path,
        output_path: Path | None = None,
        window: str = "alltime",
    ) -> dict[str, Any]:
        errors: list[str] = []
        jobs = self._load(self._jobs, jobs_path, "jobs", errors)
        candidates = self._load(self._candidates, candidates_path, "candidates", errors)

        report = self._analytics.compute(jobs, candidates, window)
        self._logger.info(
            "analytics.computed",
            window=report.window,
            total_jobs=report.total_jobs,
            completion_rate=report.completion_rate,
        )

        payload = {
            "metadata": self._metadata(jobs, candidates, errors),
            "analytics": report.to_display(),
        }
        if output_path is not None:
            self._writer.write(output_path, payload)
        return payload

    def _load(self, loader: RecordLoader, path: Path, kind: str, errors: list[str]) -> list:
        try:
            return loader.load(path)
        except RecordLoadError as exc:
            self._logger.warning(f"{kind}.partial_load", errors=exc.errors)
            errors.extend(f"{kind} {message}" for message in exc.errors)
            return exc.partial

    @staticmethod
    def _metadata(jobs: list[Job], candidates: list[Candidate], errors: list[str]) -> dict[str, Any]:
        return {
            "job_count": len(jobs),
            "candidate_count": len(candidates),
            "errors": errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


def _first_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"({location}: {first.get('msg')})"
