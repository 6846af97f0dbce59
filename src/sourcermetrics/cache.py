"""Read-through caches for match scores and sourcer display names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

import pendulum
import structlog
from pydantic import ValidationError

from .schemas import MatchScore, SourcerProfile

MatchScoreLoader = Callable[[], Mapping[str, Any]]
ProfileLoader = Callable[[Sequence[str]], Iterable[SourcerProfile | Mapping[str, Any]]]

UNKNOWN_SOURCER = "Unknown Sourcer"


class MatchScoreCache:
    """Session-scoped match-score map.

    The loader runs on first access only. The cached map is kept until
    ``invalidate`` is called; a failed load counts as an empty map.
    """

    def __init__(self, loader: MatchScoreLoader | None = None) -> None:
        self._loader = loader
        self._scores: dict[str, MatchScore] | None = None
        self._logger = structlog.get_logger(__name__)

    @property
    def loaded(self) -> bool:
        return self._scores is not None

    def get(self) -> dict[str, MatchScore]:
        if self._scores is None:
            self._scores = self._load()
        return self._scores

    def invalidate(self) -> None:
        self._scores = None

    def _load(self) -> dict[str, MatchScore]:
        if self._loader is None:
            return {}
        try:
            raw = self._loader() or {}
        except (OSError, ValueError) as exc:
            self._logger.warning("match_scores.load_failed", error=str(exc))
            return {}

        scores: dict[str, MatchScore] = {}
        skipped = 0
        for candidate_id, entry in raw.items():
            parsed = _parse_match_score(entry)
            if parsed is None:
                skipped += 1
                continue
            scores[str(candidate_id)] = parsed
        self._logger.debug("match_scores.loaded", count=len(scores), skipped=skipped)
        return scores


def _parse_match_score(entry: Any) -> MatchScore | None:
    if isinstance(entry, MatchScore):
        return entry
    if isinstance(entry, bool):
        return None
    if isinstance(entry, (int, float)):
        try:
            return MatchScore(score=float(entry))
        except (OverflowError, ValidationError):
            return None
    if isinstance(entry, Mapping):
        try:
            return MatchScore.model_validate(entry)
        except ValidationError:
            return None
    return None


@dataclass(slots=True)
class _DirectoryEntry:
    name: str | None
    fetched_at: pendulum.DateTime


class SourcerDirectory:
    """Sourcer id to display name lookup with time-based staleness.

    Entries older than ``ttl_seconds`` are re-fetched on next access. Ids with
    no profile fall back to a shortened id label.
    """

    def __init__(
        self,
        loader: ProfileLoader | None = None,
        *,
        ttl_seconds: float = 300.0,
        now_provider: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._loader = loader
        self._ttl_seconds = ttl_seconds
        self._now_provider = now_provider or pendulum.now
        self._entries: dict[str, _DirectoryEntry] = {}
        self._logger = structlog.get_logger(__name__)

    @staticmethod
    def fallback_name(sourcer_id: str) -> str:
        return f"Sourcer {sourcer_id[:8]}..."

    def names(self, sourcer_ids: Iterable[str]) -> dict[str, str]:
        ids = list(dict.fromkeys(sourcer_ids))
        now = self._now_provider()
        stale = [sid for sid in ids if self._is_stale(sid, now)]
        if stale:
            self._refresh(stale, now)
        return {sid: self._display_name(sid) for sid in ids}

    def name(self, sourcer_id: str) -> str:
        return self.names([sourcer_id])[sourcer_id]

    def invalidate(self, sourcer_id: str | None = None) -> None:
        if sourcer_id is None:
            self._entries.clear()
        else:
            self._entries.pop(sourcer_id, None)

    def _is_stale(self, sourcer_id: str, now: pendulum.DateTime) -> bool:
        entry = self._entries.get(sourcer_id)
        if entry is None:
            return True
        return (now - entry.fetched_at).total_seconds() >= self._ttl_seconds

    def _refresh(self, sourcer_ids: list[str], now: pendulum.DateTime) -> None:
        if self._loader is None:
            return
        try:
            profiles = list(self._loader(sourcer_ids))
        except (OSError, ValueError) as exc:
            self._logger.warning("sourcer_names.load_failed", error=str(exc), ids=len(sourcer_ids))
            return

        found: dict[str, str | None] = {}
        for profile in profiles:
            try:
                parsed = (
                    profile
                    if isinstance(profile, SourcerProfile)
                    else SourcerProfile.model_validate(profile)
                )
            except ValidationError:
                self._logger.debug("sourcer_names.invalid_profile", profile=str(profile))
                continue
            found[parsed.id] = parsed.name or UNKNOWN_SOURCER
        for sid in sourcer_ids:
            self._entries[sid] = _DirectoryEntry(name=found.get(sid), fetched_at=now)

    def _display_name(self, sourcer_id: str) -> str:
        entry = self._entries.get(sourcer_id)
        if entry is None or entry.name is None:
            return self.fallback_name(sourcer_id)
        return entry.name
