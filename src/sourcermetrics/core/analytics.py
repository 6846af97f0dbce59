"""Platform-wide job and company analytics for the admin overview."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable

import pendulum

from ..cache import SourcerDirectory
from ..schemas import Candidate, Job, JobStatus
from .aggregator import candidates_lookup
from .numeric import mean, round_half_up, round_to, safe_div
from .window import within_window

TOP_LIMIT = 5
NO_CONTACT = "N/A"

# The analytics screen names its windows differently from the leaderboard.
ANALYTICS_WINDOWS: dict[str, str] = {
    "7d": "7days",
    "30d": "30days",
    "90d": "90days",
    "all": "alltime",
}


@dataclass(slots=True)
class SourcerActivity:
    sourcer_id: str
    name: str
    completed: int = 0
    candidates: int = 0


@dataclass(slots=True)
class CompanyActivity:
    company_name: str
    job_count: int = 0
    unclaimed_jobs: int = 0
    claimed_jobs: int = 0
    completed_jobs: int = 0
    candidates_requested: int = 0
    candidates_delivered: int = 0
    total_delivery_days: int = 0
    completed_jobs_with_delivery_time: int = 0
    main_contact_email: str = NO_CONTACT
    latest_job_id: str | None = None

    @property
    def avg_delivery_days(self) -> float:
        return safe_div(self.total_delivery_days, self.completed_jobs_with_delivery_time)


@dataclass(slots=True)
class AnalyticsReport:
    window: str
    total_jobs: int
    total_candidates: int
    completion_rate: int
    avg_candidates_per_job: int
    avg_completion_hours: float
    status_distribution: dict[str, int]
    top_sourcers: list[SourcerActivity] = field(default_factory=list)
    company_activity: list[CompanyActivity] = field(default_factory=list)

    def to_display(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["avg_completion_hours"] = round_to(self.avg_completion_hours)
        payload["avg_completion_display"] = format_duration(self.avg_completion_hours)
        for company, source in zip(payload["company_activity"], self.company_activity):
            company["avg_delivery_days"] = round_to(source.avg_delivery_days)
        return payload


def format_duration(hours: float) -> str:
    """Render hours as ``"<h>h <m>m"``."""
    if not hours or math.isnan(hours) or hours < 0:
        return "0h 0m"
    total_minutes = round_half_up(hours * 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


class PlatformAnalytics:
    """Completion, volume and company roll-ups over a created-at window."""

    def __init__(
        self,
        *,
        directory: SourcerDirectory | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._directory = directory or SourcerDirectory()
        self._now_provider = now_provider or pendulum.now

    def compute(
        self,
        jobs: Iterable[Job] | None,
        candidates: Iterable[Candidate] | None,
        window: str = "alltime",
        *,
        now: datetime | None = None,
    ) -> AnalyticsReport:
        window = ANALYTICS_WINDOWS.get(window, window)
        reference = now or self._now_provider()
        all_jobs = list(jobs or ())
        all_candidates = list(candidates or ())
        lookup = candidates_lookup(all_candidates)

        windowed_jobs = within_window(all_jobs, window, lambda job: job.created_at, now=reference)
        windowed_candidates = within_window(
            all_candidates, window, lambda candidate: candidate.submitted_at, now=reference
        )
        completed = [job for job in windowed_jobs if job.status == JobStatus.COMPLETED]

        return AnalyticsReport(
            window=window,
            total_jobs=len(windowed_jobs),
            total_candidates=len(windowed_candidates),
            completion_rate=round_half_up(safe_div(len(completed), len(windowed_jobs)) * 100),
            avg_candidates_per_job=round_half_up(
                safe_div(len(windowed_candidates), len(windowed_jobs))
            ),
            avg_completion_hours=mean(job.completion_hours for job in completed),
            status_distribution=self._status_distribution(windowed_jobs),
            top_sourcers=self._top_sourcers(completed, lookup),
            # company roll-ups cover every job regardless of window
            company_activity=self._company_activity(all_jobs, lookup),
        )

    @staticmethod
    def _status_distribution(jobs: list[Job]) -> dict[str, int]:
        distribution = {status.value.lower(): 0 for status in JobStatus}
        for job in jobs:
            distribution[job.status.value.lower()] += 1
        return distribution

    def _top_sourcers(
        self,
        completed: list[Job],
        lookup: Callable[[str], list[Candidate]],
    ) -> list[SourcerActivity]:
        stats: dict[str, SourcerActivity] = {}
        claimed = [job for job in completed if job.sourcer_id]
        names = self._directory.names(job.sourcer_id for job in claimed) if claimed else {}
        for job in claimed:
            entry = stats.get(job.sourcer_id)
            if entry is None:
                entry = stats[job.sourcer_id] = SourcerActivity(
                    sourcer_id=job.sourcer_id,
                    name=names[job.sourcer_id],
                )
            entry.completed += 1
            entry.candidates += len(lookup(job.id))
        ranked = sorted(stats.values(), key=lambda item: -item.completed)
        return ranked[:TOP_LIMIT]

    @staticmethod
    def _company_activity(
        jobs: list[Job],
        lookup: Callable[[str], list[Candidate]],
    ) -> list[CompanyActivity]:
        grouped: dict[str, list[Job]] = defaultdict(list)
        for job in jobs:
            if job.company_name:
                grouped[job.company_name].append(job)

        activity: list[CompanyActivity] = []
        for company, company_jobs in grouped.items():
            entry = CompanyActivity(company_name=company)
            for job in company_jobs:
                entry.job_count += 1
                entry.candidates_requested += job.candidates_requested
                entry.candidates_delivered += len(lookup(job.id))
                if job.status == JobStatus.UNCLAIMED:
                    entry.unclaimed_jobs += 1
                elif job.status == JobStatus.CLAIMED:
                    entry.claimed_jobs += 1
                else:
                    entry.completed_jobs += 1
                    delivery_days = math.ceil(
                        (job.updated_at - job.created_at).total_seconds() / 86400
                    )
                    if delivery_days > 0:
                        entry.total_delivery_days += delivery_days
                        entry.completed_jobs_with_delivery_time += 1

            by_created = sorted(company_jobs, key=lambda job: job.created_at)
            entry.main_contact_email = by_created[0].user_email or NO_CONTACT
            entry.latest_job_id = by_created[-1].id
            activity.append(entry)

        activity.sort(key=lambda item: -item.job_count)
        return activity[:TOP_LIMIT]
