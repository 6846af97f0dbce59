"""Per-sourcer aggregation of jobs and submitted candidates."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Mapping, Sequence, Union

from ..schemas import Candidate, Job, JobStatus
from .numeric import mean, round_half_up, safe_div

CandidateLookup = Union[
    Callable[[str], Sequence[Candidate]],
    Mapping[str, Sequence[Candidate]],
]


@dataclass(slots=True)
class RawAggregate:
    """Counts and timings collected for one sourcer before scoring."""

    sourcer_id: str
    jobs: list[Job] = field(default_factory=list)
    completed_jobs: list[Job] = field(default_factory=list)
    claimed_jobs: list[Job] = field(default_factory=list)
    candidates: list[Candidate] = field(default_factory=list)

    @property
    def total_jobs(self) -> int:
        return len(self.jobs)

    @property
    def completed_count(self) -> int:
        return len(self.completed_jobs)

    @property
    def claimed_count(self) -> int:
        return len(self.claimed_jobs)

    @property
    def total_candidates(self) -> int:
        return len(self.candidates)

    @property
    def completion_hours(self) -> list[float]:
        return [job.completion_hours for job in self.completed_jobs]

    @property
    def avg_completion_hours(self) -> float:
        return mean(self.completion_hours)

    @property
    def fastest_completion_hours(self) -> float:
        hours = self.completion_hours
        return min(hours) if hours else 0.0

    @property
    def success_rate(self) -> int:
        return round_half_up(safe_div(self.completed_count, self.total_jobs) * 100)

    @property
    def avg_candidates_per_job(self) -> int:
        return round_half_up(safe_div(self.total_candidates, self.completed_count))

    @property
    def last_active(self) -> datetime | None:
        if not self.jobs:
            return None
        return max(job.updated_at for job in self.jobs)


def candidates_lookup(candidates: Iterable[Candidate] | None) -> Callable[[str], list[Candidate]]:
    """Index candidates by job id and return a lookup function."""
    by_job: dict[str, list[Candidate]] = defaultdict(list)
    for candidate in candidates or ():
        by_job[candidate.job_id].append(candidate)
    return lambda job_id: by_job.get(job_id, [])


def aggregate(
    jobs: Iterable[Job] | None,
    candidates_by_job: CandidateLookup | None = None,
) -> dict[str, RawAggregate]:
    """Group claimed jobs by sourcer, preserving first-seen order.

    Jobs without a sourcer are unclaimed and do not take part.
    """
    lookup = _resolve_lookup(candidates_by_job)
    aggregates: dict[str, RawAggregate] = {}

    for job in jobs or ():
        if not job.sourcer_id:
            continue
        entry = aggregates.get(job.sourcer_id)
        if entry is None:
            entry = aggregates[job.sourcer_id] = RawAggregate(sourcer_id=job.sourcer_id)

        entry.jobs.append(job)
        if job.status == JobStatus.COMPLETED:
            entry.completed_jobs.append(job)
        elif job.status == JobStatus.CLAIMED:
            entry.claimed_jobs.append(job)
        entry.candidates.extend(lookup(job.id) or ())

    return aggregates


def _resolve_lookup(candidates_by_job: CandidateLookup | None) -> Callable[[str], Sequence[Candidate]]:
    if candidates_by_job is None:
        return lambda job_id: ()
    if isinstance(candidates_by_job, Mapping):
        return lambda job_id: candidates_by_job.get(job_id, ())
    return candidates_by_job
