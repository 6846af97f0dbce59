"""Pydantic schema definitions for records read from the data API."""

from __future__ import annotations

from .candidate import Candidate, MatchScore, SourcerProfile
from .job import Job, JobStatus

__all__ = [
    "Candidate",
    "Job",
    "JobStatus",
    "MatchScore",
    "SourcerProfile",
]
