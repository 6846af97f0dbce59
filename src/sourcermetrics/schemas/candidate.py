from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator


class Candidate(BaseModel):
    """Candidate submitted by a sourcer against a job."""

    id: str
    job_id: str = Field(alias="jobId")
    submitted_at: datetime = Field(alias="submittedAt")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("submitted_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class MatchScore(BaseModel):
    """Cached AI evaluation of a candidate against its job."""

    score: FiniteFloat | None = None
    reasoning: str = ""

    model_config = ConfigDict(extra="ignore")

    @property
    def has_signal(self) -> bool:
        """Missing, zero or negative scores are measurement failures."""
        return self.score is not None and self.score > 0


class SourcerProfile(BaseModel):
    """Display profile of a sourcer account."""

    id: str
    name: str | None = None

    model_config = ConfigDict(extra="ignore")
