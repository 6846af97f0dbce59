from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(str, Enum):
    """Lifecycle states of a job posting."""

    UNCLAIMED = "Unclaimed"
    CLAIMED = "Claimed"
    COMPLETED = "Completed"


class Job(BaseModel):
    """Job posting as returned by the data API."""

    id: str
    sourcer_id: str | None = Field(default=None, alias="sourcerId")
    status: JobStatus = JobStatus.UNCLAIMED
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    candidates_requested: int = Field(default=0, alias="candidatesRequested")
    company_name: str | None = Field(default=None, alias="companyName")
    title: str | None = None
    user_email: str | None = Field(default=None, alias="userEmail")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("sourcer_id")
    @classmethod
    def _blank_sourcer_is_unclaimed(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("candidates_requested", mode="before")
    @classmethod
    def _null_requested(cls, value: object) -> object:
        return 0 if value is None else value

    @property
    def completion_hours(self) -> float:
        return (self.updated_at - self.created_at).total_seconds() / 3600
