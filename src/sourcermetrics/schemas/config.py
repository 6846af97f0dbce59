"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

WindowName = Literal["7days", "30days", "90days", "alltime"]
SortKey = Literal["performance", "speed", "rating", "completed"]
QualityMethod = Literal["match_score", "static_acceptance"]


class EngineConfig(BaseModel):
    window: WindowName | None = None
    preset: str | None = None
    quality: QualityMethod | None = None
    sort_by: SortKey | None = None
    require_completed_in_window: bool | None = None
    top_n: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class SearchConfig(BaseModel):
    fuzzy_threshold: float | None = Field(default=None, ge=0, le=100)

    model_config = ConfigDict(extra="forbid")


class DirectoryConfig(BaseModel):
    ttl_seconds: float | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class MatchScoreSection(BaseModel):
    min_valid_score: float | None = None

    model_config = ConfigDict(extra="forbid")


class StaticAcceptanceSection(BaseModel):
    submitted_rate: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class ResolverConfig(BaseModel):
    match_score: MatchScoreSection | None = None
    static_acceptance: StaticAcceptanceSection | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    resolvers: ResolverConfig = Field(default_factory=ResolverConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("engine", "search", "directory", "resolvers"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
