"""Core performance metrics components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregator import RawAggregate, aggregate, candidates_lookup
from .analytics import AnalyticsReport, CompanyActivity, PlatformAnalytics, SourcerActivity
from .engine import Leaderboard, LeaderboardSummary, PerformanceEngine
from .ranking import rank, search
from .records import SourcerPerformanceRecord
from .resolvers import MatchScoreResolver, QualityResolver, StaticAcceptanceResolver
from .scoring import (
    ACCEPTANCE_V1,
    MATCH_SCORE_V2,
    PRESETS,
    ScoringPreset,
    UnknownPresetError,
    composite,
    get_preset,
    speed_score,
    speed_tier,
)
from .window import filter_by_window, window_cutoff

__all__ = [
    "ACCEPTANCE_V1",
    "AnalyticsReport",
    "CompanyActivity",
    "Leaderboard",
    "LeaderboardSummary",
    "MATCH_SCORE_V2",
    "MatchScoreResolver",
    "PRESETS",
    "PerformanceEngine",
    "PlatformAnalytics",
    "QualityResolver",
    "RawAggregate",
    "ScoringPreset",
    "SourcerActivity",
    "SourcerPerformanceRecord",
    "StaticAcceptanceResolver",
    "UnknownPresetError",
    "aggregate",
    "candidates_lookup",
    "composite",
    "filter_by_window",
    "get_preset",
    "rank",
    "search",
    "speed_score",
    "speed_tier",
    "window_cutoff",
]
