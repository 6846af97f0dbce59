"""Speed scoring and weighted composite presets."""

from __future__ import annotations

from dataclasses import dataclass

from .numeric import clamp, round_half_up

DELIVERY_SLA_HOURS = 24.0
SPEED_POINTS_PER_HOUR = 4.1667

SPEED_TIERS: tuple[tuple[float, str], ...] = (
    (6.0, "Lightning Fast"),
    (12.0, "Fast"),
    (18.0, "Average"),
)
SLOW_TIER = "Slow"
NO_DATA_TIER = "No Data"


class UnknownPresetError(KeyError):
    """Raised when a scoring preset name is not registered."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown scoring preset: {self.name!r} (known: {', '.join(sorted(PRESETS))})"


@dataclass(frozen=True, slots=True)
class ScoringPreset:
    """Weights for folding speed, quality and volume into one score."""

    name: str
    version: int
    speed_weight: float
    quality_weight: float
    volume_points_per_job: float
    volume_cap: float
    quality_method: str

    def volume_points(self, completed_jobs: int) -> float:
        return min(completed_jobs * self.volume_points_per_job, self.volume_cap)


ACCEPTANCE_V1 = ScoringPreset(
    name="acceptance-v1",
    version=1,
    speed_weight=0.4,
    quality_weight=0.3,
    volume_points_per_job=10,
    volume_cap=30,
    quality_method="static_acceptance",
)

MATCH_SCORE_V2 = ScoringPreset(
    name="match-score-v2",
    version=2,
    speed_weight=0.4,
    quality_weight=0.4,
    volume_points_per_job=2,
    volume_cap=20,
    quality_method="match_score",
)

PRESETS: dict[str, ScoringPreset] = {
    ACCEPTANCE_V1.name: ACCEPTANCE_V1,
    MATCH_SCORE_V2.name: MATCH_SCORE_V2,
}

_ALIASES: dict[str, str] = {
    "a": ACCEPTANCE_V1.name,
    "b": MATCH_SCORE_V2.name,
}

DEFAULT_PRESET = MATCH_SCORE_V2


def get_preset(name: str | ScoringPreset | None) -> ScoringPreset:
    if name is None:
        return DEFAULT_PRESET
    if isinstance(name, ScoringPreset):
        return name
    key = _ALIASES.get(name.strip().lower(), name.strip().lower())
    try:
        return PRESETS[key]
    except KeyError as exc:
        raise UnknownPresetError(name) from exc


def speed_score(avg_completion_hours: float | None) -> float:
    """Map average completion time onto 0-100 with linear decay over the SLA.

    ``None`` means the sourcer has no completed jobs and scores 0, as does a
    negative average. Anything at or past the SLA clamps to 0.
    """
    if avg_completion_hours is None or avg_completion_hours < 0:
        return 0.0
    return clamp((DELIVERY_SLA_HOURS - avg_completion_hours) * SPEED_POINTS_PER_HOUR)


def composite(
    speed: float,
    quality: float | None,
    completed_jobs_count: int,
    preset: ScoringPreset = DEFAULT_PRESET,
) -> int:
    """Combine sub-scores with ``preset`` weights.

    A missing quality signal counts as 0 here only. The result is not clamped
    and can exceed 100.
    """
    quality_points = quality if quality is not None else 0.0
    return round_half_up(
        speed * preset.speed_weight
        + quality_points * preset.quality_weight
        + preset.volume_points(completed_jobs_count)
    )


def speed_tier(avg_completion_hours: float | None) -> str:
    if avg_completion_hours is None:
        return NO_DATA_TIER
    for ceiling, label in SPEED_TIERS:
        if avg_completion_hours <= ceiling:
            return label
    return SLOW_TIER
