"""Candidate quality from cached AI match scores."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ...schemas import Candidate, MatchScore
from ..numeric import mean, round_half_up
from .base import QualityResult


@dataclass
class MatchScoreConfig:
    """Scores at or below ``min_valid_score`` are treated as failed evaluations."""

    min_valid_score: float = 0.0


class MatchScoreResolver:
    """Average the usable match scores of a sourcer's submitted candidates."""

    method = "match_score"

    def __init__(self, *, config: MatchScoreConfig | None = None) -> None:
        self._config = config or MatchScoreConfig()

    def resolve(
        self,
        candidates: Sequence[Candidate],
        match_scores: Mapping[str, Any] | None,
    ) -> QualityResult:
        scores: list[float] = []
        lookup = match_scores or {}
        for candidate in candidates:
            score = self._usable_score(lookup.get(candidate.id))
            if score is not None:
                scores.append(score)

        rating = round_half_up(_average(scores)) if scores else None
        return QualityResult(
            method=self.method,
            value=rating,
            metadata={
                "rated_candidates": len(scores),
                "unrated_candidates": len(candidates) - len(scores),
            },
        )

    def _usable_score(self, entry: Any) -> float | None:
        if entry is None:
            return None
        if isinstance(entry, MatchScore):
            raw = entry.score
        elif isinstance(entry, Mapping):
            raw = entry.get("score")
        else:
            raw = entry
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return None
        try:
            value = float(raw)
        except OverflowError:
            return None
        if not math.isfinite(value) or value <= self._config.min_valid_score:
            return None
        return value


def _average(scores: Sequence[float]) -> float:
    average = mean(scores)
    if math.isinf(average):
        # the plain sum overflowed; scaled terms of finite scores stay finite
        average = math.fsum(score / len(scores) for score in scores)
    return average
