"""Static acceptance-rate proxy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ...schemas import Candidate
from .base import QualityResult


@dataclass
class AcceptanceConfig:
    """Rate reported for any sourcer who has submitted at least one candidate."""

    submitted_rate: int = 100


class StaticAcceptanceResolver:
    """Treat every submitted candidate as accepted.

    No rejection data exists, so the rate is all-or-nothing: ``submitted_rate``
    when anything was submitted, otherwise 0.
    """

    method = "static_acceptance"

    def __init__(self, *, config: AcceptanceConfig | None = None) -> None:
        self._config = config or AcceptanceConfig()

    def resolve(
        self,
        candidates: Sequence[Candidate],
        match_scores: Mapping[str, Any] | None = None,
    ) -> QualityResult:
        rate = self._config.submitted_rate if candidates else 0
        return QualityResult(
            method=self.method,
            value=rate,
            metadata={"submitted_candidates": len(candidates), "proxy": True},
        )
