from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from ...schemas import Candidate


@dataclass(slots=True)
class QualityResult:
    """Quality figure on a 0-100 scale, or None when there is no signal."""

    method: str
    value: int | None
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class QualityResolver(Protocol):
    """Contract for deriving a sourcer's quality figure."""

    method: str

    def resolve(
        self,
        candidates: Sequence[Candidate],
        match_scores: Mapping[str, Any] | None,
    ) -> QualityResult:
        """Return the quality figure for the given submitted candidates."""
