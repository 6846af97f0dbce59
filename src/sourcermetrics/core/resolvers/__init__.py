"""Quality resolver implementations for the performance engine."""

from .acceptance import AcceptanceConfig, StaticAcceptanceResolver
from .base import QualityResolver, QualityResult
from .match_score import MatchScoreConfig, MatchScoreResolver

RESOLVERS: dict[str, type] = {
    MatchScoreResolver.method: MatchScoreResolver,
    StaticAcceptanceResolver.method: StaticAcceptanceResolver,
}


def build_resolver(method: str) -> QualityResolver:
    try:
        return RESOLVERS[method]()
    except KeyError as exc:
        raise KeyError(f"Unsupported quality method: {method!r}") from exc


__all__ = [
    "AcceptanceConfig",
    "MatchScoreConfig",
    "MatchScoreResolver",
    "QualityResolver",
    "QualityResult",
    "RESOLVERS",
    "StaticAcceptanceResolver",
    "build_resolver",
]
