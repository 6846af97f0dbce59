from __future__ import annotations

import pendulum

from sourcermetrics.core.resolvers import (
    AcceptanceConfig,
    MatchScoreConfig,
    MatchScoreResolver,
    QualityResolver,
    StaticAcceptanceResolver,
    build_resolver,
)
from sourcermetrics.schemas import Candidate, MatchScore

SUBMITTED = pendulum.datetime(2025, 5, 1)


def build_candidates(*ids: str) -> list[Candidate]:
    return [Candidate(id=cid, job_id="J-1", submitted_at=SUBMITTED) for cid in ids]


def test_match_score_excludes_missing_and_non_positive_scores():
    resolver = MatchScoreResolver()
    candidates = build_candidates("a", "b", "c", "d", "e")
    scores = {
        "a": {"score": 80, "reasoning": "strong"},
        "b": {"score": 0, "reasoning": "api error"},
        "c": {"score": None},
        "d": MatchScore(score=60, reasoning="ok"),
    }

    result = resolver.resolve(candidates, scores)

    assert result.method == "match_score"
    assert result.value == 70
    assert result.metadata == {"rated_candidates": 2, "unrated_candidates": 3}


def test_match_score_without_signal_is_none():
    resolver = MatchScoreResolver()
    candidates = build_candidates("a", "b")

    assert resolver.resolve(candidates, {"a": {"score": -5}, "b": "broken"}).value is None
    assert resolver.resolve(candidates, None).value is None
    assert resolver.resolve([], {}).value is None


def test_match_score_rounds_half_up_and_accepts_bare_numbers():
    resolver = MatchScoreResolver()
    candidates = build_candidates("a", "b")

    assert resolver.resolve(candidates, {"a": 71, "b": 72}).value == 72


def test_match_score_min_valid_threshold():
    resolver = MatchScoreResolver(config=MatchScoreConfig(min_valid_score=10))
    candidates = build_candidates("a", "b")

    assert resolver.resolve(candidates, {"a": 10, "b": 50}).value == 50


def test_static_acceptance_is_all_or_nothing():
    resolver = StaticAcceptanceResolver()

    assert resolver.resolve(build_candidates("a")).value == 100
    assert resolver.resolve([]).value == 0
    assert resolver.resolve(build_candidates("a")).metadata["proxy"] is True


def test_static_acceptance_rate_is_configurable():
    resolver = StaticAcceptanceResolver(config=AcceptanceConfig(submitted_rate=90))

    assert resolver.resolve(build_candidates("a")).value == 90


def test_build_resolver_returns_protocol_instances():
    assert isinstance(build_resolver("match_score"), QualityResolver)
    assert isinstance(build_resolver("static_acceptance"), StaticAcceptanceResolver)


def test_match_score_skips_non_finite_scores():
    resolver = MatchScoreResolver()
    candidates = build_candidates("a", "b", "c", "d", "e")
    scores = {
        "a": {"score": float("inf")},
        "b": float("-inf"),
        "c": {"score": float("nan")},
        "d": 64,
        "e": 10**400,
    }

    result = resolver.resolve(candidates, scores)

    assert result.value == 64
    assert result.metadata == {"rated_candidates": 1, "unrated_candidates": 4}


def test_match_score_average_survives_sum_overflow():
    resolver = MatchScoreResolver()
    candidates = build_candidates("a", "b")

    result = resolver.resolve(candidates, {"a": 1e308, "b": 1e308})

    assert result.value == int(1e308)
