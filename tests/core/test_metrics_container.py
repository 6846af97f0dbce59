from __future__ import annotations

import pytest
from pydantic import ValidationError

from sourcermetrics.container import create_container
from sourcermetrics.core import UnknownPresetError
from sourcermetrics.core.resolvers import MatchScoreResolver, StaticAcceptanceResolver
from sourcermetrics.schemas.config import AppConfig, load_config


def test_create_container_defaults():
    container = create_container()

    engine = container.engine()

    assert engine.preset.name == "match-score-v2"
    assert engine.quality_method == "match_score"
    assert engine._window == "30days"
    assert engine._sort_by == "performance"
    assert engine._require_completed is False
    assert container.analytics()._directory is engine._directory


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "engine": {
                "window": "90days",
                "preset": "A",
                "sort_by": "speed",
                "require_completed_in_window": True,
                "top_n": 5,
            },
            "search": {"fuzzy_threshold": 85},
            "directory": {"ttl_seconds": 10},
            "resolvers": {"static_acceptance": {"submitted_rate": 90}},
        }
    )

    engine = container.engine()
    directory = container.sourcer_directory()

    assert engine.preset.name == "acceptance-v1"
    assert isinstance(engine._resolver, StaticAcceptanceResolver)
    assert engine._resolver._config.submitted_rate == 90
    assert engine._window == "90days"
    assert engine._sort_by == "speed"
    assert engine._require_completed is True
    assert engine._top_n == 5
    assert engine._fuzzy_threshold == 85
    assert directory._ttl_seconds == 10.0
    assert engine._directory is directory


def test_quality_override_takes_matching_resolver_settings():
    container = create_container(
        settings={
            "engine": {"preset": "acceptance-v1", "quality": "match_score"},
            "resolvers": {
                "match_score": {"min_valid_score": 5},
                "static_acceptance": {"submitted_rate": 50},
            },
        }
    )

    engine = container.engine()

    assert isinstance(engine._resolver, MatchScoreResolver)
    assert engine._resolver._config.min_valid_score == 5


def test_unknown_preset_fails_at_configuration_time():
    with pytest.raises(UnknownPresetError):
        create_container(settings={"engine": {"preset": "C"}})


def test_load_config_validation():
    data = {
        "engine": {"window": "7days", "preset": "B"},
        "search": {"fuzzy_threshold": 90},
    }
    app_config = load_config(data)

    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings == {
        "engine": {"window": "7days", "preset": "B"},
        "search": {"fuzzy_threshold": 90},
    }


def test_load_config_rejects_bad_values():
    with pytest.raises(ValidationError):
        load_config({"engine": {"window": "fortnight"}})
    with pytest.raises(ValidationError):
        load_config({"engine": {"unknown": 1}})
    with pytest.raises(ValidationError):
        load_config(["not", "a", "mapping"])


def test_load_config_rejects_unknown_resolver_keys():
    with pytest.raises(ValidationError):
        load_config({"resolvers": {"match_score": {"min_score": 5}}})
    with pytest.raises(ValidationError):
        load_config({"resolvers": {"static_acceptance": {"submitted_rate": -1}}})

    settings = load_config({"resolvers": {"match_score": {"min_valid_score": 5}}}).to_settings()
    assert settings == {"resolvers": {"match_score": {"min_valid_score": 5}}}
