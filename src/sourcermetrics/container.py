"""Dependency injection container for the metrics engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .cache import MatchScoreCache, MatchScoreLoader, ProfileLoader, SourcerDirectory
from .core import PerformanceEngine, PlatformAnalytics, get_preset
from .core.resolvers import AcceptanceConfig, MatchScoreConfig, MatchScoreResolver, StaticAcceptanceResolver
from .pipeline import MetricsPipeline


class MetricsContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    match_score_loader = providers.Object(None)
    profile_loader = providers.Object(None)

    match_score_cache = providers.Singleton(MatchScoreCache, loader=match_score_loader)
    sourcer_directory = providers.Singleton(SourcerDirectory, loader=profile_loader)

    quality_resolver = providers.Object(None)

    engine = providers.Singleton(
        PerformanceEngine,
        preset=config.engine.preset,
        quality=config.engine.quality,
        quality_resolver=quality_resolver,
        window=config.engine.window,
        sort_by=config.engine.sort_by,
        require_completed_in_window=config.engine.require_completed_in_window,
        top_n=config.engine.top_n,
        fuzzy_threshold=config.search.fuzzy_threshold,
        directory=sourcer_directory,
        match_score_cache=match_score_cache,
    )

    analytics = providers.Singleton(PlatformAnalytics, directory=sourcer_directory)

    pipeline = providers.Factory(
        MetricsPipeline,
        engine=engine,
        analytics=analytics,
    )


def create_container(
    *,
    settings: dict | None = None,
    match_score_loader: MatchScoreLoader | None = None,
    profile_loader: ProfileLoader | None = None,
) -> MetricsContainer:
    """Instantiate container with optional overrides."""

    container = MetricsContainer()

    if match_score_loader is not None:
        container.match_score_loader.override(providers.Object(match_score_loader))
    if profile_loader is not None:
        container.profile_loader.override(providers.Object(profile_loader))

    if not settings:
        return container

    config_values = {
        section: settings[section]
        for section in ("engine", "search")
        if isinstance(settings, dict) and settings.get(section)
    }
    if config_values:
        container.config.from_dict(config_values)

    directory_settings = settings.get("directory", {}) if isinstance(settings, dict) else {}
    if directory_settings.get("ttl_seconds") is not None:
        container.sourcer_directory.override(
            providers.Singleton(
                SourcerDirectory,
                loader=container.profile_loader,
                ttl_seconds=float(directory_settings["ttl_seconds"]),
            )
        )

    resolver_settings = settings.get("resolvers", {}) if isinstance(settings, dict) else {}
    engine_settings = config_values.get("engine", {})
    method = engine_settings.get("quality") or get_preset(engine_settings.get("preset")).quality_method

    if method == MatchScoreResolver.method and "match_score" in resolver_settings:
        match_config = MatchScoreConfig(**resolver_settings["match_score"])
        container.quality_resolver.override(
            providers.Singleton(MatchScoreResolver, config=match_config)
        )

    if method == StaticAcceptanceResolver.method and "static_acceptance" in resolver_settings:
        acceptance_config = AcceptanceConfig(**resolver_settings["static_acceptance"])
        container.quality_resolver.override(
            providers.Singleton(StaticAcceptanceResolver, config=acceptance_config)
        )

    return container
