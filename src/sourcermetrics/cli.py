"""Typer CLI entrypoint for the sourcer metrics engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .core import UnknownPresetError, get_preset
from .logging import configure_logging
from .pipeline import AuditLogger, MatchScoreFile, ProfileFile, render_json
from .schemas.config import load_config

app = typer.Typer(help="Sourcer performance leaderboard and platform analytics.")

WINDOW_HELP = "Time window: 7days, 30days, 90days or alltime."
WINDOWS = ("7days", "30days", "90days", "alltime")
SORT_KEYS = ("performance", "speed", "rating", "completed")


def _check_choice(value: Optional[str], allowed: tuple[str, ...], name: str) -> None:
    if value is not None and value not in allowed:
        raise typer.BadParameter(f"must be one of: {', '.join(allowed)}", param_hint=name)


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise typer.BadParameter("Config file must be a YAML object", param_hint="config")
    try:
        settings = load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc
    _check_preset(settings.get("engine", {}).get("preset"), "config")
    return settings


def _check_preset(name: Optional[str], param_name: str) -> None:
    if name is None:
        return
    try:
        get_preset(name)
    except UnknownPresetError as exc:
        raise typer.BadParameter(str(exc), param_hint=param_name) from exc


def _emit(payload: dict, output: Optional[Path], message: str) -> None:
    if output is None:
        typer.echo(render_json(payload))
    else:
        typer.echo(message, err=True)


@app.command()
def leaderboard(
    jobs: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Jobs JSON or JSONL path."),
    candidates: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Candidates JSON or JSONL path."
    ),
    match_scores: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Cached match scores JSON path."
    ),
    profiles: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Sourcer profiles JSON path."
    ),
    window: Optional[str] = typer.Option(None, help=WINDOW_HELP),
    sort_by: Optional[str] = typer.Option(None, help="performance, speed, rating or completed."),
    preset: Optional[str] = typer.Option(None, help="Scoring preset name (acceptance-v1, match-score-v2, A, B)."),
    search: Optional[str] = typer.Option(None, help="Filter sourcers by name."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, resolve_path=True, help="Output JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Compute the sourcer leaderboard."""
    _check_choice(window, WINDOWS, "window")
    _check_choice(sort_by, SORT_KEYS, "sort_by")
    settings = _load_settings(config)
    if preset:
        _check_preset(preset, "preset")
        settings.setdefault("engine", {})["preset"] = preset

    configure_logging(log_level)

    container = create_container(
        settings=settings,
        match_score_loader=MatchScoreFile(match_scores) if match_scores else None,
        profile_loader=ProfileFile(profiles) if profiles else None,
    )
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    payload = pipeline.run_leaderboard(
        jobs_path=jobs,
        candidates_path=candidates,
        output_path=output,
        window=window,
        sort_by=sort_by,
        query=search,
        audit_logger=audit_logger,
    )
    _emit(payload, output, f"Ranked {len(payload['leaderboard'])} sourcers. Results saved to {output}.")


@app.command()
def analytics(
    jobs: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Jobs JSON or JSONL path."),
    candidates: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Candidates JSON or JSONL path."
    ),
    profiles: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Sourcer profiles JSON path."
    ),
    window: str = typer.Option("alltime", help=WINDOW_HELP),
    output: Optional[Path] = typer.Option(None, dir_okay=False, resolve_path=True, help="Output JSON path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Compute platform-wide job and company analytics."""
    _check_choice(window, WINDOWS + ("7d", "30d", "90d", "all"), "window")
    configure_logging(log_level)

    container = create_container(profile_loader=ProfileFile(profiles) if profiles else None)
    pipeline = container.pipeline()

    payload = pipeline.run_analytics(
        jobs_path=jobs,
        candidates_path=candidates,
        output_path=output,
        window=window,
    )
    _emit(payload, output, f"Analysed {payload['metadata']['job_count']} jobs. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
