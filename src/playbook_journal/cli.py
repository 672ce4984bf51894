"""CLI entry point for the playbook journal."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from .core.config import Settings, load_settings
from .core.errors import ConfigError, PlaybookDataError
from .scoring.playbook import PlaybookDefinition
from .scoring.rubric import get_default_rubric

logger = logging.getLogger(__name__)


def _load_playbook(path: str, settings: Settings) -> PlaybookDefinition:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PlaybookDataError(f"Cannot read playbook {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise PlaybookDataError(f"Playbook {path} must be a JSON object")
    try:
        return PlaybookDefinition.from_dict(
            data, default_rubric=get_default_rubric(config=settings.default_rubric)
        )
    except ValidationError as exc:
        raise PlaybookDataError(f"Playbook {path} has malformed rows: {exc}") from exc


def _bootstrap(config: str | None) -> Settings:
    from .observability.logger import new_trace_id, setup_logging

    try:
        settings = load_settings(config_path=config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    new_trace_id()
    logger.debug("CLI started with config %s", config)
    return settings


@click.group()
def main() -> None:
    """Playbook setup scoring tools."""


@main.command()
@click.argument("playbook", type=click.Path(exists=True, dir_okay=False))
@click.option("--check", "checks", multiple=True, help="ID of a rule or confluence that was present (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--config", default=None, help="Config file path")
def score(playbook: str, checks: tuple[str, ...], as_json: bool, config: str | None) -> None:
    """Score a setup against a playbook JSON export."""
    from .scoring.engine import score_playbook
    from .scoring.presentation import explain_grade, format_score, get_grade_color

    settings = _bootstrap(config)
    try:
        definition = _load_playbook(playbook, settings)
    except PlaybookDataError as exc:
        raise click.ClickException(str(exc)) from exc

    checked = set(checks)
    rules_checked = {r.id: r.id in checked for r in definition.rules}
    conf_checked = {c.id: c.id in checked for c in definition.confluences}
    unknown = checked - rules_checked.keys() - conf_checked.keys()
    if unknown:
        click.echo(f"Ignoring unknown item(s): {', '.join(sorted(unknown))}", err=True)

    result = score_playbook(
        definition,
        rules_checked,
        conf_checked,
        primary_multiplier=settings.scoring.primary_multiplier,
        fallback=settings.scoring.fallback_grade,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    pct = format_score(result.score, settings.scoring.score_decimals)
    click.echo(f"Playbook: {definition.playbook_id or '(unnamed)'}")
    click.echo(f"Score:    {pct}")
    click.echo(f"Grade:    {result.grade} ({get_grade_color(result.grade).value})")
    click.echo(f"Summary:  {explain_grade(result)}")


@main.command()
@click.argument("playbook", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
def validate(playbook: str, config: str | None) -> None:
    """Validate the rubric of a playbook JSON export."""
    from .scoring.rubric import rubric_warnings, validate_rubric

    settings = _bootstrap(config)
    try:
        definition = _load_playbook(playbook, settings)
    except PlaybookDataError as exc:
        raise click.ClickException(str(exc)) from exc

    result = validate_rubric(definition.rubric)
    for warning in rubric_warnings(
        definition.rubric, tolerance=settings.scoring.weight_sum_tolerance
    ):
        click.echo(f"warning: {warning}", err=True)

    if not result.valid:
        click.echo(f"INVALID: {result.error}")
        raise SystemExit(1)
    click.echo("Rubric OK")


if __name__ == "__main__":
    main()
