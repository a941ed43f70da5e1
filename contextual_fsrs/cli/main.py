"""
Typer CLI for the contextual FSRS engine.

Commands:
    fsrs-engine review CARD RESPONSE   - Run one review and show the DSR update
    fsrs-engine params                 - Show the active FSRS weight vector

Usage:
    fsrs-engine --help
    fsrs-engine review card.json response.json --stats
    fsrs-engine review card.json response.json --profile profile.json --target-retention 0.85
    python -m contextual_fsrs.cli params
"""

from __future__ import annotations

from pathlib import Path

import typer
from loguru import logger
from pydantic import BaseModel, ValidationError
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from contextual_fsrs.config import get_settings
from contextual_fsrs.logging_config import configure_logging
from contextual_fsrs.schemas import CardStateIn, ReviewResponseIn, UserProfileIn
from contextual_fsrs.scheduling import ReviewOutcome
from contextual_fsrs.service import SchedulingService

app = typer.Typer(
    help="fsrs-engine: contextual FSRS difficulty/stability/retrievability updates",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """
    Contextual FSRS scheduling engine.

    Reads card and review snapshots as JSON and prints the updated memory state.
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        _print_validation_error("settings", exc)
        raise typer.Exit(code=1) from exc

    configure_logging(log_level.upper() if log_level else settings.log_level, settings.log_file)


# ========================================
# Helpers
# ========================================


def _print_validation_error(source: str, exc: ValidationError) -> None:
    rprint(f"[bold red]✗ Invalid {source}[/bold red]")
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "(root)"
        rprint(f"  [red]{location}[/red]: {error['msg']}")


def _load(path: Path, model: type[BaseModel], source: str):
    """Validate a JSON file against an inbound model, exiting with code 1 on failure."""
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        _print_validation_error(source, exc)
        raise typer.Exit(code=1) from exc


def _render_outcome(outcome: ReviewOutcome) -> Table:
    result = outcome.result

    table = Table(title=f"Review: {outcome.card.card_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Difficulty", f"{result.difficulty:.3f}")
    table.add_row("Stability (days)", f"{result.stability:.3f}")
    table.add_row("Retrievability", f"{result.retrievability:.3f}")
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_section()
    table.add_row("Next interval", f"{outcome.interval_days} day(s)", style="bold")

    return table


# ========================================
# Commands
# ========================================


@app.command("review")
def review(
    card_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Card memory state JSON",
    ),
    response_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Review response JSON",
    ),
    profile_path: Path | None = typer.Option(
        None,
        "--profile",
        "-p",
        exists=True,
        dir_okay=False,
        readable=True,
        help="User profile JSON with personal FSRS weights",
    ),
    target_retention: float | None = typer.Option(
        None,
        "--target-retention",
        "-r",
        min=0.01,
        max=0.99,
        help="Override FSRS_DESIRED_RETENTION for the interval",
    ),
    show_stats: bool = typer.Option(
        False,
        "--stats",
        help="Show memo cache statistics after the review",
    ),
):
    """
    Apply one review to a card and show the contextual DSR update.
    """
    card = _load(card_path, CardStateIn, "card").to_state()
    response = _load(response_path, ReviewResponseIn, "response").to_response()
    profile = _load(profile_path, UserProfileIn, "profile").to_profile() if profile_path else None

    service = SchedulingService.from_settings(setup_logging=False)
    with service:
        outcome = service.review(card, response, profile, target_retention=target_retention)
        stats = service.cache.get_stats() if service.cache else None

    console.print(_render_outcome(outcome))
    console.print(Panel(outcome.result.explanation, title="Explanation", border_style="dim"))

    if show_stats:
        if stats is None:
            rprint("[yellow]Memo cache is disabled (CACHE_ENABLED=false)[/yellow]")
        else:
            stats_table = Table(title="Memo Cache")
            stats_table.add_column("Category", style="cyan")
            stats_table.add_column("Items", justify="right")
            stats_table.add_column("Hits", justify="right")
            stats_table.add_column("Misses", justify="right")

            for category, category_stats in stats.per_category.items():
                stats_table.add_row(
                    category,
                    str(category_stats.items),
                    str(category_stats.hits),
                    str(category_stats.misses),
                )

            stats_table.add_section()
            stats_table.add_row("TOTAL", str(stats.total_items), "", "", style="bold")
            console.print(stats_table)
            rprint(f"Hit rate: {stats.hit_rate:.0%}  Evictions: {stats.eviction_count}")

    logger.debug(f"Review of {card.card_id} complete: interval {outcome.interval_days}d")


@app.command("params")
def params():
    """
    Show the active FSRS weight vector.
    """
    settings = get_settings()
    parameters = settings.get_fsrs_parameters()
    source = "FSRS_PARAMETERS" if settings.fsrs_parameters else "defaults"

    table = Table(title=f"FSRS Parameters ({source})")
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("Weight", justify="right")

    for index, weight in enumerate(parameters):
        table.add_row(f"w{index}", f"{weight:.4f}")

    console.print(table)
    rprint(f"\nDesired retention: [bold]{settings.fsrs_desired_retention}[/bold]")


def run():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
