"""
Typer CLI for the memcurve review engine.

Commands:
    memcurve init-db            - Create storage tables
    memcurve add <content>      - Add an item (with its initial review ladder)
    memcurve review <id>        - Record a review outcome
    memcurve schedule           - Initialize new items, fast-retry overdue failures
    memcurve plan               - Today's review plan
    memcurve urgent             - Due-soon items with collapsed retention
    memcurve forgotten          - Forgotten/overdue items by priority
    memcurve forecast           - Average predicted retention per day
    memcurve stats              - Weekly summary and focus areas
    memcurve categories         - Categories with cached statistics
    memcurve export <file>      - Write a JSON backup
    memcurve import <file>      - Replace all data from a JSON backup
    memcurve remind             - Periodic reminders until Ctrl-C

Usage:
    memcurve add "mitochondria: powerhouse of the cell" -c concept -d hard
    memcurve review 3f2a... --success -t 4.2
    memcurve plan --max 10
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings
from memcurve.core.models import Difficulty, MemoryItem
from memcurve.db.repository import MemoryRepository
from memcurve.study.analysis import MemoryAnalyzer
from memcurve.study.content_ranker import ForgottenContentIdentifier
from memcurve.study.forgetting_curve import current_retention
from memcurve.study.reminders import ReviewReminderService
from memcurve.study.review_scheduler import ReviewScheduler

console = Console()

app = typer.Typer(
    name="memcurve",
    help="Forgetting-curve review scheduler",
    no_args_is_help=True,
)


def _get_repository() -> MemoryRepository:
    return MemoryRepository()


def _get_scheduler() -> ReviewScheduler:
    return ReviewScheduler(**get_settings().get_scheduler_config())


def _format_time(moment: Optional[datetime]) -> str:
    return moment.strftime("%Y-%m-%d %H:%M") if moment else "-"


def _retention_style(retention: float) -> str:
    if retention >= 80:
        return "green"
    if retention >= 50:
        return "yellow"
    return "red"


def _items_table(
    title: str,
    items: list[MemoryItem],
    now: datetime,
    extra: Optional[dict[str, str]] = None,
) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", max_width=8)
    table.add_column("Content")
    table.add_column("Category", style="cyan")
    table.add_column("Difficulty")
    table.add_column("Next review")
    table.add_column("Recorded", justify="right")
    table.add_column("Now", justify="right")
    if extra:
        table.add_column("Priority", justify="right")

    for item in items:
        predicted = current_retention(item, now)
        row = [
            item.id[:8],
            item.content,
            item.category,
            item.difficulty.value,
            _format_time(item.next_review_at),
            f"{item.retention_rate:.0f}%",
            f"[{_retention_style(predicted)}]{predicted:.1f}%[/]",
        ]
        if extra:
            row.append(extra.get(item.id, ""))
        table.add_row(*row)

    return table


def _resolve_item(repo: MemoryRepository, item_id: str) -> MemoryItem:
    """Find an item by full id or unique prefix, or exit with an error."""
    item = repo.get(item_id)
    if item:
        return item

    matches = [candidate for candidate in repo.load_all() if candidate.id.startswith(item_id)]
    if len(matches) == 1:
        return matches[0]

    console.print(f"[red]No unique item matches '{item_id}'[/red]")
    raise typer.Exit(code=1)


@app.command("init-db")
def init_db_command() -> None:
    """Create storage tables and default categories."""
    repo = _get_repository()
    categories = repo.get_categories()
    console.print(f"[green]Database ready[/green] ({len(categories)} categories)")


@app.command("add")
def add_item(
    content: str = typer.Argument(..., help="Text to memorize"),
    category: str = typer.Option("vocab", "--category", "-c", help="Category id"),
    difficulty: Difficulty = typer.Option(Difficulty.MEDIUM, "--difficulty", "-d"),
) -> None:
    """Add an item and plan its initial review ladder."""
    repo = _get_repository()
    scheduler = _get_scheduler()

    item = MemoryItem.create(content, category, difficulty, now=scheduler.clock.now())
    [item] = scheduler.batch_schedule_reviews([item])
    repo.save(item)

    console.print(f"[green]Added[/green] {item.id} - first review at {_format_time(item.next_review_at)}")


@app.command("review")
def review_item(
    item_id: str = typer.Argument(..., help="Item id or unique prefix"),
    success: bool = typer.Option(True, "--success/--fail", help="Recalled correctly?"),
    response_time: Optional[float] = typer.Option(
        None, "--response-time", "-t", help="Seconds taken to answer"
    ),
) -> None:
    """Record a review outcome and reschedule the item."""
    repo = _get_repository()
    item = _resolve_item(repo, item_id)

    updated = _get_scheduler().process_review_result(item, success, response_time)
    repo.save(updated)

    outcome = "[green]recalled[/green]" if success else "[red]missed[/red]"
    console.print(
        f"{outcome} {updated.id[:8]} - retention {updated.retention_rate:.0f}%, "
        f"next review {_format_time(updated.next_review_at)} (review #{updated.review_count})"
    )


@app.command("schedule")
def schedule_items() -> None:
    """Plan new items and retry overdue failures."""
    repo = _get_repository()
    items = _get_scheduler().batch_schedule_reviews(repo.load_all())
    repo.save_all(items)
    console.print(f"[green]Scheduled[/green] {len(items)} items")


@app.command("plan")
def daily_plan(
    max_items: Optional[int] = typer.Option(None, "--max", "-n", help="Maximum items"),
) -> None:
    """Show today's review plan."""
    limit = max_items or get_settings().max_items_per_day
    scheduler = _get_scheduler()
    plan = scheduler.generate_daily_plan(_get_repository().load_all(), limit)

    if not plan:
        console.print("[dim]Nothing planned[/dim]")
        return
    console.print(_items_table(f"Daily plan ({len(plan)}/{limit})", plan, scheduler.clock.now()))


@app.command("urgent")
def urgent_reviews() -> None:
    """Items due within the hour whose retention fell below the threshold."""
    scheduler = _get_scheduler()
    urgent = scheduler.get_urgent_reviews(_get_repository().load_all())

    if not urgent:
        console.print("[green]No urgent reviews[/green]")
        return
    console.print(_items_table("Urgent reviews", urgent, scheduler.clock.now()))


@app.command("forgotten")
def forgotten_content(
    limit: int = typer.Option(20, "--limit", "-n"),
) -> None:
    """Overdue or forgotten items, highest priority first."""
    identifier = ForgottenContentIdentifier()
    forgotten = identifier.identify_forgotten_content(_get_repository().load_all())
    ranked = identifier.sort_by_priority(forgotten)[:limit]

    if not ranked:
        console.print("[green]Nothing forgotten[/green]")
        return

    now = identifier.clock.now()
    scores = {item.id: f"{identifier.calculate_priority_score(item, now):.1f}" for item in ranked}
    console.print(_items_table(f"Forgotten content ({len(forgotten)})", ranked, now, extra=scores))


@app.command("forecast")
def forecast(
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Days ahead"),
) -> None:
    """Average predicted retention for each upcoming day."""
    horizon = days or get_settings().forecast_days
    series = _get_scheduler().predict_long_term_retention(_get_repository().load_all(), horizon)

    table = Table(title=f"Retention forecast ({horizon} days)")
    table.add_column("Date")
    table.add_column("Predicted", justify="right")
    for point in series:
        table.add_row(
            point.date.strftime("%Y-%m-%d"),
            f"[{_retention_style(point.predicted_retention)}]{point.predicted_retention:.2f}%[/]",
        )
    console.print(table)


@app.command("stats")
def weekly_stats() -> None:
    """Weekly learning summary and focus areas."""
    items = _get_repository().load_all()
    stats = ForgottenContentIdentifier().get_weekly_stats(items)
    recommendations = MemoryAnalyzer().generate_recommendations(items)

    table = Table(title="Last 7 days", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Learned", str(stats.learned))
    table.add_row("Reviewed", str(stats.reviewed))
    table.add_row("Average retention", f"{stats.average_retention:.1f}%")
    table.add_row("Currently forgotten", str(stats.forgotten_count))
    console.print(table)

    if recommendations.focus_areas:
        console.print(f"Focus areas: [yellow]{', '.join(recommendations.focus_areas)}[/yellow]")


@app.command("categories")
def list_categories() -> None:
    """List categories with item counts and average retention."""
    table = Table(title="Categories")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Items", justify="right")
    table.add_column("Avg retention", justify="right")

    for category in _get_repository().get_categories():
        table.add_row(
            category.id,
            f"[{category.color}]{category.name}[/]" if category.color else category.name,
            str(category.item_count),
            f"{category.average_retention:.1f}%",
        )
    console.print(table)


@app.command("export")
def export_backup(path: Path = typer.Argument(..., help="Output JSON file")) -> None:
    """Write all items and categories to a JSON backup."""
    path.write_text(_get_repository().export_data(), encoding="utf-8")
    console.print(f"[green]Exported[/green] to {path}")


@app.command("import")
def import_backup(path: Path = typer.Argument(..., exists=True, help="Backup JSON file")) -> None:
    """Replace all stored data with a JSON backup."""
    count = _get_repository().import_data(path.read_text(encoding="utf-8"))
    console.print(f"[green]Imported[/green] {count} items")


@app.command("remind")
def remind(
    interval: Optional[int] = typer.Option(None, "--interval", "-i", help="Seconds between checks"),
) -> None:
    """Print reminders for items coming due until interrupted."""
    settings = get_settings()
    repo = _get_repository()
    reminders = ReviewReminderService(lead_minutes=settings.reminder_lead_minutes)

    def print_reminder(items: list[MemoryItem]) -> None:
        console.print(_items_table(f"{len(items)} item(s) due soon", items, reminders.clock.now()))

    reminders.register_reminder(print_reminder)
    reminders.check_and_remind(repo.load_all())

    seconds = interval or settings.reminder_check_interval_seconds
    reminders.start_periodic_checks(repo.load_all, interval_ms=seconds * 1000)
    console.print(f"[dim]Checking every {seconds}s - Ctrl-C to stop[/dim]")

    try:
        while reminders.is_running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        reminders.stop()


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB")

    app()


if __name__ == "__main__":
    main()
