"""dwmyo CLI - day/week/month/year task overview."""

import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .config import load_config
from .core import buckets
from .core.rollover import move_uncompleted_to_next_day
from .core.tasks import (
    Task,
    add_task,
    all_tags,
    delete_task,
    edit_task,
    parse_tags,
    toggle_task,
)
from .workflows import (
    ExportError,
    export_calendar,
    get_task_store,
    import_calendar,
    run_rollover,
    start_rollover_scheduler,
)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def _clock_today() -> date:
    return date.today()


def _today() -> date:
    """The date this invocation started on, read once by the group."""
    return click.get_current_context().meta["dwmyo.today"]


def _parse_date(value: str | None) -> date:
    if not value:
        return _today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a YYYY-MM-DD date")


def _serialize(tasks: list[Task]) -> list[dict]:
    return [t.to_dict() for t in tasks]


def _task_line(task: Task, show_date: bool = True) -> str:
    check = "x" if task.completed else " "
    pin = " *" if task.pinned else ""
    when = f"{task.date.strftime('%a, %b %d')}  " if show_date else ""
    tags = f"  #{' #'.join(task.tags)}" if task.tags else ""
    return f"[{check}] {when}{task.text}{pin}{tags}  ({task.id})"


def _show_section(title: str, tasks: list[Task], limit: int | None = None,
                  show_date: bool = True) -> None:
    click.echo(f"### {title} ({len(tasks)})")
    if not tasks:
        click.echo("  No events.")
    shown = tasks if limit is None else tasks[:limit]
    for task in shown:
        click.echo(f"  {_task_line(task, show_date)}")
    if len(shown) < len(tasks):
        click.echo(f"  ... {len(tasks) - len(shown)} more (use --all)")
    click.echo()


@click.group()
@click.version_option(package_name="dwmyo")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--no-rollover", is_flag=True, help="Skip the daily rollover check")
@click.pass_context
def main(ctx, debug: bool, no_rollover: bool):
    """dwmyo - calendar task tracker."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    config = load_config()
    ctx.obj = config
    today = _clock_today()
    ctx.meta["dwmyo.today"] = today
    # The rollover command runs its own pass and reports it
    if not no_rollover and ctx.invoked_subcommand not in ("rollover", "watch"):
        run_rollover(config, today)


@main.command()
@click.option("--filter", "-f", "query", default="", help="Filter by tag or text")
@click.option("--all", "show_all", is_flag=True, help="Show every far-future pinned task")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def overview(config, query: str, show_all: bool, as_json: bool):
    """Show today, the next 7, 28 and 365 days."""
    tasks = get_task_store(config).load()
    view = buckets.build_overview(tasks, _today(), query)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "today": _serialize(view.today),
                    "next_7": _serialize(view.next_7),
                    "next_28": _serialize(view.next_28),
                    "next_365": _serialize(view.next_365),
                },
                indent=2,
            )
        )
        return

    _show_section("Today", view.today, show_date=False)
    _show_section("Next 7 Days", view.next_7)
    _show_section("Next 28 Days", view.next_28)
    _show_section(
        "Next 365 Days",
        view.next_365,
        limit=None if show_all else config.preview_limit,
    )


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--filter", "-f", "query", default="", help="Filter by tag or text")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def day(config, target_date: str | None, query: str, as_json: bool):
    """List the tasks of one day."""
    target = _parse_date(target_date)
    tasks = get_task_store(config).load()
    day_tasks = buckets.filter_tasks(buckets.tasks_on_date(tasks, target), query)

    if as_json:
        click.echo(json.dumps(_serialize(day_tasks), indent=2))
        return

    click.echo(f"### {target.strftime('%A, %B %d')}")
    if not day_tasks:
        click.echo("No tasks for this day.")
        return
    for task in day_tasks:
        click.echo(f"  {_task_line(task, show_date=False)}")


@main.command()
@click.option("--year", type=int, default=None, help="Year to show")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Month to show (1-12)")
@click.option("--offset", type=int, default=0, help="Months before (-) or after (+) the chosen one")
@click.pass_obj
def month(config, year: int | None, month: int | None, offset: int):
    """Show a month grid with task counts."""
    today = _today()
    year, month = buckets.shift_month(year or today.year, month or today.month, offset)
    tasks = get_task_store(config).load()
    cells = buckets.month_grid(year, month, today, config.week_start)

    click.echo(f"{MONTH_NAMES[month - 1]} {year}")
    click.echo(" ".join(f"{name:>5}" for name in buckets.weekday_header(config.week_start)))
    for row_start in range(0, len(cells), 7):
        row = []
        for cell in cells[row_start:row_start + 7]:
            count = len(buckets.tasks_on_date(tasks, cell.date))
            label = f"{cell.day:2d}" if cell.in_month else "  "
            marker = "*" if cell.is_today else " "
            dots = f"{count}" if count and cell.in_month else " "
            row.append(f"{marker}{label}{dots:>2}")
        click.echo(" ".join(row))


@main.command()
@click.argument("text")
@click.option("--date", "-d", "target_date", default=None, help="Task date (YYYY-MM-DD)")
@click.option("--tags", "-t", default="", help="Comma-separated tags")
@click.option("--pin", is_flag=True, help="Keep visible beyond the 28-day window")
@click.pass_obj
def add(config, text: str, target_date: str | None, tags: str, pin: bool):
    """Add a task."""
    store = get_task_store(config)
    tasks = store.load()
    try:
        task = add_task(tasks, text, _parse_date(target_date), parse_tags(tags), pin)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    store.save(tasks)
    click.echo(f"Added {task.id}: {task.text} ({task.date})")


@main.command()
@click.argument("task_id")
@click.option("--text", default=None, help="New text")
@click.option("--date", "-d", "target_date", default=None, help="New date (YYYY-MM-DD)")
@click.option("--tags", "-t", default=None, help="New comma-separated tags")
@click.option("--pin/--no-pin", default=None, help="Pin or unpin")
@click.pass_obj
def edit(config, task_id: str, text: str | None, target_date: str | None,
         tags: str | None, pin: bool | None):
    """Edit a task."""
    store = get_task_store(config)
    tasks = store.load()
    try:
        task = edit_task(
            tasks,
            task_id,
            text=text,
            task_date=_parse_date(target_date) if target_date else None,
            tags=parse_tags(tags) if tags is not None else None,
            pinned=pin,
        )
    except (KeyError, ValueError) as e:
        click.echo(f"Error: {e.args[0] if e.args else e}", err=True)
        sys.exit(1)
    store.save(tasks)
    click.echo(f"Updated {task.id}: {task.text} ({task.date})")


@main.command()
@click.argument("task_id")
@click.pass_obj
def toggle(config, task_id: str):
    """Mark a task done, or not done."""
    store = get_task_store(config)
    tasks = store.load()
    try:
        task = toggle_task(tasks, task_id)
    except KeyError as e:
        click.echo(f"Error: {e.args[0]}", err=True)
        sys.exit(1)
    store.save(tasks)
    click.echo(f"{'Done' if task.completed else 'Not done'}: {task.text}")


@main.command("rm")
@click.argument("task_id")
@click.pass_obj
def remove(config, task_id: str):
    """Delete a task."""
    store = get_task_store(config)
    tasks = store.load()
    if not delete_task(tasks, task_id):
        click.echo(f"Error: No task with id {task_id!r}", err=True)
        sys.exit(1)
    store.save(tasks)
    click.echo(f"Deleted {task_id}")


@main.command()
@click.pass_obj
def tags(config):
    """List every tag in use."""
    for tag in all_tags(get_task_store(config).load()):
        click.echo(tag)


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Day to carry over (YYYY-MM-DD), defaults to today")
@click.pass_obj
def carry(config, target_date: str | None):
    """Move a day's unfinished tasks to the next day."""
    source = _parse_date(target_date)
    store = get_task_store(config)
    tasks = store.load()
    moved = move_uncompleted_to_next_day(tasks, source)
    if moved:
        store.save(tasks)
    click.echo(f"Moved {moved} task(s) from {source}")


@main.command("rollover")
@click.pass_obj
def rollover_cmd(config):
    """Move overdue unfinished tasks to today (once per day)."""
    result = run_rollover(config, _today())
    if not result.ran:
        click.echo("Rollover already ran today.")
        return
    click.echo(f"Moved {result.moved} task(s) to {result.marker}")


@main.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def import_cmd(config, path: str):
    """Import events from an .ics file."""
    try:
        count = import_calendar(config, path)
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: Could not read {path}: {e}", err=True)
        sys.exit(1)
    click.echo(f"Imported {count} event(s).")


@main.command("export")
@click.option("--output-dir", "-o", type=click.Path(), default=None,
              help="Directory to write into (default: EXPORT_DIR or cwd)")
@click.pass_obj
def export_cmd(config, output_dir: str | None):
    """Export all tasks to an .ics file."""
    try:
        path = export_calendar(
            config,
            today=_today(),
            output_dir=Path(output_dir) if output_dir else None,
        )
    except ExportError as e:
        click.echo(f"Error: Export failed. {e}", err=True)
        sys.exit(1)
    click.echo(f"Exported to {path}")


@main.command()
@click.pass_obj
def watch(config):
    """Run the rollover every day until stopped."""
    try:
        click.echo(f"Running daily rollover at {config.rollover_time}")
        click.echo("Press Ctrl+C to stop")
        start_rollover_scheduler(config)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nStopped.")


if __name__ == "__main__":
    main()
