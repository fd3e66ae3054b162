"""Shared workflow layer between the CLI and the rollover scheduler.

Each function loads state through the storage adapters, runs the pure core
logic, and writes results back.
"""

import logging
from datetime import date, datetime, timezone
from pathlib import Path

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.json_store import JsonTaskStore
from .adapters.marker_file import FileMarkerStore
from .config import Config
from .core.ics import decode, encode, export_filename
from .core.rollover import RolloverResult, rollover
from .ports import MarkerStore, TaskStore

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when an export file cannot be produced."""


def get_task_store(config: Config) -> TaskStore:
    """Resolve the task store from config."""
    return JsonTaskStore(config.tasks_file)


def get_marker_store(config: Config) -> MarkerStore:
    """Resolve the rollover marker store from config."""
    return FileMarkerStore(config.marker_file)


def run_rollover(config: Config, today: date | None = None) -> RolloverResult:
    """Move overdue unfinished tasks to today, at most once per day."""
    today = today or date.today()
    store = get_task_store(config)
    markers = get_marker_store(config)

    tasks = store.load()
    result = rollover(tasks, markers.load(), today)
    if not result.ran:
        logger.debug(f"Rollover already ran on {today}")
        return result

    if result.moved:
        store.save(result.tasks)
        logger.info(f"Auto-moved {result.moved} uncompleted tasks to {today}")
    markers.save(result.marker)
    return result


def import_calendar(config: Config, path: Path | str) -> int:
    """Append the events of an .ics file as new tasks. Returns how many."""
    content = Path(path).read_text(encoding="utf-8")
    imported = decode(content)

    store = get_task_store(config)
    tasks = store.load()
    tasks.extend(imported)
    store.save(tasks)

    logger.info(f"Imported {len(imported)} events from {path}")
    return len(imported)


def export_calendar(
    config: Config,
    today: date | None = None,
    now: datetime | None = None,
    output_dir: Path | None = None,
) -> Path:
    """Write every task to an .ics file and return its path."""
    today = today or date.today()
    now = now or datetime.now(timezone.utc)
    tasks = get_task_store(config).load()
    output_dir = output_dir or config.export_path
    output_path = output_dir / export_filename(today)

    logger.debug(f"Starting export with {len(tasks)} tasks")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        # Bytes keep the CRLF terminators untouched on every platform
        output_path.write_bytes(encode(tasks, now).encode("utf-8"))
    except OSError as e:
        logger.error(f"Export failed: {e}")
        raise ExportError(f"Could not write {output_path}: {e}") from e

    logger.info(f"Exported {len(tasks)} tasks to {output_path}")
    return output_path


def setup_scheduler(config: Config) -> BlockingScheduler:
    """Create a scheduler that runs the rollover once a day."""
    scheduler = BlockingScheduler(timezone=config.timezone or None)
    hour, minute = config.rollover_hour_minute()
    scheduler.add_job(
        run_rollover,
        CronTrigger(hour=hour, minute=minute, timezone=scheduler.timezone),
        args=[config],
        id="daily_rollover",
        name="Daily rollover",
    )
    logger.info(f"Scheduled daily rollover at {hour:02d}:{minute:02d}")
    return scheduler


def start_rollover_scheduler(config: Config) -> None:
    """Run the rollover now, then block running it daily."""
    run_rollover(config)
    scheduler = setup_scheduler(config)
    logger.info("Scheduler started")
    scheduler.start()
