"""Daily rollover of unfinished tasks - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, timedelta

from .tasks import Task


@dataclass
class RolloverResult:
    """Outcome of a rollover pass."""

    tasks: list[Task]
    marker: date | None
    moved: int = 0
    ran: bool = False


def overdue_unfinished(tasks: list[Task], today: date) -> list[Task]:
    """Incomplete tasks dated before today."""
    return [t for t in tasks if not t.completed and t.date < today]


def rollover(tasks: list[Task], last_run: date | None, today: date) -> RolloverResult:
    """
    Move every overdue, unfinished task to today.

    Runs at most once per day: if `last_run` already equals today nothing
    happens. Otherwise tasks are updated in place and the returned marker is
    today, even when nothing needed moving. Dates only ever move forward.
    """
    if last_run == today:
        return RolloverResult(tasks=tasks, marker=last_run)

    overdue = overdue_unfinished(tasks, today)
    for task in overdue:
        task.date = today

    return RolloverResult(tasks=tasks, marker=today, moved=len(overdue), ran=True)


def move_uncompleted_to_next_day(tasks: list[Task], from_date: date) -> int:
    """Carry one day's unfinished tasks over to the following day."""
    next_day = from_date + timedelta(days=1)
    moved = 0
    for task in tasks:
        if task.date == from_date and not task.completed:
            task.date = next_day
            moved += 1
    return moved
