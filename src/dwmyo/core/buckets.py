"""Pure date-bucketing logic for the overview and month views - no I/O."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from .tasks import Task

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# Inclusive day offsets from today for each overview window.
NEXT_7 = (1, 7)
NEXT_28 = (8, 28)
NEXT_365 = (29, 365)


@dataclass
class CalendarCell:
    """One day slot of the month grid."""

    date: date
    day: int
    in_month: bool
    is_today: bool


@dataclass
class Overview:
    """Tasks grouped into the overview windows."""

    today: list[Task]
    next_7: list[Task]
    next_28: list[Task]
    next_365: list[Task]


def sunday_index(day: date) -> int:
    """Weekday of `day` with Sunday as 0."""
    return (day.weekday() + 1) % 7


def tasks_on_date(tasks: list[Task], day: date) -> list[Task]:
    return [t for t in tasks if t.date == day]


def window_dates(today: date, first: int, last: int) -> set[date]:
    """The concrete dates `first`..`last` days after today, inclusive."""
    return {today + timedelta(days=i) for i in range(first, last + 1)}


def tasks_in_window(tasks: list[Task], today: date, first: int, last: int) -> list[Task]:
    dates = window_dates(today, first, last)
    return [t for t in tasks if t.date in dates]


def next_7(tasks: list[Task], today: date) -> list[Task]:
    """Tasks dated 1 to 7 days from today."""
    return tasks_in_window(tasks, today, *NEXT_7)


def next_28(tasks: list[Task], today: date) -> list[Task]:
    """Tasks dated 8 to 28 days from today."""
    return tasks_in_window(tasks, today, *NEXT_28)


def next_365_pinned(tasks: list[Task], today: date) -> list[Task]:
    """Pinned tasks dated 29 to 365 days from today."""
    return [t for t in tasks_in_window(tasks, today, *NEXT_365) if t.pinned]


def filter_tasks(tasks: list[Task], query: str) -> list[Task]:
    """
    Filter by a case-insensitive substring of any tag or of the text.

    A blank query matches everything.
    """
    if not query.strip():
        return tasks
    needle = query.lower()
    return [
        t
        for t in tasks
        if any(needle in tag.lower() for tag in t.tags) or needle in t.text.lower()
    ]


def build_overview(tasks: list[Task], today: date, query: str = "") -> Overview:
    """Assemble the overview sections, each narrowed by `query`."""
    return Overview(
        today=filter_tasks(tasks_on_date(tasks, today), query),
        next_7=filter_tasks(next_7(tasks, today), query),
        next_28=filter_tasks(next_28(tasks, today), query),
        next_365=filter_tasks(next_365_pinned(tasks, today), query),
    )


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months, rolling the year."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid(
    year: int,
    month: int,
    today: date,
    week_start: int = 0,
) -> list[CalendarCell]:
    """
    Cells for a month view, padded to whole weeks.

    `week_start` is Sunday-indexed (0 = Sunday). Leading cells hold the end
    of the previous month and trailing cells the start of the next one.
    """
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    leading = (sunday_index(first) - week_start) % 7
    total = -(-(days_in_month + leading) // 7) * 7

    cells = []
    start = first - timedelta(days=leading)
    for offset in range(total):
        day = start + timedelta(days=offset)
        cells.append(
            CalendarCell(
                date=day,
                day=day.day,
                in_month=(day.year, day.month) == (year, month),
                is_today=day == today,
            )
        )
    return cells


def weekday_header(week_start: int = 0) -> list[str]:
    """Column names for a grid starting on `week_start`."""
    return [WEEKDAY_NAMES[(week_start + i) % 7] for i in range(7)]


def week_dates(today: date, week_start: int = 0) -> list[date]:
    """The seven dates of the week containing today."""
    start = today - timedelta(days=(sunday_index(today) - week_start) % 7)
    return [start + timedelta(days=i) for i in range(7)]


def month_dates(day: date) -> list[date]:
    """Every date in the month of `day`."""
    days_in_month = calendar.monthrange(day.year, day.month)[1]
    return [date(day.year, day.month, d) for d in range(1, days_in_month + 1)]
