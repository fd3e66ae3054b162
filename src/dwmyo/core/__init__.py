"""Functional core - pure business logic with no I/O."""

from .tasks import Task, add_task, edit_task, toggle_task, delete_task, all_tags, seed_tasks
from .ics import encode, decode, export_filename
from .buckets import CalendarCell, Overview, build_overview, filter_tasks, month_grid, tasks_on_date
from .rollover import RolloverResult, rollover, move_uncompleted_to_next_day

__all__ = [
    # Tasks
    "Task",
    "add_task",
    "edit_task",
    "toggle_task",
    "delete_task",
    "all_tags",
    "seed_tasks",
    # iCalendar
    "encode",
    "decode",
    "export_filename",
    # Buckets
    "CalendarCell",
    "Overview",
    "build_overview",
    "filter_tasks",
    "month_grid",
    "tasks_on_date",
    # Rollover
    "RolloverResult",
    "rollover",
    "move_uncompleted_to_next_day",
]
