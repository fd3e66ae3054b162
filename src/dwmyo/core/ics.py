"""iCalendar (.ics) encoding and decoding of tasks - no I/O dependencies.

Only the fields a task needs are produced or read. Anything else in an
imported document is ignored.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Callable

from .tasks import DEFAULT_CATEGORY, Task, new_task_id

logger = logging.getLogger(__name__)

CRLF = "\r\n"
PRODUCT = "dwmyo"
UID_DOMAIN = "dwmyo.app"

CALENDAR_HEADER = [
    "BEGIN:VCALENDAR",
    "VERSION:2.0",
    "PRODID:-//DWMYO//DWMYO//EN",
    "CALSCALE:GREGORIAN",
    "METHOD:PUBLISH",
]
CALENDAR_FOOTER = ["END:VCALENDAR"]

STATUS_COMPLETED = "COMPLETED"
STATUS_CONFIRMED = "CONFIRMED"

_DATE_VALUE = re.compile(r"^\d{8}$")
_PROPERTY_START = re.compile(r"^[A-Z][A-Z0-9-]*[;:]")
_UNESCAPE = re.compile(r"\\([\\;,nN])")
_CATEGORY = re.compile(r"Category:[ \t]*([^\n]+)")
_TAGS = re.compile(r"Tags:[ \t]*([^\n]+)")
_COMPLETED = re.compile(r"Completed:[ \t]*(Yes|No)")


# ============== Encoding ==============


def escape_text(text: str) -> str:
    """Escape a TEXT value. Backslash goes first so it is not doubled."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def format_date(day: date) -> str:
    """Render a calendar date as YYYYMMDD, anchored at midday."""
    anchored = datetime.combine(day, time(12, 0))
    return f"{anchored.year:04d}{anchored.month:02d}{anchored.day:02d}"


def format_timestamp(now: datetime) -> str:
    """Render a moment as a UTC DATE-TIME at second precision."""
    return now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def event_uid(task: Task) -> str:
    return f"todo-{task.id}@{UID_DOMAIN}"


def describe(task: Task) -> str:
    """Pack category, tags and completion into a description blob."""
    return "\n".join(
        [
            f"Category: {task.category}",
            f"Tags: {', '.join(task.tags)}",
            f"Completed: {'Yes' if task.completed else 'No'}",
        ]
    )


def encode_event(task: Task, stamp: str) -> list[str]:
    """Lines of one VEVENT block."""
    return [
        "BEGIN:VEVENT",
        f"UID:{event_uid(task)}",
        f"DTSTAMP:{stamp}",
        f"DTSTART;VALUE=DATE:{format_date(task.date)}",
        f"SUMMARY:{escape_text(task.text)}",
        f"DESCRIPTION:{escape_text(describe(task))}",
        f"CATEGORIES:{task.category}",
        f"STATUS:{STATUS_COMPLETED if task.completed else STATUS_CONFIRMED}",
        "END:VEVENT",
    ]


def encode(tasks: list[Task], now: datetime | None = None) -> str:
    """
    Encode tasks as an iCalendar document.

    Events are emitted in input order, one per task. `now` is sampled once
    and used as DTSTAMP for every event.
    """
    now = now or datetime.now(timezone.utc)
    stamp = format_timestamp(now)

    lines = list(CALENDAR_HEADER)
    for task in tasks:
        lines.extend(encode_event(task, stamp))
    lines.extend(CALENDAR_FOOTER)
    return CRLF.join(lines)


def export_filename(today: date) -> str:
    """Download name for an export made on `today`."""
    return f"{PRODUCT}-export-{today.isoformat()}.ics"


# ============== Decoding ==============


@dataclass
class TaskBuilder:
    """Accumulates the fields of one VEVENT until it is committed."""

    id: str
    text: str | None = None
    date: "date | None" = None
    completed: bool = False
    category: str = DEFAULT_CATEGORY
    tags: list[str] = field(default_factory=list)

    def is_complete(self) -> bool:
        return bool(self.text) and self.date is not None

    def build(self) -> Task | None:
        """Materialize a Task, or None if text or date is missing."""
        if not self.is_complete():
            return None
        return Task(
            id=self.id,
            text=self.text,
            date=self.date,
            completed=self.completed,
            category=self.category,
            tags=list(self.tags),
            pinned=False,
        )

    def apply(self, key: str, value: str) -> None:
        """Apply one property line. Keys match by prefix to allow parameters."""
        if key.startswith("SUMMARY"):
            self.text = value
        elif key.startswith("DTSTART"):
            parsed = parse_date(value)
            if parsed is not None:
                self.date = parsed
        elif key.startswith("DESCRIPTION"):
            self._apply_description(value)
        elif key.startswith("STATUS"):
            self.completed = value == STATUS_COMPLETED
        elif key.startswith("CATEGORIES"):
            self.category = value

    def _apply_description(self, value: str) -> None:
        description = unescape_text(value)

        category_match = _CATEGORY.search(description)
        if category_match:
            self.category = category_match.group(1).strip()

        tags_match = _TAGS.search(description)
        if tags_match:
            self.tags = [t.strip() for t in tags_match.group(1).split(",") if t.strip()]

        completed_match = _COMPLETED.search(description)
        if completed_match:
            self.completed = completed_match.group(1) == "Yes"


def unescape_text(value: str) -> str:
    """Reverse escape_text in a single pass."""

    def _replace(match: re.Match) -> str:
        char = match.group(1)
        return "\n" if char in "nN" else char

    return _UNESCAPE.sub(_replace, value)


def parse_date(value: str) -> date | None:
    """
    Parse a DTSTART value into a calendar date.

    Any time-of-day part is dropped. Only the 8-digit DATE form is accepted;
    anything else (including impossible dates) yields None.
    """
    date_value = value.split("T", 1)[0]
    if not _DATE_VALUE.match(date_value):
        return None
    try:
        return date(int(date_value[:4]), int(date_value[4:6]), int(date_value[6:8]))
    except ValueError:
        return None


def unfold_lines(text: str) -> list[str]:
    """
    Split on CRLF or LF and join folded continuation lines.

    An indented line that starts with a property name (BEGIN:VEVENT,
    SUMMARY;LANGUAGE=en:...) is an indented property, not a continuation.
    """
    lines: list[str] = []
    for raw in re.split(r"\r?\n", text):
        if raw[:1] in (" ", "\t") and lines and not _PROPERTY_START.match(raw.strip()):
            lines[-1] += raw[1:]
        else:
            lines.append(raw)
    return lines


def decode(text: str, new_id: Callable[[], str] = new_task_id) -> list[Task]:
    """
    Decode the VEVENTs of an iCalendar document into new tasks.

    Never raises on malformed content: events without a summary or a usable
    start date are dropped. Every task gets a fresh id from `new_id` and is
    unpinned. SUMMARY is taken verbatim, without unescaping.
    """
    tasks: list[Task] = []
    current: TaskBuilder | None = None
    dropped = 0

    for raw_line in unfold_lines(text):
        line = raw_line.strip()

        if line == "BEGIN:VEVENT":
            current = TaskBuilder(id=new_id())
        elif line == "END:VEVENT" and current is not None:
            task = current.build()
            if task is not None:
                tasks.append(task)
            else:
                dropped += 1
            current = None
        elif current is not None and ":" in line:
            key, _, value = line.partition(":")
            current.apply(key, value)

    if dropped:
        logger.debug(f"Dropped {dropped} incomplete event(s) while decoding")
    return tasks
