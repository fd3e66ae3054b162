"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

DEFAULT_CATEGORY = "personal"


@dataclass
class Task:
    """A to-do item that belongs to a single calendar day."""

    id: str
    text: str
    date: date
    completed: bool = False
    category: str = DEFAULT_CATEGORY
    tags: list[str] = field(default_factory=list)
    pinned: bool = False

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dict."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "date": self.date.isoformat(),
            "category": self.category,
            "tags": list(self.tags),
            "pinned": self.pinned,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its stored form.

        Raises KeyError/ValueError/TypeError on malformed records.
        """
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise TypeError(f"tags must be a list, got {type(tags).__name__}")
        return cls(
            id=str(data["id"]),
            text=data["text"],
            date=date.fromisoformat(data["date"]),
            completed=bool(data.get("completed", False)),
            category=data.get("category") or DEFAULT_CATEGORY,
            tags=[str(t) for t in tags if t],
            pinned=bool(data.get("pinned", False)),
        )


def new_task_id() -> str:
    """Mint a fresh opaque task id."""
    return uuid.uuid4().hex


def parse_tags(raw: str) -> list[str]:
    """Split a comma-separated tag string, dropping blanks."""
    return [t.strip() for t in raw.split(",") if t.strip()]


def seed_tasks() -> list[Task]:
    """Default collection used when nothing usable is stored."""
    return [
        Task(id="1", text="Team standup meeting", date=date(2024, 1, 15),
             category="work", tags=["meeting", "team"]),
        Task(id="2", text="Review project proposal", date=date(2024, 1, 15),
             completed=True, category="work", tags=["review", "project"]),
        Task(id="3", text="Grocery shopping", date=date(2024, 1, 16),
             tags=["shopping", "errands"]),
        Task(id="4", text="Gym workout", date=date(2024, 1, 16),
             category="health", tags=["fitness", "routine"]),
        Task(id="5", text="Call mom", date=date(2024, 1, 14),
             completed=True, tags=["family", "call"]),
    ]


def add_task(
    tasks: list[Task],
    text: str,
    task_date: date,
    tags: Iterable[str] = (),
    pinned: bool = False,
    category: str = DEFAULT_CATEGORY,
) -> Task:
    """Create a task and append it to the collection."""
    if not text.strip():
        raise ValueError("Task text must not be empty")
    task = Task(
        id=new_task_id(),
        text=text,
        date=task_date,
        category=category or DEFAULT_CATEGORY,
        tags=[t for t in tags if t],
        pinned=pinned,
    )
    tasks.append(task)
    return task


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def _require(tasks: list[Task], task_id: str) -> Task:
    task = find_task(tasks, task_id)
    if task is None:
        raise KeyError(f"No task with id {task_id!r}")
    return task


def edit_task(
    tasks: list[Task],
    task_id: str,
    *,
    text: str | None = None,
    task_date: date | None = None,
    tags: Iterable[str] | None = None,
    pinned: bool | None = None,
) -> Task:
    """
    Update a task in place. Fields left as None are kept.

    Completion state and category are not editable here; use toggle_task.
    """
    task = _require(tasks, task_id)
    if text is not None:
        if not text.strip():
            raise ValueError("Task text must not be empty")
        task.text = text
    if task_date is not None:
        task.date = task_date
    if tags is not None:
        task.tags = [t for t in tags if t]
    if pinned is not None:
        task.pinned = pinned
    return task


def toggle_task(tasks: list[Task], task_id: str) -> Task:
    """Flip a task's completion state."""
    task = _require(tasks, task_id)
    task.completed = not task.completed
    return task


def delete_task(tasks: list[Task], task_id: str) -> bool:
    """Remove a task. Returns False if it was not there."""
    for i, task in enumerate(tasks):
        if task.id == task_id:
            del tasks[i]
            return True
    return False


def all_tags(tasks: list[Task]) -> list[str]:
    """Every distinct tag in the collection, sorted."""
    return sorted({tag for t in tasks for tag in t.tags})
