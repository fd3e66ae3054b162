"""Task storage interface."""

from typing import Protocol

from dwmyo.core.tasks import Task


class TaskStore(Protocol):
    """Interface for persisting the task collection."""

    def load(self) -> list[Task]:
        """Load all tasks. Falls back to the seed collection, never raises."""
        ...

    def save(self, tasks: list[Task]) -> None:
        """Persist all tasks. Best effort: failures are logged, not raised."""
        ...
