"""JSON file task storage adapter."""

import json
import logging
from pathlib import Path

from dwmyo.core.tasks import Task, seed_tasks

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskStore protocol. The whole collection is kept as one JSON
    array of task records.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> list[Task]:
        """Load all tasks, or the seed collection if nothing usable is stored."""
        if not self.path.exists():
            return seed_tasks()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read tasks from {self.path}: {e}")
            return seed_tasks()

        if not isinstance(data, list):
            logger.warning(f"Ignoring {self.path}: expected a list of tasks")
            return seed_tasks()

        try:
            return [Task.from_dict(item) for item in data]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring malformed task record in {self.path}: {e}")
            return seed_tasks()

    def save(self, tasks: list[Task]) -> None:
        """Write all tasks. Failures are logged, never raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([t.to_dict() for t in tasks], indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to save tasks to {self.path}: {e}")
