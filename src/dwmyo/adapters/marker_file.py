"""Single-file storage for the last rollover date."""

import logging
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)


class FileMarkerStore:
    """
    Stores one ISO date in a text file.

    Implements MarkerStore protocol.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> date | None:
        if not self.path.exists():
            return None
        try:
            return date.fromisoformat(self.path.read_text(encoding="utf-8").strip())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable rollover marker {self.path}: {e}")
            return None

    def save(self, day: date) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(day.isoformat(), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save rollover marker to {self.path}: {e}")
