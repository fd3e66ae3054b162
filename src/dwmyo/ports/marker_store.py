"""Rollover marker storage interface."""

from datetime import date
from typing import Protocol


class MarkerStore(Protocol):
    """Interface for the date of the last rollover run."""

    def load(self) -> date | None:
        """Return the last run date, or None if never run or unreadable."""
        ...

    def save(self, day: date) -> None:
        """Record the last run date. Best effort."""
        ...
