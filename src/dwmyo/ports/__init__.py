"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore
from .marker_store import MarkerStore

__all__ = [
    "TaskStore",
    "MarkerStore",
]
