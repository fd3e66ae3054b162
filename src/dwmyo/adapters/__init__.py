"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore
from .marker_file import FileMarkerStore

__all__ = [
    "JsonTaskStore",
    "FileMarkerStore",
]
