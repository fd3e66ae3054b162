"""Configuration management for dwmyo."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.buckets import WEEKDAY_NAMES

logger = logging.getLogger(__name__)

DWMYO_HOME = Path(os.environ.get("DWMYO_HOME", Path.home() / "dwmyo"))
CONFIG_FILE = DWMYO_HOME / "config" / "dwmyo.conf"
DATA_DIR = DWMYO_HOME / "data"

TASKS_FILENAME = "tasks.json"
MARKER_FILENAME = "last-rollover"

_TIME = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


@dataclass
class Config:
    """dwmyo configuration."""

    data_dir: str = ""
    export_dir: str = ""
    week_start: int = 0  # Sunday-indexed, 0 = Sunday
    preview_limit: int = 5
    rollover_time: str = "00:05"
    timezone: str = ""

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    @property
    def tasks_file(self) -> Path:
        return self.data_path / TASKS_FILENAME

    @property
    def marker_file(self) -> Path:
        return self.data_path / MARKER_FILENAME

    @property
    def export_path(self) -> Path:
        if self.export_dir:
            return Path(self.export_dir).expanduser()
        return Path.cwd()

    def rollover_hour_minute(self) -> tuple[int, int]:
        """Parse rollover_time into (hour, minute)."""
        match = _TIME.match(self.rollover_time)
        if not match:
            raise ValueError(f"Invalid rollover time: {self.rollover_time!r}")
        return int(match.group(1)), int(match.group(2))


def parse_week_start(value: str) -> int:
    """Accept 0-6 (Sunday = 0) or a day name such as 'Monday'."""
    if value.isdigit() and 0 <= int(value) <= 6:
        return int(value)
    prefix = value[:3].title()
    if prefix in WEEKDAY_NAMES:
        return WEEKDAY_NAMES.index(prefix)
    raise ValueError(f"Invalid week start: {value!r}")


def _unquote(value: str) -> str:
    # Quoted values may carry an inline comment after the closing quote
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from dwmyo.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "export_dir":
                config.export_dir = value
            case "week_start":
                try:
                    config.week_start = parse_week_start(value)
                except ValueError as e:
                    logger.warning(f"Ignoring WEEK_START: {e}")
            case "preview_limit":
                try:
                    config.preview_limit = max(0, int(value))
                except ValueError:
                    logger.warning(f"Ignoring PREVIEW_LIMIT: {value!r} is not a number")
            case "rollover_time":
                if _TIME.match(value):
                    config.rollover_time = value
                else:
                    logger.warning(f"Ignoring ROLLOVER_TIME: {value!r} is not HH:MM")
            case "timezone":
                try:
                    if value:
                        ZoneInfo(value)
                except (ZoneInfoNotFoundError, ValueError, OSError):
                    logger.warning(f"Ignoring TIMEZONE: {value!r} is not a known time zone")
                else:
                    config.timezone = value
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
