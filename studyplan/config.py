"""
Centralized configuration for the study planner.

Deployment-specific values live here. Override via environment variables
where marked; display and palette settings come from config/timetable.yaml.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from studyplan import paths
from studyplan.timetable.palette import SUBJECT_COLORS

logger = logging.getLogger(__name__)


# ============================================================
# Logging / display
# ============================================================

LOG_LEVEL: str = os.environ.get("STUDYPLAN_LOG_LEVEL", "INFO")
"""Root log level for the CLI."""

DISPLAY_TZ: str = os.environ.get("STUDYPLAN_TZ", "")
"""IANA zone for rendering times. Overrides the settings file when set."""

_DEFAULT_DAY_START = 6
_DEFAULT_DAY_END = 22


@dataclass
class Settings:
    """Resolved display and palette settings."""

    palette: list[str] = field(default_factory=lambda: list(SUBJECT_COLORS))
    day_start_hour: int = _DEFAULT_DAY_START
    day_end_hour: int = _DEFAULT_DAY_END
    display_tz: ZoneInfo | None = None


def _load_yaml(config_path: Path) -> dict:
    """Load YAML config, return empty dict on failure."""
    if not config_path.exists():
        logger.warning("Timetable settings not found at %s, using defaults", config_path)
        return {}
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as exc:
        logger.error("Failed to load timetable settings: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.error("Timetable settings at %s are not a mapping, using defaults", config_path)
        return {}
    return data


def _resolve_palette(raw) -> list[str]:
    if raw is None:
        return list(SUBJECT_COLORS)
    if not isinstance(raw, list) or not raw or not all(isinstance(c, str) and c for c in raw):
        logger.warning("Invalid palette in settings, using the reference palette")
        return list(SUBJECT_COLORS)
    return list(raw)


def _resolve_tz(name: str | None) -> ZoneInfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown display timezone %r, using host local time", name)
        return None


def load_settings(config_path: Path | None = None) -> Settings:
    """
    Read display/palette settings.

    Missing or malformed values fall back to defaults; nothing here raises.
    """
    if config_path is None:
        config_path = paths.settings_path()
    data = _load_yaml(config_path)

    day = data.get("day") or {}
    start_hour = day.get("start_hour", _DEFAULT_DAY_START)
    end_hour = day.get("end_hour", _DEFAULT_DAY_END)
    if not (isinstance(start_hour, int) and isinstance(end_hour, int) and 0 <= start_hour < end_hour <= 23):
        logger.warning("Invalid day hours %r-%r in settings, using defaults", start_hour, end_hour)
        start_hour, end_hour = _DEFAULT_DAY_START, _DEFAULT_DAY_END

    return Settings(
        palette=_resolve_palette(data.get("palette")),
        day_start_hour=start_hour,
        day_end_hour=end_hour,
        display_tz=_resolve_tz(DISPLAY_TZ or data.get("display_tz")),
    )
