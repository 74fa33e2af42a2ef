from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "STUDYPLAN_HOME"
APP_ENV_DB = "STUDYPLAN_DB"


def project_root() -> Path:
    """Checkout directory; bundled settings are read from its config/ folder."""
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """Where local state lives: ~/.studyplan, or STUDYPLAN_HOME when set."""
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".studyplan").resolve()


def data_dir() -> Path:
    """SQLite files and other local data; created on first use."""
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    SQLite file holding the stored timetable.

    STUDYPLAN_DB wins when set; otherwise studyplan.db under data_dir().
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "studyplan.db"


def settings_path() -> Path:
    """Bundled settings file (palette, display hours)."""
    return project_root() / "config" / "timetable.yaml"
