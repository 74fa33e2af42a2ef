"""
Test configuration - isolated storage, fixed clock, deterministic ids.

Every test runs with STUDYPLAN_HOME pointed at a temporary directory, and
sqlite3.connect refuses the real ~/.studyplan database.
"""

import sqlite3
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from studyplan.kv_store import MemoryKeyValueStore  # noqa: E402
from studyplan.timetable import BlockStore  # noqa: E402

HOME_DB_ABSOLUTE = Path.home() / ".studyplan" / "data" / "studyplan.db"

_original_sqlite_connect = sqlite3.connect


def _guarded_sqlite_connect(database, *args, **kwargs):
    """Intercept sqlite3.connect to block access to the user's real timetable."""
    if str(database) == str(HOME_DB_ABSOLUTE):
        raise RuntimeError(f"Test attempted to access the live timetable DB at {database}")
    return _original_sqlite_connect(database, *args, **kwargs)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Redirect the app home and guard the live DB for every test."""
    home = tmp_path / "home"
    monkeypatch.setenv("STUDYPLAN_HOME", str(home))
    monkeypatch.delenv("STUDYPLAN_DB", raising=False)
    monkeypatch.setattr(sqlite3, "connect", _guarded_sqlite_connect)
    return home


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SequentialIds:
    def __init__(self, prefix: str = "block"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv, clock, ids):
    return BlockStore(kv, clock=clock, id_factory=ids)


@pytest.fixture
def at():
    """
    Local-time instant factory: at(9) is 2026-03-02 09:00 host local time
    (a Monday). Rendering with the default (local) zone shows the same
    wall-clock time.
    """

    def _at(hour: int, minute: int = 0, day: int = 2) -> datetime:
        return datetime(2026, 3, day, hour, minute).astimezone()

    return _at
