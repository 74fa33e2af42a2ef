"""
Statistics Aggregator and agenda queries over study blocks.

Pure functions; nothing here reads storage.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from studyplan.clock import week_days

from .model import StudyBlock


def subject_stats(
    blocks: Iterable[StudyBlock], window_start: datetime, window_end: datetime
) -> dict[str, float]:
    """
    Hours studied per subject for blocks starting inside the window.

    The window is inclusive at both ends and applies to the block start
    only; a block that runs past window_end still counts in full. Keys are
    the subjects as entered, not normalized.
    """
    stats: dict[str, float] = defaultdict(float)
    for block in blocks:
        if window_start <= block.start <= window_end:
            stats[block.subject] += block.hours
    return dict(stats)


def ranked(stats: dict[str, float]) -> list[tuple[str, float]]:
    """Display order: most hours first, ties by subject."""
    return sorted(stats.items(), key=lambda item: (-item[1], item[0]))


def total_hours(blocks: Iterable[StudyBlock]) -> float:
    return sum(block.hours for block in blocks)


def _local_day(dt: datetime, tz: tzinfo | None) -> date:
    return (dt.astimezone(tz) if tz is not None else dt.astimezone()).date()


def blocks_on_day(blocks: Iterable[StudyBlock], day: date, tz: tzinfo | None = None) -> list[StudyBlock]:
    """Blocks starting on ``day`` (local calendar day), earliest first."""
    return sorted((b for b in blocks if _local_day(b.start, tz) == day), key=lambda b: b.start)


def week_agenda(
    blocks: Iterable[StudyBlock], day: date, tz: tzinfo | None = None
) -> list[tuple[date, list[StudyBlock]]]:
    """Monday-first week containing ``day``, one entry per day."""
    blocks = list(blocks)
    return [(d, blocks_on_day(blocks, d, tz)) for d in week_days(day)]
