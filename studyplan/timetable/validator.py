"""
Conflict Validator - time range and overlap checks for study blocks.

Pure functions. Intervals are half-open: a block ending at 10:00 does not
conflict with one starting at 10:00.
"""

from collections.abc import Iterable
from datetime import tzinfo

from studyplan.clock import format_time

from .model import ConflictError, StudyBlock

RANGE_MESSAGE = "End time must be after start time"


def overlaps(a: StudyBlock, b: StudyBlock) -> bool:
    return a.start < b.end and a.end > b.start


def validate_block(
    candidate: StudyBlock,
    existing_blocks: Iterable[StudyBlock],
    exclude_id: str | None = None,
    *,
    tz: tzinfo | None = None,
) -> ConflictError | None:
    """
    Check a candidate block before it is saved.

    Returns a ConflictError for an empty/inverted range, or for the first
    block in ``existing_blocks`` order that overlaps the candidate. The
    block whose id equals ``exclude_id`` is skipped (the block being
    edited). Returns None when the candidate can be saved.
    """
    if candidate.end <= candidate.start:
        return ConflictError(message=RANGE_MESSAGE, conflicting_block=candidate)

    for existing in existing_blocks:
        if existing.id == exclude_id:
            continue
        if overlaps(candidate, existing):
            return ConflictError(
                message=(
                    f"This block overlaps with your {existing.subject} session from "
                    f"{format_time(existing.start, tz)} to {format_time(existing.end, tz)}"
                ),
                conflicting_block=existing,
            )

    return None


def find_overlaps(blocks: Iterable[StudyBlock]) -> list[tuple[StudyBlock, StudyBlock]]:
    """
    Every overlapping pair in a collection (should be empty if every write
    went through validate_block). Pairs keep collection order.
    """
    blocks = list(blocks)
    found = []
    for i, a in enumerate(blocks):
        for b in blocks[i + 1 :]:
            if overlaps(a, b):
                found.append((a, b))
    return found
