"""
Timetable engine.

Objects:
- StudyBlock (subject, time range, priority, color)
- ColorAssignmentTable (normalized subject -> palette token)
- BlockStore (load/save/create/update/clear)

Invariants:
- end > start for every saved block
- Saved blocks never overlap (checked at write time by validate_block)
- One color per normalized subject
"""

from .block_store import STORAGE_KEY, BlockStore
from .model import ConflictError, Priority, StudyBlock
from .palette import SUBJECT_COLORS, ColorAssignmentTable, normalize_subject
from .service import TimetableService
from .stats import blocks_on_day, ranked, subject_stats, total_hours, week_agenda
from .validator import find_overlaps, validate_block

__all__ = [
    "STORAGE_KEY",
    "SUBJECT_COLORS",
    "BlockStore",
    "ColorAssignmentTable",
    "ConflictError",
    "Priority",
    "StudyBlock",
    "TimetableService",
    "blocks_on_day",
    "find_overlaps",
    "normalize_subject",
    "ranked",
    "subject_stats",
    "total_hours",
    "validate_block",
    "week_agenda",
]
