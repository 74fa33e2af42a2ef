"""
Block Store - canonical operations over the study block collection.

The whole collection is the unit of persistence: callers hold it in
memory, compute a new collection and save it back. The store generates
ids, timestamps and colors; it never checks overlap (see validator).
"""

import json
import logging
import sqlite3
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from studyplan.clock import parse_instant, utc_now
from studyplan.errors import NotFoundError, PersistenceError
from studyplan.kv_store import MemoryKeyValueStore, SqliteKeyValueStore

from .model import Priority, StudyBlock, dump_blocks, parse_blocks
from .palette import ColorAssignmentTable, normalize_subject

logger = logging.getLogger(__name__)

STORAGE_KEY = "studyTimetable"

# Fields the store owns; callers cannot set them through update()
GENERATED_FIELDS = frozenset({"id", "color", "created_at", "updated_at"})
EDITABLE_FIELDS = frozenset({"subject", "description", "start", "end", "priority"})

# Storage-level failures translated into PersistenceError
STORAGE_ERRORS = (sqlite3.Error, OSError)


def _new_id() -> str:
    return str(uuid.uuid4())


def _require_subject(subject: str) -> str:
    # must run before palette.color_for: a rejected subject takes no color
    if not subject or not subject.strip():
        raise ValueError("Study block subject must not be empty")
    return subject


def _coerce(field: str, value: Any) -> Any:
    if field in ("start", "end"):
        return parse_instant(value)
    if field == "priority":
        return Priority(value)
    return value


class BlockStore:
    """
    Owns the persisted block collection and the subject color table.

    Collaborators are injected so tests can use fixed clocks and
    in-memory storage:
        kv:         get/set/delete key-value storage
        palette:    ColorAssignmentTable (a fresh one per store by default)
        clock:      returns the current aware instant
        id_factory: returns a new unique id string
    """

    def __init__(
        self,
        kv: SqliteKeyValueStore | MemoryKeyValueStore | None = None,
        palette: ColorAssignmentTable | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
        key: str = STORAGE_KEY,
    ):
        self.kv = kv if kv is not None else SqliteKeyValueStore()
        self.palette = palette if palette is not None else ColorAssignmentTable()
        self.clock = clock or utc_now
        self.id_factory = id_factory or _new_id
        self.key = key

    # ==================== Persistence ====================

    def load(self) -> list[StudyBlock]:
        """
        Read the stored collection.

        Missing, unreadable or corrupt data yields an empty list and a
        logged warning. The color table is rebuilt from the result.
        """
        blocks: list[StudyBlock] = []
        try:
            raw = self.kv.get(self.key)
        except STORAGE_ERRORS as e:
            logger.error(
                "Failed to read study blocks, starting empty: %s",
                e,
                extra={"key": self.key, "reason": type(e).__name__},
            )
            raw = None

        if raw:
            try:
                blocks = parse_blocks(raw)
            except ValueError as e:
                logger.warning(
                    "Stored study blocks are unreadable, starting empty",
                    extra={"key": self.key, "reason": str(e).splitlines()[0]},
                )
                blocks = []

        self.palette.rebuild(blocks)
        logger.debug("Loaded %d study blocks", len(blocks))
        return blocks

    def save(self, blocks: list[StudyBlock]) -> None:
        """
        Persist the whole collection in one write.

        Raises:
            PersistenceError: If storage rejected the write; the previously
                saved collection is left as it was
        """
        payload = dump_blocks(list(blocks))
        try:
            self.kv.set(self.key, payload)
        except STORAGE_ERRORS as e:
            logger.error("Failed to save study blocks: %s", e, extra={"key": self.key})
            raise PersistenceError("Failed to save data. Please try again.") from e
        logger.debug("Saved %d study blocks", len(blocks))

    def clear(self) -> None:
        """Remove all persisted blocks and forget every color assignment."""
        try:
            self.kv.delete(self.key)
        except STORAGE_ERRORS as e:
            logger.error("Failed to clear study blocks: %s", e, extra={"key": self.key})
            raise PersistenceError("Failed to clear data. Please try again.") from e
        self.palette.clear()

    # ==================== Construction ====================

    def create(
        self,
        subject: str,
        start: datetime | str,
        end: datetime | str,
        priority: Priority | str = Priority.NORMAL,
        description: str | None = None,
    ) -> StudyBlock:
        """Build a new block with id, color and timestamps. Not validated, not saved."""
        _require_subject(subject)
        now = self.clock()
        return StudyBlock(
            id=self.id_factory(),
            subject=subject,
            description=description,
            start=parse_instant(start),
            end=parse_instant(end),
            priority=Priority(priority),
            color=self.palette.color_for(subject),
            created_at=now,
            updated_at=now,
        )

    def update(self, blocks: list[StudyBlock], block_id: str, changes: Mapping[str, Any]) -> StudyBlock:
        """
        Merge changes into an existing block and return the new value.

        Generated fields in ``changes`` (id, color, timestamps) are ignored.
        The color is re-resolved only when the normalized subject changes.
        Neither ``blocks`` nor storage is modified.

        Raises:
            NotFoundError: If no block has ``block_id``
            ValueError: If ``changes`` names an unknown field
        """
        current = self.find(blocks, block_id)

        unknown = set(changes) - EDITABLE_FIELDS - GENERATED_FIELDS
        if unknown:
            raise ValueError(f"Unknown study block field(s): {', '.join(sorted(unknown))}")

        fields = {k: _coerce(k, v) for k, v in changes.items() if k in EDITABLE_FIELDS}

        subject = _require_subject(fields.get("subject", current.subject))
        color = current.color
        if normalize_subject(subject) != current.normalized_subject:
            color = self.palette.color_for(subject)

        return StudyBlock(
            id=current.id,
            subject=subject,
            description=fields.get("description", current.description),
            start=fields.get("start", current.start),
            end=fields.get("end", current.end),
            priority=fields.get("priority", current.priority),
            color=color,
            created_at=current.created_at,
            updated_at=max(self.clock(), current.updated_at),
        )

    # ==================== Collection helpers ====================

    @staticmethod
    def find(blocks: list[StudyBlock], block_id: str) -> StudyBlock:
        for block in blocks:
            if block.id == block_id:
                return block
        raise NotFoundError(block_id)

    @staticmethod
    def without(blocks: list[StudyBlock], block_id: str) -> list[StudyBlock]:
        """New collection with ``block_id`` removed."""
        remaining = [b for b in blocks if b.id != block_id]
        if len(remaining) == len(blocks):
            raise NotFoundError(block_id)
        return remaining

    @staticmethod
    def replace(blocks: list[StudyBlock], block: StudyBlock) -> list[StudyBlock]:
        """New collection with the block of the same id swapped in place."""
        BlockStore.find(blocks, block.id)
        return [block if b.id == block.id else b for b in blocks]


def export_json(blocks: list[StudyBlock], indent: int = 2) -> str:
    """Pretty JSON of a collection, same shape as the stored value."""
    return json.dumps(json.loads(dump_blocks(blocks)), indent=indent)
