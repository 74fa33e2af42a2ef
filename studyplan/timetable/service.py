"""
TimetableService - the caller-side flow around the block store.

Holds the current collection in memory and turns each mutation into
hold -> compute -> validate -> save. Single writer: a later save simply
overwrites an earlier one.
"""

import logging
from collections.abc import Mapping
from datetime import date, tzinfo
from typing import Any

from studyplan.clock import week_bounds

from .block_store import BlockStore
from .model import ConflictError, StudyBlock
from .stats import subject_stats
from .validator import find_overlaps, validate_block

logger = logging.getLogger(__name__)


class TimetableService:
    def __init__(self, store: BlockStore, tz: tzinfo | None = None):
        self.store = store
        self.tz = tz
        self._blocks: list[StudyBlock] = []

    @property
    def blocks(self) -> tuple[StudyBlock, ...]:
        return tuple(self._blocks)

    def refresh(self) -> tuple[StudyBlock, ...]:
        self._blocks = self.store.load()
        return self.blocks

    def _commit(self, new_blocks: list[StudyBlock]) -> None:
        # PersistenceError propagates; in-memory state only moves on success
        self.store.save(new_blocks)
        self._blocks = new_blocks

    def add(self, **fields: Any) -> StudyBlock | ConflictError:
        """Create and save a block, or return the conflict that prevented it."""
        block = self.store.create(**fields)
        conflict = validate_block(block, self._blocks, tz=self.tz)
        if conflict:
            logger.info("Rejected new block: %s", conflict.message)
            return conflict
        self._commit([*self._blocks, block])
        logger.info("Created study block %s (%s)", block.id, block.subject)
        return block

    def edit(self, block_id: str, changes: Mapping[str, Any]) -> StudyBlock | ConflictError:
        """Apply changes to a block and save, or return the conflict."""
        updated = self.store.update(self._blocks, block_id, changes)
        conflict = validate_block(updated, self._blocks, exclude_id=block_id, tz=self.tz)
        if conflict:
            logger.info("Rejected edit of %s: %s", block_id, conflict.message)
            return conflict
        self._commit(BlockStore.replace(self._blocks, updated))
        logger.info("Updated study block %s", block_id)
        return updated

    def delete(self, block_id: str) -> StudyBlock:
        removed = BlockStore.find(self._blocks, block_id)
        self._commit(BlockStore.without(self._blocks, block_id))
        logger.info("Deleted study block %s", block_id)
        return removed

    def clear(self) -> None:
        self.store.clear()
        self._blocks = []
        logger.info("Cleared all study blocks")

    def stats_for_week(self, day: date) -> dict[str, float]:
        start, end = week_bounds(day, self.tz)
        return subject_stats(self._blocks, start, end)

    def check(self) -> list[tuple[StudyBlock, StudyBlock]]:
        return find_overlaps(self._blocks)
