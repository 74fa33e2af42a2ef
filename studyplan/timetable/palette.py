"""
Subject color assignment.

Each normalized subject gets one palette token, reused by every block of
that subject. The table is rebuilt from stored blocks on load so colors
stay stable across sessions even after blocks are deleted.
"""

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Order is significant: new subjects take the first unused token.
SUBJECT_COLORS = (
    "subject-blue",
    "subject-green",
    "subject-purple",
    "subject-orange",
    "subject-pink",
    "subject-teal",
    "subject-indigo",
    "subject-cyan",
    "subject-red",
    "subject-yellow",
)


def normalize_subject(subject: str) -> str:
    """Grouping key for a subject: lowercased and trimmed. Never displayed."""
    return subject.strip().lower()


class ColorAssignmentTable:
    """Normalized subject -> palette token."""

    def __init__(self, palette: Iterable[str] = SUBJECT_COLORS):
        self.palette: tuple[str, ...] = tuple(palette)
        if not self.palette:
            raise ValueError("Palette must contain at least one color")
        self._assignments: dict[str, str] = {}

    def color_for(self, subject: str) -> str:
        """
        Color for a subject, assigning one on first sight.

        Picks the first palette token no other subject uses. When every token
        is taken the first token is shared.
        """
        key = normalize_subject(subject)
        if key in self._assignments:
            return self._assignments[key]

        used = set(self._assignments.values())
        color = next((c for c in self.palette if c not in used), None)
        if color is None:
            color = self.palette[0]
            logger.debug(
                "Palette exhausted, subject %r shares %s", key, color, extra={"subjects": len(used)}
            )

        self._assignments[key] = color
        return color

    def rebuild(self, blocks: Iterable) -> None:
        """Reset from stored blocks; the first block seen for a subject wins."""
        self._assignments.clear()
        for block in blocks:
            key = normalize_subject(block.subject)
            if key not in self._assignments:
                self._assignments[key] = block.color

    def clear(self) -> None:
        self._assignments.clear()

    def assignments(self) -> dict[str, str]:
        return dict(self._assignments)

    def __len__(self) -> int:
        return len(self._assignments)

    def __contains__(self, subject: str) -> bool:
        return normalize_subject(subject) in self._assignments
