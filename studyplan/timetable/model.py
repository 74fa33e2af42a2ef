"""
Study block model and its persisted form.

StudyBlock is the only persisted entity. The stored collection is a JSON
array of records; StudyBlockRecord is the schema of one element.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, TypeAdapter

from .palette import normalize_subject


class Priority(StrEnum):
    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True)
class StudyBlock:
    """A single scheduled, non-repeating study session."""

    id: str
    subject: str
    start: datetime
    end: datetime
    priority: Priority
    color: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None

    def __post_init__(self):
        if not self.subject or not self.subject.strip():
            raise ValueError("Study block subject must not be empty")
        for name in ("start", "end", "created_at", "updated_at"):
            value = getattr(self, name)
            if value.tzinfo is None or value.utcoffset() is None:
                raise ValueError(f"Study block {name} must be timezone-aware")
        # end > start is checked by the validator, not here
        object.__setattr__(self, "priority", Priority(self.priority))

    @property
    def normalized_subject(self) -> str:
        return normalize_subject(self.subject)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def hours(self) -> float:
        return self.duration.total_seconds() / 3600

    @property
    def is_high_priority(self) -> bool:
        return self.priority is Priority.HIGH

    def to_record(self) -> "StudyBlockRecord":
        return StudyBlockRecord(
            id=self.id,
            subject=self.subject,
            description=self.description,
            start=self.start,
            end=self.end,
            priority=self.priority,
            color=self.color,
            createdAt=self.created_at,
            updatedAt=self.updated_at,
        )

    @classmethod
    def from_record(cls, record: "StudyBlockRecord") -> "StudyBlock":
        return cls(
            id=record.id,
            subject=record.subject,
            description=record.description,
            start=record.start,
            end=record.end,
            priority=record.priority,
            color=record.color,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


@dataclass(frozen=True)
class ConflictError:
    """
    A business-rule rejection returned by the validator (never raised).

    conflicting_block is the overlapped block, or the candidate itself for
    an invalid time range.
    """

    message: str
    conflicting_block: StudyBlock

    def __str__(self) -> str:
        return self.message


class StudyBlockRecord(BaseModel):
    """Persisted shape of one study block (camelCase timestamps, ISO-8601 instants)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    description: str | None = None
    start: AwareDatetime
    end: AwareDatetime
    priority: Priority = Priority.NORMAL
    color: str = Field(min_length=1)
    created_at: AwareDatetime = Field(alias="createdAt")
    updated_at: AwareDatetime = Field(alias="updatedAt")


RECORDS = TypeAdapter(list[StudyBlockRecord])


def dump_blocks(blocks: list[StudyBlock]) -> str:
    """Serialize a collection, preserving order."""
    records = [block.to_record() for block in blocks]
    return RECORDS.dump_json(records, by_alias=True, exclude_none=True).decode("utf-8")


def parse_blocks(raw: str | bytes) -> list[StudyBlock]:
    """
    Parse a stored collection.

    Raises:
        ValueError: On malformed JSON, a non-array payload or any invalid
            element (pydantic.ValidationError is a ValueError)
    """
    return [StudyBlock.from_record(record) for record in RECORDS.validate_json(raw)]
