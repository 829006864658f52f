"""Conflict report types."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ConflictType(str, Enum):
    """Kind of violation."""
    TEACHER_CONFLICT = "teacher_conflict"
    NO_BREAK = "no_break"


class Severity(str, Enum):
    """How urgent a conflict is."""
    HIGH = "high"
    MEDIUM = "medium"


class Conflict(BaseModel):
    """A detected violation in a proposed or live schedule."""
    type: ConflictType
    severity: Severity
    day: str
    time_range: str = Field(description="'HH:MM - HH:MM'")
    details: str
    affected_classes: list[str] = Field(default_factory=list)
    teacher_name: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.day} {self.time_range}: {self.details}"
