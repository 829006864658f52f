"""
Conflict detection for timetables.

A read-only auditor that runs over any set of entries, generated or
hand-edited, for any mix of classes. It never mutates the entries and
tolerates partially loaded lookup data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..data.lookups import LookupTables
from ..data.models import TimetableEntry
from .models import Conflict, ConflictType, Severity
from .teacher_overlap import find_teacher_conflicts, group_by_teacher_slot
from .breaks import DEFAULT_MAX_CONSECUTIVE, find_missing_breaks, group_by_class_day


@dataclass
class ConflictReport:
    """Ordered conflicts: teacher overlaps first, then missing breaks."""
    conflicts: list[Conflict] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.conflicts)

    def __iter__(self):
        return iter(self.conflicts)

    def of_type(self, conflict_type: ConflictType) -> list[Conflict]:
        return [c for c in self.conflicts if c.type == conflict_type]

    @property
    def high_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity == Severity.HIGH)

    @property
    def medium_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity == Severity.MEDIUM)

    @property
    def has_critical(self) -> bool:
        return self.high_count > 0

    def summary(self) -> str:
        """E.g. '2 Critical, 1 Warning'; empty when there is nothing to report."""
        parts = []
        if self.high_count:
            parts.append(f"{self.high_count} Critical")
        if self.medium_count:
            suffix = "s" if self.medium_count > 1 else ""
            parts.append(f"{self.medium_count} Warning{suffix}")
        return ", ".join(parts)

    def to_dict(self) -> dict:
        return {
            "high": self.high_count,
            "medium": self.medium_count,
            "conflicts": [c.model_dump(mode="json") for c in self.conflicts],
        }


class ConflictDetector:
    """Runs the teacher-overlap and missing-break passes."""

    def __init__(
        self,
        lookups: Optional[LookupTables] = None,
        max_consecutive_periods: int = DEFAULT_MAX_CONSECUTIVE,
    ):
        self.lookups = lookups or LookupTables()
        self.max_consecutive_periods = max_consecutive_periods

    def detect(self, entries: Iterable[TimetableEntry]) -> ConflictReport:
        entries = list(entries)
        conflicts = find_teacher_conflicts(entries, self.lookups)
        conflicts += find_missing_breaks(entries, self.lookups, self.max_consecutive_periods)
        return ConflictReport(conflicts=conflicts)


def detect_conflicts(
    entries: Iterable[TimetableEntry],
    lookups: Optional[LookupTables] = None,
) -> ConflictReport:
    """Convenience wrapper around ConflictDetector."""
    return ConflictDetector(lookups).detect(entries)


__all__ = [
    "Conflict",
    "ConflictType",
    "Severity",
    "ConflictReport",
    "ConflictDetector",
    "detect_conflicts",
    "find_teacher_conflicts",
    "find_missing_breaks",
    "group_by_teacher_slot",
    "group_by_class_day",
    "DEFAULT_MAX_CONSECUTIVE",
]
