"""
Side-by-side comparison of the current and the proposed timetable.

For every class present on either side the view holds enriched entries
grouped by day (canonical day order, sorted by start time), per-side
period counts and a slot-level diff keyed by (day, start, end).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..data.lookups import LookupTables
from ..data.models import TimetableEntry, day_index, time_to_minutes


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class EnrichedEntry:
    """An entry with display names resolved."""
    entry: TimetableEntry
    class_name: str
    subject_name: str
    teacher_name: Optional[str]

    @classmethod
    def build(cls, entry: TimetableEntry, lookups: LookupTables) -> EnrichedEntry:
        return cls(
            entry=entry,
            class_name=lookups.class_label(entry.class_id),
            subject_name=lookups.entry_label(entry),
            teacher_name=lookups.teacher_label(entry.teacher_id) if entry.teacher_id else None,
        )

    @property
    def time_range(self) -> str:
        return self.entry.time_range


@dataclass
class DaySchedule:
    """One day of one side of the comparison."""
    day: str
    entries: list[EnrichedEntry] = field(default_factory=list)


@dataclass
class SlotChange:
    """What occupies a (day, start, end) cell before and after."""
    day: str
    start_time: str
    end_time: str
    before: Optional[str]
    after: Optional[str]

    @property
    def kind(self) -> str:
        if self.before is None:
            return "added"
        if self.after is None:
            return "removed"
        return "changed"


@dataclass
class ClassComparison:
    """Current vs proposed timetable of one class."""
    class_id: str
    class_name: str
    current: list[DaySchedule] = field(default_factory=list)
    proposed: list[DaySchedule] = field(default_factory=list)
    changes: list[SlotChange] = field(default_factory=list)

    @property
    def current_count(self) -> int:
        return sum(len(d.entries) for d in self.current)

    @property
    def proposed_count(self) -> int:
        return sum(len(d.entries) for d in self.proposed)

    @property
    def added(self) -> list[SlotChange]:
        return [c for c in self.changes if c.kind == "added"]

    @property
    def removed(self) -> list[SlotChange]:
        return [c for c in self.changes if c.kind == "removed"]

    @property
    def changed(self) -> list[SlotChange]:
        return [c for c in self.changes if c.kind == "changed"]

    @property
    def unchanged(self) -> bool:
        return not self.changes


# =============================================================================
# Comparison
# =============================================================================

def group_by_day(entries: Iterable[EnrichedEntry]) -> list[DaySchedule]:
    """Days in canonical order, entries sorted by start time; empty days omitted."""
    by_day: dict[str, list[EnrichedEntry]] = {}
    for enriched in entries:
        by_day.setdefault(enriched.entry.day_of_week, []).append(enriched)

    return [
        DaySchedule(
            day=day,
            entries=sorted(by_day[day], key=lambda e: time_to_minutes(e.entry.start_time)),
        )
        for day in sorted(by_day, key=day_index)
    ]


def diff_slots(
    current: Iterable[EnrichedEntry],
    proposed: Iterable[EnrichedEntry],
) -> list[SlotChange]:
    """Cells whose occupant differs between the two sides."""
    before = {_cell(e.entry): e.subject_name for e in current}
    after = {_cell(e.entry): e.subject_name for e in proposed}

    changes = []
    for cell in sorted(set(before) | set(after), key=_cell_order):
        if before.get(cell) != after.get(cell):
            day, start, end = cell
            changes.append(SlotChange(day, start, end, before.get(cell), after.get(cell)))
    return changes


def compare_timetables(
    current: Iterable[TimetableEntry],
    proposed: Iterable[TimetableEntry],
    lookups: Optional[LookupTables] = None,
) -> list[ClassComparison]:
    """
    Build the per-class comparison.

    Args:
        current: Persisted entries
        proposed: Candidate entries awaiting apply
        lookups: Display tables; missing ids render as 'Unknown'

    Returns:
        One ClassComparison per class, current-side classes first
    """
    lookups = lookups or LookupTables()
    current_by_class = _by_class(EnrichedEntry.build(e, lookups) for e in current)
    proposed_by_class = _by_class(EnrichedEntry.build(e, lookups) for e in proposed)

    class_ids = list(current_by_class)
    class_ids += [c for c in proposed_by_class if c not in current_by_class]

    comparisons = []
    for class_id in class_ids:
        before = current_by_class.get(class_id, [])
        after = proposed_by_class.get(class_id, [])
        comparisons.append(ClassComparison(
            class_id=class_id,
            class_name=lookups.class_label(class_id),
            current=group_by_day(before),
            proposed=group_by_day(after),
            changes=diff_slots(before, after),
        ))
    return comparisons


def _by_class(entries: Iterable[EnrichedEntry]) -> dict[str, list[EnrichedEntry]]:
    grouped: dict[str, list[EnrichedEntry]] = {}
    for enriched in entries:
        grouped.setdefault(enriched.entry.class_id, []).append(enriched)
    return grouped


def _cell(entry: TimetableEntry) -> tuple[str, str, str]:
    return (entry.day_of_week, entry.start_time, entry.end_time)


def _cell_order(cell: tuple[str, str, str]) -> tuple[int, int]:
    return (day_index(cell[0]), time_to_minutes(cell[1]))
