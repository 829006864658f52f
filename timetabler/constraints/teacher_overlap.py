"""
Teacher double-booking pass.

Groups entries by teacher, then by (day, start, end). Any group holding
more than one entry is a high-severity ``teacher_conflict`` naming every
affected class. Entries without a teacher are ignored.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..data.lookups import LookupTables
from ..data.models import TimetableEntry
from .models import Conflict, ConflictType, Severity


def group_by_teacher_slot(
    entries: Iterable[TimetableEntry],
) -> dict[str, dict[tuple[str, str, str], list[TimetableEntry]]]:
    """teacher_id -> (day, start, end) -> entries, in first-seen order."""
    schedule: dict[str, dict[tuple[str, str, str], list[TimetableEntry]]] = {}

    for entry in entries:
        if not entry.teacher_id:
            continue
        slot = (entry.day_of_week, entry.start_time, entry.end_time)
        schedule.setdefault(entry.teacher_id, {}).setdefault(slot, []).append(entry)

    return schedule


def find_teacher_conflicts(
    entries: Iterable[TimetableEntry],
    lookups: Optional[LookupTables] = None,
) -> list[Conflict]:
    """
    Report every teacher booked more than once in the same slot.

    Args:
        entries: Entries of any classes, generated or hand-edited
        lookups: Display tables; missing ids render as 'Unknown'

    Returns:
        One conflict per (teacher, slot) with two or more entries
    """
    lookups = lookups or LookupTables()
    conflicts = []

    for teacher_id, schedule in group_by_teacher_slot(entries).items():
        teacher_name = lookups.teacher_label(teacher_id)
        for (day, start, end), entries_at_time in schedule.items():
            if len(entries_at_time) < 2:
                continue
            conflicts.append(Conflict(
                type=ConflictType.TEACHER_CONFLICT,
                severity=Severity.HIGH,
                day=day,
                time_range=f"{start} - {end}",
                details=(
                    f"{teacher_name} is scheduled for {len(entries_at_time)} "
                    f"classes at the same time"
                ),
                affected_classes=[lookups.class_label(e.class_id) for e in entries_at_time],
                teacher_name=teacher_name,
            ))

    return conflicts
