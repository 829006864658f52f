"""
Missing-break pass.

For each (class, day) the teaching entries are sorted by start time and
walked pairwise. A run grows while one period ends exactly when the next
starts; any gap, or a break entry, resets it. When a run reaches
``max_consecutive`` periods a medium-severity ``no_break`` conflict is
reported for the run's span and the counter restarts at the current
period, so a long run is reported once per ``max_consecutive - 1``
extra periods rather than at every step.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..data.lookups import LookupTables
from ..data.models import TimetableEntry, time_to_minutes
from .models import Conflict, ConflictType, Severity

DEFAULT_MAX_CONSECUTIVE = 4


def group_by_class_day(
    entries: Iterable[TimetableEntry],
) -> dict[tuple[str, str], list[TimetableEntry]]:
    """(class_id, day) -> entries sorted by start time."""
    schedule: dict[tuple[str, str], list[TimetableEntry]] = {}

    for entry in entries:
        schedule.setdefault((entry.class_id, entry.day_of_week), []).append(entry)

    for day_entries in schedule.values():
        day_entries.sort(key=lambda e: time_to_minutes(e.start_time))

    return schedule


def find_missing_breaks(
    entries: Iterable[TimetableEntry],
    lookups: Optional[LookupTables] = None,
    max_consecutive: int = DEFAULT_MAX_CONSECUTIVE,
) -> list[Conflict]:
    """
    Report runs of back-to-back periods without a break.

    Args:
        entries: Entries of any classes, generated or hand-edited
        lookups: Display tables; missing ids render as 'Unknown'
        max_consecutive: Run length that triggers a conflict

    Returns:
        One conflict per reported run
    """
    lookups = lookups or LookupTables()
    conflicts = []

    for (class_id, day), day_entries in group_by_class_day(entries).items():
        class_name = lookups.class_label(class_id)
        run = 0
        run_start: Optional[TimetableEntry] = None
        prev: Optional[TimetableEntry] = None

        for entry in day_entries:
            if entry.is_break:
                run, run_start, prev = 0, None, None
                continue

            if prev is not None and prev.end_time == entry.start_time:
                run += 1
            else:
                run, run_start = 1, entry
            prev = entry

            if run >= max_consecutive:
                conflicts.append(Conflict(
                    type=ConflictType.NO_BREAK,
                    severity=Severity.MEDIUM,
                    day=day,
                    time_range=f"{run_start.start_time} - {entry.end_time}",
                    details=f"{class_name} has {run} consecutive periods without a break",
                    affected_classes=[class_name],
                ))
                run, run_start = 1, entry

    return conflicts
