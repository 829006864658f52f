"""
Output formatters for timetables.

This module provides formatters for different output formats:
- JSON: Entry rows in the storage shape
- CSV: Flat enriched rows for spreadsheets
- Console: rich tables for the weekly grid, conflicts and comparisons
"""

from __future__ import annotations

import csv
import json
from io import StringIO
from typing import Iterable, Optional, Sequence, TextIO

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..constraints import ConflictReport, ConflictType, Severity
from ..data.lookups import LookupTables
from ..data.models import TimetableEntry, day_index, time_to_minutes
from .comparison import ClassComparison


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter:
    """Formats entries as a JSON array of storage rows."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, entries: Iterable[TimetableEntry]) -> str:
        return json.dumps([e.to_record() for e in entries], indent=self.indent)


def format_json(entries: Iterable[TimetableEntry], indent: int = 2) -> str:
    """Convenience function for JSON formatting."""
    return JSONFormatter(indent=indent).format(entries)


# =============================================================================
# CSV Formatter
# =============================================================================

class CSVFormatter:
    """Formats entries as CSV, enriched with display names."""

    DEFAULT_COLUMNS = [
        'class_id', 'class_name', 'day_of_week', 'start_time', 'end_time',
        'subject_id', 'subject_name', 'teacher_id', 'teacher_name',
        'is_break', 'period_name',
    ]

    MINIMAL_COLUMNS = [
        'class_name', 'day_of_week', 'start_time', 'end_time', 'subject_name', 'teacher_name',
    ]

    def __init__(
        self,
        lookups: Optional[LookupTables] = None,
        columns: list[str] | None = None,
        include_header: bool = True,
    ):
        self.lookups = lookups or LookupTables()
        self.columns = columns or self.DEFAULT_COLUMNS
        self.include_header = include_header

    def format(self, entries: Iterable[TimetableEntry]) -> str:
        buffer = StringIO()
        self.write(entries, buffer)
        return buffer.getvalue()

    def write(self, entries: Iterable[TimetableEntry], file: TextIO) -> None:
        writer = csv.writer(file)

        if self.include_header:
            writer.writerow(self.columns)

        for entry in sort_entries(entries):
            writer.writerow(self._entry_to_row(entry))

    def _entry_to_row(self, entry: TimetableEntry) -> list[str]:
        field_map = {
            'class_id': entry.class_id,
            'class_name': self.lookups.class_label(entry.class_id),
            'day_of_week': entry.day_of_week,
            'start_time': entry.start_time,
            'end_time': entry.end_time,
            'subject_id': entry.subject_id or '',
            'subject_name': self.lookups.entry_label(entry),
            'teacher_id': entry.teacher_id or '',
            'teacher_name': self.lookups.teacher_label(entry.teacher_id) if entry.teacher_id else '',
            'is_break': 'true' if entry.is_break else 'false',
            'period_name': entry.period_name or '',
        }
        return [field_map.get(col, '') for col in self.columns]


def format_csv(
    entries: Iterable[TimetableEntry],
    lookups: Optional[LookupTables] = None,
    minimal: bool = False,
) -> str:
    """Convenience function for CSV formatting."""
    columns = CSVFormatter.MINIMAL_COLUMNS if minimal else None
    return CSVFormatter(lookups=lookups, columns=columns).format(entries)


def sort_entries(entries: Iterable[TimetableEntry]) -> list[TimetableEntry]:
    """Class, then canonical day order, then start time."""
    return sorted(
        entries,
        key=lambda e: (e.class_id, day_index(e.day_of_week), time_to_minutes(e.start_time)),
    )


# =============================================================================
# Console Tables
# =============================================================================

def week_grid_table(
    entries: Sequence[TimetableEntry],
    lookups: Optional[LookupTables] = None,
    title: str = "Weekly Schedule",
    show_teacher: bool = True,
) -> Table:
    """Time rows x day columns for one class's entries."""
    lookups = lookups or LookupTables()

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Time", style="dim")

    days = sorted({e.day_of_week for e in entries}, key=day_index)
    for day in days:
        table.add_column(day[:3], justify="center")

    cells: dict[tuple[str, str], list[TimetableEntry]] = {}
    for entry in entries:
        cells.setdefault((entry.time_range, entry.day_of_week), []).append(entry)

    time_ranges = sorted({e.time_range for e in entries}, key=lambda t: time_to_minutes(t[:5]))
    for time_range in time_ranges:
        row = [time_range]
        for day in days:
            row.append(_cell_text(cells.get((time_range, day), []), lookups, show_teacher))
        table.add_row(*row)

    return table


def _cell_text(entries: list[TimetableEntry], lookups: LookupTables, show_teacher: bool) -> Text:
    if not entries:
        return Text("-", style="dim")

    text = Text()
    for i, entry in enumerate(entries):
        if i:
            text.append("\n")
        if entry.is_break:
            text.append(lookups.entry_label(entry), style="italic yellow")
            continue
        text.append(lookups.entry_label(entry))
        if show_teacher and entry.teacher_id:
            text.append(f"\n{lookups.teacher_label(entry.teacher_id)}", style="dim")
    if len(entries) > 1:
        text.stylize("bold red")
    return text


def conflict_panel(report: ConflictReport) -> Panel:
    """Conflicts listed under a severity summary."""
    if not report.conflicts:
        return Panel(Text("No conflicts detected", style="green"), title="Timetable Conflicts")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Type")
    table.add_column("Day")
    table.add_column("Time")
    table.add_column("Details")
    table.add_column("Classes")

    for conflict in report:
        style = "red" if conflict.severity == Severity.HIGH else "yellow"
        label = "Teacher" if conflict.type == ConflictType.TEACHER_CONFLICT else "No break"
        table.add_row(
            Text(label, style=style),
            conflict.day,
            conflict.time_range,
            conflict.details,
            ", ".join(conflict.affected_classes),
        )

    border = "red" if report.has_critical else "yellow"
    return Panel(
        table,
        title="Timetable Conflicts Detected",
        subtitle=report.summary(),
        border_style=border,
    )


def comparison_summary_table(comparisons: Sequence[ClassComparison]) -> Table:
    """One row per class: period counts on each side and the diff size."""
    table = Table(title="Current vs Proposed", show_header=True, header_style="bold cyan")
    table.add_column("Class")
    table.add_column("Current", justify="right")
    table.add_column("Proposed", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Removed", justify="right", style="red")
    table.add_column("Changed", justify="right", style="yellow")

    for comparison in comparisons:
        table.add_row(
            comparison.class_name,
            str(comparison.current_count),
            str(comparison.proposed_count),
            str(len(comparison.added)),
            str(len(comparison.removed)),
            str(len(comparison.changed)),
        )

    return table


def comparison_detail(comparison: ClassComparison) -> Group:
    """Slot-level changes for one class."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Day")
    table.add_column("Time")
    table.add_column("Current")
    table.add_column("Proposed")

    for change in comparison.changes:
        table.add_row(
            change.day,
            f"{change.start_time} - {change.end_time}",
            change.before or "-",
            change.after or "-",
        )

    heading = Text(f"{comparison.class_name}: {len(comparison.changes)} slot(s) differ", style="bold")
    return Group(heading, table)
