"""Comparison views and output formatters."""

from .comparison import (
    ClassComparison,
    DaySchedule,
    EnrichedEntry,
    SlotChange,
    compare_timetables,
)
from .formatters import (
    CSVFormatter,
    JSONFormatter,
    comparison_detail,
    comparison_summary_table,
    conflict_panel,
    format_csv,
    format_json,
    week_grid_table,
)

__all__ = [
    # Comparison
    "ClassComparison",
    "DaySchedule",
    "EnrichedEntry",
    "SlotChange",
    "compare_timetables",
    # Formatters
    "CSVFormatter",
    "JSONFormatter",
    "comparison_detail",
    "comparison_summary_table",
    "conflict_panel",
    "format_csv",
    "format_json",
    "week_grid_table",
]
