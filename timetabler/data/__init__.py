"""Data models, loading and persistence collaborators."""

from .models import (
    DAYS,
    TIME_SLOTS,
    GeneratorConfig,
    Roster,
    SchoolClass,
    Subject,
    Teacher,
    TimeSlot,
    TimetableEntry,
)
from .loader import load_roster, parse_roster, save_roster
from .lookups import LookupTables
from .store import InMemoryTimetableStore, JsonTimetableStore, TimetableStore
from .sample import SampleRosterConfig, generate_sample_roster, save_sample_roster

__all__ = [
    # Models
    "DAYS",
    "TIME_SLOTS",
    "GeneratorConfig",
    "Roster",
    "SchoolClass",
    "Subject",
    "Teacher",
    "TimeSlot",
    "TimetableEntry",
    # Loader
    "load_roster",
    "parse_roster",
    "save_roster",
    # Lookups
    "LookupTables",
    # Stores
    "TimetableStore",
    "InMemoryTimetableStore",
    "JsonTimetableStore",
    # Sample data
    "SampleRosterConfig",
    "generate_sample_roster",
    "save_sample_roster",
]
