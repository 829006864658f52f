"""
Pydantic models for the timetabler data model.

Field names follow the storage shape of the school's timetable table
(``class_id``, ``subject_id``, ``teacher_id``, ``day_of_week``,
``start_time``, ``end_time``, ``is_break``, ``period_name``).

Time conventions:
- Wall-clock times are zero-padded 'HH:MM' strings, local to the school
- Days are weekday names ('Monday' ... 'Saturday')

Example times:
- 9:00 AM = '09:00'
- 1:00 PM = '13:00'
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# Constants
# =============================================================================

DAYS: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Canonical one-hour teaching grid; a run uses the first `periods_per_day` slots
SLOT_TIMES: tuple[tuple[str, str], ...] = (
    ("08:00", "09:00"),
    ("09:00", "10:00"),
    ("10:00", "11:00"),
    ("11:00", "12:00"),
    ("12:00", "13:00"),
    ("13:00", "14:00"),
    ("14:00", "15:00"),
    ("15:00", "16:00"),
)

UNKNOWN_LABEL = "Unknown"

# Type aliases for documentation
WallClock = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="Time as 'HH:MM'")]


# =============================================================================
# Helper Functions
# =============================================================================

def time_to_minutes(time_str: str) -> int:
    """Convert HH:MM format to minutes from midnight."""
    h, m = map(int, time_str.split(":"))
    return h * 60 + m


def minutes_to_time(minutes: int) -> str:
    """Convert minutes from midnight to HH:MM format."""
    h, m = divmod(minutes, 60)
    return f"{h:02d}:{m:02d}"


def day_index(day: str) -> int:
    """Position of a day in the canonical week; unknown days sort last."""
    try:
        return DAYS.index(day)
    except ValueError:
        return len(DAYS)


def slot_key(day: str, start_time: str, end_time: str) -> str:
    """Key identifying one (day, slot) cell, e.g. 'Monday-08:00-09:00'."""
    return f"{day}-{start_time}-{end_time}"


# =============================================================================
# Core Entity Models
# =============================================================================

class TimeSlot(BaseModel):
    """A fixed (start, end) time range within one day."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start: WallClock
    end: WallClock

    @model_validator(mode="after")
    def validate_time_range(self) -> "TimeSlot":
        """Ensure start time is before end time."""
        if time_to_minutes(self.start) >= time_to_minutes(self.end):
            raise ValueError(f"start ({self.start}) must be before end ({self.end})")
        return self

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end}"

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


TIME_SLOTS: tuple[TimeSlot, ...] = tuple(TimeSlot(start=s, end=e) for s, e in SLOT_TIMES)


class SchoolClass(BaseModel):
    """
    Student class.
    Named 'SchoolClass' to avoid collision with Python's 'class' keyword.
    """
    model_config = ConfigDict(extra="forbid")

    class_id: str = Field(min_length=1, description="Unique identifier")
    class_name: str = Field(min_length=1, description="Class name (e.g., 'Grade 7')")
    section: Optional[str] = Field(default=None, description="Section (e.g., 'A')")

    @property
    def label(self) -> str:
        """Display label, e.g. 'Grade 7 - A'."""
        if self.section:
            return f"{self.class_name} - {self.section}"
        return self.class_name

    def __str__(self) -> str:
        return self.label


class Subject(BaseModel):
    """Subject taught to one class, optionally by an assigned teacher."""
    model_config = ConfigDict(extra="forbid")

    subject_id: str = Field(min_length=1, description="Unique identifier")
    subject_name: str = Field(min_length=1, description="Subject name")
    class_id: str = Field(min_length=1, description="Class this subject belongs to")
    teacher_id: Optional[str] = Field(default=None, description="Assigned teacher ID")

    def __str__(self) -> str:
        return self.subject_name


class Teacher(BaseModel):
    """Teacher entity."""
    model_config = ConfigDict(extra="forbid")

    teacher_id: str = Field(min_length=1, description="Unique identifier")
    full_name: str = Field(min_length=1, description="Full name")

    def __str__(self) -> str:
        return self.full_name


class TimetableEntry(BaseModel):
    """
    One row of a class timetable.

    Teaching entries reference a subject (and its teacher, when assigned).
    Break entries have ``is_break`` set, a ``period_name`` and no subject.
    """
    model_config = ConfigDict(extra="forbid")

    class_id: str = Field(min_length=1, description="Class ID")
    subject_id: Optional[str] = Field(default=None, description="Subject ID (None for breaks)")
    teacher_id: Optional[str] = Field(default=None, description="Teacher ID")
    day_of_week: str = Field(min_length=1, description="Weekday name")
    start_time: WallClock = Field(description="Start time")
    end_time: WallClock = Field(description="End time")
    is_break: bool = Field(default=False, description="Is break period")
    period_name: Optional[str] = Field(default=None, description="Break display name")

    @model_validator(mode="after")
    def validate_entry(self) -> "TimetableEntry":
        """Check the time range and the teaching/break shape."""
        if time_to_minutes(self.start_time) >= time_to_minutes(self.end_time):
            raise ValueError(
                f"start_time ({self.start_time}) must be before end_time ({self.end_time})"
            )
        if self.is_break and not self.period_name:
            raise ValueError("break entries require a period_name")
        if not self.is_break and not self.subject_id:
            raise ValueError("teaching entries require a subject_id")
        return self

    @property
    def key(self) -> str:
        """The (day, start, end) cell this entry occupies."""
        return slot_key(self.day_of_week, self.start_time, self.end_time)

    @property
    def time_range(self) -> str:
        return f"{self.start_time} - {self.end_time}"

    def to_record(self) -> dict[str, Any]:
        """Row shape handed to the persistence collaborator."""
        return self.model_dump()

    def __str__(self) -> str:
        what = self.period_name if self.is_break else self.subject_id
        return f"{self.class_id} {self.day_of_week} {self.time_range}: {what}"


# =============================================================================
# Configuration Models
# =============================================================================

class GeneratorConfig(BaseModel):
    """
    User-supplied generation parameters.

    Only ranges are validated. Cross-field consistency (for example
    min_periods_per_subject > max_periods_per_subject, or a break time that
    matches no slot) is accepted as given.
    """
    model_config = ConfigDict(extra="forbid")

    selected_class_id: Optional[str] = Field(default=None, description="Class to generate for")
    periods_per_day: int = Field(default=6, ge=4, le=8, description="Slots per day")
    days_per_week: int = Field(default=6, ge=5, le=6, description="Working days per week")
    min_periods_per_subject: int = Field(default=2, ge=1, le=10, description="Weekly minimum per subject")
    max_periods_per_subject: int = Field(default=5, ge=1, le=15, description="Weekly maximum per subject")
    breakfast_time: Optional[WallClock] = Field(default="10:00", description="Start of the breakfast break slot")
    lunch_time: Optional[WallClock] = Field(default="13:00", description="Start of the lunch break slot")
    short_break_after_period: int = Field(default=3, ge=2, le=5, description="Teaching periods before the short break")


# =============================================================================
# Roster
# =============================================================================

class Roster(BaseModel):
    """
    Snapshot of the collaborator data a generation run works from:
    classes, their subjects, teachers and the persisted timetable.
    """
    model_config = ConfigDict(extra="forbid")

    classes: list[SchoolClass] = Field(default_factory=list, description="Classes")
    subjects: list[Subject] = Field(default_factory=list, description="Subjects")
    teachers: list[Teacher] = Field(default_factory=list, description="Teachers")
    timetable: list[TimetableEntry] = Field(default_factory=list, description="Persisted entries")

    @model_validator(mode="after")
    def validate_no_duplicate_ids(self) -> "Roster":
        """Ensure no duplicate IDs within each entity type."""
        errors: list[str] = []

        def check_duplicates(ids: list[str], entity_name: str) -> None:
            seen: set[str] = set()
            for id_ in ids:
                if id_ in seen:
                    errors.append(f"Duplicate {entity_name} ID: '{id_}'")
                seen.add(id_)

        check_duplicates([c.class_id for c in self.classes], "class")
        check_duplicates([s.subject_id for s in self.subjects], "subject")
        check_duplicates([t.teacher_id for t in self.teachers], "teacher")

        if errors:
            raise ValueError("Duplicate ID validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    @model_validator(mode="after")
    def validate_references(self) -> "Roster":
        """Validate all cross-entity references."""
        errors: list[str] = []

        class_ids = {c.class_id for c in self.classes}
        subject_ids = {s.subject_id for s in self.subjects}
        teacher_ids = {t.teacher_id for t in self.teachers}

        for subject in self.subjects:
            if subject.class_id not in class_ids:
                errors.append(f"Subject {subject.subject_id}: unknown class_id '{subject.class_id}'")
            if subject.teacher_id and subject.teacher_id not in teacher_ids:
                errors.append(f"Subject {subject.subject_id}: unknown teacher_id '{subject.teacher_id}'")

        for i, entry in enumerate(self.timetable):
            if entry.class_id not in class_ids:
                errors.append(f"Timetable entry {i}: unknown class_id '{entry.class_id}'")
            if entry.subject_id and entry.subject_id not in subject_ids:
                errors.append(f"Timetable entry {i}: unknown subject_id '{entry.subject_id}'")
            if entry.teacher_id and entry.teacher_id not in teacher_ids:
                errors.append(f"Timetable entry {i}: unknown teacher_id '{entry.teacher_id}'")

        if errors:
            raise ValueError("Reference validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        """Get class by ID."""
        return next((c for c in self.classes if c.class_id == class_id), None)

    def get_class_subjects(self, class_id: str) -> list[Subject]:
        """Get all subjects of a class, in declaration order."""
        return [s for s in self.subjects if s.class_id == class_id]

    def get_class_entries(self, class_id: str) -> list[TimetableEntry]:
        """Get all persisted entries of a class."""
        return [e for e in self.timetable if e.class_id == class_id]

    def summary(self) -> dict[str, Any]:
        """Get a summary of the roster."""
        return {
            "classes": len(self.classes),
            "subjects": len(self.subjects),
            "teachers": len(self.teachers),
            "timetable_entries": len(self.timetable),
            "break_entries": sum(1 for e in self.timetable if e.is_break),
            "classes_without_subjects": sum(
                1 for c in self.classes if not self.get_class_subjects(c.class_id)
            ),
        }
