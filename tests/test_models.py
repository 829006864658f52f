"""Tests for Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from timetabler.data.models import (
    DAYS,
    TIME_SLOTS,
    GeneratorConfig,
    Roster,
    SchoolClass,
    Subject,
    Teacher,
    TimeSlot,
    TimetableEntry,
    day_index,
    minutes_to_time,
    slot_key,
    time_to_minutes,
)


class TestTimeHelpers:
    """Tests for time conversion helpers."""

    def test_minutes_to_time(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(480) == "08:00"
        assert minutes_to_time(780) == "13:00"

    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("08:00") == 480
        assert time_to_minutes("15:30") == 930

    def test_day_index_orders_canonical_days(self):
        assert [day_index(d) for d in DAYS] == list(range(6))

    def test_unknown_day_sorts_last(self):
        assert day_index("Sunday") == len(DAYS)

    def test_slot_key(self):
        assert slot_key("Monday", "08:00", "09:00") == "Monday-08:00-09:00"


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_canonical_slots(self):
        assert len(TIME_SLOTS) == 8
        assert TIME_SLOTS[0].start == "08:00"
        assert TIME_SLOTS[-1].end == "16:00"

    def test_invalid_range(self):
        with pytest.raises(ValidationError, match="must be before"):
            TimeSlot(start="10:00", end="09:00")

    def test_label(self):
        slot = TimeSlot(start="08:00", end="09:00")
        assert slot.label == "08:00 - 09:00"
        assert str(slot) == "08:00-09:00"


class TestEntities:
    """Tests for class, subject and teacher models."""

    def test_class_label_with_section(self):
        school_class = SchoolClass(class_id="c1", class_name="Grade 7", section="A")
        assert school_class.label == "Grade 7 - A"

    def test_class_label_without_section(self):
        school_class = SchoolClass(class_id="c1", class_name="Grade 7")
        assert school_class.label == "Grade 7"

    def test_subject_teacher_optional(self):
        subject = Subject(subject_id="s1", subject_name="Maths", class_id="c1")
        assert subject.teacher_id is None

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            Teacher(teacher_id="t1", full_name="Mr Smith", email="x@example.com")


class TestTimetableEntry:
    """Tests for TimetableEntry model."""

    def test_teaching_entry(self):
        entry = TimetableEntry(
            class_id="c1", subject_id="s1", teacher_id="t1",
            day_of_week="Monday", start_time="08:00", end_time="09:00",
        )
        assert not entry.is_break
        assert entry.key == "Monday-08:00-09:00"
        assert entry.time_range == "08:00 - 09:00"

    def test_break_entry_has_no_subject(self):
        entry = TimetableEntry(
            class_id="c1", day_of_week="Monday", start_time="10:00", end_time="11:00",
            is_break=True, period_name="Breakfast Break",
        )
        assert entry.subject_id is None
        assert entry.to_record()["period_name"] == "Breakfast Break"

    def test_break_requires_period_name(self):
        with pytest.raises(ValidationError, match="period_name"):
            TimetableEntry(
                class_id="c1", day_of_week="Monday", start_time="10:00", end_time="11:00",
                is_break=True,
            )

    def test_teaching_requires_subject(self):
        with pytest.raises(ValidationError, match="subject_id"):
            TimetableEntry(
                class_id="c1", day_of_week="Monday", start_time="08:00", end_time="09:00",
            )

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError, match="must be before"):
            TimetableEntry(
                class_id="c1", subject_id="s1", day_of_week="Monday",
                start_time="09:00", end_time="09:00",
            )

    def test_bad_time_format(self):
        with pytest.raises(ValidationError):
            TimetableEntry(
                class_id="c1", subject_id="s1", day_of_week="Monday",
                start_time="8:00", end_time="09:00",
            )


class TestGeneratorConfig:
    """Tests for GeneratorConfig model."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.selected_class_id is None
        assert config.periods_per_day == 6
        assert config.days_per_week == 6
        assert config.min_periods_per_subject == 2
        assert config.max_periods_per_subject == 5
        assert config.breakfast_time == "10:00"
        assert config.lunch_time == "13:00"
        assert config.short_break_after_period == 3

    @pytest.mark.parametrize("field,value", [
        ("periods_per_day", 3),
        ("periods_per_day", 9),
        ("days_per_week", 4),
        ("days_per_week", 7),
        ("min_periods_per_subject", 0),
        ("max_periods_per_subject", 16),
        ("short_break_after_period", 1),
        ("short_break_after_period", 6),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            GeneratorConfig(**{field: value})

    def test_min_above_max_accepted(self):
        config = GeneratorConfig(min_periods_per_subject=6, max_periods_per_subject=3)
        assert config.min_periods_per_subject == 6

    def test_invalid_break_time(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(breakfast_time="25:00")


class TestRoster:
    """Tests for Roster validation and queries."""

    @pytest.fixture
    def roster(self) -> Roster:
        return Roster(
            classes=[
                SchoolClass(class_id="c1", class_name="Grade 7", section="A"),
                SchoolClass(class_id="c2", class_name="Grade 8"),
            ],
            teachers=[Teacher(teacher_id="t1", full_name="Mr Smith")],
            subjects=[
                Subject(subject_id="s1", subject_name="Maths", class_id="c1", teacher_id="t1"),
                Subject(subject_id="s2", subject_name="English", class_id="c1"),
            ],
            timetable=[
                TimetableEntry(
                    class_id="c1", subject_id="s1", teacher_id="t1",
                    day_of_week="Monday", start_time="08:00", end_time="09:00",
                ),
                TimetableEntry(
                    class_id="c1", day_of_week="Monday", start_time="10:00", end_time="11:00",
                    is_break=True, period_name="Breakfast Break",
                ),
            ],
        )

    def test_queries(self, roster):
        assert roster.get_class("c1").class_name == "Grade 7"
        assert roster.get_class("missing") is None
        assert [s.subject_id for s in roster.get_class_subjects("c1")] == ["s1", "s2"]
        assert len(roster.get_class_entries("c1")) == 2
        assert roster.get_class_entries("c2") == []

    def test_summary(self, roster):
        assert roster.summary() == {
            "classes": 2,
            "subjects": 2,
            "teachers": 1,
            "timetable_entries": 2,
            "break_entries": 1,
            "classes_without_subjects": 1,
        }

    def test_duplicate_ids(self):
        with pytest.raises(ValidationError, match="Duplicate class ID"):
            Roster(classes=[
                SchoolClass(class_id="c1", class_name="Grade 7"),
                SchoolClass(class_id="c1", class_name="Grade 8"),
            ])

    def test_unknown_subject_class(self):
        with pytest.raises(ValidationError, match="unknown class_id"):
            Roster(subjects=[Subject(subject_id="s1", subject_name="Maths", class_id="c9")])

    def test_unknown_entry_teacher(self, roster):
        data = roster.model_dump()
        data["timetable"][0]["teacher_id"] = "t9"
        with pytest.raises(ValidationError, match="unknown teacher_id"):
            Roster.model_validate(data)
