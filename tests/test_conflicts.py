"""Tests for the conflict detector."""

from __future__ import annotations

import json

import pytest

from timetabler.constraints import (
    ConflictDetector,
    ConflictType,
    Severity,
    detect_conflicts,
    find_missing_breaks,
    find_teacher_conflicts,
)
from timetabler.data.lookups import LookupTables
from timetabler.data.models import GeneratorConfig, SchoolClass, Subject, Teacher, TimetableEntry
from timetabler.engine.generator import generate_timetable


def lesson(
    class_id: str = "c1",
    teacher_id: str | None = "t1",
    day: str = "Monday",
    start: str = "08:00",
    end: str = "09:00",
) -> TimetableEntry:
    return TimetableEntry(
        class_id=class_id, subject_id=f"{class_id}-s1", teacher_id=teacher_id,
        day_of_week=day, start_time=start, end_time=end,
    )


def back_to_back(count: int, class_id: str = "c1", day: str = "Monday", first_hour: int = 8) -> list[TimetableEntry]:
    return [
        lesson(class_id, f"t{i}", day, f"{first_hour + i:02d}:00", f"{first_hour + i + 1:02d}:00")
        for i in range(count)
    ]


@pytest.fixture
def lookups() -> LookupTables:
    return LookupTables.build(
        classes=[
            SchoolClass(class_id="c1", class_name="Grade 7", section="A"),
            SchoolClass(class_id="c2", class_name="Grade 8", section="B"),
            SchoolClass(class_id="c3", class_name="Grade 9"),
        ],
        teachers=[Teacher(teacher_id="t1", full_name="Mr Smith")],
    )


class TestTeacherConflicts:
    """Tests for the teacher double-booking pass."""

    def test_double_booking(self, lookups):
        conflicts = find_teacher_conflicts([lesson("c1"), lesson("c2")], lookups)

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.type == ConflictType.TEACHER_CONFLICT
        assert conflict.severity == Severity.HIGH
        assert conflict.day == "Monday"
        assert conflict.time_range == "08:00 - 09:00"
        assert conflict.teacher_name == "Mr Smith"
        assert conflict.affected_classes == ["Grade 7 - A", "Grade 8 - B"]
        assert conflict.details == "Mr Smith is scheduled for 2 classes at the same time"

    def test_triple_booking_is_one_conflict(self, lookups):
        conflicts = find_teacher_conflicts([lesson("c1"), lesson("c2"), lesson("c3")], lookups)

        assert len(conflicts) == 1
        assert conflicts[0].affected_classes == ["Grade 7 - A", "Grade 8 - B", "Grade 9"]

    def test_different_slots(self):
        entries = [lesson("c1"), lesson("c2", start="09:00", end="10:00")]
        assert find_teacher_conflicts(entries) == []

    def test_untaught_entries_ignored(self):
        assert find_teacher_conflicts([lesson("c1", None), lesson("c2", None)]) == []

    def test_missing_lookups_render_unknown(self):
        conflicts = find_teacher_conflicts([lesson("c1"), lesson("c2")])

        assert conflicts[0].teacher_name == "Unknown"
        assert conflicts[0].affected_classes == ["Unknown", "Unknown"]


class TestMissingBreaks:
    """Tests for the no-break pass."""

    def test_four_in_a_row(self, lookups):
        conflicts = find_missing_breaks(back_to_back(4), lookups)

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.type == ConflictType.NO_BREAK
        assert conflict.severity == Severity.MEDIUM
        assert conflict.time_range == "08:00 - 12:00"
        assert conflict.details == "Grade 7 - A has 4 consecutive periods without a break"
        assert conflict.affected_classes == ["Grade 7 - A"]

    def test_three_in_a_row(self):
        assert find_missing_breaks(back_to_back(3)) == []

    def test_gap_resets_run(self):
        entries = back_to_back(2) + back_to_back(2, first_hour=11)
        assert find_missing_breaks(entries) == []

    def test_break_entry_resets_run(self):
        entries = back_to_back(2) + back_to_back(2, first_hour=11) + [
            TimetableEntry(
                class_id="c1", day_of_week="Monday", start_time="10:00", end_time="11:00",
                is_break=True, period_name="Breakfast Break",
            )
        ]
        assert find_missing_breaks(entries) == []

    def test_long_run_reported_again(self):
        conflicts = find_missing_breaks(back_to_back(7))
        assert [c.time_range for c in conflicts] == ["08:00 - 12:00", "11:00 - 15:00"]

    def test_unsorted_input(self):
        assert len(find_missing_breaks(list(reversed(back_to_back(4))))) == 1

    def test_runs_are_per_class_and_day(self):
        entries = (
            back_to_back(2, "c1", "Monday")
            + back_to_back(2, "c2", "Monday", first_hour=10)
            + back_to_back(2, "c1", "Tuesday", first_hour=10)
        )
        assert find_missing_breaks(entries) == []

    def test_custom_threshold(self):
        assert len(find_missing_breaks(back_to_back(3), max_consecutive=3)) == 1


class TestConflictDetector:
    """Tests for the combined report."""

    def test_teacher_conflicts_first(self, lookups):
        entries = back_to_back(4) + [lesson("c2", "t1", "Tuesday"), lesson("c3", "t1", "Tuesday")]
        report = ConflictDetector(lookups).detect(entries)

        assert [c.type for c in report] == [ConflictType.TEACHER_CONFLICT, ConflictType.NO_BREAK]
        assert report.high_count == 1
        assert report.medium_count == 1
        assert report.has_critical
        assert report.summary() == "1 Critical, 1 Warning"

    def test_warnings_only(self):
        report = detect_conflicts(back_to_back(4, "c1") + back_to_back(4, "c2", "Tuesday"))

        assert not report.has_critical
        assert report.summary() == "2 Warnings"

    def test_empty(self):
        report = detect_conflicts([])
        assert len(report) == 0
        assert report.summary() == ""

    def test_entries_not_mutated(self):
        entries = back_to_back(5) + [lesson("c2", "t0")]
        before = [e.model_dump() for e in entries]
        detect_conflicts(entries)
        assert [e.model_dump() for e in entries] == before

    def test_to_dict_is_json(self, lookups):
        report = ConflictDetector(lookups).detect([lesson("c1"), lesson("c2")])
        data = json.loads(json.dumps(report.to_dict()))

        assert data["high"] == 1
        assert data["conflicts"][0]["type"] == "teacher_conflict"
        assert data["conflicts"][0]["severity"] == "high"

    def test_default_generation_has_breaks(self):
        school_class = SchoolClass(class_id="c1", class_name="Grade 7")
        subjects = [
            Subject(subject_id=f"s{i}", subject_name=f"Subject {i}", class_id="c1", teacher_id=f"t{i}")
            for i in range(4)
        ]
        result = generate_timetable(school_class, subjects, GeneratorConfig(), seed=2)
        assert detect_conflicts(result.entries).of_type(ConflictType.NO_BREAK) == []
