"""Tests for roster loading and saving."""

from __future__ import annotations

import json

import pytest

from timetabler.data.loader import load_roster, parse_roster, save_roster
from timetabler.errors import DataValidationError


@pytest.fixture
def valid_data() -> dict:
    """Minimal valid roster data."""
    return {
        "classes": [{"class_id": "c1", "class_name": "Grade 7", "section": "A"}],
        "teachers": [{"teacher_id": "t1", "full_name": "Mr Smith"}],
        "subjects": [
            {"subject_id": "s1", "subject_name": "Maths", "class_id": "c1", "teacher_id": "t1"}
        ],
        "timetable": [],
    }


class TestParseRoster:
    """Tests for roster validation."""

    def test_valid_data(self, valid_data):
        roster = parse_roster(valid_data)
        assert roster.get_class("c1").label == "Grade 7 - A"

    def test_camel_case_keys(self):
        roster = parse_roster({
            "classes": [{"classId": "c1", "className": "Grade 7"}],
            "timetable": [{
                "classId": "c1",
                "dayOfWeek": "Monday",
                "startTime": "10:00",
                "endTime": "11:00",
                "isBreak": True,
                "periodName": "Breakfast Break",
            }],
        })
        assert roster.timetable[0].is_break

    def test_not_an_object(self):
        with pytest.raises(DataValidationError, match="JSON object"):
            parse_roster([1, 2, 3])

    def test_invalid_reference(self, valid_data):
        valid_data["subjects"][0]["class_id"] = "c9"
        with pytest.raises(DataValidationError, match="unknown class_id"):
            parse_roster(valid_data)

    def test_missing_sections_default_empty(self):
        roster = parse_roster({})
        assert roster.classes == []
        assert roster.timetable == []


class TestLoadRoster:
    """Tests for file loading."""

    def test_load_from_file(self, valid_data, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps(valid_data))

        roster = load_roster(path)
        assert len(roster.subjects) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text("{not json")

        with pytest.raises(DataValidationError, match="Invalid JSON"):
            load_roster(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_roster(tmp_path / "missing.json")

    def test_save_creates_directories(self, valid_data, tmp_path):
        path = tmp_path / "nested" / "dir" / "roster.json"
        save_roster(parse_roster(valid_data), path)

        assert path.exists()
        assert load_roster(path).get_class("c1") is not None
