"""Tests for the slot grid builder."""

from __future__ import annotations

import pytest

from timetabler.data.models import DAYS, GeneratorConfig
from timetabler.engine.grid import SlotKind, build_grid


def kinds_for(config: GeneratorConfig, day: str = "Monday") -> list[SlotKind]:
    return [cell.kind for cell in build_grid(config).cells_for_day(day)]


class TestGridShape:
    """Tests for grid size and ordering."""

    @pytest.mark.parametrize("days", [5, 6])
    @pytest.mark.parametrize("periods", [4, 5, 6, 7, 8])
    def test_size(self, days, periods):
        grid = build_grid(GeneratorConfig(days_per_week=days, periods_per_day=periods))
        assert len(grid) == days * periods
        assert grid.periods_per_day == periods

    def test_days_are_canonical_prefix(self):
        grid = build_grid(GeneratorConfig(days_per_week=5))
        assert grid.days == DAYS[:5]
        assert "Saturday" not in {c.day for c in grid}

    def test_walk_order(self):
        grid = build_grid(GeneratorConfig(periods_per_day=4))
        first_four = [c.key for c in list(grid)[:5]]
        assert first_four == [
            "Monday-08:00-09:00",
            "Monday-09:00-10:00",
            "Monday-10:00-11:00",
            "Monday-11:00-12:00",
            "Tuesday-08:00-09:00",
        ]

    def test_positions_are_one_based(self):
        grid = build_grid(GeneratorConfig())
        assert [c.position for c in grid.cells_for_day("Monday")] == [1, 2, 3, 4, 5, 6]


class TestBreakPlacement:
    """Tests for break classification."""

    def test_defaults(self):
        assert kinds_for(GeneratorConfig()) == [
            SlotKind.TEACHING,
            SlotKind.TEACHING,
            SlotKind.BREAKFAST,
            SlotKind.TEACHING,
            SlotKind.SHORT_BREAK,
            SlotKind.LUNCH,
        ]

    def test_worked_scenario_layout(self):
        """Short break after three lessons lands on lunch and merges with it."""
        config = GeneratorConfig(breakfast_time="09:00", lunch_time="12:00", short_break_after_period=3)
        assert kinds_for(config) == [
            SlotKind.TEACHING,
            SlotKind.BREAKFAST,
            SlotKind.TEACHING,
            SlotKind.TEACHING,
            SlotKind.LUNCH,
            SlotKind.TEACHING,
        ]

    def test_worked_scenario_break_count(self):
        config = GeneratorConfig(
            days_per_week=5, breakfast_time="09:00", lunch_time="12:00", short_break_after_period=3,
        )
        grid = build_grid(config)
        assert len(grid.break_cells) == 10
        assert len(grid.teaching_cells) == 20

    def test_short_break_counts_lessons_not_slots(self):
        config = GeneratorConfig(breakfast_time="09:00", lunch_time="12:00", short_break_after_period=2)
        assert kinds_for(config) == [
            SlotKind.TEACHING,
            SlotKind.BREAKFAST,
            SlotKind.TEACHING,
            SlotKind.SHORT_BREAK,
            SlotKind.LUNCH,
            SlotKind.TEACHING,
        ]

    def test_short_break_merges_into_breakfast(self):
        config = GeneratorConfig(breakfast_time="10:00", short_break_after_period=2)
        kinds = kinds_for(config)
        assert kinds[2] == SlotKind.BREAKFAST
        assert SlotKind.SHORT_BREAK not in kinds

    def test_short_break_once_per_day(self):
        config = GeneratorConfig(
            periods_per_day=8, breakfast_time=None, lunch_time=None, short_break_after_period=2,
        )
        kinds = kinds_for(config)
        assert kinds.count(SlotKind.SHORT_BREAK) == 1
        assert kinds[2] == SlotKind.SHORT_BREAK

    def test_short_break_beyond_day_end(self):
        config = GeneratorConfig(
            periods_per_day=4, breakfast_time=None, lunch_time=None, short_break_after_period=5,
        )
        assert kinds_for(config) == [SlotKind.TEACHING] * 4

    def test_break_outside_grid_ignored(self):
        config = GeneratorConfig(periods_per_day=4, lunch_time="13:00")
        assert SlotKind.LUNCH not in kinds_for(config)

    def test_no_breakfast_shifts_short_break(self):
        config = GeneratorConfig(breakfast_time=None)
        kinds = kinds_for(config)
        assert kinds[3] == SlotKind.SHORT_BREAK
        assert SlotKind.BREAKFAST not in kinds

    def test_unaligned_break_time_matches_nothing(self):
        config = GeneratorConfig(breakfast_time="10:30")
        assert SlotKind.BREAKFAST not in kinds_for(config)

    @pytest.mark.parametrize("short_break", [2, 3, 4, 5])
    def test_same_breaks_every_day(self, short_break):
        grid = build_grid(GeneratorConfig(periods_per_day=8, short_break_after_period=short_break))
        per_day = {day: [c.kind for c in grid.cells_for_day(day)] for day in grid.days}
        assert len({tuple(kinds) for kinds in per_day.values()}) == 1

    def test_break_count(self):
        grid = build_grid(GeneratorConfig(days_per_week=5))
        assert len(grid.break_cells) == 15
        assert len(grid.teaching_cells) == 15

    def test_period_names(self):
        assert SlotKind.BREAKFAST.period_name == "Breakfast Break"
        assert SlotKind.LUNCH.period_name == "Lunch Break"
        assert SlotKind.SHORT_BREAK.period_name == "Short Break"
        assert not SlotKind.TEACHING.is_break
