"""Tests for the subject demand planner."""

from __future__ import annotations

from collections import Counter

import pytest

from timetabler.data.models import GeneratorConfig, Subject
from timetabler.engine.demand import (
    SubjectDemand,
    build_demand_pool,
    plan_demands,
    plan_periods_per_subject,
    usable_slots,
)
from timetabler.engine.grid import build_grid
from timetabler.errors import NoSubjectsError


def make_subjects(count: int) -> list[Subject]:
    return [
        Subject(subject_id=f"s{i}", subject_name=f"Subject {i}", class_id="c1", teacher_id=f"t{i}")
        for i in range(1, count + 1)
    ]


@pytest.fixture
def grid():
    return build_grid(GeneratorConfig(days_per_week=5, periods_per_day=6))


class TestPeriodsPerSubject:
    """Tests for the per-subject period count."""

    def test_usable_slots_reserve_two_per_day(self, grid):
        assert usable_slots(grid) == 20

    def test_share_clamped_to_max(self, grid):
        assert plan_periods_per_subject(3, grid, 2, 5) == 5

    def test_share_within_bounds(self, grid):
        assert plan_periods_per_subject(5, grid, 2, 5) == 4

    def test_share_clamped_to_min(self, grid):
        assert plan_periods_per_subject(12, grid, 2, 5) == 2

    def test_min_wins_over_max(self, grid):
        assert plan_periods_per_subject(3, grid, 4, 3) == 4

    def test_no_subjects(self, grid):
        with pytest.raises(NoSubjectsError, match="Grade 7 - A"):
            plan_periods_per_subject(0, grid, 2, 5, class_label="Grade 7 - A")

    @pytest.mark.parametrize("count", range(1, 11))
    def test_bounds_hold(self, grid, count):
        config = GeneratorConfig(min_periods_per_subject=2, max_periods_per_subject=5)
        demands = plan_demands(make_subjects(count), grid, config)

        assert len({d.required_periods for d in demands}) == 1
        assert all(2 <= d.required_periods <= 5 for d in demands)


class TestDemandPool:
    """Tests for demand construction and the flat pool."""

    def test_demands_carry_teacher(self, grid):
        demands = plan_demands(make_subjects(2), grid, GeneratorConfig())
        assert demands[0] == SubjectDemand(subject_id="s1", teacher_id="t1", required_periods=5)

    def test_pool_is_multiset(self, grid):
        pool = build_demand_pool(plan_demands(make_subjects(3), grid, GeneratorConfig()))
        assert len(pool) == 15
        assert Counter(d.subject_id for d in pool) == {"s1": 5, "s2": 5, "s3": 5}

    def test_pool_keeps_declaration_order(self, grid):
        pool = build_demand_pool(plan_demands(make_subjects(2), grid, GeneratorConfig()))
        assert [d.subject_id for d in pool] == ["s1"] * 5 + ["s2"] * 5

    def test_empty_pool(self):
        assert build_demand_pool([]) == []
