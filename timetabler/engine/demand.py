"""
Subject demand planner.

Every subject of a class receives the same number of weekly periods:

    usable_slots = days * (periods_per_day - 2)
    periods_per_subject = clamp(usable_slots // subjects, min, max)

Two slot-equivalents per day are reserved for breaks regardless of where
the breaks actually fall. When min exceeds max, min wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..data.models import GeneratorConfig, Subject
from ..errors import NoSubjectsError
from .grid import Grid

RESERVED_BREAK_SLOTS_PER_DAY = 2


@dataclass(frozen=True)
class SubjectDemand:
    """How many weekly periods a subject needs, and who teaches it."""
    subject_id: str
    teacher_id: Optional[str]
    required_periods: int


def usable_slots(grid: Grid) -> int:
    """Teaching capacity assumed by the planner."""
    return len(grid.days) * (grid.periods_per_day - RESERVED_BREAK_SLOTS_PER_DAY)


def plan_periods_per_subject(
    subject_count: int,
    grid: Grid,
    min_periods: int,
    max_periods: int,
    class_label: str = "selected class",
) -> int:
    """
    Weekly periods each subject receives.

    Raises:
        NoSubjectsError: If the class has no subjects
    """
    if subject_count <= 0:
        raise NoSubjectsError(class_label)

    share = usable_slots(grid) // subject_count
    return max(min_periods, min(max_periods, share))


def plan_demands(
    subjects: Sequence[Subject],
    grid: Grid,
    config: GeneratorConfig,
    class_label: str = "selected class",
) -> list[SubjectDemand]:
    """One demand per subject, all with the same required_periods."""
    periods = plan_periods_per_subject(
        len(subjects),
        grid,
        config.min_periods_per_subject,
        config.max_periods_per_subject,
        class_label=class_label,
    )
    return [
        SubjectDemand(subject_id=s.subject_id, teacher_id=s.teacher_id, required_periods=periods)
        for s in subjects
    ]


def build_demand_pool(demands: Sequence[SubjectDemand]) -> list[SubjectDemand]:
    """Flat multiset: each demand repeated required_periods times, in declaration order."""
    pool: list[SubjectDemand] = []
    for demand in demands:
        pool.extend([demand] * demand.required_periods)
    return pool
