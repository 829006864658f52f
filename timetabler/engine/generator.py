"""Generation entry point: grid -> demand -> assignment for one class."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..data.models import GeneratorConfig, SchoolClass, Subject, TimetableEntry
from .assignment import AssignmentEngine, RepairStrategy
from .demand import SubjectDemand, build_demand_pool, plan_demands
from .grid import Grid, GridCell, build_grid

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A proposed timetable for one class plus how it was derived."""
    class_id: str
    config: GeneratorConfig
    grid: Grid
    demands: list[SubjectDemand]
    entries: list[TimetableEntry] = field(default_factory=list)
    unfilled_cells: list[GridCell] = field(default_factory=list)
    skipped: list[SubjectDemand] = field(default_factory=list)
    swaps: int = 0

    @property
    def periods_per_subject(self) -> int:
        return self.demands[0].required_periods if self.demands else 0

    @property
    def pool_size(self) -> int:
        return sum(d.required_periods for d in self.demands)

    @property
    def teaching_entries(self) -> list[TimetableEntry]:
        return [e for e in self.entries if not e.is_break]

    @property
    def break_entries(self) -> list[TimetableEntry]:
        return [e for e in self.entries if e.is_break]

    @property
    def is_complete(self) -> bool:
        return not self.unfilled_cells

    def summary(self) -> dict:
        return {
            "class_id": self.class_id,
            "grid_cells": len(self.grid),
            "periods_per_subject": self.periods_per_subject,
            "pool_size": self.pool_size,
            "teaching_entries": len(self.teaching_entries),
            "break_entries": len(self.break_entries),
            "unfilled_cells": len(self.unfilled_cells),
            "skipped_demands": len(self.skipped),
            "swaps": self.swaps,
        }


def generate_timetable(
    school_class: SchoolClass,
    subjects: Sequence[Subject],
    config: GeneratorConfig,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    committed: Iterable[TimetableEntry] = (),
    repair: Optional[RepairStrategy] = None,
) -> GenerationResult:
    """
    Generate a proposed weekly timetable for one class.

    Args:
        school_class: The class to schedule
        subjects: Subjects to schedule; those of other classes are ignored
        config: Generation parameters
        rng: Random source for the shuffle (takes precedence over seed)
        seed: Seed for a fresh random source
        committed: Live entries of other classes whose teachers are booked
        repair: Repair strategy (defaults to SwapForwardRepair)

    Returns:
        GenerationResult holding the proposed entries

    Raises:
        NoSubjectsError: If the class has no subjects
    """
    class_subjects = [s for s in subjects if s.class_id == school_class.class_id]

    grid = build_grid(config)
    demands = plan_demands(class_subjects, grid, config, class_label=school_class.label)
    pool = build_demand_pool(demands)

    if rng is None:
        rng = random.Random(seed)

    engine = AssignmentEngine(grid, school_class.class_id, rng=rng, repair=repair)
    assignment = engine.assign(pool, committed=committed)

    result = GenerationResult(
        class_id=school_class.class_id,
        config=config,
        grid=grid,
        demands=demands,
        entries=assignment.entries,
        unfilled_cells=assignment.unfilled_cells,
        skipped=assignment.skipped,
        swaps=assignment.swaps,
    )

    logger.info(
        "Generated %d teaching and %d break entries for %s (%d per subject, pool %d)",
        len(result.teaching_entries),
        len(result.break_entries),
        school_class.label,
        result.periods_per_subject,
        result.pool_size,
    )
    if result.skipped:
        logger.warning(
            "%d demand(s) for %s skipped: no free teacher at the slot",
            len(result.skipped), school_class.label,
        )
    if result.unfilled_cells:
        logger.warning(
            "%d teaching slot(s) left empty for %s", len(result.unfilled_cells), school_class.label
        )

    return result
