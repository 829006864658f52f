"""
Assignment engine.

Greedy single forward pass over the grid with local swap repair:

1. Shuffle the demand pool (``random.Random.shuffle`` is a Fisher-Yates
   permutation; pass a seeded ``Random`` for reproducible runs).
2. Walk the grid day by day, slot by slot. Break cells always produce a
   break entry and never consume demand.
3. A teaching cell takes the demand under the cursor. If its teacher is
   already busy at that (day, start, end), the repair strategy looks for
   an alternative further down the pool and swaps it into place.
4. If no alternative exists, the demand under the cursor is skipped and
   the cell stays empty. Skipped demands are never retried.

There is no backtracking. The engine never raises; the worst outcome is
a result with unfilled cells.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Sequence

from ..data.models import TimetableEntry
from .demand import SubjectDemand
from .grid import Grid, GridCell

logger = logging.getLogger(__name__)

TeacherBusyMap = dict[str, set[str]]


# =============================================================================
# Repair Strategies
# =============================================================================

class RepairStrategy(Protocol):
    """Finds a replacement for a demand whose teacher is busy."""

    def find_alternative(
        self,
        pool: Sequence[SubjectDemand],
        cursor: int,
        key: str,
        teacher_busy: TeacherBusyMap,
    ) -> Optional[int]:
        """Return the pool index to swap into ``cursor``, or None."""
        ...


def is_teacher_free(demand: SubjectDemand, key: str, teacher_busy: TeacherBusyMap) -> bool:
    """Demands without a teacher are always placeable."""
    if demand.teacher_id is None:
        return True
    return key not in teacher_busy.get(demand.teacher_id, set())


class SwapForwardRepair:
    """First later demand in the pool whose teacher is free at the cell."""

    def find_alternative(
        self,
        pool: Sequence[SubjectDemand],
        cursor: int,
        key: str,
        teacher_busy: TeacherBusyMap,
    ) -> Optional[int]:
        for i in range(cursor + 1, len(pool)):
            if is_teacher_free(pool[i], key, teacher_busy):
                return i
        return None


# =============================================================================
# Results
# =============================================================================

@dataclass
class AssignmentResult:
    """Outcome of one assignment pass for a single class."""
    entries: list[TimetableEntry] = field(default_factory=list)
    unfilled_cells: list[GridCell] = field(default_factory=list)
    skipped: list[SubjectDemand] = field(default_factory=list)
    swaps: int = 0
    pool_size: int = 0

    @property
    def teaching_entries(self) -> list[TimetableEntry]:
        return [e for e in self.entries if not e.is_break]

    @property
    def break_entries(self) -> list[TimetableEntry]:
        return [e for e in self.entries if e.is_break]

    @property
    def is_complete(self) -> bool:
        """Every teaching cell was filled."""
        return not self.unfilled_cells


# =============================================================================
# Engine
# =============================================================================

def busy_map_from_entries(entries: Iterable[TimetableEntry]) -> TeacherBusyMap:
    """Teacher commitments already present in a set of entries."""
    busy: TeacherBusyMap = {}
    for entry in entries:
        if entry.teacher_id and not entry.is_break:
            busy.setdefault(entry.teacher_id, set()).add(entry.key)
    return busy


class AssignmentEngine:
    """
    Places a shuffled demand pool into one class's grid.

    The teacher-busy map is created per ``assign`` call. It can be seeded
    with commitments from other classes so their teachers are avoided.
    """

    def __init__(
        self,
        grid: Grid,
        class_id: str,
        rng: Optional[random.Random] = None,
        repair: Optional[RepairStrategy] = None,
    ):
        self.grid = grid
        self.class_id = class_id
        self.rng = rng if rng is not None else random.Random()
        self.repair = repair if repair is not None else SwapForwardRepair()

    def assign(
        self,
        pool: Sequence[SubjectDemand],
        committed: Iterable[TimetableEntry] = (),
    ) -> AssignmentResult:
        """
        Run one forward pass.

        Args:
            pool: Flat demand pool (not modified)
            committed: Entries of other classes whose teachers are already booked

        Returns:
            AssignmentResult with break and teaching entries in grid order
        """
        pool = list(pool)
        self.rng.shuffle(pool)

        teacher_busy = busy_map_from_entries(committed)
        result = AssignmentResult(pool_size=len(pool))
        cursor = 0

        for cell in self.grid:
            if cell.is_break:
                result.entries.append(self._break_entry(cell))
                continue

            if cursor >= len(pool):
                result.unfilled_cells.append(cell)
                continue

            if not is_teacher_free(pool[cursor], cell.key, teacher_busy):
                alt = self.repair.find_alternative(pool, cursor, cell.key, teacher_busy)
                if alt is None:
                    logger.debug(
                        "No free teacher for %s at %s; skipping %s",
                        self.class_id, cell.key, pool[cursor].subject_id,
                    )
                    result.skipped.append(pool[cursor])
                    result.unfilled_cells.append(cell)
                    cursor += 1
                    continue
                logger.debug("Swapping pool[%d] and pool[%d] at %s", cursor, alt, cell.key)
                pool[cursor], pool[alt] = pool[alt], pool[cursor]
                result.swaps += 1

            demand = pool[cursor]
            if demand.teacher_id:
                teacher_busy.setdefault(demand.teacher_id, set()).add(cell.key)
            result.entries.append(self._teaching_entry(cell, demand))
            cursor += 1

        return result

    def _teaching_entry(self, cell: GridCell, demand: SubjectDemand) -> TimetableEntry:
        return TimetableEntry(
            class_id=self.class_id,
            subject_id=demand.subject_id,
            teacher_id=demand.teacher_id,
            day_of_week=cell.day,
            start_time=cell.slot.start,
            end_time=cell.slot.end,
        )

    def _break_entry(self, cell: GridCell) -> TimetableEntry:
        return TimetableEntry(
            class_id=self.class_id,
            day_of_week=cell.day,
            start_time=cell.slot.start,
            end_time=cell.slot.end,
            is_break=True,
            period_name=cell.kind.period_name,
        )
