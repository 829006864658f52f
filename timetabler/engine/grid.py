"""
Slot grid builder.

Derives the weekly grid for one generation run: the first
``days_per_week`` canonical days crossed with the first
``periods_per_day`` canonical time slots. Each day is classified by
walking its slots in order with a count of teaching periods seen so far:

- breakfast break: the slot starts at ``breakfast_time``
- lunch break: the slot starts at ``lunch_time``
- short break: the teaching count has just reached
  ``short_break_after_period``; fires once per day, and merges into a
  breakfast or lunch slot that lands on the same point
- teaching period: everything else

Breaks depend on configuration alone, so every day gets the same layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from ..data.models import DAYS, TIME_SLOTS, GeneratorConfig, TimeSlot, slot_key


class SlotKind(str, Enum):
    """What a grid cell is used for."""
    TEACHING = "teaching"
    BREAKFAST = "breakfast_break"
    LUNCH = "lunch_break"
    SHORT_BREAK = "short_break"

    @property
    def is_break(self) -> bool:
        return self is not SlotKind.TEACHING

    @property
    def period_name(self) -> str:
        return PERIOD_NAMES[self]


PERIOD_NAMES = {
    SlotKind.TEACHING: "Period",
    SlotKind.BREAKFAST: "Breakfast Break",
    SlotKind.LUNCH: "Lunch Break",
    SlotKind.SHORT_BREAK: "Short Break",
}


@dataclass(frozen=True)
class GridCell:
    """One (day, slot) cell of the weekly grid."""
    day: str
    position: int  # 1-based position of the slot within the day
    slot: TimeSlot
    kind: SlotKind

    @property
    def is_break(self) -> bool:
        return self.kind.is_break

    @property
    def key(self) -> str:
        return slot_key(self.day, self.slot.start, self.slot.end)


@dataclass(frozen=True)
class Grid:
    """Ordered days x ordered slots, walked day by day, slot by slot."""
    days: tuple[str, ...]
    slots: tuple[TimeSlot, ...]
    cells: tuple[GridCell, ...]

    @property
    def periods_per_day(self) -> int:
        return len(self.slots)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[GridCell]:
        return iter(self.cells)

    def cells_for_day(self, day: str) -> list[GridCell]:
        return [c for c in self.cells if c.day == day]

    @property
    def break_cells(self) -> list[GridCell]:
        return [c for c in self.cells if c.is_break]

    @property
    def teaching_cells(self) -> list[GridCell]:
        return [c for c in self.cells if not c.is_break]


def classify_day(slots: tuple[TimeSlot, ...], config: GeneratorConfig) -> list[SlotKind]:
    """Classify one day's slots in order."""
    kinds = []
    taught = 0
    short_break_due = True

    for slot in slots:
        at_short_break = short_break_due and taught == config.short_break_after_period

        if config.breakfast_time and slot.start == config.breakfast_time:
            kind = SlotKind.BREAKFAST
        elif config.lunch_time and slot.start == config.lunch_time:
            kind = SlotKind.LUNCH
        elif at_short_break:
            kind = SlotKind.SHORT_BREAK
        else:
            kind = SlotKind.TEACHING

        if at_short_break:
            short_break_due = False
        if kind is SlotKind.TEACHING:
            taught += 1
        kinds.append(kind)

    return kinds


def build_grid(config: GeneratorConfig) -> Grid:
    """
    Build the weekly grid for a configuration.

    Args:
        config: Generation parameters (ranges already validated)

    Returns:
        Grid with exactly days_per_week * periods_per_day cells
    """
    days = DAYS[:config.days_per_week]
    slots = TIME_SLOTS[:config.periods_per_day]

    kinds = classify_day(slots, config)

    cells = tuple(
        GridCell(day=day, position=position, slot=slot, kind=kind)
        for day in days
        for position, (slot, kind) in enumerate(zip(slots, kinds), start=1)
    )

    return Grid(days=days, slots=slots, cells=cells)
