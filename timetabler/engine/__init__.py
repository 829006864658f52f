"""
Timetable generation engine.

Components, leaf-first: slot grid builder, subject demand planner,
assignment engine, and the per-class generation entry point.
"""

from .grid import Grid, GridCell, SlotKind, build_grid, classify_day
from .demand import (
    SubjectDemand,
    build_demand_pool,
    plan_demands,
    plan_periods_per_subject,
    usable_slots,
)
from .assignment import (
    AssignmentEngine,
    AssignmentResult,
    RepairStrategy,
    SwapForwardRepair,
    busy_map_from_entries,
)
from .generator import GenerationResult, generate_timetable

__all__ = [
    # Grid
    "Grid",
    "GridCell",
    "SlotKind",
    "build_grid",
    "classify_day",
    # Demand
    "SubjectDemand",
    "build_demand_pool",
    "plan_demands",
    "plan_periods_per_subject",
    "usable_slots",
    # Assignment
    "AssignmentEngine",
    "AssignmentResult",
    "RepairStrategy",
    "SwapForwardRepair",
    "busy_map_from_entries",
    # Generation
    "GenerationResult",
    "generate_timetable",
]
