"""Timetabler - greedy school timetable generation with conflict auditing."""

from .data.models import GeneratorConfig, Roster, TimetableEntry
from .data.store import InMemoryTimetableStore, JsonTimetableStore, TimetableStore
from .engine.generator import GenerationResult, generate_timetable
from .constraints import ConflictDetector, ConflictReport, detect_conflicts
from .output.comparison import compare_timetables
from .templates import TemplateStore
from .workflow import ProposalWorkflow, WorkflowState
from .cli import app as cli_app

__all__ = [
    # Data
    "GeneratorConfig",
    "Roster",
    "TimetableEntry",
    "TimetableStore",
    "InMemoryTimetableStore",
    "JsonTimetableStore",
    # Generation
    "GenerationResult",
    "generate_timetable",
    # Conflicts
    "ConflictDetector",
    "ConflictReport",
    "detect_conflicts",
    # Review and apply
    "compare_timetables",
    "ProposalWorkflow",
    "WorkflowState",
    "TemplateStore",
    # CLI
    "cli_app",
]
