"""
Proposal/apply workflow.

    CONFIGURING --generate/propose--> PROPOSED --apply--> APPLIED
                                               --reject--> REJECTED

A proposed timetable lives only in memory until ``apply`` replaces the
live entries of the affected classes (delete all, then insert all).
Applied and rejected are terminal; a new run needs a new workflow.

A failed generation leaves the workflow in CONFIGURING. A failed apply
leaves it in PROPOSED so the caller can retry; if the delete already
went through, the raised ``ApplyError`` says the live schedule may now
be empty.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from .constraints import ConflictDetector, ConflictReport
from .data.lookups import LookupTables
from .data.models import GeneratorConfig, TimetableEntry
from .data.store import TimetableStore
from .engine.assignment import RepairStrategy
from .engine.generator import GenerationResult, generate_timetable
from .errors import (
    ApplyError,
    NoClassSelectedError,
    PersistenceError,
    UnknownClassError,
    WorkflowStateError,
)
from .output.comparison import ClassComparison, compare_timetables

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    """Lifecycle of one generation run."""
    CONFIGURING = "configuring"
    PROPOSED = "proposed"
    APPLIED = "applied"
    REJECTED = "rejected"


@dataclass
class ApplyResult:
    """What apply changed in the store."""
    class_ids: list[str]
    deleted_count: int
    inserted_count: int


def replace_class_entries(
    store: TimetableStore,
    entries: Sequence[TimetableEntry],
    class_ids: Iterable[str],
) -> ApplyResult:
    """
    Delete every live entry of ``class_ids``, then insert ``entries``.

    Re-running with the same arguments leaves the store unchanged.

    Raises:
        ApplyError: If a delete or the insert fails
    """
    class_ids = list(dict.fromkeys(class_ids))
    deleted = 0
    deleted_any = False

    for class_id in class_ids:
        try:
            deleted += store.delete_entries(class_id)
        except PersistenceError as e:
            raise ApplyError(e, deleted=deleted_any, class_id=class_id) from e
        deleted_any = True

    try:
        inserted = store.insert_entries(entries)
    except PersistenceError as e:
        raise ApplyError(e, deleted=deleted_any) from e

    return ApplyResult(class_ids=class_ids, deleted_count=deleted, inserted_count=inserted)


class ProposalWorkflow:
    """Generate, review and apply a timetable for one selected class."""

    def __init__(
        self,
        store: TimetableStore,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[random.Random] = None,
        repair: Optional[RepairStrategy] = None,
        respect_other_classes: bool = True,
    ):
        self.store = store
        self.config = config or GeneratorConfig()
        self.rng = rng
        self.repair = repair
        self.respect_other_classes = respect_other_classes

        self._state = WorkflowState.CONFIGURING
        self._proposed: list[TimetableEntry] = []
        self._generation: Optional[GenerationResult] = None
        self._class_ids: list[str] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def proposed_entries(self) -> list[TimetableEntry]:
        return list(self._proposed)

    @property
    def generation(self) -> Optional[GenerationResult]:
        """The generation result behind the proposal, if it was generated."""
        return self._generation

    @property
    def affected_class_ids(self) -> list[str]:
        return list(self._class_ids)

    def _require(self, state: WorkflowState, action: str) -> None:
        if self._state != state:
            raise WorkflowStateError(
                f"Cannot {action} while {self._state.value}; expected {state.value}"
            )

    # -------------------------------------------------------------------------
    # Configuring
    # -------------------------------------------------------------------------

    def configure(self, **changes: Any) -> GeneratorConfig:
        """Update generation parameters. Ranges are re-validated."""
        self._require(WorkflowState.CONFIGURING, "configure")
        self.config = GeneratorConfig.model_validate({**self.config.model_dump(), **changes})
        return self.config

    def generate(self, seed: Optional[int] = None) -> GenerationResult:
        """
        Generate a proposal for the selected class.

        Raises:
            NoClassSelectedError: If no class is selected
            UnknownClassError: If the selected class is not in the store
            NoSubjectsError: If the class has no subjects
        """
        self._require(WorkflowState.CONFIGURING, "generate")

        class_id = self.config.selected_class_id
        if not class_id:
            raise NoClassSelectedError()

        school_class = self.store.get_class(class_id)
        if school_class is None:
            raise UnknownClassError(class_id)

        subjects = self.store.list_subjects(class_id)
        committed = self._other_class_entries(class_id) if self.respect_other_classes else []

        rng = self.rng if self.rng is not None else random.Random(seed)
        result = generate_timetable(
            school_class,
            subjects,
            self.config,
            rng=rng,
            committed=committed,
            repair=self.repair,
        )

        self._generation = result
        self._proposed = list(result.entries)
        self._class_ids = [class_id]
        self._state = WorkflowState.PROPOSED
        return result

    def propose(self, entries: Iterable[TimetableEntry]) -> list[TimetableEntry]:
        """Propose a prepared entry set, e.g. one loaded from a template."""
        self._require(WorkflowState.CONFIGURING, "propose")

        entries = list(entries)
        class_ids = list(dict.fromkeys(e.class_id for e in entries))
        if self.config.selected_class_id and self.config.selected_class_id not in class_ids:
            class_ids.append(self.config.selected_class_id)
        if not class_ids:
            raise NoClassSelectedError()

        self._generation = None
        self._proposed = entries
        self._class_ids = class_ids
        self._state = WorkflowState.PROPOSED
        return self.proposed_entries

    def _other_class_entries(self, class_id: str) -> list[TimetableEntry]:
        return [e for e in self.store.list_entries() if e.class_id != class_id]

    # -------------------------------------------------------------------------
    # Proposed
    # -------------------------------------------------------------------------

    def current_entries(self) -> list[TimetableEntry]:
        """Live entries of the affected classes."""
        entries = []
        for class_id in self._class_ids:
            entries.extend(self.store.list_entries(class_id))
        return entries

    def lookups(self) -> LookupTables:
        return LookupTables.build(
            self.store.list_classes(),
            self.store.list_subjects(),
            self.store.list_teachers(),
        )

    def compare(self, lookups: Optional[LookupTables] = None) -> list[ClassComparison]:
        """Current vs proposed, per affected class."""
        self._require(WorkflowState.PROPOSED, "compare")
        return compare_timetables(self.current_entries(), self._proposed, lookups or self.lookups())

    def conflicts(self, lookups: Optional[LookupTables] = None) -> ConflictReport:
        """Audit the proposal together with the live entries of other classes."""
        self._require(WorkflowState.PROPOSED, "check conflicts")
        others = [e for e in self.store.list_entries() if e.class_id not in self._class_ids]
        detector = ConflictDetector(lookups or self.lookups())
        return detector.detect(self._proposed + others)

    def apply(self) -> ApplyResult:
        """
        Replace the live entries of the affected classes with the proposal.

        Raises:
            ApplyError: If persistence fails; the workflow stays PROPOSED
        """
        self._require(WorkflowState.PROPOSED, "apply")

        try:
            result = replace_class_entries(self.store, self._proposed, self._class_ids)
        except ApplyError as e:
            logger.warning("Apply failed for %s: %s", ", ".join(self._class_ids), e)
            raise

        self._state = WorkflowState.APPLIED
        logger.info(
            "Applied %d entries for %s (%d replaced)",
            result.inserted_count, ", ".join(result.class_ids), result.deleted_count,
        )
        return result

    def reject(self) -> None:
        """Discard the proposal without touching the store."""
        self._require(WorkflowState.PROPOSED, "reject")
        self._proposed = []
        self._generation = None
        self._state = WorkflowState.REJECTED
        logger.info("Rejected proposal for %s", ", ".join(self._class_ids))
