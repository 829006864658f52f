"""
Persistence collaborators.

The generator never talks to storage directly. It reads rosters and
writes timetable rows through a ``TimetableStore``:

- ``InMemoryTimetableStore`` keeps a ``Roster`` in memory
- ``JsonTimetableStore`` keeps the roster in a JSON file and rewrites it
  after every mutation

Storage failures surface as ``PersistenceError`` carrying the underlying
message verbatim.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Union

from ..errors import PersistenceError
from .loader import load_roster, save_roster
from .models import Roster, SchoolClass, Subject, Teacher, TimetableEntry

logger = logging.getLogger(__name__)


class TimetableStore(ABC):
    """Read rosters and replace timetable rows."""

    @abstractmethod
    def list_classes(self) -> list[SchoolClass]:
        ...

    @abstractmethod
    def list_subjects(self, class_id: Optional[str] = None) -> list[Subject]:
        ...

    @abstractmethod
    def list_teachers(self) -> list[Teacher]:
        ...

    @abstractmethod
    def list_entries(self, class_id: Optional[str] = None) -> list[TimetableEntry]:
        ...

    @abstractmethod
    def delete_entries(self, class_id: str) -> int:
        """Delete every entry of a class. Returns the number deleted."""
        ...

    @abstractmethod
    def insert_entries(self, entries: Iterable[TimetableEntry]) -> int:
        """Bulk-insert entries. Returns the number inserted."""
        ...

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.list_classes() if c.class_id == class_id), None)


class InMemoryTimetableStore(TimetableStore):
    """Store backed by an in-memory roster."""

    def __init__(self, roster: Optional[Roster] = None):
        self.roster = roster if roster is not None else Roster()

    def list_classes(self) -> list[SchoolClass]:
        return list(self.roster.classes)

    def list_subjects(self, class_id: Optional[str] = None) -> list[Subject]:
        if class_id is None:
            return list(self.roster.subjects)
        return self.roster.get_class_subjects(class_id)

    def list_teachers(self) -> list[Teacher]:
        return list(self.roster.teachers)

    def list_entries(self, class_id: Optional[str] = None) -> list[TimetableEntry]:
        if class_id is None:
            return list(self.roster.timetable)
        return self.roster.get_class_entries(class_id)

    def delete_entries(self, class_id: str) -> int:
        kept = [e for e in self.roster.timetable if e.class_id != class_id]
        deleted = len(self.roster.timetable) - len(kept)
        self._commit(kept)
        self.roster.timetable = kept
        logger.debug("Deleted %d entries for class %s", deleted, class_id)
        return deleted

    def insert_entries(self, entries: Iterable[TimetableEntry]) -> int:
        new_entries = [e.model_copy() for e in entries]
        timetable = self.roster.timetable + new_entries
        self._commit(timetable)
        self.roster.timetable = timetable
        logger.debug("Inserted %d entries", len(new_entries))
        return len(new_entries)

    def _commit(self, timetable: list[TimetableEntry]) -> None:
        """Persist the timetable about to be installed. Raising leaves the roster untouched."""
        pass


class JsonTimetableStore(InMemoryTimetableStore):
    """Store backed by a roster JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            roster = load_roster(self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot read roster {self.path}: {e}") from e
        super().__init__(roster)

    def _commit(self, timetable: list[TimetableEntry]) -> None:
        try:
            save_roster(self.roster.model_copy(update={"timetable": timetable}), self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write roster {self.path}: {e}") from e
