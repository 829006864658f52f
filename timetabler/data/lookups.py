"""
Display lookup tables.

Id-to-record maps built once per report or render and passed into the
conflict detector and the comparison view as plain data. Missing ids
resolve to the 'Unknown' label instead of raising, so partially loaded
data can still be audited.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import UNKNOWN_LABEL, Roster, SchoolClass, Subject, Teacher, TimetableEntry


@dataclass
class LookupTables:
    """Id -> record maps for classes, subjects and teachers."""
    classes: dict[str, SchoolClass] = field(default_factory=dict)
    subjects: dict[str, Subject] = field(default_factory=dict)
    teachers: dict[str, Teacher] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        classes: Iterable[SchoolClass] = (),
        subjects: Iterable[Subject] = (),
        teachers: Iterable[Teacher] = (),
    ) -> LookupTables:
        return cls(
            classes={c.class_id: c for c in classes},
            subjects={s.subject_id: s for s in subjects},
            teachers={t.teacher_id: t for t in teachers},
        )

    @classmethod
    def from_roster(cls, roster: Roster) -> LookupTables:
        return cls.build(roster.classes, roster.subjects, roster.teachers)

    def class_label(self, class_id: Optional[str]) -> str:
        school_class = self.classes.get(class_id) if class_id else None
        return school_class.label if school_class else UNKNOWN_LABEL

    def subject_label(self, subject_id: Optional[str]) -> str:
        subject = self.subjects.get(subject_id) if subject_id else None
        return subject.subject_name if subject else UNKNOWN_LABEL

    def teacher_label(self, teacher_id: Optional[str]) -> str:
        teacher = self.teachers.get(teacher_id) if teacher_id else None
        return teacher.full_name if teacher else UNKNOWN_LABEL

    def entry_label(self, entry: TimetableEntry) -> str:
        """What occupies the entry's slot: the break name or the subject name."""
        if entry.is_break:
            return entry.period_name or "Break"
        return self.subject_label(entry.subject_id)
