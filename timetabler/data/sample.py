"""
Sample roster generator.

Builds a realistic roster of classes, subjects and teachers for demos and
tests. Teachers are drawn from a shared pool, so the same teacher can be
assigned to subjects in several classes and cross-class conflicts are
possible.

Usage:
    from timetabler.data.sample import SampleRosterConfig, generate_sample_roster

    roster = generate_sample_roster(SampleRosterConfig(num_classes=4, seed=7))
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .loader import save_roster
from .models import Roster, SchoolClass, Subject, Teacher


# =============================================================================
# Name Data
# =============================================================================

FIRST_NAMES = [
    "James", "John", "Robert", "Michael", "David", "William", "Richard", "Joseph",
    "Thomas", "Sarah", "Jessica", "Emily", "Ashley", "Amanda", "Elizabeth",
    "Jennifer", "Rachel", "Laura", "Nicole", "Emma", "Olivia", "Sophia", "Daniel",
    "Matthew", "Andrew", "Samuel", "Henry", "Grace", "Hannah", "Lucy", "Priya",
    "Arjun", "Meera", "Rahul", "Anita", "Kiran", "Fatima", "Omar", "Aisha", "Yusuf",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Wilson", "Anderson", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Thompson",
    "White", "Harris", "Clark", "Lewis", "Walker", "Young", "King", "Wright",
    "Sharma", "Patel", "Iyer", "Khan", "Reddy", "Nair", "Gupta", "Das",
]

SUBJECT_NAMES = [
    "English", "Mathematics", "Science", "Social Studies", "Hindi",
    "Computer Science", "Physical Education", "Art", "Music", "French",
]

SECTIONS = ["A", "B", "C", "D"]


# =============================================================================
# Generator Configuration
# =============================================================================

@dataclass
class SampleRosterConfig:
    """Configuration for sample roster generation."""
    num_classes: int = 3
    subjects_per_class: int = 5
    num_teachers: int = 6

    # Fraction of subjects left without an assigned teacher
    unassigned_subject_ratio: float = 0.0

    grades: list[int] = field(default_factory=lambda: [6, 7, 8, 9, 10])

    # Randomization
    seed: Optional[int] = None


# =============================================================================
# Generator Functions
# =============================================================================

def generate_sample_roster(config: SampleRosterConfig | None = None) -> Roster:
    """
    Generate a sample roster with an empty timetable.

    Args:
        config: Generator configuration (uses defaults if None)

    Returns:
        Validated Roster
    """
    if config is None:
        config = SampleRosterConfig()

    rng = random.Random(config.seed)

    teachers = _generate_teachers(config, rng)
    classes = _generate_classes(config)
    subjects = _generate_subjects(config, classes, teachers, rng)

    return Roster(classes=classes, subjects=subjects, teachers=teachers)


def save_sample_roster(roster: Roster, filepath: Union[str, Path]) -> None:
    """Save a generated roster to a JSON file."""
    save_roster(roster, filepath)


# =============================================================================
# Private Generator Helpers
# =============================================================================

def _generate_teachers(config: SampleRosterConfig, rng: random.Random) -> list[Teacher]:
    """Generate teachers with unique names."""
    teachers = []
    used_names: set[str] = set()

    for i in range(config.num_teachers):
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        while name in used_names:
            name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        used_names.add(name)
        teachers.append(Teacher(teacher_id=f"t{i + 1:03d}", full_name=name))

    return teachers


def _generate_classes(config: SampleRosterConfig) -> list[SchoolClass]:
    """Generate classes, cycling sections within each grade."""
    classes = []

    for i in range(config.num_classes):
        grade = config.grades[(i // len(SECTIONS)) % len(config.grades)]
        section = SECTIONS[i % len(SECTIONS)]
        classes.append(SchoolClass(
            class_id=f"c{i + 1:03d}",
            class_name=f"Grade {grade}",
            section=section,
        ))

    return classes


def _generate_subjects(
    config: SampleRosterConfig,
    classes: list[SchoolClass],
    teachers: list[Teacher],
    rng: random.Random,
) -> list[Subject]:
    """Generate each class's subjects and assign teachers from the shared pool."""
    subjects = []
    count = min(config.subjects_per_class, len(SUBJECT_NAMES))

    for school_class in classes:
        for j, name in enumerate(rng.sample(SUBJECT_NAMES, count)):
            teacher_id = None
            if teachers and rng.random() >= config.unassigned_subject_ratio:
                teacher_id = rng.choice(teachers).teacher_id
            subjects.append(Subject(
                subject_id=f"{school_class.class_id}-s{j + 1:02d}",
                subject_name=name,
                class_id=school_class.class_id,
                teacher_id=teacher_id,
            ))

    return subjects
