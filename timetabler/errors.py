"""Exception hierarchy for the timetabler package."""

from __future__ import annotations

from typing import Optional


class TimetablerError(Exception):
    """Base class for all timetabler errors."""
    pass


class DataValidationError(TimetablerError):
    """Raised when roster or template data fails validation."""
    pass


# =============================================================================
# Generation
# =============================================================================

class GenerationError(TimetablerError):
    """A precondition for timetable generation is not met."""
    pass


class NoClassSelectedError(GenerationError):
    """Generation was requested without a selected class."""

    def __init__(self) -> None:
        super().__init__("No class selected: choose a class before generating a timetable")


class UnknownClassError(GenerationError):
    """The selected class does not exist in the roster."""

    def __init__(self, class_id: str) -> None:
        self.class_id = class_id
        super().__init__(f"Class '{class_id}' not found")


class NoSubjectsError(GenerationError):
    """The selected class has no subjects to schedule."""

    def __init__(self, class_label: str) -> None:
        self.class_label = class_label
        super().__init__(
            f"Class '{class_label}' has no subjects: add subjects before generating a timetable"
        )


# =============================================================================
# Workflow and persistence
# =============================================================================

class WorkflowStateError(TimetablerError):
    """An operation is not allowed in the workflow's current state."""
    pass


class PersistenceError(TimetablerError):
    """The persistence collaborator failed to read or write."""
    pass


class ApplyError(TimetablerError):
    """Applying a proposed timetable failed part-way."""

    EMPTY_SCHEDULE_WARNING = (
        "Existing entries may already have been deleted; the live schedule may now be "
        "empty. Retry applying the proposed timetable."
    )

    def __init__(self, cause: Exception, deleted: bool, class_id: Optional[str] = None) -> None:
        self.cause = cause
        self.deleted = deleted
        self.class_id = class_id
        message = str(cause)
        if deleted:
            message = f"{message}. {self.EMPTY_SCHEDULE_WARNING}"
        super().__init__(message)


# =============================================================================
# Templates
# =============================================================================

class TemplateError(TimetablerError):
    """A template could not be saved or loaded."""
    pass


class TemplateNotFoundError(TemplateError):
    """No template exists with the requested id."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template '{template_id}' not found")
