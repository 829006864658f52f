"""
Timetable templates.

Named snapshots of a timetable entry set, stored in one JSON file.
Loading a template returns its entries; the workflow can then propose
them like a generated timetable.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .data.models import TimetableEntry
from .errors import DataValidationError, PersistenceError, TemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TemplateMetadata(BaseModel):
    """Bookkeeping recorded when a template is saved."""
    model_config = ConfigDict(extra="forbid")

    total_entries: int = Field(ge=0)
    saved_at: datetime


class Template(BaseModel):
    """A saved timetable."""
    model_config = ConfigDict(extra="forbid")

    template_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    template_name: str = Field(min_length=1)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    metadata: TemplateMetadata
    configuration: list[TimetableEntry] = Field(default_factory=list)

    @property
    def class_ids(self) -> list[str]:
        return list(dict.fromkeys(e.class_id for e in self.configuration))


class TemplateFile(BaseModel):
    """On-disk layout of the templates file."""
    model_config = ConfigDict(extra="forbid")

    templates: list[Template] = Field(default_factory=list)


class TemplateStore:
    """Save, list, load and delete templates in a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def list_templates(self) -> list[Template]:
        """All templates, newest first."""
        return sorted(self._read().templates, key=lambda t: t.created_at, reverse=True)

    def save(
        self,
        template_name: str,
        entries: Iterable[TimetableEntry],
        description: Optional[str] = None,
    ) -> Template:
        """
        Save a new template.

        Raises:
            TemplateError: If the name is blank or there are no entries
        """
        name = template_name.strip()
        if not name:
            raise TemplateError("Please enter a template name")

        entries = list(entries)
        if not entries:
            raise TemplateError("No timetable data to save")

        now = _utcnow()
        template = Template(
            template_name=name,
            description=(description or "").strip() or None,
            created_at=now,
            metadata=TemplateMetadata(total_entries=len(entries), saved_at=now),
            configuration=entries,
        )

        data = self._read()
        data.templates.append(template)
        self._write(data)

        logger.info("Saved template '%s' with %d entries", name, len(entries))
        return template

    def get(self, template_id: str) -> Template:
        """
        Raises:
            TemplateNotFoundError: If no template has this id
        """
        for template in self._read().templates:
            if template.template_id == template_id:
                return template
        raise TemplateNotFoundError(template_id)

    def load(self, template_id: str) -> list[TimetableEntry]:
        """Entries of a template."""
        return list(self.get(template_id).configuration)

    def delete(self, template_id: str) -> None:
        """
        Raises:
            TemplateNotFoundError: If no template has this id
        """
        data = self._read()
        remaining = [t for t in data.templates if t.template_id != template_id]
        if len(remaining) == len(data.templates):
            raise TemplateNotFoundError(template_id)

        data.templates = remaining
        self._write(data)
        logger.info("Deleted template %s", template_id)

    # -------------------------------------------------------------------------
    # File I/O
    # -------------------------------------------------------------------------

    def _read(self) -> TemplateFile:
        if not self.path.exists():
            return TemplateFile()

        try:
            with open(self.path) as f:
                raw = json.load(f)
            return TemplateFile.model_validate(raw)
        except json.JSONDecodeError as e:
            raise DataValidationError(f"Invalid JSON in {self.path}: {e}") from e
        except ValidationError as e:
            raise DataValidationError(str(e)) from e
        except OSError as e:
            raise PersistenceError(f"Cannot read templates {self.path}: {e}") from e

    def _write(self, data: TemplateFile) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                f.write(data.model_dump_json(indent=2))
        except OSError as e:
            raise PersistenceError(f"Cannot write templates {self.path}: {e}") from e
