"""Load and save roster data as JSON files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..errors import DataValidationError
from .models import Roster


def load_roster(path: Union[str, Path]) -> Roster:
    """
    Load and validate a roster from a JSON file.

    Keys may be snake_case or camelCase; camelCase keys are converted.

    Args:
        path: Path to the JSON file

    Returns:
        Validated Roster model

    Raises:
        FileNotFoundError: If the file doesn't exist
        DataValidationError: If the file isn't valid JSON or fails validation
    """
    path = Path(path)

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise DataValidationError(f"Invalid JSON in {path}: {e}") from e

    return parse_roster(data)


def parse_roster(data: Any) -> Roster:
    """Validate raw roster data (already decoded from JSON)."""
    if not isinstance(data, dict):
        raise DataValidationError("Roster data must be a JSON object")

    try:
        return Roster.model_validate(_convert_keys_to_snake_case(data))
    except ValidationError as e:
        raise DataValidationError(str(e)) from e


def save_roster(roster: Roster, path: Union[str, Path]) -> None:
    """Write a roster to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(roster.model_dump_json(indent=2))


def _convert_keys_to_snake_case(obj: Any) -> Any:
    """Recursively convert dictionary keys from camelCase to snake_case."""

    def to_snake_case(name: str) -> str:
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
        return name.lower()

    if isinstance(obj, dict):
        return {to_snake_case(k): _convert_keys_to_snake_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_keys_to_snake_case(item) for item in obj]
    else:
        return obj
