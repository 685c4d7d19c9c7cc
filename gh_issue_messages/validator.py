"""
JSON message descriptor validation.

Validates message files against the bundled JSON schema and checks
the rules the schema cannot express.
"""

import json
from pathlib import Path
from typing import Dict, Any

import jsonschema

from .models import MessageOptions


SCHEMA_PATH = Path(__file__).parent / "schemas" / "message-schema.json"


class ValidationError(Exception):
    """Custom exception for validation errors."""

    pass


def _load_json(path: Path, kind: str) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        raise ValidationError(f"{kind} file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {kind.lower()} file: {e}")


def validate_against_schema(data: Dict[str, Any], schema: Dict[str, Any]) -> None:
    """
    Validate data against JSON schema.

    Args:
        data: Message descriptor to validate
        schema: JSON schema

    Raises:
        ValidationError: If validation fails with detailed error message
    """
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        # Format error message with path information
        path = ' → '.join(str(p) for p in e.absolute_path) if e.absolute_path else 'root'
        raise ValidationError(
            f"Schema validation failed at '{path}': {e.message}"
        )
    except jsonschema.SchemaError as e:
        raise ValidationError(f"Invalid schema: {e.message}")


def validate_repository_override(data: Dict[str, Any]) -> None:
    """
    Validate that owner and repo are given together.

    A partial override would silently fall back to the default
    repository, so it is rejected up front.

    Raises:
        ValidationError: If only one of owner/repo is present
    """
    if ('owner' in data) != ('repo' in data):
        raise ValidationError("'owner' and 'repo' must be given together")


def validate_message_data(data: Dict[str, Any], schema_path: Path = SCHEMA_PATH) -> Dict[str, Any]:
    """Validate an already loaded message descriptor."""
    validate_against_schema(data, _load_json(schema_path, "Schema"))
    validate_repository_override(data)
    return data


def validate_message_file(input_path: Path, schema_path: Path = SCHEMA_PATH) -> Dict[str, Any]:
    """
    Load and validate a message descriptor file.

    Args:
        input_path: Path to the message JSON file
        schema_path: Path to the JSON schema file

    Returns:
        Validated message descriptor

    Raises:
        ValidationError: If any validation fails
    """
    return validate_message_data(_load_json(input_path, "Input"), schema_path)


def options_from_descriptor(data: Dict[str, Any]) -> MessageOptions:
    """Build delivery options from a validated descriptor."""
    options = MessageOptions(
        update=data.get('update', ''),
        owner=data.get('owner'),
        repo=data.get('repo'),
    )
    if 'update_after_days' in data:
        options.update_after_days = data['update_after_days']
    return options
