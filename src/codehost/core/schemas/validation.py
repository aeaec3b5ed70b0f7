"""Shared schema validation utilities.

codehost validates user-supplied YAML configuration using JSON Schema.
Schemas are stored as YAML files under ``codehost.data/schemas/`` and
loaded in a single, consistent way.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from codehost.core.utils.io import read_yaml
from codehost.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""

    def __init__(self, schema_name: str, errors: List[str]) -> None:
        self.schema_name = schema_name
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.yaml`` if no extension is present.

    Args:
        schema_name: Schema file name under the bundled schemas root
            (e.g., "config-file.schema").

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def iter_validation_errors(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return readable error messages (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    errors = iter_validation_errors(payload, schema_name)
    if errors:
        raise SchemaValidationError(schema_name, errors)


__all__ = [
    "load_schema",
    "iter_validation_errors",
    "validate_payload",
    "SchemaValidationError",
]
