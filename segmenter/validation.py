"""JSON Schema validation for segmentation payloads."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from .errors import ConfigError, SchemaValidationError
from .models import ValidationIssue

SEGMENTATION_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "SegmentationDocument",
    "type": "object",
    "required": ["name", "contactCriteria"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "contactCriteria": {"$ref": "#/$defs/group"},
    },
    "$defs": {
        "criteria": {
            "type": "object",
            "required": ["type", "field", "operator", "value"],
            "properties": {
                "type": {"const": "criteria"},
                "field": {"type": "string"},
                "operator": {"enum": ["equals", "empty"]},
                "value": {"type": "string"},
            },
        },
        "group": {
            "type": "object",
            "required": ["type", "children"],
            "properties": {
                "type": {"enum": ["and", "or"]},
                "children": {
                    "type": "array",
                    "items": {"oneOf": [{"$ref": "#/$defs/criteria"}, {"$ref": "#/$defs/group"}]},
                },
            },
        },
    },
}


def _issue_path(error) -> str:
    return "/" + "/".join(str(part) for part in error.absolute_path) if error.absolute_path else "(root)"


def validate_document(document: Any, schema: Optional[Dict[str, Any]] = None) -> List[ValidationIssue]:
    """Return every schema violation in `document`; empty means valid."""
    schema = SEGMENTATION_SCHEMA if schema is None else schema
    try:
        Draft202012Validator.check_schema(schema)
        validator = Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(document), key=lambda e: [str(part) for part in e.absolute_path])
    except SchemaError as exc:
        raise ConfigError(f"invalid schema: {exc.message}") from exc
    return [ValidationIssue(path=_issue_path(error), message=error.message) for error in errors]


def validate_json(document: Any, schema: Optional[Dict[str, Any]] = None) -> None:
    issues = validate_document(document, schema)
    if issues:
        details = "\n".join(f"{issue.path} {issue.message}" for issue in issues)
        raise SchemaValidationError(f"JSON validation failed:\n{details}", issues=issues)


def load_schema(path: Path) -> Dict[str, Any]:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)
