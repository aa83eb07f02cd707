"""
metadata/validator.py: JSON Schema validation for contentkit model settings files.

Usage:
    from contentkit.metadata.validator import validate_settings_file

    issues = validate_settings_file(Path("config/models.yaml"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

logger = logging.getLogger(__name__)

_SCHEMAS_DIR = Path(__file__).parent / "schemas"

MODEL_SETTINGS_SCHEMA = "model_settings.schema.json"


@dataclass
class ValidationIssue:
    """A single validation finding for a settings file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "models/blog/article/table"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


def _load_schema(name: str) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _load_registry() -> Registry:
    schema = _load_schema(MODEL_SETTINGS_SCHEMA)
    return Registry().with_resources(
        [(schema["$id"], Resource(contents=schema, specification=DRAFT202012))]
    )


def _json_path(error: SchemaError) -> str:
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def validate_settings(doc: Any, source: Path) -> list[ValidationIssue]:
    """Validate an already parsed settings document."""
    schema = _load_schema(MODEL_SETTINGS_SCHEMA)
    validator = Draft202012Validator(schema, registry=_load_registry())
    return [
        ValidationIssue(file=source, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]


def validate_settings_file(yaml_path: Path) -> list[ValidationIssue]:
    """
    Validate a single model settings YAML file.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]
    except OSError as exc:
        return [ValidationIssue(file=yaml_path, message=f"Can not read file: {exc}")]

    if raw is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    issues = validate_settings(raw, yaml_path)
    if issues:
        logger.debug("%d issue(s) in %s", len(issues), yaml_path)
    return issues
