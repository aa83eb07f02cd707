"""Load per-type model settings from YAML files.

A settings file looks like:

    models:
      blog/article:
        revision_enabled: false
        table: articles
      site/page:
        hierarchy:
          siblings: exclude-self
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from contentkit.errors import ValidationError
from contentkit.metadata.validator import ValidationIssue, validate_settings


@dataclass
class HierarchySettings:
    siblings: str | None = None  # sibling strategy name


@dataclass
class ModelSettings:
    tag: str
    revision_enabled: bool | None = None
    table: str | None = None
    hierarchy: HierarchySettings = field(default_factory=HierarchySettings)

    def as_dict(self) -> dict[str, Any]:
        """Settings in the shape ModelFactory.configure() takes. Unset keys are left out."""
        result: dict[str, Any] = {}
        if self.revision_enabled is not None:
            result["revision_enabled"] = self.revision_enabled
        if self.table:
            result["table"] = self.table
        if self.hierarchy.siblings:
            result["hierarchy"] = {"siblings": self.hierarchy.siblings}
        return result


class ModelSettingsLoader:
    """Loads model settings from a YAML file, validating it first."""

    def __init__(self, settings_path: Path):
        self.settings_path = Path(settings_path)
        self.models: dict[str, ModelSettings] = {}

    def load(self) -> dict[str, ModelSettings]:
        """Parse and validate the file.

        Raises:
            ValidationError: If the file can not be parsed or does not match
                the settings schema.
        """
        try:
            with open(self.settings_path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ValidationError(
                f"Can not load model settings from {self.settings_path}: {exc}"
            ) from exc

        if data is None:
            data = {"models": {}}

        issues = validate_settings(data, self.settings_path)
        if issues:
            raise ValidationError(self._format_issues(issues))

        self.models = {
            tag: self._resolve_model(tag, raw or {})
            for tag, raw in data["models"].items()
        }
        return self.models

    def apply(self, factory: Any) -> None:
        """Configure every loaded type on a ModelFactory."""
        for tag, settings in self.models.items():
            factory.configure(tag, settings.as_dict())

    def _resolve_model(self, tag: str, data: dict) -> ModelSettings:
        hierarchy = data.get("hierarchy") or {}
        return ModelSettings(
            tag=tag,
            revision_enabled=data.get("revision_enabled"),
            table=data.get("table"),
            hierarchy=HierarchySettings(siblings=hierarchy.get("siblings")),
        )

    def _format_issues(self, issues: list[ValidationIssue]) -> str:
        lines = [f"Invalid model settings in {self.settings_path}:"]
        lines.extend(f"  {issue}" for issue in issues)
        return "\n".join(lines)
