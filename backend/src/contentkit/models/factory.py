"""Model factory.

Creates model instances by type tag with the factory's dependencies
injected, and applies per-type model settings (see
contentkit.metadata.loader):

    factory = ModelFactory(ModelDependencies(store=MemoryStore()))
    factory.register("blog/article", Article)
    article = factory.create("blog/article")

The built-in object types (revisions, routes, schedules, user data) and
every class decorated with @model_type are registered with each factory
created afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contentkit.hierarchy.siblings import get_siblings_strategy
from contentkit.models.base import Model, ModelDependencies
from contentkit.models.revision import ObjectRevision
from contentkit.models.route import ObjectRoute
from contentkit.models.schedule import ObjectSchedule
from contentkit.models.user_data import UserData

BUILTIN_MODELS = (ObjectRevision, ObjectRoute, ObjectSchedule, UserData)

# Populated by @model_type
_model_types: dict[str, type[Model]] = {}


def model_type(tag: str):
    """Class decorator assigning a type tag and registering the class.

    Usage:
        @model_type("blog/article")
        class Article(Content):
            ...
    """

    def decorator(cls: type[Model]) -> type[Model]:
        cls.obj_type = tag
        _model_types[tag] = cls
        return cls

    return decorator


class ModelFactory:
    """Registry of model classes keyed by type tag.

    Unlike the decorator registry, a factory instance is scoped to the
    dependencies it injects. Registration is idempotent: registering a tag
    that already exists replaces its class.
    """

    def __init__(self, dependencies: ModelDependencies | None = None):
        self.dependencies = dependencies or ModelDependencies()
        self.dependencies.factory = self
        self._models: dict[str, type[Model]] = {cls.obj_type: cls for cls in BUILTIN_MODELS}
        self._models.update(_model_types)
        self._settings: dict[str, dict[str, Any]] = {}
        self._prototypes: dict[str, Model] = {}

    def register(self, tag: str, model_cls: type[Model]) -> None:
        if not model_cls.obj_type:
            model_cls.obj_type = tag
        self._models[tag] = model_cls
        self._prototypes.pop(tag, None)

    def is_registered(self, tag: str) -> bool:
        return tag in self._models

    def list_registered(self) -> list[str]:
        return sorted(self._models)

    def model_class(self, tag: str) -> type[Model]:
        """Get a registered class.

        Raises:
            ValueError: If the tag is not registered
        """
        if tag not in self._models:
            raise ValueError(
                f"Model type '{tag}' is not registered. "
                "Available types: " + ", ".join(self.list_registered())
            )
        return self._models[tag]

    def configure(self, tag: str, settings: Mapping[str, Any]) -> None:
        """Attach model settings to a type tag.

        Recognized keys: ``revision_enabled`` (bool), ``table`` (str),
        ``hierarchy.siblings`` (sibling strategy name).
        """
        siblings = (settings.get("hierarchy") or {}).get("siblings")
        if siblings is not None:
            get_siblings_strategy(siblings)
        self._settings[tag] = dict(settings)
        self._prototypes.pop(tag, None)

    def settings(self, tag: str) -> dict[str, Any]:
        return dict(self._settings.get(tag, {}))

    def table_names(self) -> dict[str, str]:
        """Table name overrides from model settings, keyed by type tag."""
        return {
            tag: settings["table"]
            for tag, settings in self._settings.items()
            if settings.get("table")
        }

    def create(self, tag: str) -> Model:
        """A blank instance with dependencies and settings applied."""
        obj = self.model_class(tag)(deps=self.dependencies)
        self._apply_settings(tag, obj)
        return obj

    def from_record(self, tag: str, record: Mapping[str, Any]) -> Model:
        obj = self.create(tag)
        obj.set_data(record)
        return obj

    def get(self, tag: str) -> Model:
        """A shared prototype instance, e.g. for building queries. Do not mutate."""
        if tag not in self._prototypes:
            self._prototypes[tag] = self.create(tag)
        return self._prototypes[tag]

    def _apply_settings(self, tag: str, obj: Model) -> None:
        settings = self._settings.get(tag)
        if not settings:
            return
        if "revision_enabled" in settings:
            obj.revision_enabled = bool(settings["revision_enabled"])
        siblings = (settings.get("hierarchy") or {}).get("siblings")
        if siblings:
            obj.siblings_strategy = siblings
