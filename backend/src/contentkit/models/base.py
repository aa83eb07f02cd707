"""Base model for persisted content objects.

A model declares its properties as Field descriptors and composes its
behaviours from an ordered tuple of capabilities:

    @model_type("blog/article")
    class Article(Content):
        title = Field("string")

Capabilities contribute their own fields when the class is created and
their hooks when an operation runs (see contentkit.lifecycle).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from contentkit.core.clock import Clock, system_clock
from contentkit.core.types import coerce_value
from contentkit.errors import ConfigurationError
from contentkit.hierarchy.cache import ObjectCache, process_object_cache
from contentkit.lifecycle import (
    HookChain,
    HookContext,
    LifecycleService,
    Operation,
    OperationResult,
)

if TYPE_CHECKING:
    from contentkit.capabilities.base import Capability
    from contentkit.models.factory import ModelFactory
    from contentkit.persistence.adapter import StorageFacade

_MISSING = object()


class Field:
    """A typed model property. Assignments are coerced by the property type."""

    def __init__(
        self,
        type_name: str = "mixed",
        default: Any = None,
        default_factory: Callable[[], Any] | None = None,
    ):
        self.type_name = type_name
        self.default = default
        self.default_factory = default_factory
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def initial(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def __get__(self, obj: Any, owner: type | None = None) -> Any:
        if obj is None:
            return self
        return obj._values.get(self.name)

    def __set__(self, obj: Any, value: Any) -> None:
        obj._values[self.name] = coerce_value(self.type_name, value, obj.clock)


@dataclass
class ModelDependencies:
    """Collaborators injected into every model created by a factory.

    store and factory are optional at construction; using a model that
    needs one without it raises ConfigurationError.
    """

    store: StorageFacade | None = None
    factory: ModelFactory | None = None
    object_cache: ObjectCache = field(default_factory=lambda: process_object_cache)
    clock: Clock = system_clock
    logger: logging.Logger | None = None
    lifecycle: LifecycleService | None = None

    def lifecycle_service(self) -> LifecycleService:
        if self.lifecycle is None:
            self.lifecycle = LifecycleService(self.logger)
        return self.lifecycle


class Model:
    """Base class for all persisted objects."""

    obj_type: ClassVar[str] = ""
    key: ClassVar[str] = "id"
    capabilities: ClassVar[tuple[Capability, ...]] = ()
    _fields: ClassVar[dict[str, Field]] = {}

    id = Field("id")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for capability in cls.capabilities:
            for name, capability_field in capability.fields().items():
                if any(name in vars(klass) for klass in cls.__mro__):
                    continue
                capability_field.__set_name__(cls, name)
                setattr(cls, name, capability_field)
        cls._fields = _collect_fields(cls)

    def __init__(self, deps: ModelDependencies | None = None, **data: Any):
        self._deps = deps or ModelDependencies()
        self._values: dict[str, Any] = {
            name: f.initial() for name, f in self._fields.items()
        }
        self._chain: HookChain | None = None
        if data:
            self.set_data(data)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.obj_type}:{self.id}>"

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    @property
    def dependencies(self) -> ModelDependencies:
        return self._deps

    @property
    def clock(self) -> Clock:
        return self._deps.clock

    @property
    def logger(self) -> logging.Logger:
        return self._deps.logger or logging.getLogger(type(self).__module__)

    @property
    def store(self) -> StorageFacade:
        if self._deps.store is None:
            raise ConfigurationError(
                f'Storage is not defined for "{type(self).__name__}"'
            )
        return self._deps.store

    @property
    def factory(self) -> ModelFactory:
        if self._deps.factory is None:
            raise ConfigurationError(
                f'Model Factory is not defined for "{type(self).__name__}"'
            )
        return self._deps.factory

    @property
    def object_cache(self) -> ObjectCache:
        return self._deps.object_cache

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @classmethod
    def property_types(cls) -> dict[str, str]:
        return {name: f.type_name for name, f in cls._fields.items()}

    @classmethod
    def property_names(cls) -> list[str]:
        return list(cls._fields)

    @classmethod
    def has_capability(cls, capability_type: type) -> bool:
        return any(isinstance(c, capability_type) for c in cls.capabilities)

    def set_data(self, data: Mapping[str, Any]) -> Model:
        """Assign every known property present in data. Unknown keys are ignored."""
        for name, value in data.items():
            if name in self._fields:
                setattr(self, name, value)
        return self

    def data(self, properties: list[str] | None = None) -> dict[str, Any]:
        names = properties if properties is not None else list(self._fields)
        return {name: self._values.get(name) for name in names if name in self._fields}

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def load(self, ident: Any) -> Model:
        """Load the object's data from the store. Leaves id empty if not found."""
        record = self.store.load(self.obj_type, coerce_value("id", ident))
        if record:
            self.set_data(record)
        else:
            self.id = None
        return self

    def lifecycle_chain(self) -> HookChain:
        if self._chain is None:
            self._chain = HookChain.for_model(self)
        return self._chain

    def run_operation(
        self,
        operation: Operation,
        execute: Callable[[HookContext], bool],
        properties: list[str] | None = None,
        force: bool = False,
        actor: Any = None,
    ) -> OperationResult:
        ctx = HookContext(
            obj=self,
            operation=operation,
            properties=properties,
            force=force,
            actor=actor,
            clock=self.clock,
        )
        return self._deps.lifecycle_service().run(
            ctx, self.lifecycle_chain(), lambda: execute(ctx)
        )

    def save(self, actor: Any = None) -> OperationResult:
        """Create the object in the store."""
        return self.run_operation(
            Operation.CREATE, lambda ctx: self.store.save(self), actor=actor
        )

    def update(self, properties: list[str] | None = None, actor: Any = None) -> OperationResult:
        """Persist changes. ``properties`` limits the write to a subset."""
        return self.run_operation(
            Operation.UPDATE,
            lambda ctx: self.store.update_properties(self, ctx.properties),
            properties=properties,
            actor=actor,
        )

    def delete(self, actor: Any = None, force: bool = False) -> OperationResult:
        """Delete the object.

        Capabilities may turn the delete into a property update (soft delete)
        unless ``force`` is set.
        """
        return self.run_operation(
            Operation.DELETE, self._execute_delete, force=force, actor=actor
        )

    def _execute_delete(self, ctx: HookContext) -> bool:
        for capability in self.capabilities:
            properties = capability.delete_properties(ctx)
            if properties:
                ctx.properties = list(properties)
                return self.store.update_properties(self, ctx.properties)
        return self.store.delete(self)


def _collect_fields(cls: type) -> dict[str, Field]:
    fields: dict[str, Field] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, Field):
                fields[name] = value
    return fields


Model._fields = _collect_fields(Model)
