"""Hook chains for contentkit models.

A chain is the ordered list of hooks one model class runs around its
mutating operations: every attached capability's hooks, in the order the
capabilities are declared, followed by the model's own hooks.

Hooks are marked with the @hook decorator:

    class Timestampable(Capability):
        @hook(Stage.PRE, Operation.CREATE)
        def stamp_created(self, ctx: HookContext) -> bool:
            ...

    class ObjectRoute(Model):
        @hook(Stage.PRE, Operation.CREATE)
        def prepare_route(self, ctx: HookContext) -> bool:
            ...

On a capability the decorated method is bound to the capability; on a
model it is bound to the model instance being operated on (ctx.obj).
"""

from collections.abc import Callable, Iterable
from typing import Any

from contentkit.lifecycle.types import HookContext, HookDefinition, Operation, Stage

_HOOK_ATTR = "__contentkit_hook__"


def hook(stage: Stage, *on: Operation, name: str | None = None) -> Callable:
    """Decorator marking a method as a lifecycle hook.

    Usage:
        @hook(Stage.PRE, Operation.CREATE, Operation.UPDATE)
        def check_master(self, ctx): ...
    """
    if not on:
        raise ValueError("A hook must apply to at least one operation")

    def decorator(fn: Callable) -> Callable:
        setattr(fn, _HOOK_ATTR, (stage, list(on), name or fn.__name__))
        return fn

    return decorator


def collect_hooks(owner_cls: type) -> list[tuple[str, Stage, list[Operation], Callable]]:
    """Collect @hook-decorated functions of a class, base classes first.

    A subclass redefining a hook method replaces it in place.
    """
    found: dict[str, tuple[str, Stage, list[Operation], Callable]] = {}
    for klass in reversed(owner_cls.__mro__):
        for attr, value in vars(klass).items():
            marker = getattr(value, _HOOK_ATTR, None)
            if marker is None:
                if attr in found:
                    del found[attr]
                continue
            stage, on, name = marker
            found[attr] = (name, stage, on, value)
    return list(found.values())


class HookChain:
    """Ordered registry of hook definitions.

    Registration is idempotent per (name, stage): re-registering is a no-op.
    """

    def __init__(self, definitions: Iterable[HookDefinition] = ()):
        self._hooks: list[HookDefinition] = []
        for definition in definitions:
            self.register(definition)

    def register(self, definition: HookDefinition) -> None:
        if self.is_registered(definition.name, definition.stage):
            return
        self._hooks.append(definition)

    def is_registered(self, name: str, stage: Stage | None = None) -> bool:
        return any(
            h.name == name and (stage is None or h.stage == stage)
            for h in self._hooks
        )

    def for_point(self, stage: Stage, operation: Operation) -> list[HookDefinition]:
        """Hooks for one stage of one operation, in registration order."""
        return [h for h in self._hooks if h.applies_to(stage, operation)]

    def list_registered(self) -> list[str]:
        return [h.name for h in self._hooks]

    def clear(self) -> None:
        self._hooks.clear()

    def __len__(self) -> int:
        return len(self._hooks)

    @classmethod
    def for_model(cls, obj: Any) -> "HookChain":
        """Build the chain for a model instance."""
        chain = cls()
        for capability in obj.capabilities:
            for definition in capability.hooks():
                chain.register(definition)

        for name, stage, on, fn in collect_hooks(type(obj)):
            chain.register(
                HookDefinition(
                    name=f"{type(obj).__name__}.{name}",
                    stage=stage,
                    on=on,
                    fn=_bind_to_subject(fn),
                    description=(fn.__doc__ or "").strip(),
                )
            )
        return chain


def _bind_to_subject(fn: Callable) -> Callable[[HookContext], bool | None]:
    def run(ctx: HookContext) -> bool | None:
        return fn(ctx.obj, ctx)

    return run
