"""Timestampable capability: creation and last modification times."""

from contentkit.capabilities.base import Capability, include_property
from contentkit.core.clock import NOW
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field


class Timestampable(Capability):
    name = "timestampable"

    def fields(self) -> dict[str, Field]:
        return {
            "created": Field("datetime"),
            "last_modified": Field("datetime"),
        }

    @hook(Stage.PRE, Operation.CREATE)
    def stamp_created(self, ctx: HookContext) -> bool:
        """Set created once, and last_modified on every create."""
        if ctx.obj.created is None:
            ctx.obj.created = NOW
        ctx.obj.last_modified = NOW
        return True

    @hook(Stage.PRE, Operation.UPDATE)
    def stamp_modified(self, ctx: HookContext) -> bool:
        ctx.obj.last_modified = NOW
        include_property(ctx, "last_modified")
        return True
