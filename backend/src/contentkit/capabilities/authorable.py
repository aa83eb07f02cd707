"""Authorable capability: who created and who last modified an object."""

from contentkit.capabilities.base import Capability, include_property
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field


class Authorable(Capability):
    """Records the acting user on create and update.

    Nothing is written when the operation has no actor.
    """

    name = "authorable"

    def fields(self) -> dict[str, Field]:
        return {
            "created_by": Field("ref"),
            "last_modified_by": Field("ref"),
        }

    @hook(Stage.PRE, Operation.CREATE)
    def stamp_creator(self, ctx: HookContext) -> bool:
        if ctx.actor is not None:
            ctx.obj.created_by = ctx.actor
            ctx.obj.last_modified_by = ctx.actor
        return True

    @hook(Stage.PRE, Operation.UPDATE)
    def stamp_modifier(self, ctx: HookContext) -> bool:
        if ctx.actor is not None:
            ctx.obj.last_modified_by = ctx.actor
            include_property(ctx, "last_modified_by")
        return True

