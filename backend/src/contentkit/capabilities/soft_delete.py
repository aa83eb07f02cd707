"""SoftDeletable capability.

Deleting a soft-deletable object stamps ``deleted_date`` (and
``deleted_by``) and writes only those two properties; the record stays
in the store. A forced delete skips the stamp and removes the record.
Restoring clears both properties and writes them back.
"""

from contentkit.capabilities.base import Capability
from contentkit.core.clock import NOW
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field

SOFT_DELETE_PROPERTIES = ("deleted_date", "deleted_by")


class SoftDeletable(Capability):
    name = "soft_delete"

    def fields(self) -> dict[str, Field]:
        return {
            "deleted_date": Field("datetime"),
            "deleted_by": Field("ref"),
        }

    @hook(Stage.PRE, Operation.DELETE)
    def stamp_deleted(self, ctx: HookContext) -> bool:
        if not ctx.force:
            ctx.obj.deleted_date = NOW
            if ctx.actor is not None:
                ctx.obj.deleted_by = ctx.actor
        return True

    @hook(Stage.PRE, Operation.RESTORE)
    def clear_deleted(self, ctx: HookContext) -> bool:
        ctx.obj.deleted_date = None
        ctx.obj.deleted_by = None
        return True

    def delete_properties(self, ctx: HookContext) -> list[str] | None:
        if ctx.force:
            return None
        return list(SOFT_DELETE_PROPERTIES)
