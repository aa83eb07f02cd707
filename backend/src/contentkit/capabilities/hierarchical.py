"""Hierarchical capability: a ``master`` reference to the parent node.

The traversal itself lives in contentkit.hierarchy; this capability owns
the field and refuses self-parenting and masters that do not exist.
"""

from typing import Any

from contentkit.capabilities.base import Capability
from contentkit.core.types import coerce_value
from contentkit.errors import CycleError, InvalidReferenceError
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field


class MasterField(Field):
    """The parent reference.

    Accepts an id, a record or a node; stores the normalized id. Assigning
    a new master drops the node's resolved parent and ancestor chain.
    """

    def __init__(self):
        super().__init__("ref")

    def __set__(self, obj: Any, value: Any) -> None:
        master = coerce_value(self.type_name, value, obj.clock)
        if master is not None and master == obj.id:
            raise CycleError(f"Can not be ones own parent: {master}")
        obj._values[self.name] = master
        hierarchy = obj.__dict__.get("_hierarchy")
        if hierarchy is not None:
            hierarchy.reset_parent()


class Hierarchical(Capability):
    name = "hierarchical"

    def fields(self) -> dict[str, Field]:
        return {"master": MasterField()}

    @hook(Stage.PRE, Operation.CREATE, Operation.UPDATE)
    def check_master(self, ctx: HookContext) -> bool:
        """Refuse a master that is the object itself or that does not exist."""
        obj = ctx.obj
        if obj.master is None:
            return True
        if obj.id is not None and obj.master == obj.id:
            raise CycleError(f"Can not be ones own parent: {obj.id}")
        # A new object could otherwise be given the id its master points at
        if obj.hierarchy.resolve(obj.master) is None:
            raise InvalidReferenceError(
                f'Master "{obj.obj_type}:{obj.master}" does not exist'
            )
        return True
