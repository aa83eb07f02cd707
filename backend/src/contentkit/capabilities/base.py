"""Capability base class.

A capability is one independent behaviour a model class can carry. It
contributes fields (installed on the model class when the class is
created) and lifecycle hooks (run for every operation on an instance).
Models list their capabilities in order:

    class Content(Model):
        capabilities = (Authorable(), Revisionable(), Timestampable())
"""

from contentkit.lifecycle import HookContext, HookDefinition, collect_hooks
from contentkit.models.base import Field


class Capability:
    """Base for all capabilities. Subclasses declare hooks with @hook."""

    name: str = ""

    def fields(self) -> dict[str, Field]:
        """Fresh Field instances for the properties this capability owns."""
        return {}

    def hooks(self) -> list[HookDefinition]:
        definitions = []
        for name, stage, on, fn in collect_hooks(type(self)):
            definitions.append(
                HookDefinition(
                    name=f"{self.name}.{name}",
                    stage=stage,
                    on=on,
                    fn=fn.__get__(self),
                    description=(fn.__doc__ or "").strip(),
                )
            )
        return definitions

    def delete_properties(self, ctx: HookContext) -> list[str] | None:
        """Properties a delete should write instead of removing the record.

        None means this capability does not change how deletes execute.
        """
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


def include_property(ctx: HookContext, name: str) -> None:
    """Make sure a partial write also covers a property a hook changed."""
    if ctx.properties is not None and name not in ctx.properties:
        ctx.properties.append(name)
