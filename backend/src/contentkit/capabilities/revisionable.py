"""Revisionable capability: a revision snapshot before every update."""

import logging

from contentkit.capabilities.base import Capability
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.revision import REVISION_TYPE, ObjectRevision

logger = logging.getLogger(__name__)


def revision_prototype(obj) -> ObjectRevision:
    """A blank revision sharing obj's collaborators."""
    deps = obj.dependencies
    if deps.factory is not None and deps.factory.is_registered(REVISION_TYPE):
        return deps.factory.create(REVISION_TYPE)
    return ObjectRevision(deps=deps)


class Revisionable(Capability):
    """Writes an ObjectRevision before each update when enabled.

    Whether revisions are written is read from ``obj.revision_enabled``,
    a plain attribute set on the class or by the factory's model settings.
    Must be declared before Timestampable so the snapshot is taken before
    ``last_modified`` changes.
    """

    name = "revisionable"

    @hook(Stage.PRE, Operation.UPDATE)
    def generate_revision(self, ctx: HookContext) -> bool:
        obj = ctx.obj
        if not getattr(obj, "revision_enabled", False) or obj.id is None:
            return True

        revision = revision_prototype(obj).create_from_object(obj)
        result = revision.save()
        if not result:
            return False
        ctx.extra["revision"] = revision
        logger.debug(
            "Generated revision %s for %s:%s", revision.rev_num, obj.obj_type, obj.id
        )
        return True
