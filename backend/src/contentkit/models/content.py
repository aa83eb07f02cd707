"""Content models.

Content is the base for editorial objects: it knows who created and
last modified it, when, and keeps a revision history. The two variants
add a parent/child hierarchy or a trash can.
"""

from __future__ import annotations

from typing import Any

from contentkit.capabilities import (
    SOFT_DELETE_PROPERTIES,
    Authorable,
    Hierarchical,
    Revisionable,
    SoftDeletable,
    Timestampable,
)
from contentkit.capabilities.revisionable import revision_prototype
from contentkit.errors import ValidationError
from contentkit.hierarchy import Hierarchy, get_siblings_strategy
from contentkit.lifecycle import Operation, OperationResult
from contentkit.models.base import Field, Model, ModelDependencies
from contentkit.models.revision import ObjectRevision
from contentkit.persistence.query import Query


class Content(Model):
    """Authorable, revisionable, timestamped content.

    ``revision_enabled`` may be switched off per class or per type through
    the factory's model settings.
    """

    capabilities = (Authorable(), Revisionable(), Timestampable())
    revision_enabled = True

    active = Field("boolean", default=True)
    position = Field("integer", default=0)
    required_permissions = Field("permissions", default_factory=list)

    # ------------------------------------------------------------------
    # Revisions
    # ------------------------------------------------------------------

    def latest_revision(self) -> ObjectRevision | None:
        return revision_prototype(self).last_object_revision(self)

    def revision(self, rev_num: int) -> ObjectRevision | None:
        return revision_prototype(self).object_revision_num(self, rev_num)

    def revisions(self) -> list[ObjectRevision]:
        return revision_prototype(self).object_revisions(self)

    def revert_to_revision(self, rev_num: int, actor: Any = None) -> OperationResult:
        """Restore the data saved with revision rev_num and update the object.

        Raises:
            ValidationError: If the revision does not exist.
        """
        revision = self.revision(rev_num)
        if revision is None:
            raise ValidationError(
                f'Revision {rev_num} does not exist for "{self.obj_type}:{self.id}"'
            )
        data = dict(revision.data_obj or {})
        data.pop(self.key, None)
        self.set_data(data)
        return self.update(actor=actor)


class HierarchicalContent(Content):
    """Content with a parent (``master``) and ordered children.

    The tree is navigated through ``self.hierarchy``. ``siblings_strategy`` names
    the sibling strategy (see contentkit.hierarchy.siblings).
    """

    # Master checks run before a revision is written
    capabilities = (Authorable(), Hierarchical(), Revisionable(), Timestampable())
    siblings_strategy = "parent-children"

    def __init__(self, deps: ModelDependencies | None = None, **data: Any):
        self._hierarchy: Hierarchy | None = None
        super().__init__(deps, **data)

    @property
    def hierarchy(self) -> Hierarchy:
        if self._hierarchy is None:
            self._hierarchy = Hierarchy(self, get_siblings_strategy(self.siblings_strategy))
        return self._hierarchy

    def load_children(self) -> list[HierarchicalContent]:
        """Children from the store, ordered by position."""
        if self.id is None:
            return []
        query = Query(self).add_filter("master", self.id).add_order("position")
        return [
            self.factory.from_record(self.obj_type, record)
            for record in self.store.query(query)
        ]


class SoftDeletableContent(Content):
    """Content that goes to the trash on delete and can be restored."""

    capabilities = Content.capabilities + (SoftDeletable(),)

    def __init__(self, deps: ModelDependencies | None = None, **data: Any):
        self._force_deleting = False
        self._restoring = False
        super().__init__(deps, **data)

    def is_trashed(self) -> bool:
        return self.deleted_date is not None

    def is_force_deleting(self) -> bool:
        return self._force_deleting

    def is_restoring(self) -> bool:
        return self._restoring

    def delete(self, actor: Any = None, force: bool = False) -> OperationResult:
        self._force_deleting = force
        try:
            return super().delete(actor=actor, force=force)
        finally:
            self._force_deleting = False

    def force_delete(self, actor: Any = None) -> OperationResult:
        """Remove the record from the store, bypassing the trash."""
        return self.delete(actor=actor, force=True)

    def restore(self, actor: Any = None) -> OperationResult:
        """Take the object out of the trash."""
        self._restoring = True
        try:
            return self.run_operation(
                Operation.RESTORE,
                lambda ctx: self.store.update_properties(self, ctx.properties),
                properties=list(SOFT_DELETE_PROPERTIES),
                actor=actor,
            )
        finally:
            self._restoring = False
