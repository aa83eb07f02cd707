"""Object revisions.

A revision is written before every update of a revisionable object. It
holds the object's data as it is about to be saved (``data_obj``), the
data of the previous revision (``data_prev``) and the changed keys
between the two (``data_diff``, as ``{key: [old, new]}``).
"""

from __future__ import annotations

from typing import Any

from contentkit.core.clock import NOW
from contentkit.core.types import serialize_value
from contentkit.lifecycle import compute_changes
from contentkit.models.base import Field, Model
from contentkit.persistence.query import Query

REVISION_TYPE = "object/revision"


def snapshot(obj: Model) -> dict[str, Any]:
    """JSON-safe copy of an object's data, serialized by property type."""
    types = obj.property_types()
    return {name: serialize_value(types[name], value) for name, value in obj.data().items()}


class ObjectRevision(Model):
    obj_type = REVISION_TYPE

    target_type = Field("string")
    target_id = Field("id")
    rev_num = Field("integer")
    rev_ts = Field("datetime")
    rev_user = Field("ref")
    data_prev = Field("json", default_factory=dict)
    data_obj = Field("json", default_factory=dict)
    data_diff = Field("json", default_factory=dict)

    def create_from_object(self, obj: Model) -> ObjectRevision:
        """Fill this revision from the current state of obj. Does not save."""
        prev = self.last_object_revision(obj)

        self.target_type = obj.obj_type
        self.target_id = obj.id
        self.rev_num = (prev.rev_num or 0) + 1 if prev is not None else 1
        self.rev_ts = NOW
        self.rev_user = getattr(obj, "last_modified_by", None)

        if prev is not None:
            self.data_prev = dict(prev.data_obj or {})
        else:
            self.data_prev = self._stored_snapshot(obj)
        self.data_obj = snapshot(obj)
        self.data_diff = self.create_diff()
        return self

    def _stored_snapshot(self, obj: Model) -> dict[str, Any]:
        record = self.store.load(obj.obj_type, obj.id)
        if not record:
            return {}
        stored = type(obj)(deps=obj.dependencies)
        stored.set_data(record)
        return snapshot(stored)

    def create_diff(
        self,
        data_prev: dict[str, Any] | None = None,
        data_obj: dict[str, Any] | None = None,
    ) -> dict[str, list[Any]]:
        """Changed keys only, each as an [old, new] pair."""
        prev = self.data_prev if data_prev is None else data_prev
        new = self.data_obj if data_obj is None else data_obj
        changes = compute_changes(new or {}, prev or {}) or {}
        return {key: [(prev or {}).get(key), value] for key, value in changes.items()}

    def _revisions_query(self, obj: Model) -> Query:
        return (
            Query(self)
            .add_filter("target_type", obj.obj_type)
            .add_filter("target_id", obj.id)
        )

    def _from_record(self, record: dict[str, Any] | None) -> ObjectRevision | None:
        if not record:
            return None
        return type(self)(deps=self.dependencies, **record)

    def last_object_revision(self, obj: Model) -> ObjectRevision | None:
        """The most recent revision of obj, or None."""
        if obj.id is None:
            return None
        query = self._revisions_query(obj).add_order("rev_num", "desc").set_num_per_page(1)
        records = self.store.query(query)
        return self._from_record(records[0] if records else None)

    def object_revision_num(self, obj: Model, rev_num: int) -> ObjectRevision | None:
        """Revision number rev_num of obj, or None."""
        if obj.id is None:
            return None
        query = self._revisions_query(obj).add_filter("rev_num", int(rev_num)).set_num_per_page(1)
        records = self.store.query(query)
        return self._from_record(records[0] if records else None)

    def object_revisions(self, obj: Model) -> list[ObjectRevision]:
        """All revisions of obj, oldest first."""
        if obj.id is None:
            return []
        query = self._revisions_query(obj).add_order("rev_num")
        return [self._from_record(record) for record in self.store.query(query)]
