"""In-memory store.

Records are deep-copied on the way in and out so callers never share
mutable state with the store.
"""

import copy
from typing import Any

from contentkit.persistence.query import Filter, Query


class MemoryStore:
    """Dict-backed store. Integer ids are assigned per object type."""

    def __init__(self):
        self._records: dict[str, dict[Any, dict[str, Any]]] = {}
        self._next_ids: dict[str, int] = {}

    def _table(self, obj_type: str) -> dict[Any, dict[str, Any]]:
        return self._records.setdefault(obj_type, {})

    def _next_id(self, obj_type: str) -> int:
        table = self._table(obj_type)
        next_id = self._next_ids.get(obj_type, 1)
        while next_id in table:
            next_id += 1
        self._next_ids[obj_type] = next_id + 1
        return next_id

    def load(self, obj_type: str, ident: Any) -> dict[str, Any] | None:
        record = self._table(obj_type).get(ident)
        if record is None:
            return None
        return copy.deepcopy(record)

    def save(self, obj: Any) -> bool:
        if obj.id is None:
            obj.id = self._next_id(obj.obj_type)
        record = copy.deepcopy(obj.data())
        self._table(obj.obj_type)[obj.id] = record
        return True

    def update_properties(self, obj: Any, properties: list[str] | None = None) -> bool:
        table = self._table(obj.obj_type)
        if obj.id is None or obj.id not in table:
            return False
        table[obj.id].update(copy.deepcopy(obj.data(properties)))
        return True

    def delete(self, obj: Any) -> bool:
        table = self._table(obj.obj_type)
        if obj.id is None or obj.id not in table:
            return False
        del table[obj.id]
        return True

    def query(self, query: Query) -> list[dict[str, Any]]:
        rows = [
            r for r in self._table(query.obj_type).values()
            if all(self._matches(r, f) for f in query.filters)
        ]

        # Stable sort, applied from the least significant order backwards
        for order in reversed(query.orders):
            rows.sort(
                key=lambda r: _sort_key(r.get(order.field)),
                reverse=order.descending,
            )

        if query.limit:
            rows = rows[query.offset:query.offset + query.limit]

        return [copy.deepcopy(r) for r in rows]

    def count(self, obj_type: str) -> int:
        return len(self._table(obj_type))

    def clear(self) -> None:
        self._records.clear()
        self._next_ids.clear()

    @staticmethod
    def _matches(record: dict[str, Any], cond: Filter) -> bool:
        value = record.get(cond.field)
        op = cond.operator

        if op == "eq":
            return value == cond.value
        elif op == "neq":
            return value != cond.value
        elif op == "in":
            return value in cond.value
        elif op == "isNull":
            return value is None
        elif op == "isNotNull":
            return value is not None

        return False


def _sort_key(value: Any) -> tuple:
    # None sorts before everything, like SQL NULLS FIRST on ascending order
    if value is None:
        return (0, "")
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, value)
