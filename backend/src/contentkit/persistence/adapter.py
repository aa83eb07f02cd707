"""StorageFacade Protocol: the shared interface for all object stores."""

from typing import Any, Protocol, runtime_checkable

from contentkit.persistence.query import Query


@runtime_checkable
class StorageFacade(Protocol):
    """Interface all stores must implement.

    Stores operate on model objects for writes (they read ``obj_type``,
    ``key``, ``id`` and ``data()``) and return plain records (dicts) for
    reads. Calls are blocking; errors raised by the backend propagate
    unchanged, there is no retry at this layer.
    """

    def load(self, obj_type: str, ident: Any) -> dict[str, Any] | None: ...

    def save(self, obj: Any) -> bool:
        """Insert, or replace when ``obj.id`` already exists. Assigns an id if absent."""
        ...

    def update_properties(
        self, obj: Any, properties: list[str] | None = None
    ) -> bool: ...

    def delete(self, obj: Any) -> bool: ...

    def query(self, query: Query) -> list[dict[str, Any]]: ...
