"""Object caches used by reference resolution.

A cache maps (object type, id) to a previously loaded object. It is a
read-through cache only: resolution looks here first and stores what it
loads from the store. Which lifetime to use is the integrator's choice:

- ProcessObjectCache: unbounded, lives as long as the process. The
  module-level ``process_object_cache`` is the shared default.
- ProcessObjectCache(): a fresh instance per request gives request scope.
- LRUObjectCache(maxsize): bounded, evicts least recently used entries.
"""

from collections import OrderedDict
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ObjectCache(Protocol):
    def get(self, obj_type: str, ident: Any) -> Any | None: ...

    def put(self, obj_type: str, ident: Any, obj: Any) -> None: ...

    def clear(self, obj_type: str | None = None) -> None: ...


class ProcessObjectCache:
    """Unbounded cache. Never evicts."""

    def __init__(self):
        self._objects: dict[str, dict[Any, Any]] = {}

    def get(self, obj_type: str, ident: Any) -> Any | None:
        return self._objects.get(obj_type, {}).get(ident)

    def put(self, obj_type: str, ident: Any, obj: Any) -> None:
        self._objects.setdefault(obj_type, {})[ident] = obj

    def clear(self, obj_type: str | None = None) -> None:
        if obj_type is None:
            self._objects.clear()
        else:
            self._objects.pop(obj_type, None)

    def __len__(self) -> int:
        return sum(len(objects) for objects in self._objects.values())


class LRUObjectCache:
    """Bounded cache holding at most ``maxsize`` objects across all types."""

    def __init__(self, maxsize: int = 1024):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._objects: OrderedDict[tuple[str, Any], Any] = OrderedDict()

    def get(self, obj_type: str, ident: Any) -> Any | None:
        key = (obj_type, ident)
        if key not in self._objects:
            return None
        self._objects.move_to_end(key)
        return self._objects[key]

    def put(self, obj_type: str, ident: Any, obj: Any) -> None:
        key = (obj_type, ident)
        self._objects[key] = obj
        self._objects.move_to_end(key)
        while len(self._objects) > self.maxsize:
            self._objects.popitem(last=False)

    def clear(self, obj_type: str | None = None) -> None:
        if obj_type is None:
            self._objects.clear()
            return
        for key in [k for k in self._objects if k[0] == obj_type]:
            del self._objects[key]

    def __len__(self) -> int:
        return len(self._objects)


process_object_cache = ProcessObjectCache()
