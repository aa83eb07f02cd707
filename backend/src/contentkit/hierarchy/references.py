"""References to hierarchical nodes.

Anything that points at a node is normalized into one of three variants
before the hierarchy engine looks at it:

- ById(ident): a scalar identifier
- ByNode(node): an already-resolved node
- ByRecord(fields): a record (mapping) holding the identity field
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from contentkit.core.types import normalize_ident
from contentkit.errors import InvalidReferenceError
from contentkit.hierarchy.cache import ObjectCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ById:
    ident: Any


@dataclass(frozen=True)
class ByNode:
    node: Any


@dataclass(frozen=True)
class ByRecord:
    fields: Mapping[str, Any]
    key: str = "id"

    @property
    def ident(self) -> Any:
        return self.fields.get(self.key)


Reference = ById | ByNode | ByRecord


def to_reference(value: Any, node_cls: type, key: str = "id") -> Reference | None:
    """Normalize a node, record or scalar into a Reference.

    Returns None for None.

    Raises:
        InvalidReferenceError: If value is none of the accepted shapes.
    """
    if value is None:
        return None
    if isinstance(value, (ById, ByNode, ByRecord)):
        return value
    if isinstance(value, node_cls):
        return ByNode(value)
    if isinstance(value, Mapping) and key in value:
        return ByRecord(value, key)
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return ById(value)
    raise InvalidReferenceError(
        f'Can not load object (not a scalar or a "{node_cls.__name__}")'
    )


def resolve_reference(
    ref: Reference | None,
    obj_type: str,
    load: Callable[[Any], Any],
    cache: ObjectCache,
) -> Any | None:
    """Resolve a reference to a node, consulting the cache before the store.

    A node with an empty id counts as not found. Only found nodes are cached.
    """
    if ref is None:
        return None
    if isinstance(ref, ByNode):
        return ref.node

    ident = normalize_ident(ref.ident)
    if ident is None:
        return None

    cached = cache.get(obj_type, ident)
    if cached is not None:
        logger.debug("Resolved %s:%s from object cache", obj_type, ident)
        return cached

    obj = load(ident)
    if obj is None or not obj.id:
        logger.debug("Reference %s:%s not found", obj_type, ident)
        return None

    cache.put(obj_type, obj.id, obj)
    return obj
