"""Hierarchical object graph: parent resolution, ancestors, children, siblings."""

from contentkit.hierarchy.cache import (
    LRUObjectCache,
    ObjectCache,
    ProcessObjectCache,
    process_object_cache,
)
from contentkit.hierarchy.engine import Hierarchy
from contentkit.hierarchy.references import (
    ById,
    ByNode,
    ByRecord,
    Reference,
    resolve_reference,
    to_reference,
)
from contentkit.hierarchy.siblings import (
    SIBLINGS_STRATEGIES,
    exclude_self,
    get_siblings_strategy,
    parent_children,
    with_top_level,
)

__all__ = [
    "ById",
    "ByNode",
    "ByRecord",
    "Hierarchy",
    "LRUObjectCache",
    "ObjectCache",
    "ProcessObjectCache",
    "Reference",
    "SIBLINGS_STRATEGIES",
    "exclude_self",
    "get_siblings_strategy",
    "parent_children",
    "process_object_cache",
    "resolve_reference",
    "to_reference",
    "with_top_level",
]
