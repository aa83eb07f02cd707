"""Sibling strategies.

A strategy takes a node and returns the nodes on the same level. The
default, ``parent_children``, returns the parent's children as-is: the
node itself is included, and a top-level node has no siblings at all.
The other strategies are opt-in corrections of those two behaviours.
"""

from collections.abc import Callable
from typing import Any

from contentkit.persistence.query import Query

SiblingsStrategy = Callable[[Any], list[Any]]


def parent_children(node: Any) -> list[Any]:
    parent = node.hierarchy.parent()
    if parent is not None:
        return list(parent.hierarchy.children())
    return []


def exclude_self(node: Any) -> list[Any]:
    return [s for s in parent_children(node) if s is not node and s.id != node.id]


def with_top_level(node: Any) -> list[Any]:
    """Like parent_children, but top-level nodes get every other top-level node."""
    if node.hierarchy.has_master():
        return parent_children(node)

    query = Query(type(node)).add_filter("master", operator="isNull")
    if "position" in node.property_types():
        query.add_order("position")
    return [
        node.factory.from_record(node.obj_type, record)
        for record in node.store.query(query)
    ]


SIBLINGS_STRATEGIES: dict[str, SiblingsStrategy] = {
    "parent-children": parent_children,
    "exclude-self": exclude_self,
    "with-top-level": with_top_level,
}


def get_siblings_strategy(name: str) -> SiblingsStrategy:
    if name not in SIBLINGS_STRATEGIES:
        raise ValueError(
            f"Unknown siblings strategy '{name}'. "
            f"Expected one of: {', '.join(sorted(SIBLINGS_STRATEGIES))}"
        )
    return SIBLINGS_STRATEGIES[name]
