"""Hierarchy engine.

Every hierarchical node owns a Hierarchy component (``node.hierarchy``)
that resolves its parent and computes ancestors, children and siblings
lazily. Each derived value is cached on the component behind its own
invalidation method:

- reset_parent(): resolved parent and ancestor chain (called whenever the
  node's master is reassigned)
- reset_hierarchy(): ancestor chain only
- reset_children(): children
- reset_siblings(): siblings

Reassigning the master does not touch the children or siblings caches.
Callers who move nodes around call reset_children()/reset_siblings()
themselves.

The node must expose ``id``, ``master``, ``obj_type``, ``key``,
``object_cache``, ``factory`` and ``load_children()``.
"""

from typing import Any

from contentkit.errors import CycleError, SelfReferenceError, UnsupportedOperationError
from contentkit.hierarchy.references import resolve_reference, to_reference
from contentkit.hierarchy.siblings import SiblingsStrategy, parent_children


class Hierarchy:
    """Lazily computed, cached view of one node's place in its tree."""

    def __init__(self, node: Any, siblings_strategy: SiblingsStrategy | None = None):
        self.node = node
        self.siblings_strategy = siblings_strategy or parent_children
        self._parent: Any = None
        self._parent_resolved = False
        self._ancestors: list[Any] | None = None
        self._children: list[Any] | None = None
        self._siblings: list[Any] | None = None

    # ------------------------------------------------------------------
    # Cache invalidation
    # ------------------------------------------------------------------

    def reset_parent(self) -> None:
        self._parent = None
        self._parent_resolved = False
        self.reset_hierarchy()

    def reset_hierarchy(self) -> None:
        self._ancestors = None

    def reset_children(self) -> None:
        self._children = None

    def reset_siblings(self) -> None:
        self._siblings = None

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, value: Any) -> Any | None:
        """Resolve a node, record or id to a node of this node's type."""
        ref = to_reference(value, type(self.node), self.node.key)
        return resolve_reference(
            ref,
            obj_type=self.node.obj_type,
            load=self._load,
            cache=self.node.object_cache,
        )

    def _load(self, ident: Any) -> Any | None:
        obj = self.node.factory.create(self.node.obj_type)
        obj.load(ident)
        if obj.id:
            return obj
        return None

    # ------------------------------------------------------------------
    # Ancestors
    # ------------------------------------------------------------------

    def has_master(self) -> bool:
        return bool(self.node.master)

    def parent(self) -> Any | None:
        """The node's immediate parent, resolved and cached.

        Raises:
            CycleError: If the master resolves to the node itself.
        """
        if not self._parent_resolved:
            master = self.resolve(self.node.master) if self.has_master() else None
            if master is not None and master.id == self.node.id:
                raise CycleError(f"Can not be ones own parent: {master.id}")
            # A missing master is remembered too, until the master changes
            self._parent = master
            self._parent_resolved = True
        return self._parent

    def has_master_object(self) -> bool:
        return self.parent() is not None

    def ancestors(self) -> list[Any]:
        """Ancestors from the immediate parent up to the top-level node."""
        if self._ancestors is None:
            self._ancestors = self._load_ancestors()
        return self._ancestors

    def _load_ancestors(self) -> list[Any]:
        ancestors: list[Any] = []
        seen = {self.node.id}
        master = self.parent()
        while master is not None:
            if master.id in seen:
                raise CycleError(
                    f"Hierarchy of {self.node.obj_type}:{self.node.id} "
                    f"loops back to {master.id}"
                )
            seen.add(master.id)
            ancestors.append(master)
            master = master.hierarchy.parent()
        return ancestors

    def inverted_ancestors(self) -> list[Any]:
        """Ancestors from the top-level node down to the immediate parent."""
        return list(reversed(self.ancestors()))

    def top_level_ancestor(self) -> Any | None:
        inverted = self.inverted_ancestors()
        return inverted[0] if inverted else None

    def level(self) -> int:
        """Position in the hierarchy, starting at 1 for top-level nodes."""
        return len(self.ancestors()) + 1

    def has_parents(self) -> bool:
        return len(self.ancestors()) > 0

    def is_top_level(self) -> bool:
        return not self.node.master

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def children(self) -> list[Any]:
        if self._children is None:
            self._children = list(self.node.load_children())
        return self._children

    def set_children(self, children: list[Any]) -> None:
        self._children = []
        for child in children:
            self.add_child(child)

    def add_child(self, child: Any) -> None:
        """Append a child (node, record or id) to the cached children.

        Nothing is persisted. Unresolvable references are ignored.

        Raises:
            SelfReferenceError: If the child is the node itself.
        """
        resolved = self.resolve(child)
        if resolved is None:
            return
        if resolved is self.node or (resolved.id is not None and resolved.id == self.node.id):
            raise SelfReferenceError(f"Can not be ones own child: {resolved.id}")
        self.children().append(resolved)

    def has_children(self) -> bool:
        return self.num_children() > 0

    def num_children(self) -> int:
        return len(self.children())

    def is_last_level(self) -> bool:
        return not self.has_children()

    def recursive_num_children(self) -> int:
        raise UnsupportedOperationError(
            "recursive_num_children is not supported yet"
        )

    # ------------------------------------------------------------------
    # Siblings
    # ------------------------------------------------------------------

    def siblings(self) -> list[Any]:
        if self._siblings is None:
            self._siblings = list(self.siblings_strategy(self.node))
        return self._siblings

    def num_siblings(self) -> int:
        return len(self.siblings())

    def has_siblings(self) -> bool:
        # The default strategy counts the node itself
        return self.num_siblings() > 1

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def is_child_of(self, master: Any) -> bool:
        resolved = self.resolve(master)
        return resolved is not None and resolved.id == self.node.master

    def recursive_is_child_of(self, master: Any) -> bool:
        """True if master is the parent, grandparent, ... of the node."""
        current = self.node
        seen = set()
        while current is not None:
            if current.hierarchy.is_child_of(master):
                return True
            if current.id in seen:
                raise CycleError(
                    f"Hierarchy of {self.node.obj_type}:{self.node.id} "
                    f"loops back to {current.id}"
                )
            seen.add(current.id)
            current = current.hierarchy.parent()
        return False

    def is_sibling_of(self, sibling: Any) -> bool:
        resolved = self.resolve(sibling)
        return resolved is not None and resolved.master == self.node.master

    def is_master_of(self, child: Any) -> bool:
        resolved = self.resolve(child)
        return resolved is not None and resolved.master == self.node.id

    def recursive_is_master_of(self, child: Any) -> bool:
        raise UnsupportedOperationError(
            "recursive_is_master_of is not supported yet"
        )
