"""Dot-segmented key/value trie used to index translations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_SEPARATOR = "."


class Node[V]:
    """One trie node: an optional child map and an optional leaf value."""

    __slots__ = ("branch", "has_leaf", "leaf")

    def __init__(self) -> None:
        self.branch: dict[str, Node[V]] | None = None
        self.leaf: V | None = None
        self.has_leaf = False

    def deeper(self, segment: str) -> Node[V] | None:
        if self.branch is None:
            return None
        return self.branch.get(segment)

    def child(self, segment: str) -> Node[V]:
        """Return the child for `segment`, creating it when missing."""

        if self.branch is None:
            self.branch = {}
        node = self.branch.get(segment)
        if node is None:
            node = Node()
            self.branch[segment] = node
        return node

    def set_leaf(self, value: V) -> None:
        self.leaf = value
        self.has_leaf = True

    def children(self) -> Iterator[tuple[str, Node[V]]]:
        if self.branch is None:
            return iter(())
        return iter(self.branch.items())


class Directory[V]:
    """Trie keyed by dotted paths such as `menu.options.title`.

    Inserting a key materializes every intermediate segment as a branch;
    re-inserting a key replaces only its leaf value.
    """

    __slots__ = ("_count", "_root")

    def __init__(self) -> None:
        self._root: Node[V] = Node()
        self._count = 0

    @property
    def root(self) -> Node[V]:
        return self._root

    def node(self, key: str) -> Node[V] | None:
        current = self._root
        for segment in key.split(_SEPARATOR):
            deeper = current.deeper(segment)
            if deeper is None:
                return None
            current = deeper
        return current

    def get(self, key: str) -> V | None:
        found = self.node(key)
        if found is None or not found.has_leaf:
            return None
        return found.leaf

    def insert(self, key: str, value: V) -> None:
        current = self._root
        for segment in key.split(_SEPARATOR):
            current = current.child(segment)
        if not current.has_leaf:
            self._count += 1
        current.set_leaf(value)

    def items(self) -> Iterator[tuple[str, V]]:
        """Yield `(dotted_key, value)` for every leaf, depth first."""

        stack: list[tuple[str, Node[V]]] = [
            (segment, child) for segment, child in reversed(list(self._root.children()))
        ]
        while stack:
            key, current = stack.pop()
            if current.has_leaf:
                yield key, current.leaf  # type: ignore[misc]
            stack.extend(
                (f"{key}{_SEPARATOR}{segment}", child)
                for segment, child in reversed(list(current.children()))
            )

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        found = self.node(key)
        return found is not None and found.has_leaf

    def __len__(self) -> int:
        return self._count
