"""Recursive traversal of nested token trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Union

WalkPredicate = Callable[[Any, list[str]], Any]
StopPredicate = Callable[[Any, list[str]], bool]


@dataclass(frozen=True, slots=True)
class Leaf:
    """A terminal value in a token tree."""

    value: Any


@dataclass(frozen=True, slots=True)
class ListNode:
    """An ordered sequence node; item indices become path segments."""

    items: tuple[TreeNode, ...]


@dataclass(frozen=True, slots=True)
class MapNode:
    """A mapping node with stringified keys in source order."""

    entries: tuple[tuple[str, TreeNode], ...]


TreeNode = Union[Leaf, ListNode, MapNode]


def build_tree(
    value: Any,
    stop: StopPredicate | None = None,
    path: tuple[str, ...] = (),
) -> TreeNode:
    """Classify a nested mapping/list structure into tree nodes.

    ``stop`` is consulted before descending into a node; when it returns
    True the node is kept whole as a leaf.
    """
    if stop is not None and stop(value, list(path)):
        return Leaf(value)
    if isinstance(value, Mapping):
        return MapNode(
            tuple(
                (str(key), build_tree(child, stop, (*path, str(key))))
                for key, child in value.items()
            )
        )
    if isinstance(value, (list, tuple)):
        return ListNode(
            tuple(
                build_tree(item, stop, (*path, str(index)))
                for index, item in enumerate(value)
            )
        )
    return Leaf(value)


def iter_leaves(node: TreeNode, path: tuple[str, ...] = ()) -> Iterator[tuple[list[str], Any]]:
    """Yield ``(path, value)`` for every leaf, depth first, in source order."""
    if isinstance(node, MapNode):
        for key, child in node.entries:
            yield from iter_leaves(child, (*path, key))
    elif isinstance(node, ListNode):
        for index, child in enumerate(node.items):
            yield from iter_leaves(child, (*path, str(index)))
    else:
        yield list(path), node.value


def map_leaves(node: TreeNode, predicate: WalkPredicate, path: tuple[str, ...] = ()) -> Any:
    """Rebuild the tree as plain dicts/lists with every leaf passed through ``predicate``."""
    if isinstance(node, MapNode):
        return {key: map_leaves(child, predicate, (*path, key)) for key, child in node.entries}
    if isinstance(node, ListNode):
        return [map_leaves(child, predicate, (*path, str(index))) for index, child in enumerate(node.items)]
    return predicate(node.value, list(path))


def walk_object(target: Any, predicate: WalkPredicate, *, stop: StopPredicate | None = None) -> Any:
    """Map every leaf of ``target`` through ``predicate(value, path)``.

    The result mirrors the shape of ``target``. Cyclic input never terminates.
    """
    return map_leaves(build_tree(target, stop), predicate)
