"""Structure Builder — materializes node graphs from normalized input.

Every node's identity is its position in the original input, so two
nodes holding the same value stay distinguishable.  Structures are
built once per input application and never mutated afterwards.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from . import constants

Number = Union[int, float]


# ── Binary tree ──────────────────────────────────────────────────


@dataclass(frozen=True)
class TreeNode:
    index: int
    value: Number
    left: int | None = None
    right: int | None = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


@dataclass(frozen=True)
class BinaryTree:
    """Binary tree addressed by node identity (level-order input position)."""

    root: int | None
    nodes: Mapping[int, TreeNode]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def node(self, index: int) -> TreeNode:
        return self.nodes[index]

    def value(self, index: int) -> Number:
        return self.nodes[index].value

    def left(self, index: int | None) -> int | None:
        return None if index is None else self.nodes[index].left

    def right(self, index: int | None) -> int | None:
        return None if index is None else self.nodes[index].right

    def children(self, index: int) -> list[int]:
        node = self.nodes[index]
        return [child for child in (node.left, node.right) if child is not None]

    def parents(self) -> dict[int, int]:
        return {
            child: node.index
            for node in self.nodes.values()
            for child in (node.left, node.right)
            if child is not None
        }


def build_tree(values: Sequence[Number | None]) -> BinaryTree:
    """Place *values* breadth-first; ``None`` suppresses that child subtree."""
    if not values or values[0] is None:
        return BinaryTree(root=None, nodes=MappingProxyType({}))

    links: dict[int, list[int | None]] = {0: [None, None]}
    queue: deque[int] = deque([0])
    cursor = 1
    while queue and cursor < len(values):
        parent = queue.popleft()
        for side in (0, 1):
            if cursor >= len(values):
                break
            if values[cursor] is not None:
                links[parent][side] = cursor
                links[cursor] = [None, None]
                queue.append(cursor)
            cursor += 1

    nodes = {
        index: TreeNode(
            index=index, value=values[index], left=left, right=right
        )
        for index, (left, right) in sorted(links.items())
    }
    return BinaryTree(root=0, nodes=MappingProxyType(nodes))


# ── Singly linked lists ──────────────────────────────────────────


@dataclass(frozen=True)
class LinkedList:
    """Singly linked chain with an optional cycle and optional random pointers."""

    values: tuple[Number, ...]
    next: tuple[int | None, ...]
    random: tuple[int | None, ...] = ()
    cycle_entry: int | None = None

    def __len__(self) -> int:
        return len(self.values)

    @property
    def head(self) -> int | None:
        return 0 if self.values else None

    @property
    def is_empty(self) -> bool:
        return not self.values

    def successor(self, index: int | None) -> int | None:
        return None if index is None else self.next[index]


def build_linked_list(
    values: Sequence[Number],
    cycle_pos: int = constants.NO_CYCLE,
    random_targets: Sequence[int | None] | None = None,
) -> LinkedList:
    """Chain *values* in order; a non-negative *cycle_pos* links the tail back.

    Random pointers are resolved in a second pass once every primary link
    exists, since they may point forward.
    """
    count = len(values)
    links: list[int | None] = [i + 1 for i in range(count - 1)]
    if count:
        links.append(cycle_pos if cycle_pos >= 0 else None)

    random: list[int | None] = []
    if random_targets is not None:
        for target in random_targets:
            random.append(target if target is not None and 0 <= target < count else None)

    return LinkedList(
        values=tuple(values),
        next=tuple(links),
        random=tuple(random),
        cycle_entry=cycle_pos if count and cycle_pos >= 0 else None,
    )


@dataclass(frozen=True)
class IntersectingLists:
    """Two chains sharing one node space; list B may merge into list A's tail.

    List A owns identities ``0..len_a-1``.  List B's own prefix nodes follow
    as ``len_a + j``; its shared tail reuses list A's nodes.
    """

    values: tuple[Number, ...]
    next: tuple[int | None, ...]
    head_a: int
    head_b: int
    len_a: int
    len_b: int
    intersection: int | None = None

    def __len__(self) -> int:
        return len(self.values)

    def successor(self, index: int | None) -> int | None:
        return None if index is None else self.next[index]

    def chain(self, head: int) -> list[int]:
        order: list[int] = []
        current: int | None = head
        while current is not None:
            order.append(current)
            current = self.next[current]
        return order


def build_intersecting_lists(
    list_a: Sequence[Number],
    list_b: Sequence[Number],
    join_a: int | None = None,
    join_b: int | None = None,
) -> IntersectingLists:
    len_a, len_b = len(list_a), len(list_b)
    joined = join_a is not None and join_b is not None
    prefix_b = join_b if joined else len_b

    values: list[Number] = list(list_a) + list(list_b[:prefix_b])
    links: list[int | None] = [i + 1 for i in range(len_a - 1)] + [None]
    for j in range(prefix_b):
        links.append(len_a + j + 1 if j + 1 < prefix_b else None)

    if joined:
        if prefix_b == 0:
            head_b = join_a
        else:
            head_b = len_a
            links[len_a + prefix_b - 1] = join_a
    else:
        head_b = len_a

    return IntersectingLists(
        values=tuple(values),
        next=tuple(links),
        head_a=0,
        head_b=head_b,
        len_a=len_a,
        len_b=len_b,
        intersection=join_a if joined else None,
    )


# ── Arrays ───────────────────────────────────────────────────────


def build_array(values: Sequence[Number]) -> tuple[Number, ...]:
    return tuple(values)
