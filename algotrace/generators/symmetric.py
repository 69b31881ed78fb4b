"""Symmetric-tree check by paired descent, recursive or with a pair queue."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import ClassVar

from ..structures import BinaryTree
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder

Pair = tuple[int | None, int | None]


@dataclass(frozen=True)
class SymmetricStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.COMPARE,
            Action.MIRROR,
            Action.ENQUEUE,
            Action.VIOLATION,
            Action.COMPLETE,
        }
    )

    pair: Pair | None = None
    stack: tuple[Pair, ...] = ()
    queue: tuple[Pair, ...] = ()
    matched: tuple[int, ...] = ()
    mismatch: Pair | None = None
    symmetric: bool | None = None


def _label(tree: BinaryTree, index: int | None) -> str:
    return "null" if index is None else str(tree.value(index))


class SymmetricGenerator(TraceGenerator):
    ALGORITHM = "symmetric"
    VARIANTS = ("recursive", "iterative")
    STEP_TYPE = SymmetricStep

    def describe(self) -> str:
        return "Check whether a tree is a mirror image of itself."

    def _mismatch_reason(self, tree: BinaryTree, left: int | None, right: int | None) -> str | None:
        if left is None and right is None:
            return None
        if left is None or right is None:
            return (
                f"Only one side exists ({_label(tree, left)} vs {_label(tree, right)}); "
                "the tree is not symmetric."
            )
        if tree.value(left) != tree.value(right):
            return (
                f"Values differ ({tree.value(left)} vs {tree.value(right)}); "
                "the tree is not symmetric."
            )
        return None

    def _trace_recursive(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "An empty tree is symmetric.", symmetric=True)
            return

        stack: list[Pair] = []
        matched: list[int] = []

        def check(left: int | None, right: int | None) -> bool:
            stack.append((left, right))
            rec.emit(
                Action.COMPARE,
                f"Compare {_label(tree, left)} with {_label(tree, right)}.",
                pair=(left, right),
                stack=stack,
                matched=matched,
            )
            if left is None and right is None:
                stack.pop()
                rec.emit(
                    Action.MIRROR,
                    "Both sides are empty; this pair mirrors.",
                    pair=(left, right),
                    stack=stack,
                    matched=matched,
                )
                return True
            reason = self._mismatch_reason(tree, left, right)
            if reason is not None:
                rec.emit(
                    Action.VIOLATION,
                    reason,
                    pair=(left, right),
                    stack=stack,
                    matched=matched,
                    mismatch=(left, right),
                    symmetric=False,
                )
                return False

            rec.emit(
                Action.MIRROR,
                f"Both are {tree.value(left)}; check the outer pair, then the inner pair.",
                pair=(left, right),
                stack=stack,
                matched=matched,
            )
            if not check(tree.left(left), tree.right(right)):
                return False
            if not check(tree.right(left), tree.left(right)):
                return False
            stack.pop()
            matched.extend((left, right))
            rec.emit(
                Action.MIRROR,
                f"Subtrees under {tree.value(left)} mirror each other.",
                pair=(left, right),
                stack=stack,
                matched=matched,
            )
            return True

        if check(tree.left(tree.root), tree.right(tree.root)):
            matched.append(tree.root)
            rec.emit(
                Action.COMPLETE,
                "Every pair mirrored; the tree is symmetric.",
                matched=matched,
                symmetric=True,
            )

    def _trace_iterative(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "An empty tree is symmetric.", symmetric=True)
            return

        queue: deque[Pair] = deque([(tree.left(tree.root), tree.right(tree.root))])
        matched: list[int] = []
        rec.emit(
            Action.ENQUEUE,
            "Queue the root's left and right children as the first pair.",
            queue=queue,
        )
        while queue:
            left, right = queue.popleft()
            rec.emit(
                Action.COMPARE,
                f"Dequeue and compare {_label(tree, left)} with {_label(tree, right)}.",
                pair=(left, right),
                queue=queue,
                matched=matched,
            )
            if left is None and right is None:
                rec.emit(
                    Action.MIRROR,
                    "Both sides are empty; continue.",
                    pair=(left, right),
                    queue=queue,
                    matched=matched,
                )
                continue
            reason = self._mismatch_reason(tree, left, right)
            if reason is not None:
                rec.emit(
                    Action.VIOLATION,
                    reason,
                    pair=(left, right),
                    queue=queue,
                    matched=matched,
                    mismatch=(left, right),
                    symmetric=False,
                )
                return

            matched.extend((left, right))
            rec.emit(
                Action.MIRROR,
                f"Both are {tree.value(left)}; the pair matches.",
                pair=(left, right),
                queue=queue,
                matched=matched,
            )
            queue.append((tree.left(left), tree.right(right)))
            queue.append((tree.right(left), tree.left(right)))
            rec.emit(
                Action.ENQUEUE,
                "Queue the outer pair and the inner pair.",
                pair=(left, right),
                queue=queue,
                matched=matched,
            )

        matched.append(tree.root)
        rec.emit(
            Action.COMPLETE,
            "Queue is empty with no mismatch; the tree is symmetric.",
            matched=matched,
            symmetric=True,
        )
