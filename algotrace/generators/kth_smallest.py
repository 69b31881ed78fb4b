"""Kth smallest value in a BST via inorder traversal, stopping at the kth visit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .. import constants
from ..structures import BinaryTree, Number, build_tree
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class KthStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.DESCEND,
            Action.VISIT,
            Action.MOVE_RIGHT,
            Action.BACKTRACK,
            Action.FOUND,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    stack: tuple[int, ...] = ()
    visited: tuple[int, ...] = ()
    count: int = 0
    k: int = 0
    found: int | None = None
    answer: Number | None = None


class KthSmallestGenerator(TraceGenerator):
    ALGORITHM = "kth_smallest"
    VARIANTS = ("iterative", "recursive")
    INPUT_KIND = constants.INPUT_KTH
    CEILING = constants.MAX_KTH_TREE_NODES
    STEP_TYPE = KthStep

    def describe(self) -> str:
        return "Find the kth smallest value with an inorder walk."

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        return build_tree(normalized.values), {"k": normalized.k}

    def _not_found(self, rec: TraceRecorder, visited: list[int], count: int, k: int) -> None:
        rec.emit(
            Action.COMPLETE,
            f"Only {count} nodes exist; there is no {k}th smallest value.",
            visited=visited,
            count=count,
            k=k,
        )

    def _trace_iterative(self, rec: TraceRecorder, tree: BinaryTree, k: int) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; nothing to count.", k=k)
            return

        stack: list[int] = []
        visited: list[int] = []
        count = 0
        rec.emit(
            Action.DESCEND,
            "Walk left from the root, pushing each node.",
            current=tree.root,
            k=k,
        )
        current = tree.root
        while current is not None or stack:
            while current is not None:
                stack.append(current)
                rec.emit(
                    Action.DESCEND,
                    f"Push {tree.value(current)} and go left.",
                    current=current,
                    stack=stack,
                    visited=visited,
                    count=count,
                    k=k,
                )
                current = tree.left(current)

            index = stack.pop()
            count += 1
            if count == k:
                visited.append(index)
                rec.emit(
                    Action.FOUND,
                    f"Visit #{count} is {tree.value(index)}; that is the answer.",
                    current=index,
                    stack=stack,
                    visited=visited,
                    count=count,
                    k=k,
                    found=index,
                    answer=tree.value(index),
                )
                return
            visited.append(index)
            rec.emit(
                Action.VISIT,
                f"Pop {tree.value(index)}; visit count is now {count}.",
                current=index,
                stack=stack,
                visited=visited,
                count=count,
                k=k,
            )
            current = tree.right(index)
            if current is not None:
                rec.emit(
                    Action.MOVE_RIGHT,
                    f"Move to the right child {tree.value(current)}.",
                    current=current,
                    stack=stack,
                    visited=visited,
                    count=count,
                    k=k,
                )

        self._not_found(rec, visited, count, k)

    def _trace_recursive(self, rec: TraceRecorder, tree: BinaryTree, k: int) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; nothing to count.", k=k)
            return

        stack: list[int] = []
        visited: list[int] = []
        count = 0

        def walk(index: int | None) -> bool:
            nonlocal count
            if index is None:
                return False
            stack.append(index)
            rec.emit(
                Action.DESCEND,
                f"Enter {tree.value(index)} and recurse left.",
                current=index,
                stack=stack,
                visited=visited,
                count=count,
                k=k,
            )
            if walk(tree.left(index)):
                return True

            count += 1
            visited.append(index)
            if count == k:
                rec.emit(
                    Action.FOUND,
                    f"Visit #{count} is {tree.value(index)}; stop here.",
                    current=index,
                    stack=stack,
                    visited=visited,
                    count=count,
                    k=k,
                    found=index,
                    answer=tree.value(index),
                )
                return True
            rec.emit(
                Action.VISIT,
                f"Visit {tree.value(index)}; count is now {count}.",
                current=index,
                stack=stack,
                visited=visited,
                count=count,
                k=k,
            )
            right = tree.right(index)
            if right is not None:
                rec.emit(
                    Action.MOVE_RIGHT,
                    f"Recurse into the right child {tree.value(right)}.",
                    current=right,
                    stack=stack,
                    visited=visited,
                    count=count,
                    k=k,
                )
            if walk(right):
                return True

            stack.pop()
            if stack:
                rec.emit(
                    Action.BACKTRACK,
                    f"Return to {tree.value(stack[-1])}.",
                    current=stack[-1],
                    stack=stack,
                    visited=visited,
                    count=count,
                    k=k,
                )
            return False

        if not walk(tree.root):
            self._not_found(rec, visited, count, k)
