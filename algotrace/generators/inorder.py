"""Inorder traversal with an explicit stack or with recursion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..structures import BinaryTree
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class InorderStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.DESCEND,
            Action.VISIT,
            Action.MOVE_RIGHT,
            Action.BACKTRACK,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    stack: tuple[int, ...] = ()
    visited: tuple[int, ...] = ()


class InorderGenerator(TraceGenerator):
    ALGORITHM = "inorder"
    VARIANTS = ("iterative", "recursive")
    STEP_TYPE = InorderStep

    def describe(self) -> str:
        return "Visit left subtree, node, then right subtree."

    def _trace_iterative(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; the inorder result is [].")
            return

        rec.emit(
            Action.DESCEND,
            "Start with an empty stack and walk left from the root.",
            current=tree.root,
        )
        stack: list[int] = []
        visited: list[int] = []
        current = tree.root
        while current is not None or stack:
            while current is not None:
                stack.append(current)
                rec.emit(
                    Action.DESCEND,
                    f"Push {tree.value(current)} and continue into its left subtree.",
                    current=current,
                    stack=stack,
                    visited=visited,
                )
                current = tree.left(current)

            index = stack.pop()
            visited.append(index)
            rec.emit(
                Action.VISIT,
                f"Left side done; output {tree.value(index)}.",
                current=index,
                stack=stack,
                visited=visited,
            )
            current = tree.right(index)
            if current is not None:
                rec.emit(
                    Action.MOVE_RIGHT,
                    f"Move to the right child {tree.value(current)} of {tree.value(index)}.",
                    current=current,
                    stack=stack,
                    visited=visited,
                )

        rec.emit(
            Action.COMPLETE,
            "Stack and pointer are both empty; traversal finished.",
            visited=visited,
        )

    def _trace_recursive(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; the inorder result is [].")
            return

        stack: list[int] = []
        visited: list[int] = []
        rec.emit(
            Action.DESCEND,
            "The call stack keeps the path; go left before visiting.",
            current=tree.root,
        )

        def traverse(index: int | None) -> None:
            if index is None:
                return
            stack.append(index)
            rec.emit(
                Action.DESCEND,
                f"Enter {tree.value(index)} and recurse into its left subtree.",
                current=index,
                stack=stack,
                visited=visited,
            )
            traverse(tree.left(index))

            visited.append(index)
            rec.emit(
                Action.VISIT,
                f"Left subtree finished; output {tree.value(index)}.",
                current=index,
                stack=stack,
                visited=visited,
            )
            right = tree.right(index)
            if right is not None:
                rec.emit(
                    Action.MOVE_RIGHT,
                    f"Recurse into the right child {tree.value(right)}.",
                    current=right,
                    stack=stack,
                    visited=visited,
                )
            traverse(right)

            stack.pop()
            if stack:
                rec.emit(
                    Action.BACKTRACK,
                    f"{tree.value(index)} is done; return to {tree.value(stack[-1])}.",
                    current=stack[-1],
                    stack=stack,
                    visited=visited,
                )

        traverse(tree.root)
        rec.emit(Action.COMPLETE, "Recursion finished.", visited=visited)
