"""BST validation by bound propagation or by a monotonic inorder walk."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..structures import BinaryTree, Number
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder

# (node, exclusive lower bound, exclusive upper bound); None is unbounded
Frame = tuple[int, Number | None, Number | None]


@dataclass(frozen=True)
class BSTStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.CHECK,
            Action.DESCEND,
            Action.VISIT,
            Action.VIOLATION,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    lower: Number | None = None
    upper: Number | None = None
    stack: tuple = ()
    visited: tuple[int, ...] = ()
    previous: Number | None = None
    ordered: tuple[Number, ...] = ()
    valid: bool | None = None


def _bound_text(lower: Number | None, upper: Number | None) -> str:
    low = "-inf" if lower is None else str(lower)
    high = "+inf" if upper is None else str(upper)
    return f"({low}, {high})"


class ValidateBSTGenerator(TraceGenerator):
    ALGORITHM = "validate_bst"
    VARIANTS = ("range", "inorder")
    STEP_TYPE = BSTStep

    def describe(self) -> str:
        return "Decide whether a binary tree satisfies the search-tree ordering."

    def _trace_range(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "An empty tree is a valid BST.", valid=True)
            return

        stack: list[Frame] = [(tree.root, None, None)]
        visited: list[int] = []
        while stack:
            index, lower, upper = stack.pop()
            value = tree.value(index)
            if (lower is not None and value <= lower) or (upper is not None and value >= upper):
                rec.emit(
                    Action.VIOLATION,
                    f"{value} is outside its bound {_bound_text(lower, upper)}; not a BST.",
                    current=index,
                    lower=lower,
                    upper=upper,
                    stack=stack,
                    visited=visited,
                    valid=False,
                )
                return

            visited.append(index)
            right = tree.right(index)
            left = tree.left(index)
            if right is not None:
                stack.append((right, value, upper))
            if left is not None:
                stack.append((left, lower, value))
            rec.emit(
                Action.CHECK,
                f"{value} fits {_bound_text(lower, upper)}; children inherit tightened bounds.",
                current=index,
                lower=lower,
                upper=upper,
                stack=stack,
                visited=visited,
            )

        rec.emit(
            Action.COMPLETE,
            "Every node is inside its bound; the tree is a valid BST.",
            visited=visited,
            valid=True,
        )

    def _trace_inorder(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "An empty tree is a valid BST.", valid=True)
            return

        stack: list[int] = []
        visited: list[int] = []
        ordered: list[Number] = []
        previous: Number | None = None
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
                    previous=previous,
                    ordered=ordered,
                )
                current = tree.left(current)

            index = stack.pop()
            value = tree.value(index)
            if previous is not None and value <= previous:
                rec.emit(
                    Action.VIOLATION,
                    f"{value} does not exceed the previous value {previous}; not a BST.",
                    current=index,
                    stack=stack,
                    visited=visited,
                    previous=previous,
                    ordered=ordered,
                    valid=False,
                )
                return

            previous = value
            visited.append(index)
            ordered.append(value)
            rec.emit(
                Action.VISIT,
                f"{value} keeps the inorder sequence strictly increasing.",
                current=index,
                stack=stack,
                visited=visited,
                previous=previous,
                ordered=ordered,
            )
            current = tree.right(index)

        rec.emit(
            Action.COMPLETE,
            "The inorder sequence is strictly increasing; the tree is a valid BST.",
            visited=visited,
            previous=previous,
            ordered=ordered,
            valid=True,
        )
