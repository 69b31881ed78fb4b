"""Tree inversion on working copies of the child pointers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import ClassVar

from ..structures import BinaryTree
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder

ChildLinks = dict[int, list]


@dataclass(frozen=True)
class InvertStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.DESCEND,
            Action.DEQUEUE,
            Action.ENQUEUE,
            Action.SWAP,
            Action.BACKTRACK,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    stack: tuple[int, ...] = ()
    queue: tuple[int, ...] = ()
    swapped: tuple[int, ...] = ()
    processed: tuple[int, ...] = ()
    # (index, left, right) per node, in identity order
    shape: tuple[tuple[int, int | None, int | None], ...] = ()


def _working_links(tree: BinaryTree) -> ChildLinks:
    return {index: [node.left, node.right] for index, node in tree.nodes.items()}


def _shape(links: ChildLinks) -> list[tuple[int, int | None, int | None]]:
    return [(index, left, right) for index, (left, right) in sorted(links.items())]


def _swap(links: ChildLinks, index: int) -> None:
    left, right = links[index]
    links[index] = [right, left]


class InvertGenerator(TraceGenerator):
    ALGORITHM = "invert"
    VARIANTS = ("recursive", "iterative")
    STEP_TYPE = InvertStep

    def describe(self) -> str:
        return "Mirror a binary tree by swapping every node's children."

    def _trace_recursive(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; nothing to invert.")
            return

        links = _working_links(tree)
        stack: list[int] = []
        swapped: list[int] = []

        def invert(index: int | None, parent: int | None) -> None:
            if index is None:
                return
            stack.append(index)
            rec.emit(
                Action.DESCEND,
                f"Enter {tree.value(index)}; invert both subtrees first.",
                current=index,
                stack=stack,
                swapped=swapped,
                processed=swapped,
                shape=_shape(links),
            )
            left, right = links[index]
            invert(left, index)
            invert(right, index)

            _swap(links, index)
            swapped.append(index)
            rec.emit(
                Action.SWAP,
                f"Swap the left and right children of {tree.value(index)}.",
                current=index,
                stack=stack,
                swapped=swapped,
                processed=swapped,
                shape=_shape(links),
            )
            stack.pop()
            target = "the caller" if parent is None else str(tree.value(parent))
            rec.emit(
                Action.BACKTRACK,
                f"{tree.value(index)} is inverted; return to {target}.",
                current=parent,
                stack=stack,
                swapped=swapped,
                processed=swapped,
                shape=_shape(links),
            )

        invert(tree.root, None)
        rec.emit(
            Action.COMPLETE,
            f"Every node swapped; {len(swapped)} swaps in total.",
            swapped=swapped,
            processed=swapped,
            shape=_shape(links),
        )

    def _trace_iterative(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; nothing to invert.")
            return

        links = _working_links(tree)
        queue: deque[int] = deque([tree.root])
        swapped: list[int] = []
        rec.emit(
            Action.ENQUEUE,
            f"Queue the root {tree.value(tree.root)}.",
            current=tree.root,
            queue=queue,
            shape=_shape(links),
        )
        while queue:
            index = queue.popleft()
            rec.emit(
                Action.DEQUEUE,
                f"Take {tree.value(index)} from the queue.",
                current=index,
                queue=queue,
                swapped=swapped,
                processed=swapped,
                shape=_shape(links),
            )
            _swap(links, index)
            swapped.append(index)
            rec.emit(
                Action.SWAP,
                f"Swap the children of {tree.value(index)}.",
                current=index,
                queue=queue,
                swapped=swapped,
                processed=swapped,
                shape=_shape(links),
            )
            children = [child for child in links[index] if child is not None]
            if children:
                queue.extend(children)
                rec.emit(
                    Action.ENQUEUE,
                    f"Queue the children of {tree.value(index)}.",
                    current=index,
                    queue=queue,
                    swapped=swapped,
                    processed=swapped,
                    shape=_shape(links),
                )

        rec.emit(
            Action.COMPLETE,
            f"Queue is empty; {len(swapped)} nodes swapped.",
            swapped=swapped,
            processed=swapped,
            shape=_shape(links),
        )
