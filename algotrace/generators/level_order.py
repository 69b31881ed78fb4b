"""Level-order traversal: breadth-first queue vs. depth-first recursion by level."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import ClassVar

from .. import constants
from ..structures import BinaryTree, Number
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class LevelOrderStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.ENQUEUE,
            Action.DEQUEUE,
            Action.DESCEND,
            Action.VISIT,
            Action.BACKTRACK,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    level: int | None = None
    queue: tuple[int, ...] = ()
    stack: tuple[int, ...] = ()
    visited: tuple[int, ...] = ()
    result: tuple[tuple[Number, ...], ...] = ()


def _record_value(result: list[list[Number]], level: int, value: Number) -> None:
    while len(result) <= level:
        result.append([])
    result[level].append(value)


class LevelOrderGenerator(TraceGenerator):
    ALGORITHM = "level_order"
    VARIANTS = ("bfs", "dfs")
    CEILING = constants.MAX_LEVEL_ORDER_NODES
    STEP_TYPE = LevelOrderStep

    def describe(self) -> str:
        return "Group tree values by depth, one row per level."

    def _trace_bfs(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; the result is [].")
            return

        queue: deque[tuple[int, int]] = deque([(tree.root, 0)])
        visited: list[int] = []
        result: list[list[Number]] = []

        def queued() -> list[int]:
            return [index for index, _ in queue]

        rec.emit(
            Action.ENQUEUE,
            f"Enqueue the root {tree.value(tree.root)} to start level 0.",
            current=tree.root,
            level=0,
            queue=queued(),
        )
        while queue:
            index, level = queue.popleft()
            rec.emit(
                Action.DEQUEUE,
                f"Dequeue node {tree.value(index)} from level {level}.",
                current=index,
                level=level,
                queue=queued(),
                visited=visited,
                result=result,
            )
            _record_value(result, level, tree.value(index))
            visited.append(index)
            rec.emit(
                Action.VISIT,
                f"Append {tree.value(index)} to row {level}.",
                current=index,
                level=level,
                queue=queued(),
                visited=visited,
                result=result,
            )
            children = tree.children(index)
            if children:
                queue.extend((child, level + 1) for child in children)
                rec.emit(
                    Action.ENQUEUE,
                    f"Enqueue the children of {tree.value(index)} for level {level + 1}.",
                    current=index,
                    level=level,
                    queue=queued(),
                    visited=visited,
                    result=result,
                )

        rec.emit(
            Action.COMPLETE,
            f"Queue is empty; {len(result)} levels collected.",
            visited=visited,
            result=result,
        )

    def _trace_dfs(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; the result is [].")
            return

        stack: list[int] = []
        visited: list[int] = []
        result: list[list[Number]] = []

        def traverse(index: int | None, level: int) -> None:
            if index is None:
                return
            stack.append(index)
            rec.emit(
                Action.DESCEND,
                f"Enter node {tree.value(index)} at depth {level}.",
                current=index,
                level=level,
                stack=stack,
                visited=visited,
                result=result,
            )
            _record_value(result, level, tree.value(index))
            visited.append(index)
            rec.emit(
                Action.VISIT,
                f"Append {tree.value(index)} to row {level}.",
                current=index,
                level=level,
                stack=stack,
                visited=visited,
                result=result,
            )
            traverse(tree.left(index), level + 1)
            traverse(tree.right(index), level + 1)
            stack.pop()
            if stack:
                rec.emit(
                    Action.BACKTRACK,
                    f"Node {tree.value(index)} is done; return to {tree.value(stack[-1])}.",
                    current=stack[-1],
                    level=level - 1,
                    stack=stack,
                    visited=visited,
                    result=result,
                )

        traverse(tree.root, 0)
        rec.emit(
            Action.COMPLETE,
            f"Recursion finished; {len(result)} levels collected.",
            visited=visited,
            result=result,
        )
