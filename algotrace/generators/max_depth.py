"""Maximum depth of a binary tree: post-order recursion vs. level counting."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import ClassVar

from ..structures import BinaryTree
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class DepthStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.DESCEND,
            Action.EVALUATE,
            Action.LEVEL,
            Action.DEQUEUE,
            Action.ENQUEUE,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    depth: int = 0
    max_depth: int = 0
    stack: tuple[int, ...] = ()
    queue: tuple[int, ...] = ()
    visited: tuple[int, ...] = ()


class MaxDepthGenerator(TraceGenerator):
    ALGORITHM = "max_depth"
    VARIANTS = ("dfs", "bfs")
    STEP_TYPE = DepthStep

    def describe(self) -> str:
        return "Number of nodes on the longest root-to-leaf path."

    def _trace_dfs(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; its depth is 0.")
            return

        visited: list[int] = []
        best = 0

        def traverse(index: int | None, path: list[int]) -> int:
            nonlocal best
            if index is None:
                return 0
            path = path + [index]
            rec.emit(
                Action.DESCEND,
                f"Enter {tree.value(index)}; the path now has {len(path)} nodes.",
                current=index,
                depth=len(path),
                max_depth=best,
                stack=path,
                visited=visited,
            )
            left_depth = traverse(tree.left(index), path)
            right_depth = traverse(tree.right(index), path)
            depth = max(left_depth, right_depth) + 1
            best = max(best, depth)
            visited.append(index)
            rec.emit(
                Action.EVALUATE,
                f"Deeper child subtree has depth {depth - 1}; "
                f"{tree.value(index)} has depth {depth}.",
                current=index,
                depth=depth,
                max_depth=best,
                stack=path[:-1],
                visited=visited,
            )
            return depth

        depth = traverse(tree.root, [])
        rec.emit(
            Action.COMPLETE,
            f"Recursion finished; the maximum depth is {depth}.",
            depth=depth,
            max_depth=depth,
            visited=visited,
        )

    def _trace_bfs(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; its depth is 0.")
            return

        queue: deque[int] = deque([tree.root])
        visited: list[int] = []
        depth = 0
        while queue:
            width = len(queue)
            depth += 1
            rec.emit(
                Action.LEVEL,
                f"Level {depth} holds {width} nodes; depth is at least {depth}.",
                current=queue[0],
                depth=depth,
                max_depth=depth,
                queue=queue,
                visited=visited,
            )
            for _ in range(width):
                index = queue.popleft()
                visited.append(index)
                rec.emit(
                    Action.DEQUEUE,
                    f"Process {tree.value(index)}.",
                    current=index,
                    depth=depth,
                    max_depth=depth,
                    queue=queue,
                    visited=visited,
                )
                children = tree.children(index)
                if children:
                    queue.extend(children)
                    rec.emit(
                        Action.ENQUEUE,
                        f"Children of {tree.value(index)} join the queue.",
                        current=index,
                        depth=depth,
                        max_depth=depth,
                        queue=queue,
                        visited=visited,
                    )

        rec.emit(
            Action.COMPLETE,
            f"All levels processed; the maximum depth is {depth}.",
            depth=depth,
            max_depth=depth,
            visited=visited,
        )
