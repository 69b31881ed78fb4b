"""Right-side view: last node of each level (BFS) or first node at each depth (DFS).

Results are tracked by node identity so duplicate values never collide.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import ClassVar

from ..structures import BinaryTree
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class RightViewStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.ENQUEUE,
            Action.LEVEL,
            Action.DESCEND,
            Action.VISIT,
            Action.CAPTURE,
            Action.COMPLETE,
        }
    )

    current: int | None = None
    depth: int | None = None
    queue: tuple[int, ...] = ()
    stack: tuple[int, ...] = ()
    level_nodes: tuple[int, ...] = ()
    visited: tuple[int, ...] = ()
    view: tuple[int, ...] = ()


class RightViewGenerator(TraceGenerator):
    ALGORITHM = "right_view"
    VARIANTS = ("bfs", "dfs")
    STEP_TYPE = RightViewStep

    def describe(self) -> str:
        return "Nodes visible when looking at the tree from the right."

    def _trace_bfs(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; nothing is visible.")
            return

        queue: deque[int] = deque([tree.root])
        visited: list[int] = []
        view: list[int] = []
        rec.emit(
            Action.ENQUEUE,
            f"Queue the root {tree.value(tree.root)}.",
            current=tree.root,
            depth=0,
            queue=queue,
        )
        depth = 0
        while queue:
            level_nodes = list(queue)
            rec.emit(
                Action.LEVEL,
                f"Level {depth} has {len(level_nodes)} nodes; the last one is visible.",
                depth=depth,
                queue=queue,
                level_nodes=level_nodes,
                visited=visited,
                view=view,
            )
            for position, index in enumerate(level_nodes):
                queue.popleft()
                queue.extend(tree.children(index))
                visited.append(index)
                if position == len(level_nodes) - 1:
                    view.append(index)
                    rec.emit(
                        Action.CAPTURE,
                        f"{tree.value(index)} is last on level {depth}; add it to the view.",
                        current=index,
                        depth=depth,
                        queue=queue,
                        level_nodes=level_nodes,
                        visited=visited,
                        view=view,
                    )
                else:
                    rec.emit(
                        Action.VISIT,
                        f"{tree.value(index)} is hidden by a node to its right.",
                        current=index,
                        depth=depth,
                        queue=queue,
                        level_nodes=level_nodes,
                        visited=visited,
                        view=view,
                    )
            depth += 1

        rec.emit(
            Action.COMPLETE,
            f"All levels done; {len(view)} nodes are visible.",
            visited=visited,
            view=view,
        )

    def _trace_dfs(self, rec: TraceRecorder, tree: BinaryTree) -> None:
        if tree.is_empty:
            rec.emit(Action.COMPLETE, "The tree is empty; nothing is visible.")
            return

        stack: list[int] = []
        visited: list[int] = []
        view: list[int] = []
        rec.emit(
            Action.DESCEND,
            "Walk right before left; the first node seen at each depth is visible.",
            current=tree.root,
            depth=0,
        )

        def walk(index: int | None, depth: int) -> None:
            if index is None:
                return
            stack.append(index)
            visited.append(index)
            if depth == len(view):
                view.append(index)
                rec.emit(
                    Action.CAPTURE,
                    f"Depth {depth} reached for the first time; {tree.value(index)} is visible.",
                    current=index,
                    depth=depth,
                    stack=stack,
                    visited=visited,
                    view=view,
                )
            else:
                rec.emit(
                    Action.VISIT,
                    f"Depth {depth} already has a visible node; {tree.value(index)} is hidden.",
                    current=index,
                    depth=depth,
                    stack=stack,
                    visited=visited,
                    view=view,
                )
            walk(tree.right(index), depth + 1)
            walk(tree.left(index), depth + 1)
            stack.pop()

        walk(tree.root, 0)
        rec.emit(
            Action.COMPLETE,
            f"Traversal finished; {len(view)} nodes are visible.",
            visited=visited,
            view=view,
        )
