"""Linked-list cycle entry detection with Floyd's two-phase pointer walk."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .. import constants
from ..structures import LinkedList, build_linked_list
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class CycleStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.INIT,
            Action.MOVE,
            Action.COLLISION,
            Action.RESET,
            Action.SEEK,
            Action.FOUND,
            Action.COMPLETE,
        }
    )

    phase: int = 1
    slow: int | None = None
    fast: int | None = None
    finder: int | None = None
    previous_slow: int | None = None
    previous_fast: int | None = None
    previous_finder: int | None = None
    fast_mid: int | None = None
    slow_visited: tuple[int, ...] = ()
    fast_visited: tuple[int, ...] = ()
    finder_visited: tuple[int, ...] = ()
    links: tuple[int | None, ...] = ()
    cycle_entry: int | None = None
    has_cycle: bool | None = None
    iteration: int = 0
    entry_iteration: int = 0


class CycleEntryGenerator(TraceGenerator):
    ALGORITHM = "cycle_entry"
    VARIANTS = ("floyd",)
    INPUT_KIND = constants.INPUT_CYCLE_LIST
    CEILING = constants.MAX_CYCLE_LIST_LENGTH
    INTERVAL_MS = constants.CYCLE_INTERVAL_MS
    STEP_TYPE = CycleStep

    def describe(self) -> str:
        return "Find the node where a linked list's cycle begins."

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        return build_linked_list(normalized.values, cycle_pos=normalized.pos), {}

    def _trace_floyd(self, rec: TraceRecorder, chain: LinkedList) -> None:
        if chain.is_empty:
            rec.emit(
                Action.COMPLETE,
                "The list is empty, so it has no cycle.",
                has_cycle=False,
            )
            return

        max_iterations = max(1, len(chain) * constants.CYCLE_ITERATION_FACTOR)
        slow = fast = chain.head
        slow_visited: list[int] = [slow]
        fast_visited: list[int] = [fast]
        rec.emit(
            Action.INIT,
            "Slow and fast both start at the head.",
            slow=slow,
            fast=fast,
            slow_visited=slow_visited,
            fast_visited=fast_visited,
            links=chain.next,
        )

        met = False
        iteration = 0
        while iteration < max_iterations:
            if fast is None or chain.successor(fast) is None:
                break
            iteration += 1
            previous_slow, previous_fast = slow, fast
            slow = chain.successor(slow)
            fast_mid = chain.successor(fast)
            fast = chain.successor(fast_mid)
            slow_visited.append(slow)
            fast_visited.append(fast_mid)
            if fast is not None:
                fast_visited.append(fast)
            rec.emit(
                Action.MOVE,
                f"Slow moves one node to {self._label(chain, slow)}; "
                f"fast moves two nodes to {self._label(chain, fast)}.",
                slow=slow,
                fast=fast,
                previous_slow=previous_slow,
                previous_fast=previous_fast,
                fast_mid=fast_mid,
                slow_visited=slow_visited,
                fast_visited=fast_visited,
                links=chain.next,
                iteration=iteration,
            )
            if slow == fast:
                met = True
                rec.emit(
                    Action.COLLISION,
                    f"Slow and fast meet at node {slow}; a cycle exists.",
                    slow=slow,
                    fast=fast,
                    slow_visited=slow_visited,
                    fast_visited=fast_visited,
                    links=chain.next,
                    has_cycle=True,
                    iteration=iteration,
                )
                break

        if not met:
            rec.emit(
                Action.COMPLETE,
                "Fast reached the end of the list; there is no cycle.",
                slow=slow,
                fast=fast,
                slow_visited=slow_visited,
                fast_visited=fast_visited,
                links=chain.next,
                has_cycle=False,
                iteration=iteration,
            )
            return

        finder = chain.head
        finder_visited: list[int] = [finder]
        rec.emit(
            Action.RESET,
            "Phase two: a finder starts at the head while slow stays at the meeting point.",
            phase=2,
            slow=slow,
            finder=finder,
            slow_visited=slow_visited,
            fast_visited=fast_visited,
            finder_visited=finder_visited,
            links=chain.next,
            has_cycle=True,
            iteration=iteration,
        )
        entry_iteration = 0
        while finder != slow and entry_iteration < max_iterations:
            entry_iteration += 1
            previous_slow, previous_finder = slow, finder
            slow = chain.successor(slow)
            finder = chain.successor(finder)
            slow_visited.append(slow)
            finder_visited.append(finder)
            rec.emit(
                Action.SEEK,
                f"Both advance one node: finder to {finder}, slow to {slow}.",
                phase=2,
                slow=slow,
                finder=finder,
                previous_slow=previous_slow,
                previous_finder=previous_finder,
                slow_visited=slow_visited,
                fast_visited=fast_visited,
                finder_visited=finder_visited,
                links=chain.next,
                has_cycle=True,
                iteration=iteration,
                entry_iteration=entry_iteration,
            )

        if finder != slow:
            rec.emit(
                Action.COMPLETE,
                "Iteration cap reached before the pointers met.",
                phase=2,
                slow=slow,
                finder=finder,
                links=chain.next,
                has_cycle=True,
                iteration=iteration,
                entry_iteration=entry_iteration,
            )
            return

        rec.emit(
            Action.FOUND,
            f"Finder and slow meet at node {finder} (value {chain.values[finder]}); "
            "that is the cycle entry.",
            phase=2,
            slow=slow,
            finder=finder,
            slow_visited=slow_visited,
            fast_visited=fast_visited,
            finder_visited=finder_visited,
            links=chain.next,
            cycle_entry=finder,
            has_cycle=True,
            iteration=iteration,
            entry_iteration=entry_iteration,
        )

    @staticmethod
    def _label(chain: LinkedList, index: int | None) -> str:
        return "null" if index is None else f"node {index} ({chain.values[index]})"
