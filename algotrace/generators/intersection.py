"""Intersection of two linked lists by synchronized pointer switch-over."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .. import constants
from ..structures import IntersectingLists, build_intersecting_lists
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class IntersectionStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {Action.INIT, Action.MOVE, Action.FOUND, Action.COMPLETE}
    )

    pointer_a: int | None = None
    pointer_b: int | None = None
    previous_a: int | None = None
    previous_b: int | None = None
    switched_a: bool = False
    switched_b: bool = False
    visited_a: tuple[int, ...] = ()
    visited_b: tuple[int, ...] = ()
    intersection: int | None = None
    iteration: int = 0


class IntersectionGenerator(TraceGenerator):
    ALGORITHM = "intersection"
    VARIANTS = ("two_pointer",)
    INPUT_KIND = constants.INPUT_INTERSECTION
    CEILING = constants.MAX_INTERSECTION_LIST_LENGTH
    INTERVAL_MS = constants.LIST_INTERVAL_MS
    STEP_TYPE = IntersectionStep

    def describe(self) -> str:
        return "Find the first node shared by two linked lists."

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        lists = build_intersecting_lists(
            normalized.list_a,
            normalized.list_b,
            normalized.join_a if normalized.has_join else None,
            normalized.join_b if normalized.has_join else None,
        )
        return lists, {}

    def _trace_two_pointer(self, rec: TraceRecorder, lists: IntersectingLists) -> None:
        pointer_a, pointer_b = lists.head_a, lists.head_b
        visited_a: list[int] = [pointer_a]
        visited_b: list[int] = [pointer_b]
        rec.emit(
            Action.INIT,
            "Pointer A starts at head A, pointer B at head B.",
            pointer_a=pointer_a,
            pointer_b=pointer_b,
            visited_a=visited_a,
            visited_b=visited_b,
        )
        if pointer_a == pointer_b:
            rec.emit(
                Action.FOUND,
                f"Both heads are the same node {pointer_a}; the lists intersect there.",
                pointer_a=pointer_a,
                pointer_b=pointer_b,
                visited_a=visited_a,
                visited_b=visited_b,
                intersection=pointer_a,
            )
            return

        switched_a = switched_b = False
        cap = len(lists) * constants.INTERSECTION_ITERATION_FACTOR
        cap += constants.INTERSECTION_ITERATION_SLACK
        for iteration in range(1, cap + 1):
            previous_a, previous_b = pointer_a, pointer_b
            if pointer_a is None:
                pointer_a, switched_a = lists.head_b, True
            else:
                pointer_a = lists.successor(pointer_a)
            if pointer_b is None:
                pointer_b, switched_b = lists.head_a, True
            else:
                pointer_b = lists.successor(pointer_b)
            if pointer_a is not None:
                visited_a.append(pointer_a)
            if pointer_b is not None:
                visited_b.append(pointer_b)
            rec.emit(
                Action.MOVE,
                f"A moves to {self._label(lists, pointer_a)}, "
                f"B moves to {self._label(lists, pointer_b)}.",
                pointer_a=pointer_a,
                pointer_b=pointer_b,
                previous_a=previous_a,
                previous_b=previous_b,
                switched_a=switched_a,
                switched_b=switched_b,
                visited_a=visited_a,
                visited_b=visited_b,
                iteration=iteration,
            )
            if pointer_a == pointer_b:
                if pointer_a is None:
                    rec.emit(
                        Action.COMPLETE,
                        "Both pointers reached null together; the lists do not intersect.",
                        switched_a=switched_a,
                        switched_b=switched_b,
                        visited_a=visited_a,
                        visited_b=visited_b,
                        iteration=iteration,
                    )
                else:
                    rec.emit(
                        Action.FOUND,
                        f"Both pointers meet at node {pointer_a} "
                        f"(value {lists.values[pointer_a]}); that is the intersection.",
                        pointer_a=pointer_a,
                        pointer_b=pointer_b,
                        switched_a=switched_a,
                        switched_b=switched_b,
                        visited_a=visited_a,
                        visited_b=visited_b,
                        intersection=pointer_a,
                        iteration=iteration,
                    )
                return

        rec.emit(
            Action.COMPLETE,
            "Iteration cap reached without a meeting point.",
            pointer_a=pointer_a,
            pointer_b=pointer_b,
            visited_a=visited_a,
            visited_b=visited_b,
            iteration=cap,
        )

    @staticmethod
    def _label(lists: IntersectingLists, index: int | None) -> str:
        return "null" if index is None else f"node {index} ({lists.values[index]})"
