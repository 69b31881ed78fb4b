"""Deep copy of a list with random pointers, using an original-to-clone map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .. import constants
from ..structures import LinkedList, build_linked_list
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class CopyStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.INIT,
            Action.CLONE,
            Action.PASS_COMPLETE,
            Action.LINK,
            Action.COMPLETE,
        }
    )

    pass_number: int = 0
    pointer: int | None = None
    clone_pointer: int | None = None
    clones_created: tuple[int, ...] = ()
    clones_linked: tuple[int, ...] = ()
    # Indexed by clone identity; None until resolved
    clone_next: tuple[int | None, ...] = ()
    clone_random: tuple[int | None, ...] = ()


class RandomCopyGenerator(TraceGenerator):
    ALGORITHM = "random_copy"
    VARIANTS = ("hash_map",)
    INPUT_KIND = constants.INPUT_RANDOM_LIST
    CEILING = constants.MAX_RANDOM_LIST_LENGTH
    INTERVAL_MS = constants.LIST_INTERVAL_MS
    STEP_TYPE = CopyStep

    def describe(self) -> str:
        return "Copy a list whose nodes also point at a random node."

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        chain = build_linked_list(
            normalized.values, random_targets=normalized.random_targets
        )
        return chain, {}

    def _trace_hash_map(self, rec: TraceRecorder, chain: LinkedList) -> None:
        if chain.is_empty:
            rec.emit(Action.COMPLETE, "The list is empty; the copy is empty too.")
            return

        count = len(chain)
        mapping: dict[int, int] = {}
        created: list[int] = []
        linked: list[int] = []
        clone_next: list[int | None] = [None] * count
        clone_random: list[int | None] = [None] * count
        rec.emit(
            Action.INIT,
            "Pass one walks the list and clones each value into a map.",
            pass_number=1,
            pointer=chain.head,
        )

        pointer = chain.head
        while pointer is not None:
            mapping[pointer] = pointer
            created.append(pointer)
            rec.emit(
                Action.CLONE,
                f"Clone node {pointer} with value {chain.values[pointer]}.",
                pass_number=1,
                pointer=pointer,
                clone_pointer=mapping[pointer],
                clones_created=created,
                clone_next=clone_next,
                clone_random=clone_random,
            )
            pointer = chain.successor(pointer)

        rec.emit(
            Action.PASS_COMPLETE,
            f"All {count} clones exist; pass two wires next and random pointers.",
            pass_number=2,
            pointer=chain.head,
            clones_created=created,
            clone_next=clone_next,
            clone_random=clone_random,
        )

        pointer = chain.head
        while pointer is not None:
            successor = chain.successor(pointer)
            target = chain.random[pointer] if chain.random else None
            clone_next[mapping[pointer]] = None if successor is None else mapping[successor]
            clone_random[mapping[pointer]] = None if target is None else mapping[target]
            linked.append(pointer)
            rec.emit(
                Action.LINK,
                f"Clone {pointer}: next -> {self._label(clone_next[pointer])}, "
                f"random -> {self._label(clone_random[pointer])}.",
                pass_number=2,
                pointer=pointer,
                clone_pointer=mapping[pointer],
                clones_created=created,
                clones_linked=linked,
                clone_next=clone_next,
                clone_random=clone_random,
            )
            pointer = successor

        rec.emit(
            Action.COMPLETE,
            "Every clone is linked; the deep copy is complete.",
            pass_number=2,
            clones_created=created,
            clones_linked=linked,
            clone_next=clone_next,
            clone_random=clone_random,
        )

    @staticmethod
    def _label(index: int | None) -> str:
        return "null" if index is None else f"clone {index}"
