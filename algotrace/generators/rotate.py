"""Array rotation to the right by k: extra array, cyclic replacement, triple reversal.

All three variants work from the same normalized shift ``k mod n``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .. import constants
from ..structures import Number, build_array
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder


@dataclass(frozen=True)
class RotateStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.INIT,
            Action.PLACE,
            Action.START_CYCLE,
            Action.MOVE,
            Action.CYCLE_COMPLETE,
            Action.NORMALIZE,
            Action.REVERSE,
            Action.COMPLETE,
        }
    )

    array: tuple[Number, ...] = ()
    k: int = 0
    shift: int = 0
    index: int | None = None
    target: int | None = None
    result: tuple[Number | None, ...] = ()
    cycle_start: int | None = None
    carried: Number | None = None
    moved: int = 0
    cycles: int = 0
    section: tuple[int, int] | None = None
    pointers: tuple[int, int] | None = None


def normalize_shift(k: int, length: int) -> int:
    """``k mod n`` wrapped into ``[0, n)``; 0 for an empty array."""
    if length == 0:
        return 0
    return k % length


class RotateGenerator(TraceGenerator):
    ALGORITHM = "rotate"
    VARIANTS = ("extra_array", "cyclic", "reverse")
    INPUT_KIND = constants.INPUT_ROTATION
    CEILING = constants.MAX_ROTATE_LENGTH
    INTERVAL_MS = constants.ROTATE_INTERVAL_MS
    STEP_TYPE = RotateStep

    def describe(self) -> str:
        return "Rotate an array to the right by k positions."

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        return build_array(normalized.values), {"k": normalized.k}

    def _trace_extra_array(self, rec: TraceRecorder, values: tuple[Number, ...], k: int) -> None:
        shift = normalize_shift(k, len(values))
        result: list[Number | None] = [None] * len(values)
        rec.emit(
            Action.INIT,
            f"Allocate a result array of length {len(values)}; shift is {shift}.",
            array=values,
            k=k,
            shift=shift,
            result=result,
        )
        if shift == 0:
            rec.emit(
                Action.COMPLETE,
                "A zero shift leaves the array unchanged.",
                array=values,
                k=k,
                shift=shift,
                result=values,
            )
            return

        for i, value in enumerate(values):
            target = (i + shift) % len(values)
            result[target] = value
            rec.emit(
                Action.PLACE,
                f"Place {value} from index {i} at index {target}.",
                array=values,
                k=k,
                shift=shift,
                index=i,
                target=target,
                result=result,
            )

        rec.emit(
            Action.COMPLETE,
            "Copy the result back; rotation done.",
            array=result,
            k=k,
            shift=shift,
            result=result,
        )

    def _trace_cyclic(self, rec: TraceRecorder, values: tuple[Number, ...], k: int) -> None:
        length = len(values)
        shift = normalize_shift(k, length)
        if shift == 0:
            rec.emit(
                Action.COMPLETE,
                "A zero shift leaves the array unchanged.",
                array=values,
                k=k,
                shift=shift,
            )
            return

        array = list(values)
        moved = 0
        cycles = 0
        start = 0
        while moved < length:
            current = start
            carried = array[start]
            rec.emit(
                Action.START_CYCLE,
                f"Start a cycle at index {start}, carrying {carried}.",
                array=array,
                k=k,
                shift=shift,
                index=start,
                cycle_start=start,
                carried=carried,
                moved=moved,
                cycles=cycles,
            )
            while True:
                target = (current + shift) % length
                array[target], carried = carried, array[target]
                moved += 1
                rec.emit(
                    Action.MOVE,
                    f"Write into index {target}; now carrying {carried}.",
                    array=array,
                    k=k,
                    shift=shift,
                    index=current,
                    target=target,
                    cycle_start=start,
                    carried=carried,
                    moved=moved,
                    cycles=cycles,
                )
                current = target
                if current == start:
                    break
            cycles += 1
            rec.emit(
                Action.CYCLE_COMPLETE,
                f"Back at index {start}; {moved} of {length} elements placed.",
                array=array,
                k=k,
                shift=shift,
                cycle_start=start,
                moved=moved,
                cycles=cycles,
            )
            start += 1

        rec.emit(
            Action.COMPLETE,
            f"All elements moved in {cycles} cycle(s).",
            array=array,
            k=k,
            shift=shift,
            moved=moved,
            cycles=cycles,
        )

    def _trace_reverse(self, rec: TraceRecorder, values: tuple[Number, ...], k: int) -> None:
        length = len(values)
        shift = normalize_shift(k, length)
        rec.emit(
            Action.NORMALIZE,
            f"k = {k} reduces to a shift of {shift} for length {length}.",
            array=values,
            k=k,
            shift=shift,
        )
        if shift == 0:
            rec.emit(
                Action.COMPLETE,
                "A zero shift leaves the array unchanged.",
                array=values,
                k=k,
                shift=shift,
            )
            return

        array = list(values)
        sections = (
            ("the whole array", 0, length - 1),
            (f"the first {shift}", 0, shift - 1),
            ("the rest", shift, length - 1),
        )
        for label, low, high in sections:
            if low >= high:
                rec.emit(
                    Action.REVERSE,
                    f"Reversing {label} ({low}..{high}) needs no swaps.",
                    array=array,
                    k=k,
                    shift=shift,
                    section=(low, high),
                )
                continue
            section = (low, high)
            while low < high:
                array[low], array[high] = array[high], array[low]
                rec.emit(
                    Action.REVERSE,
                    f"Reverse {label}: swap indices {low} and {high}.",
                    array=array,
                    k=k,
                    shift=shift,
                    section=section,
                    pointers=(low, high),
                )
                low += 1
                high -= 1

        rec.emit(
            Action.COMPLETE,
            "Three reversals done; the array is rotated.",
            array=array,
            k=k,
            shift=shift,
        )
