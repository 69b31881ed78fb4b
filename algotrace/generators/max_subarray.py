"""Maximum subarray: Kadane's running window and divide-and-conquer merging."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .. import constants
from ..structures import Number, build_array
from ..trace_types import Action, Step
from ._base import TraceGenerator, TraceRecorder

Range = tuple[int, int]


@dataclass(frozen=True)
class SegmentResult:
    """Summary of one segment, enough to merge it with a neighbour."""

    total: Number
    prefix_sum: Number
    prefix_range: Range
    suffix_sum: Number
    suffix_range: Range
    best_sum: Number
    best_range: Range


@dataclass(frozen=True)
class SubarrayStep(Step):
    ACTIONS: ClassVar[frozenset[Action]] = frozenset(
        {
            Action.EVALUATE,
            Action.UPDATE,
            Action.SPLIT,
            Action.BASE,
            Action.MERGE,
            Action.COMPLETE,
        }
    )

    # Kadane
    index: int | None = None
    previous_sum: Number | None = None
    current_sum: Number | None = None
    window: Range | None = None
    restarted: bool | None = None
    # Shared
    best_sum: Number | None = None
    best_range: Range | None = None
    # Divide and conquer
    segment: Range | None = None
    mid: int | None = None
    frames: tuple[Range, ...] = ()
    left_result: SegmentResult | None = None
    right_result: SegmentResult | None = None
    cross_sum: Number | None = None
    cross_range: Range | None = None
    best_source: str | None = None


class MaxSubarrayGenerator(TraceGenerator):
    ALGORITHM = "max_subarray"
    VARIANTS = ("kadane", "divide")
    INPUT_KIND = constants.INPUT_ARRAY
    CEILING = constants.MAX_SUBARRAY_LENGTH
    STEP_TYPE = SubarrayStep

    def describe(self) -> str:
        return "Largest sum over all contiguous, non-empty subarrays."

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        return build_array(normalized.values), {}

    def _trace_kadane(self, rec: TraceRecorder, values: tuple[Number, ...]) -> None:
        if not values:
            rec.emit(Action.COMPLETE, "No numbers; there is no subarray.")
            return

        current = best = values[0]
        start = 0
        best_range: Range = (0, 0)
        rec.emit(
            Action.EVALUATE,
            f"Start the window at index 0 with sum {current}.",
            index=0,
            current_sum=current,
            previous_sum=current,
            window=(0, 0),
            restarted=False,
            best_sum=best,
            best_range=best_range,
        )
        for i in range(1, len(values)):
            value = values[i]
            previous = current
            extend = current + value
            restarted = value >= extend
            if restarted:
                current = value
                start = i
                note = f"{value} alone beats extending ({extend}); restart the window at {i}."
            else:
                current = extend
                note = f"Extend the window with {value}; running sum {previous} -> {current}."
            rec.emit(
                Action.EVALUATE,
                note,
                index=i,
                previous_sum=previous,
                current_sum=current,
                window=(start, i),
                restarted=restarted,
                best_sum=best,
                best_range=best_range,
            )
            if current > best:
                best = current
                best_range = (start, i)
                rec.emit(
                    Action.UPDATE,
                    f"New best sum {best} over indices {start}..{i}.",
                    index=i,
                    current_sum=current,
                    window=(start, i),
                    best_sum=best,
                    best_range=best_range,
                )

        rec.emit(
            Action.COMPLETE,
            f"Maximum subarray sum is {best} over indices {best_range[0]}..{best_range[1]}.",
            best_sum=best,
            best_range=best_range,
        )

    def _trace_divide(self, rec: TraceRecorder, values: tuple[Number, ...]) -> None:
        if not values:
            rec.emit(Action.COMPLETE, "No numbers; there is no subarray.")
            return

        frames: list[Range] = []

        def solve(low: int, high: int) -> SegmentResult:
            frames.append((low, high))
            if low == high:
                value = values[low]
                result = SegmentResult(
                    total=value,
                    prefix_sum=value,
                    prefix_range=(low, low),
                    suffix_sum=value,
                    suffix_range=(low, low),
                    best_sum=value,
                    best_range=(low, low),
                )
                rec.emit(
                    Action.BASE,
                    f"Single element {value} at index {low} is its own answer.",
                    segment=(low, high),
                    frames=frames,
                    best_sum=value,
                    best_range=(low, low),
                )
                frames.pop()
                return result

            mid = (low + high) // 2
            rec.emit(
                Action.SPLIT,
                f"Split {low}..{high} into {low}..{mid} and {mid + 1}..{high}.",
                segment=(low, high),
                mid=mid,
                frames=frames,
            )
            left = solve(low, mid)
            right = solve(mid + 1, high)
            result, cross_sum, cross_range, source = self._merge(left, right, low, high)
            rec.emit(
                Action.MERGE,
                f"Merge {low}..{high}: left {left.best_sum}, right {right.best_sum}, "
                f"cross {cross_sum}; keep the {source} result {result.best_sum}.",
                segment=(low, high),
                mid=mid,
                frames=frames,
                left_result=left,
                right_result=right,
                cross_sum=cross_sum,
                cross_range=cross_range,
                best_source=source,
                best_sum=result.best_sum,
                best_range=result.best_range,
            )
            frames.pop()
            return result

        answer = solve(0, len(values) - 1)
        rec.emit(
            Action.COMPLETE,
            f"Maximum subarray sum is {answer.best_sum} over indices "
            f"{answer.best_range[0]}..{answer.best_range[1]}.",
            best_sum=answer.best_sum,
            best_range=answer.best_range,
        )

    @staticmethod
    def _merge(
        left: SegmentResult, right: SegmentResult, low: int, high: int
    ) -> tuple[SegmentResult, Number, Range, str]:
        extended_prefix = left.total + right.prefix_sum
        if left.prefix_sum >= extended_prefix:
            prefix_sum, prefix_range = left.prefix_sum, left.prefix_range
        else:
            prefix_sum, prefix_range = extended_prefix, (low, right.prefix_range[1])

        extended_suffix = right.total + left.suffix_sum
        if right.suffix_sum >= extended_suffix:
            suffix_sum, suffix_range = right.suffix_sum, right.suffix_range
        else:
            suffix_sum, suffix_range = extended_suffix, (left.suffix_range[0], high)

        cross_sum = left.suffix_sum + right.prefix_sum
        cross_range = (left.suffix_range[0], right.prefix_range[1])

        best_sum, best_range, source = left.best_sum, left.best_range, "left"
        if right.best_sum > best_sum:
            best_sum, best_range, source = right.best_sum, right.best_range, "right"
        if cross_sum > best_sum:
            best_sum, best_range, source = cross_sum, cross_range, "cross"

        merged = SegmentResult(
            total=left.total + right.total,
            prefix_sum=prefix_sum,
            prefix_range=prefix_range,
            suffix_sum=suffix_sum,
            suffix_range=suffix_range,
            best_sum=best_sum,
            best_range=best_range,
        )
        return merged, cross_sum, cross_range, source
