"""Tests for the maximum-subarray and rotation trace generators."""

import math

import pytest

from algotrace.generators import get_generator
from algotrace.generators.rotate import normalize_shift
from algotrace.trace_types import Action

KADANE_SAMPLE = (-2, 1, -3, 4, -1, 2, 1, -5, 4)


def _trace(algorithm, values, variant=None, **params):
    return get_generator(algorithm).generate(tuple(values), variant, **params)


class TestKadane:
    def test_best_sum_and_range(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "kadane")

        assert trace.final.action == Action.COMPLETE
        assert trace.final.best_sum == 6
        assert trace.final.best_range == (3, 6)

    def test_one_evaluate_per_index(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "kadane")
        indices = [s.index for s in trace if s.action == Action.EVALUATE]

        assert indices == list(range(len(KADANE_SAMPLE)))

    def test_update_only_on_new_best(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "kadane")
        updates = [(s.index, s.best_sum) for s in trace if s.action == Action.UPDATE]

        assert updates == [(1, 1), (3, 4), (5, 5), (6, 6)]

    def test_update_follows_its_evaluate(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "kadane")
        for position, step in enumerate(trace.steps):
            if step.action == Action.UPDATE:
                previous = trace[position - 1]
                assert previous.action == Action.EVALUATE
                assert previous.index == step.index

    def test_restart_flag(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "kadane")
        evaluates = [s for s in trace if s.action == Action.EVALUATE]

        assert evaluates[3].restarted is True
        assert evaluates[3].previous_sum == -2
        assert evaluates[4].restarted is False
        assert evaluates[4].current_sum == 3

    def test_first_evaluate_starts_without_restart(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "kadane")
        first = trace[0]

        assert first.action == Action.EVALUATE
        assert first.restarted is False
        assert first.previous_sum == first.current_sum == -2

    def test_all_negative(self):
        trace = _trace("max_subarray", (-3, -1, -2), "kadane")

        assert trace.final.best_sum == -1
        assert trace.final.best_range == (1, 1)


class TestDivideAndConquer:
    def test_best_sum(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "divide")

        assert trace.final.best_sum == 6
        assert trace.final.best_range == (3, 6)

    def test_step_counts(self):
        trace = _trace("max_subarray", KADANE_SAMPLE, "divide")

        assert trace.count(Action.BASE) == 9
        assert trace.count(Action.SPLIT) == 8
        assert trace.count(Action.MERGE) == 8

    def test_merge_carries_both_halves_and_cross(self):
        trace = _trace("max_subarray", (2, -1, 3), "divide")
        merge = [s for s in trace if s.action == Action.MERGE][-1]

        assert merge.left_result.best_sum == 2
        assert merge.right_result.best_sum == 3
        assert merge.cross_sum == 4
        assert merge.best_source == "cross"
        assert merge.best_range == (0, 2)

    def test_ties_prefer_left(self):
        trace = _trace("max_subarray", (1, -5, 1), "divide")
        merge = [s for s in trace if s.action == Action.MERGE][-1]

        assert merge.best_source == "left"
        assert trace.final.best_range == (0, 0)

    def test_single_element(self):
        trace = _trace("max_subarray", (7,), "divide")

        assert trace.actions() == [Action.BASE, Action.COMPLETE]
        assert trace.final.best_sum == 7


class TestRotate:
    @pytest.mark.parametrize("variant", ["extra_array", "cyclic", "reverse"])
    def test_rotates_right_by_three(self, variant):
        trace = _trace("rotate", (1, 2, 3, 4, 5, 6, 7), variant, k=3)

        assert trace.final.action == Action.COMPLETE
        assert trace.final.array == (5, 6, 7, 1, 2, 3, 4)

    @pytest.mark.parametrize("variant", ["extra_array", "cyclic", "reverse"])
    def test_large_k_is_reduced(self, variant):
        trace = _trace("rotate", (1, 2, 3, 4, 5, 6, 7), variant, k=10)

        assert trace.final.shift == 3
        assert trace.final.array == (5, 6, 7, 1, 2, 3, 4)

    def test_negative_k_wraps(self):
        assert normalize_shift(-1, 7) == 6
        assert normalize_shift(3, 0) == 0

    def test_extra_array_places_every_element(self):
        trace = _trace("rotate", (1, 2, 3, 4), "extra_array", k=1)
        targets = [(s.index, s.target) for s in trace if s.action == Action.PLACE]

        assert targets == [(0, 1), (1, 2), (2, 3), (3, 0)]

    def test_zero_shift_short_traces(self):
        values = (1, 2, 3)
        assert _trace("rotate", values, "extra_array", k=3).actions() == [
            Action.INIT,
            Action.COMPLETE,
        ]
        assert _trace("rotate", values, "cyclic", k=0).actions() == [Action.COMPLETE]
        assert _trace("rotate", values, "reverse", k=6).actions() == [
            Action.NORMALIZE,
            Action.COMPLETE,
        ]

    @pytest.mark.parametrize("length, k", [(6, 2), (6, 4), (7, 3), (8, 6), (9, 3)])
    def test_cyclic_uses_gcd_cycles(self, length, k):
        values = tuple(range(length))
        trace = _trace("rotate", values, "cyclic", k=k)

        assert trace.count(Action.START_CYCLE) == math.gcd(length, k)
        assert trace.count(Action.MOVE) == length
        assert trace.final.moved == length

    def test_cyclic_two_cycles(self):
        trace = _trace("rotate", (1, 2, 3, 4, 5, 6), "cyclic", k=2)

        assert trace.final.array == (5, 6, 1, 2, 3, 4)
        assert trace.final.cycles == 2

    def test_reverse_sections(self):
        trace = _trace("rotate", (1, 2, 3, 4, 5, 6, 7), "reverse", k=3)
        sections = []
        for step in trace:
            if step.action == Action.REVERSE and step.section not in sections:
                sections.append(step.section)

        assert sections == [(0, 6), (0, 2), (3, 6)]

    def test_reverse_emits_no_swap_step_for_single_element_section(self):
        trace = _trace("rotate", (1, 2), "reverse", k=1)

        assert trace.count(Action.REVERSE) == 3
        assert trace.final.array == (2, 1)
