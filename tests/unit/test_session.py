"""Tests for VisualizerSession: apply, reject-keeps-state and variant switching."""

import pytest

from algotrace.playback import PlaybackState, Scheduler
from algotrace.session import SessionConfig, VisualizerSession
from algotrace.trace_types import Action

TREE = {"tree": "3 9 20 null null 15 7"}


class FakeScheduler(Scheduler):
    def __init__(self):
        self.pending = {}
        self._next_handle = 0

    def call_later(self, delay, callback):
        self._next_handle += 1
        self.pending[self._next_handle] = (delay, callback)
        return self._next_handle

    def cancel(self, handle):
        self.pending.pop(handle, None)

    def fire(self):
        due = list(self.pending.values())
        self.pending.clear()
        for _, callback in due:
            callback()


def _session(**config):
    scheduler = FakeScheduler()
    return VisualizerSession(scheduler, SessionConfig(**config)), scheduler


class TestApply:
    def test_accepted_input_attaches_trace(self):
        session, _ = _session()
        result = session.apply(TREE)

        assert result.accepted
        assert result.message == ""
        assert session.trace.final.action == Action.COMPLETE
        assert session.controller.state == PlaybackState.AT_START
        assert len(session.structure) == 5

    def test_stats_are_recorded(self):
        session, _ = _session()
        result = session.apply(TREE)

        assert result.stats.step_count == len(session.trace)
        assert result.stats.structure_size == 5
        assert result.stats.total_time >= 0
        assert "Generation Statistics" in result.stats.report()

    def test_rejected_input_keeps_previous_trace_and_position(self):
        session, _ = _session()
        session.apply(TREE)
        session.controller.step()
        session.controller.step()
        previous = session.trace

        result = session.apply({"tree": "1 two 3"})

        assert not result.accepted
        assert result.error.field == "tree"
        assert "two" in result.message
        assert session.trace is previous
        assert session.controller.position == 2

    def test_rejection_before_any_trace(self):
        session, _ = _session(algorithm="rotate")
        result = session.apply({"values": "1 2 3", "k": "-1"})

        assert not result.accepted
        assert result.error.field == "k"
        assert session.trace is None

    def test_apply_while_playing_cancels_timer(self):
        session, scheduler = _session()
        session.apply(TREE)
        session.controller.play()
        (_, stale), = scheduler.pending.values()

        session.apply({"tree": "1 2 3"})
        stale()

        assert scheduler.pending == {}
        assert session.controller.position == 0
        assert session.controller.state == PlaybackState.AT_START

    def test_out_of_range_random_value_is_rejected(self):
        session, _ = _session(algorithm="random_copy")
        result = session.apply({"entries": "[[" + "9" * 400 + ", null]]"})

        assert not result.accepted
        assert result.error.field == "entries"
        assert session.trace is None

    def test_switching_algorithm_uses_its_default_variant(self):
        session, _ = _session()
        session.apply(TREE)
        session.apply({"values": "1 2 3 4", "k": "1"}, algorithm="rotate")

        assert session.algorithm == "rotate"
        assert session.variant == "extra_array"
        assert session.trace.final.array == (4, 1, 2, 3)

    def test_unknown_variant_raises(self):
        session, _ = _session()
        with pytest.raises(ValueError, match="Unknown variant"):
            session.apply(TREE, variant="sideways")

    def test_unknown_algorithm_raises(self):
        with pytest.raises(ValueError, match="Unknown algorithm"):
            _session(algorithm="bubble_sort")


class TestSelectVariant:
    def test_regenerates_from_current_structure(self):
        session, _ = _session()
        session.apply(TREE)
        session.controller.step()

        trace = session.select_variant("dfs")

        assert trace.variant == "dfs"
        assert session.trace is trace
        assert session.controller.position == 0
        assert trace.final.result == ((3,), (9, 20), (15, 7))

    def test_keeps_parameters(self):
        session, _ = _session(algorithm="kth_smallest")
        session.apply({"tree": "3 1 4 null 2", "k": "2"})

        trace = session.select_variant("recursive")

        assert trace.final.answer == 2

    def test_before_any_input(self):
        session, _ = _session()

        assert session.select_variant("dfs") is None
        assert session.variant == "dfs"

    def test_unknown_variant(self):
        session, _ = _session()
        with pytest.raises(ValueError, match="Unknown variant"):
            session.select_variant("zigzag")


class TestIntervals:
    @pytest.mark.parametrize("interval_ms", [0, -5])
    def test_non_positive_interval_is_rejected_up_front(self, interval_ms):
        with pytest.raises(ValueError, match="Interval must be positive"):
            _session(interval_ms=interval_ms)

    def test_per_algorithm_interval(self):
        session, scheduler = _session(algorithm="rotate")
        session.apply({"values": "1 2 3", "k": "1"})
        session.controller.play()

        assert session.controller.interval_ms == 1400
        assert [delay for delay, _ in scheduler.pending.values()] == [1.4]

    def test_configured_interval_overrides(self):
        session, _ = _session(algorithm="cycle_entry", interval_ms=200)
        session.apply({"values": "1 2", "pos": "0"})

        assert session.controller.interval_ms == 200

    def test_playback_runs_to_completion(self):
        session, scheduler = _session()
        session.apply(TREE)
        session.controller.play()
        while scheduler.pending:
            scheduler.fire()

        assert session.controller.state == PlaybackState.FINISHED
        assert session.controller.current_step is session.trace.final
