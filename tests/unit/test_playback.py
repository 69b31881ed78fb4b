"""Tests for PlaybackController: state machine, timer arming and stale ticks."""

import asyncio

import pytest

from algotrace.generators._base import TraceRecorder
from algotrace.generators.inorder import InorderStep
from algotrace.playback import (
    AsyncioScheduler,
    PlaybackConfig,
    PlaybackController,
    PlaybackState,
    Scheduler,
)
from algotrace.trace_types import Action


class FakeScheduler(Scheduler):
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.pending: dict[int, tuple[float, object]] = {}
        self.cancelled: list[int] = []
        self._next_handle = 0

    def call_later(self, delay, callback):
        handle = self._next_handle
        self._next_handle += 1
        self.pending[handle] = (delay, callback)
        return handle

    def cancel(self, handle):
        self.pending.pop(handle, None)
        self.cancelled.append(handle)

    def fire(self):
        """Run every currently pending callback once."""
        due = list(self.pending.values())
        self.pending.clear()
        for _, callback in due:
            callback()

    @property
    def delays(self):
        return [delay for delay, _ in self.pending.values()]


def _make_trace(length, name="t"):
    rec = TraceRecorder(InorderStep, "inorder", "iterative")
    for i in range(length - 1):
        rec.emit(Action.VISIT, f"{name}{i + 1}")
    rec.emit(Action.COMPLETE, f"{name}{length}")
    return rec.finish()


def _make_controller(length=4, **config):
    scheduler = FakeScheduler()
    controller = PlaybackController(scheduler, PlaybackConfig(**config))
    controller.attach(_make_trace(length))
    return controller, scheduler


class TestInitialState:
    def test_unattached_controller(self):
        controller = PlaybackController(FakeScheduler())

        assert controller.current_step is None
        assert controller.length == 0
        assert controller.position == 0
        assert controller.state == PlaybackState.AT_START

    def test_operations_without_trace_are_no_ops(self):
        scheduler = FakeScheduler()
        controller = PlaybackController(scheduler)

        controller.play()
        controller.step()
        controller.pause()

        assert scheduler.pending == {}
        assert controller.state == PlaybackState.AT_START

    def test_attach_starts_at_zero(self):
        controller, _ = _make_controller()

        assert controller.position == 0
        assert controller.state == PlaybackState.AT_START
        assert controller.current_step.sequence == 1


class TestStep:
    def test_step_from_start_pauses(self):
        controller, _ = _make_controller()
        controller.step()

        assert controller.position == 1
        assert controller.state == PlaybackState.PAUSED

    def test_reaching_last_index_finishes(self):
        controller, _ = _make_controller(length=3)
        controller.step()
        controller.step()

        assert controller.position == 2
        assert controller.state == PlaybackState.FINISHED

    def test_step_at_end_is_idempotent(self):
        controller, _ = _make_controller(length=2)
        controller.step()
        controller.step()
        controller.step()

        assert controller.position == 1
        assert controller.state == PlaybackState.FINISHED

    def test_position_only_increases(self):
        controller, _ = _make_controller(length=5)
        positions = []
        for _ in range(8):
            controller.step()
            positions.append(controller.position)

        assert positions == sorted(positions)
        assert positions[-1] == 4

    def test_single_step_trace_finishes_on_step(self):
        controller, _ = _make_controller(length=1)
        controller.step()

        assert controller.position == 0
        assert controller.state == PlaybackState.FINISHED

    def test_manual_step_while_playing_keeps_timer(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        controller.step()

        assert controller.state == PlaybackState.PLAYING
        assert controller.position == 1
        assert len(scheduler.pending) == 1

    def test_manual_step_to_end_cancels_timer(self):
        controller, scheduler = _make_controller(length=2)
        controller.play()
        controller.step()

        assert controller.state == PlaybackState.FINISHED
        assert scheduler.pending == {}


class TestPlay:
    def test_play_arms_timer_with_interval(self):
        controller, scheduler = _make_controller(interval_ms=1500)
        controller.play()

        assert controller.state == PlaybackState.PLAYING
        assert scheduler.delays == [1.5]

    def test_tick_advances_and_rearms(self):
        controller, scheduler = _make_controller(length=4)
        controller.play()
        scheduler.fire()

        assert controller.position == 1
        assert len(scheduler.pending) == 1

    def test_plays_to_the_end(self):
        controller, scheduler = _make_controller(length=4)
        controller.play()
        for _ in range(3):
            scheduler.fire()

        assert controller.position == 3
        assert controller.state == PlaybackState.FINISHED
        assert scheduler.pending == {}

    def test_play_when_finished_restarts(self):
        controller, scheduler = _make_controller(length=2)
        controller.go_to_end()
        controller.play()

        assert controller.position == 0
        assert controller.state == PlaybackState.PLAYING
        assert len(scheduler.pending) == 1

    def test_play_twice_arms_once(self):
        controller, scheduler = _make_controller()
        controller.play()
        controller.play()

        assert len(scheduler.pending) == 1

    def test_single_step_trace_finishes_without_timer(self):
        controller, scheduler = _make_controller(length=1)
        controller.play()

        assert controller.state == PlaybackState.FINISHED
        assert scheduler.pending == {}


class TestPauseAndReset:
    def test_pause_keeps_position_and_cancels(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        scheduler.fire()
        controller.pause()

        assert controller.position == 1
        assert controller.state == PlaybackState.PAUSED
        assert scheduler.pending == {}

    def test_pause_when_not_playing_keeps_state(self):
        controller, _ = _make_controller()
        controller.pause()

        assert controller.state == PlaybackState.AT_START

    def test_reset_returns_to_start(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        scheduler.fire()
        controller.reset()

        assert controller.position == 0
        assert controller.state == PlaybackState.AT_START
        assert scheduler.pending == {}

    @pytest.mark.parametrize("advance", [0, 1, 3])
    def test_attach_always_resets(self, advance):
        controller, scheduler = _make_controller(length=4)
        controller.play()
        for _ in range(advance):
            scheduler.fire()

        controller.attach(_make_trace(6, name="new"))

        assert controller.position == 0
        assert controller.state == PlaybackState.AT_START
        assert controller.length == 6
        assert scheduler.pending == {}


class TestStaleTimers:
    def test_tick_after_pause_is_ignored(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        (_, callback), = scheduler.pending.values()
        controller.pause()

        callback()

        assert controller.position == 0

    def test_tick_after_attach_is_ignored(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        (_, callback), = scheduler.pending.values()
        controller.attach(_make_trace(3, name="new"))
        controller.play()

        callback()

        assert controller.position == 0
        assert controller.current_step.description == "new1"

    def test_tick_after_reset_and_replay_is_ignored(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        (_, stale), = scheduler.pending.values()
        controller.reset()
        controller.play()

        stale()

        assert controller.position == 0
        assert len(scheduler.pending) == 1


class TestNavigationExtras:
    def test_back_moves_one_step(self):
        controller, _ = _make_controller(length=5)
        controller.step()
        controller.step()
        controller.back()

        assert controller.position == 1
        assert controller.state == PlaybackState.PAUSED
        controller.back()
        assert controller.state == PlaybackState.AT_START

    def test_go_to_end(self):
        controller, scheduler = _make_controller(length=5)
        controller.play()
        controller.go_to_end()

        assert controller.position == 4
        assert controller.state == PlaybackState.FINISHED
        assert scheduler.pending == {}

    def test_progress(self):
        controller, _ = _make_controller(length=5)
        controller.step()
        controller.step()

        assert controller.progress == 0.5

    def test_recent_log_is_capped(self):
        controller, _ = _make_controller(length=6, log_limit=3)
        for _ in range(4):
            controller.step()

        assert controller.recent_log() == ["t3", "t4", "t5"]

    def test_set_interval_rearms_while_playing(self):
        controller, scheduler = _make_controller()
        controller.play()
        controller.set_interval(200)

        assert scheduler.delays == [0.2]

    def test_set_interval_rejects_non_positive(self):
        controller, _ = _make_controller()
        with pytest.raises(ValueError, match="positive"):
            controller.set_interval(0)

    def test_listeners_are_notified(self):
        controller, _ = _make_controller()
        seen = []
        controller.subscribe(lambda c: seen.append((c.position, c.state)))

        controller.step()
        controller.reset()

        assert seen == [(1, PlaybackState.PAUSED), (0, PlaybackState.AT_START)]


class TestAsyncioScheduler:
    def test_runs_callback_after_delay(self):
        async def scenario():
            fired = []
            AsyncioScheduler().call_later(0.01, lambda: fired.append(True))
            await asyncio.sleep(0.05)
            return fired

        assert asyncio.run(scenario()) == [True]

    def test_cancelled_callback_never_runs(self):
        async def scenario():
            fired = []
            scheduler = AsyncioScheduler()
            handle = scheduler.call_later(0.01, lambda: fired.append(True))
            scheduler.cancel(handle)
            await asyncio.sleep(0.05)
            return fired

        assert asyncio.run(scenario()) == []

    def test_controller_plays_on_event_loop(self):
        async def scenario():
            controller = PlaybackController(AsyncioScheduler(), PlaybackConfig(interval_ms=5))
            controller.attach(_make_trace(3))
            controller.play()
            for _ in range(100):
                if controller.state == PlaybackState.FINISHED:
                    break
                await asyncio.sleep(0.01)
            return controller.position, controller.state

        assert asyncio.run(scenario()) == (2, PlaybackState.FINISHED)
