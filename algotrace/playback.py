"""Playback Controller — position-based navigation over a precomputed trace.

Auto-advance is a one-shot, self-rearming timer obtained from a
``Scheduler``.  Every arm takes a fresh token; a callback whose token is
no longer current is ignored, so a timer that fires after ``attach``,
``pause`` or ``reset`` can never move the new position.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from . import constants
from .trace_types import Step, Trace

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    AT_START = "at-start"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class PlaybackConfig:
    """Groups playback timing configuration."""

    interval_ms: int = constants.DEFAULT_INTERVAL_MS
    log_limit: int = constants.PLAYBACK_LOG_LIMIT


# ── Schedulers ───────────────────────────────────────────────────


class Scheduler(ABC):
    """Runs a callback once after a delay; the returned handle cancels it."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> Any: ...

    @abstractmethod
    def cancel(self, handle: Any) -> None: ...


class AsyncioScheduler(Scheduler):
    """Schedules on an asyncio event loop (the running loop unless one is given)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


# ── Controller ───────────────────────────────────────────────────


class PlaybackController:
    """Play, pause, step and reset over the attached ``Trace``.

    The position is always a valid index into the attached trace (0 when
    nothing is attached).  Listeners are called with the controller after
    every change of position or state.
    """

    def __init__(self, scheduler: Scheduler, config: PlaybackConfig = PlaybackConfig()):
        self._scheduler = scheduler
        self._log_limit = config.log_limit
        self.interval_ms = config.interval_ms
        self._trace: Trace | None = None
        self._position = 0
        self._state = PlaybackState.AT_START
        self._handle: Any = None
        self._token = 0
        self._listeners: list[Callable[["PlaybackController"], None]] = []

    # -- read-only view -------------------------------------------------

    @property
    def trace(self) -> Trace | None:
        return self._trace

    @property
    def position(self) -> int:
        return self._position

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def length(self) -> int:
        return len(self._trace) if self._trace is not None else 0

    @property
    def current_step(self) -> Step | None:
        if self._trace is None:
            return None
        return self._trace[self._position]

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def timer_pending(self) -> bool:
        return self._handle is not None

    @property
    def progress(self) -> float:
        if self.length <= 1:
            return 1.0 if self._trace is not None else 0.0
        return self._position / (self.length - 1)

    def recent_log(self) -> list[str]:
        """Descriptions of steps reached so far, newest last, capped to the log limit."""
        if self._trace is None:
            return []
        start = max(0, self._position + 1 - self._log_limit)
        return [step.description for step in self._trace.steps[start : self._position + 1]]

    def subscribe(self, listener: Callable[["PlaybackController"], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[["PlaybackController"], None]) -> None:
        self._listeners.remove(listener)

    # -- operations -----------------------------------------------------

    def attach(self, trace: Trace) -> None:
        """Replace the trace wholesale and return to the start."""
        self._cancel_timer()
        self._trace = trace
        logger.debug("Attached %s/%s (%d steps)", trace.algorithm, trace.variant, len(trace))
        self.reset()

    def reset(self) -> None:
        self._cancel_timer()
        self._position = 0
        self._state = PlaybackState.AT_START
        self._notify()

    def play(self) -> None:
        if self._trace is None or self._state == PlaybackState.PLAYING:
            return
        if self._state == PlaybackState.FINISHED:
            self.reset()
        if self._at_last():
            self._transition(PlaybackState.FINISHED)
            return
        self._transition(PlaybackState.PLAYING)
        self._arm_timer()

    def pause(self) -> None:
        self._cancel_timer()
        if self._state == PlaybackState.PLAYING:
            self._transition(PlaybackState.PAUSED)

    def step(self) -> None:
        """Advance one step; a manual step while playing keeps the timer running."""
        if self._trace is None or self._state == PlaybackState.FINISHED:
            return
        self._advance()

    def back(self) -> None:
        """Move one step back and stop auto-advance."""
        if self._trace is None:
            return
        self._cancel_timer()
        if self._position == 0:
            self._transition(PlaybackState.AT_START)
            return
        self._position -= 1
        self._state = PlaybackState.AT_START if self._position == 0 else PlaybackState.PAUSED
        self._notify()

    def go_to_end(self) -> None:
        if self._trace is None:
            return
        self._cancel_timer()
        self._position = self.length - 1
        self._state = PlaybackState.FINISHED
        self._notify()

    def set_interval(self, interval_ms: int) -> None:
        """Change the auto-advance interval; a pending timer is re-armed with it."""
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        if self._state == PlaybackState.PLAYING:
            self._cancel_timer()
            self._arm_timer()

    # -- internals ------------------------------------------------------

    def _at_last(self) -> bool:
        return self._position >= self.length - 1

    def _advance(self) -> None:
        if not self._at_last():
            self._position += 1
        if self._at_last():
            self._cancel_timer()
            self._state = PlaybackState.FINISHED
        elif self._state == PlaybackState.AT_START:
            self._state = PlaybackState.PAUSED
        self._notify()

    def _tick(self, token: int) -> None:
        if token != self._token or self._state != PlaybackState.PLAYING:
            logger.debug("Ignoring stale playback tick %d", token)
            return
        self._handle = None
        self._advance()
        if self._state == PlaybackState.PLAYING:
            self._arm_timer()

    def _arm_timer(self) -> None:
        self._token += 1
        token = self._token
        self._handle = self._scheduler.call_later(
            self.interval_ms / 1000, lambda: self._tick(token)
        )

    def _cancel_timer(self) -> None:
        self._token += 1
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _transition(self, state: PlaybackState) -> None:
        logger.debug("Playback %s -> %s at %d", self._state.value, state.value, self._position)
        self._state = state
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
