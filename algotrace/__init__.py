"""Deterministic, replayable algorithm traces with a playback controller."""

from .session import VisualizerSession, SessionConfig, ApplyResult  # noqa: F401
from .playback import (  # noqa: F401
    PlaybackController,
    PlaybackConfig,
    PlaybackState,
    AsyncioScheduler,
    Scheduler,
)
from .generators import get_generator, list_algorithms  # noqa: F401
from .normalizer import InputValidationError  # noqa: F401
from .trace_types import Action, Step, Trace, TraceInvariantError  # noqa: F401
