"""Base class and step recorder shared by every trace generator."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Any

from pydantic import BaseModel

from .. import constants
from ..structures import build_tree
from ..trace_types import Action, Step, Trace, TraceInvariantError, TERMINAL_ACTIONS

logger = logging.getLogger(__name__)


def _snapshot(value: Any) -> Any:
    """Structural copy of a working collection, taken at emission time."""
    if isinstance(value, (list, tuple, deque)):
        return tuple(_snapshot(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(value)
    return value


class TraceRecorder:
    """Accumulates steps for one run and seals them into a ``Trace``.

    Owns sequence numbering: steps are numbered 1..n in emission order.
    """

    def __init__(self, step_type: type[Step], algorithm: str, variant: str):
        self.step_type = step_type
        self.algorithm = algorithm
        self.variant = variant
        self._steps: list[Step] = []

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def last(self) -> Step | None:
        return self._steps[-1] if self._steps else None

    def emit(self, action: Action, description: str, **fields: Any) -> Step:
        if action not in self.step_type.ACTIONS:
            raise TraceInvariantError(
                f"{self.step_type.__name__} does not allow action {action.value!r}"
            )
        if self._steps and self._steps[-1].is_terminal:
            raise TraceInvariantError(
                f"{self.algorithm}/{self.variant}: step after terminal "
                f"{self._steps[-1].action.value!r}"
            )
        step = self.step_type(
            sequence=len(self._steps) + 1,
            action=action,
            description=description,
            **{name: _snapshot(value) for name, value in fields.items()},
        )
        self._steps.append(step)
        return step

    def finish(self) -> Trace:
        if not self._steps:
            raise TraceInvariantError(f"{self.algorithm}/{self.variant} produced no steps")
        if not self._steps[-1].is_terminal:
            raise TraceInvariantError(
                f"{self.algorithm}/{self.variant} ended on non-terminal "
                f"{self._steps[-1].action.value!r}"
            )
        return Trace(
            algorithm=self.algorithm, variant=self.variant, steps=tuple(self._steps)
        )


class TraceGenerator(ABC):
    """One algorithm family; each variant is a ``_trace_<variant>`` method.

    Subclasses declare their input kind, size ceiling, playback interval
    and step type, and override ``build`` when the structure is not a tree.
    """

    ALGORITHM: str = ""
    VARIANTS: tuple[str, ...] = ()
    INPUT_KIND: str = constants.INPUT_TREE
    CEILING: int = constants.MAX_TREE_NODES
    INTERVAL_MS: int = constants.TREE_INTERVAL_MS
    STEP_TYPE: type[Step] = Step

    @property
    def default_variant(self) -> str:
        return self.VARIANTS[0]

    def build(self, normalized: BaseModel) -> tuple[Any, dict[str, Any]]:
        """Materialize the structure and scalar parameters for ``generate``."""
        return build_tree(normalized.values), {}

    def generate(self, structure: Any, variant: str | None = None, **params: Any) -> Trace:
        variant = variant or self.default_variant
        if variant not in self.VARIANTS:
            raise ValueError(f"Unknown variant for {self.ALGORITHM}: {variant}")
        recorder = TraceRecorder(self.STEP_TYPE, self.ALGORITHM, variant)
        self._dispatch(variant)(recorder, structure, **params)
        trace = recorder.finish()
        logger.debug("%s/%s produced %d steps", self.ALGORITHM, variant, len(trace))
        return trace

    def _dispatch(self, variant: str):
        return getattr(self, f"_trace_{variant}")

    @abstractmethod
    def describe(self) -> str:
        """One-line human description of the algorithm family."""
        ...
