"""Trace data types for step-by-step algorithm replay (pure data, no business logic)."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator


class Action(str, Enum):
    # Traversal
    ENQUEUE = "enqueue"
    DEQUEUE = "dequeue"
    DESCEND = "descend"
    VISIT = "visit"
    MOVE_RIGHT = "move-right"
    BACKTRACK = "backtrack"
    LEVEL = "level"
    EVALUATE = "evaluate"
    CAPTURE = "capture"
    CHECK = "check"
    # Tree mutation / pairing
    SWAP = "swap"
    COMPARE = "compare"
    MIRROR = "mirror"
    # Arrays
    INIT = "init"
    UPDATE = "update"
    SPLIT = "split"
    BASE = "base"
    MERGE = "merge"
    PLACE = "place"
    START_CYCLE = "start-cycle"
    CYCLE_COMPLETE = "cycle-complete"
    NORMALIZE = "normalize"
    REVERSE = "reverse"
    # Linked lists
    MOVE = "move"
    COLLISION = "collision"
    RESET = "reset"
    SEEK = "seek"
    CLONE = "clone"
    PASS_COMPLETE = "pass-complete"
    LINK = "link"
    # Terminal
    COMPLETE = "complete"
    FOUND = "found"
    VIOLATION = "violation"


TERMINAL_ACTIONS: frozenset[Action] = frozenset(
    {Action.COMPLETE, Action.FOUND, Action.VIOLATION}
)


class TraceInvariantError(Exception):
    """Raised when a generator produces a trace that breaks the step contract."""

    pass


@dataclass(frozen=True)
class Step:
    """Immutable snapshot of algorithm state at one instant.

    Subclasses add the algorithm-specific fields and declare the closed
    vocabulary of actions they may carry in ``ACTIONS``.  Collections are
    stored as tuples copied at emission time, never as live references.
    """

    ACTIONS: ClassVar[frozenset[Action]] = frozenset()

    sequence: int
    action: Action
    description: str

    @property
    def is_terminal(self) -> bool:
        return self.action in TERMINAL_ACTIONS


@dataclass(frozen=True)
class Trace:
    """Complete, precomputed step sequence for one algorithm run."""

    algorithm: str
    variant: str
    steps: tuple[Step, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    @property
    def final(self) -> Step:
        return self.steps[-1]

    def actions(self) -> list[Action]:
        return [step.action for step in self.steps]

    def count(self, action: Action) -> int:
        return sum(1 for step in self.steps if step.action == action)


@dataclass
class GenerationStats:
    """Timing and size statistics for one input application."""

    algorithm: str = ""
    variant: str = ""
    structure_size: int = 0

    # Stage timings (seconds)
    normalize_time: float = 0.0
    build_time: float = 0.0
    generate_time: float = 0.0
    total_time: float = 0.0

    step_count: int = 0
    action_counts: dict[str, int] = field(default_factory=dict)

    def record_trace(self, trace: Trace) -> None:
        self.step_count = len(trace)
        self.action_counts = dict(
            Counter(step.action.value for step in trace.steps)
        )

    def report(self) -> str:
        lines = [
            "═══ Generation Statistics ═══",
            f"  Algorithm: {self.algorithm} ({self.variant}), {self.structure_size} elements",
            "",
            f"  {'Stage':<20} {'Time':>10}",
            f"  {'─' * 20} {'─' * 10}",
        ]
        stages = [
            ("Normalize input", self.normalize_time),
            ("Build structure", self.build_time),
            ("Generate trace", self.generate_time),
        ]
        for name, t in stages:
            lines.append(f"  {name:<20} {t * 1000:>8.1f}ms")
        lines.append(f"  {'─' * 20} {'─' * 10}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        lines.append("")
        lines.append(f"  Trace: {self.step_count} steps")
        for action, count in sorted(self.action_counts.items()):
            lines.append(f"    {action:<18} {count:>4}")
        return "\n".join(lines)
