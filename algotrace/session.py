"""Orchestrator — normalize, build, generate, then hand the trace to playback."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

from . import constants
from .generators import TraceGenerator, get_generator
from .normalizer import InputValidationError, normalize
from .playback import PlaybackConfig, PlaybackController, Scheduler
from .trace_types import GenerationStats, Trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """Groups session configuration.

    ``interval_ms`` overrides the per-algorithm playback interval when set.
    """

    algorithm: str = "level_order"
    variant: str | None = None
    interval_ms: int | None = None
    log_limit: int = constants.PLAYBACK_LOG_LIMIT


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of applying raw input; a rejection carries the field-level error."""

    accepted: bool
    error: InputValidationError | None = None
    stats: GenerationStats | None = None

    @property
    def message(self) -> str:
        return "" if self.error is None else str(self.error)


class VisualizerSession:
    """Owns the current Structure and Trace pair for one visualization.

    A new pair replaces the old one only after generation fully succeeds;
    rejected input leaves structure, trace and playback position untouched.
    """

    def __init__(self, scheduler: Scheduler, config: SessionConfig = SessionConfig()):
        if config.interval_ms is not None and config.interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {config.interval_ms}")
        self.config = config
        self._generator: TraceGenerator = get_generator(config.algorithm)
        self._variant = config.variant or self._generator.default_variant
        if self._variant not in self._generator.VARIANTS:
            raise ValueError(f"Unknown variant for {config.algorithm}: {self._variant}")
        self.controller = PlaybackController(
            scheduler,
            PlaybackConfig(
                interval_ms=config.interval_ms or self._generator.INTERVAL_MS,
                log_limit=config.log_limit,
            ),
        )
        self._structure: Any = None
        self._params: dict[str, Any] = {}
        self.stats: GenerationStats | None = None

    @property
    def algorithm(self) -> str:
        return self._generator.ALGORITHM

    @property
    def variant(self) -> str:
        return self._variant

    @property
    def structure(self) -> Any:
        return self._structure

    @property
    def trace(self) -> Trace | None:
        return self.controller.trace

    def apply(
        self,
        raw: Mapping[str, str],
        algorithm: str | None = None,
        variant: str | None = None,
    ) -> ApplyResult:
        """Run the full pipeline for *raw* text fields and attach the new trace.

        Unknown algorithms or variants raise ``ValueError``; invalid input is
        reported through the returned ``ApplyResult``.
        """
        generator = get_generator(algorithm) if algorithm else self._generator
        if variant is None:
            same_family = generator.ALGORITHM == self._generator.ALGORITHM
            variant = self._variant if same_family else generator.default_variant
        if variant not in generator.VARIANTS:
            raise ValueError(f"Unknown variant for {generator.ALGORITHM}: {variant}")

        stats = GenerationStats(algorithm=generator.ALGORITHM, variant=variant)
        pipeline_start = time.perf_counter()

        t0 = time.perf_counter()
        try:
            normalized = normalize(generator.INPUT_KIND, raw, generator.CEILING)
        except InputValidationError as exc:
            logger.info("Rejected %s input: %s", generator.ALGORITHM, exc)
            return ApplyResult(accepted=False, error=exc)
        stats.normalize_time = time.perf_counter() - t0

        t0 = time.perf_counter()
        structure, params = generator.build(normalized)
        stats.build_time = time.perf_counter() - t0
        stats.structure_size = len(structure)

        t0 = time.perf_counter()
        trace = generator.generate(structure, variant, **params)
        stats.generate_time = time.perf_counter() - t0
        stats.record_trace(trace)
        stats.total_time = time.perf_counter() - pipeline_start

        self._generator = generator
        self._variant = variant
        self._structure = structure
        self._params = params
        self.stats = stats
        self._attach(trace)

        logger.info(
            "Generated %s/%s trace: %d steps in %.1fms",
            generator.ALGORITHM,
            variant,
            len(trace),
            stats.total_time * 1000,
        )
        return ApplyResult(accepted=True, stats=stats)

    def select_variant(self, variant: str) -> Trace | None:
        """Switch variant, regenerating from the current structure if there is one."""
        if variant not in self._generator.VARIANTS:
            raise ValueError(f"Unknown variant for {self.algorithm}: {variant}")
        self._variant = variant
        if self._structure is None:
            return None
        trace = self._generator.generate(self._structure, variant, **self._params)
        self._attach(trace)
        logger.info("Switched %s to %s: %d steps", self.algorithm, variant, len(trace))
        return trace

    def _attach(self, trace: Trace) -> None:
        self.controller.attach(trace)
        self.controller.set_interval(self.config.interval_ms or self._generator.INTERVAL_MS)
