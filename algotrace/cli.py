"""Command-line entry point: print a trace or replay it with timed playback."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .generators import SUPPORTED_ALGORITHMS, get_generator, list_algorithms
from .playback import AsyncioScheduler, PlaybackController, PlaybackState
from .session import SessionConfig, VisualizerSession
from .trace_types import Step

# CLI flag -> raw input field
_INPUT_FLAGS = ("tree", "values", "k", "pos", "list_a", "list_b", "join_a", "join_b", "entries")


def _format_step(step: Step) -> str:
    return f"  #{step.sequence:<3} [{step.action.value}] {step.description}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and replay step-by-step algorithm traces"
    )
    parser.add_argument(
        "algorithm", nargs="?", choices=SUPPORTED_ALGORITHMS, help="Algorithm to trace"
    )
    parser.add_argument("--variant", "-V", default=None, help="Algorithm variant")
    parser.add_argument("--list", action="store_true", help="List algorithms and variants")
    parser.add_argument("--tree", default="", help="Level-order tree, e.g. '3,9,20,null,null,15,7'")
    parser.add_argument("--values", default="", help="Array or list values")
    parser.add_argument("--k", default="", help="k for rotation or kth smallest")
    parser.add_argument("--pos", default="", help="Cycle entry index (-1 for none)")
    parser.add_argument("--list-a", dest="list_a", default="", help="First list values")
    parser.add_argument("--list-b", dest="list_b", default="", help="Second list values")
    parser.add_argument("--join-a", dest="join_a", default="", help="Join index in list A")
    parser.add_argument("--join-b", dest="join_b", default="", help="Join index in list B")
    parser.add_argument("--entries", default="", help="Random list JSON, e.g. '[[7,null],[13,0]]'")
    parser.add_argument("--play", action="store_true", help="Replay with timed auto-advance")
    parser.add_argument("--interval-ms", type=int, default=None, help="Playback interval override")
    parser.add_argument("--stats", action="store_true", help="Print generation statistics")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


async def _replay(session: VisualizerSession) -> None:
    finished = asyncio.Event()

    def on_change(controller: PlaybackController) -> None:
        if controller.position > 0:
            print(_format_step(controller.current_step))
        if controller.state == PlaybackState.FINISHED:
            finished.set()

    session.controller.subscribe(on_change)
    print(_format_step(session.controller.current_step))
    session.controller.play()
    await finished.wait()


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )

    if args.list or not args.algorithm:
        for name, variants in list_algorithms().items():
            print(f"  {name:<14} {', '.join(variants):<30} {get_generator(name).describe()}")
        return 0

    variants = get_generator(args.algorithm).VARIANTS
    if args.variant is not None and args.variant not in variants:
        parser.error(
            f"unknown variant {args.variant!r} for {args.algorithm} "
            f"(choose from {', '.join(variants)})"
        )
    if args.interval_ms is not None and args.interval_ms <= 0:
        parser.error("--interval-ms must be positive")

    raw = {flag: getattr(args, flag) for flag in _INPUT_FLAGS}
    config = SessionConfig(
        algorithm=args.algorithm, variant=args.variant, interval_ms=args.interval_ms
    )

    if args.play:
        return asyncio.run(_play_main(config, raw, args.stats))

    session = VisualizerSession(AsyncioScheduler(), config)
    result = session.apply(raw)
    if not result.accepted:
        print(f"Invalid input: {result.message}", file=sys.stderr)
        return 2
    print(f"═══ {session.algorithm} ({session.variant}) ═══")
    for step in session.trace:
        print(_format_step(step))
    if args.stats:
        print()
        print(result.stats.report())
    return 0


async def _play_main(config: SessionConfig, raw: dict[str, str], show_stats: bool) -> int:
    session = VisualizerSession(AsyncioScheduler(), config)
    result = session.apply(raw)
    if not result.accepted:
        print(f"Invalid input: {result.message}", file=sys.stderr)
        return 2
    print(f"═══ {session.algorithm} ({session.variant}) ═══")
    await _replay(session)
    if show_stats:
        print()
        print(result.stats.report())
    return 0


if __name__ == "__main__":
    sys.exit(main())
