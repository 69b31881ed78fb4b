"""Demo: replay a level-order trace with timed auto-advance, then switch variant mid-play."""

import asyncio
import logging

from algotrace.playback import AsyncioScheduler, PlaybackController, PlaybackState
from algotrace.session import SessionConfig, VisualizerSession

TREE = "3, 9, 20, null, null, 15, 7"


def _show(controller: PlaybackController) -> None:
    step = controller.current_step
    print(
        f"  [{controller.state.value:<8}] {controller.position + 1:>2}/{controller.length}"
        f"  {step.action.value:<10} {step.description}"
    )


async def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    session = VisualizerSession(
        AsyncioScheduler(), SessionConfig(algorithm="level_order", interval_ms=150)
    )
    session.controller.subscribe(_show)

    print("=" * 60)
    print("BFS playback (interrupted by a variant switch)")
    print("=" * 60)
    session.apply({"tree": TREE})
    session.controller.play()
    await asyncio.sleep(0.5)
    session.select_variant("dfs")

    print("=" * 60)
    print("DFS playback to the end")
    print("=" * 60)
    session.controller.play()
    while session.controller.state != PlaybackState.FINISHED:
        await asyncio.sleep(0.05)

    print()
    print("Final rows:", [list(row) for row in session.trace.final.result])
    print(session.stats.report())


if __name__ == "__main__":
    asyncio.run(main())
