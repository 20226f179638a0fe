#!/usr/bin/env python3
"""
Live Session Demo - Touch Grass Simulator

Runs a session in wall time on an asyncio event loop with shortened
timings, printing each view as JSON. A scripted "user" touches the grass
and submits an answer when prompted.

Run: python examples/live_session_demo.py
"""

import asyncio

from grass_app.engine import GrassSessionEngine
from grass_app.logging.config import configure_logging
from grass_app.render.stdout_surface import StdoutRenderSurface
from grass_app.state.models import Screen, SessionView

FAST_TIMINGS = {
    "calibration": {"tick_ms": 5, "settle_delay_ms": 200},
    "grass": {"tick_ms": 100, "movement_window_ms": 100, "pointer_duration_s": 5},
}


async def run_session() -> None:
    loop = asyncio.get_running_loop()
    finished = loop.create_future()

    engine = GrassSessionEngine(
        StdoutRenderSurface(format="json", coarse_pointer=False),
        config_overrides=FAST_TIMINGS,
    )

    def on_view(view: SessionView) -> None:
        if view.screen == Screen.VALIDATION and not finished.done():
            finished.set_result(view.response)

    unsubscribe = engine.subscribe(on_view)

    engine.begin()
    while engine.session.screen != Screen.GRASS:
        await asyncio.sleep(0.05)

    engine.pointer_enter()
    while engine.session.screen != Screen.INTROSPECTION:
        await asyncio.sleep(0.05)

    engine.change_text("The grass was fine.")
    engine.submit()

    response = await asyncio.wait_for(finished, timeout=5)
    print(f"🌱 Validation says: {response}")

    unsubscribe()
    engine.close()


def main():
    """Main demonstration function."""
    print("🚀 Touch Grass Simulator - Live Session Demo")
    print("=" * 60)
    configure_logging(level="WARNING")
    asyncio.run(run_session())
    print("✅ Live session complete")


if __name__ == "__main__":
    main()
