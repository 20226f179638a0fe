#!/usr/bin/env python3
"""
Basic Usage Example - Touch Grass Simulator

This script walks one session through every screen on a virtual clock, so
the whole run takes milliseconds instead of over a minute. It shows how to:
- Initialize the engine with a scheduler and a render surface
- Feed user intents and environment signals
- Advance time and watch the screens change

Run: python examples/basic_usage.py
"""

import random

from grass_app.engine import GrassSessionEngine
from grass_app.render.stdout_surface import StdoutRenderSurface
from grass_app.state.models import Screen
from grass_app.state.runtime import VirtualScheduler


def print_session_state(engine: GrassSessionEngine) -> None:
    """Print current session state."""
    session = engine.session
    print(f"📊 Session {session.session_id}:")
    print(f"  Screen: {session.screen.value}")
    print(f"  Device profile: {session.device_profile.value}")
    if session.screen == Screen.GRASS:
        print(f"  Timer: {session.grass_timer}s")
        print(f"  Focused: {session.is_tab_focused}")
        print(f"  Touching: {session.is_touching_grass}")
        print(f"  Moving too much: {session.is_mouse_moving_too_much}")
    print()


def main():
    """Main demonstration function."""
    print("🚀 Touch Grass Simulator - Basic Usage Demo")
    print("=" * 60)

    print("1. Initializing the session engine...")
    scheduler = VirtualScheduler()
    surface = StdoutRenderSurface(coarse_pointer=False)
    engine = GrassSessionEngine(surface, scheduler=scheduler, rng=random.Random(42))
    print_session_state(engine)

    print("2. Beginning calibration...")
    engine.begin()
    scheduler.advance(17_800)
    print_session_state(engine)

    print("3. Looking at the grass without touching it...")
    scheduler.advance(3000)
    print_session_state(engine)

    print("4. Touching the grass, then getting distracted...")
    engine.pointer_enter()
    scheduler.advance(10_000)
    engine.window_blur()
    scheduler.advance(5000)
    engine.window_focus()
    print_session_state(engine)

    print("5. Fidgeting with the mouse...")
    for _ in range(50):
        engine.pointer_move()
    scheduler.advance(2000)
    print_session_state(engine)

    print("6. Holding still until the countdown ends...")
    scheduler.advance(60_000)
    print_session_state(engine)

    print("7. Answering the prompt...")
    engine.change_text("Probably.")
    engine.submit()
    print_session_state(engine)

    print("8. Leaving...")
    engine.reset()
    print_session_state(engine)

    engine.close()
    print(f"✅ Demo complete, {surface.get_stats()['render_count']} views rendered")


if __name__ == "__main__":
    main()
