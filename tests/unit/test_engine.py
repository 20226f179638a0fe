"""Unit tests for the session engine."""

import asyncio
from typing import Optional
from unittest.mock import Mock

import pytest

from grass_app.content import GRASS_DEFAULT_MESSAGE, GRASS_FOCUS_LOST_MESSAGE
from grass_app.engine import GrassSessionEngine
from grass_app.errors import ConfigurationError
from grass_app.render.recording import RecordingRenderSurface
from grass_app.state.models import DeviceProfile, EventType, Screen, SessionEvent, TimerKind
from grass_app.state.runtime import AsyncioScheduler


class BrokenSurface(RecordingRenderSurface):
    """Surface whose capability queries fail."""

    def is_coarse_pointer(self) -> Optional[bool]:
        raise RuntimeError("media query unavailable")

    def has_focus(self) -> bool:
        raise RuntimeError("focus query unavailable")


class TestGrassSessionEngine:
    """Test suite for the GrassSessionEngine class."""

    def test_engine_initialization(self, engine, surface) -> None:
        """A new engine sits on LANDING and has rendered it."""
        assert engine.session.screen == Screen.LANDING
        assert engine.session.device_profile == DeviceProfile.POINTER
        assert engine.session.grass_timer == 45
        assert surface.last.screen == Screen.LANDING
        assert engine.scope.screen == Screen.LANDING
        assert engine.scope.active_timers() == ()

    def test_touch_device_profile(self, make_engine) -> None:
        engine = make_engine(RecordingRenderSurface(coarse_pointer=True))
        assert engine.session.device_profile == DeviceProfile.TOUCH
        assert engine.session.grass_timer == 15

    def test_unknown_capability_uses_pointer(self, make_engine) -> None:
        engine = make_engine(RecordingRenderSurface(coarse_pointer=None))
        assert engine.session.device_profile == DeviceProfile.POINTER

    def test_failing_capability_query_uses_pointer(self, make_engine) -> None:
        engine = make_engine(BrokenSurface())
        assert engine.session.device_profile == DeviceProfile.POINTER

    def test_failing_focus_query_assumes_focus(self, make_engine, run_to_grass) -> None:
        engine = run_to_grass(make_engine(BrokenSurface()))
        assert engine.session.is_tab_focused is True

    def test_begin_starts_calibration_timer(self, engine, scheduler) -> None:
        transition = engine.begin()
        assert transition.accepted is True
        assert engine.session.screen == Screen.CALIBRATING
        assert engine.scope.screen == Screen.CALIBRATING
        assert engine.scope.active_timers() == (TimerKind.CALIBRATION_TICK,)
        assert scheduler.pending() == 1

    def test_begin_twice_is_dropped(self, engine) -> None:
        engine.begin()
        transition = engine.begin()
        assert transition.accepted is False
        assert engine.session.screen == Screen.CALIBRATING

    def test_dispatch_drops_events_outside_scope(self, engine, surface) -> None:
        frames = len(surface.frames)
        transition = engine.dispatch(SessionEvent.of(EventType.POINTER_MOVE))
        assert transition.accepted is False
        assert len(surface.frames) == frames

    def test_grass_entry_syncs_focus(self, make_engine, run_to_grass) -> None:
        surface = RecordingRenderSurface(coarse_pointer=False, focused=False)
        engine = run_to_grass(make_engine(surface))

        assert engine.session.is_tab_focused is False
        assert engine.session.grass_message == GRASS_DEFAULT_MESSAGE
        assert engine.scope.active_timers() == (
            TimerKind.GRASS_COUNTDOWN, TimerKind.MOVEMENT_WINDOW
        )

    def test_unfocused_entry_holds_first_tick(self, make_engine, run_to_grass, scheduler) -> None:
        surface = RecordingRenderSurface(coarse_pointer=False, focused=False)
        engine = run_to_grass(make_engine(surface))
        engine.pointer_enter()

        scheduler.advance(1000)

        assert engine.session.grass_timer == 45
        assert engine.session.grass_message == GRASS_FOCUS_LOST_MESSAGE

    def test_config_overrides(self, make_engine, scheduler) -> None:
        engine = make_engine(
            RecordingRenderSurface(coarse_pointer=False),
            config_overrides={"grass": {"pointer_duration_s": 3, "image_asset": "/lawn.png"}},
        )
        assert engine.session.grass_timer == 3
        assert engine.view.grass_asset == "/lawn.png"

    def test_invalid_config_raises(self, make_engine) -> None:
        with pytest.raises(ConfigurationError):
            make_engine(
                RecordingRenderSurface(),
                config_overrides={"calibration": {"tick_ms": -1}},
            )

    def test_subscribe_delivers_current_view(self, engine) -> None:
        subscriber = Mock()
        unsubscribe = engine.subscribe(subscriber)
        subscriber.assert_called_once_with(engine.view)

        engine.begin()
        assert subscriber.call_count == 2
        assert subscriber.call_args.args[0].screen == Screen.CALIBRATING

        unsubscribe()
        unsubscribe()
        engine.dispatch(SessionEvent.of(EventType.CALIBRATION_TICK))
        assert subscriber.call_count == 2

    def test_close_releases_timers(self, engine, scheduler, surface) -> None:
        engine.begin()
        engine.close()

        frames = len(surface.frames)
        scheduler.advance(60_000)

        assert engine.scope.released is True
        assert scheduler.pending() == 0
        assert len(surface.frames) == frames

    def test_render_stats(self, engine, surface) -> None:
        engine.begin()
        stats = surface.get_stats()
        assert stats["name"] == "recording"
        assert stats["render_count"] == 2

    def test_default_scheduler_runs_on_asyncio(self) -> None:
        async def scenario():
            engine = GrassSessionEngine(
                RecordingRenderSurface(coarse_pointer=False),
                config_overrides={"calibration": {"tick_ms": 1}},
            )
            assert isinstance(engine.scheduler, AsyncioScheduler)
            engine.begin()
            await asyncio.sleep(0.05)
            ticks = engine.session.calibration_ticks
            engine.close()
            return ticks

        assert asyncio.run(scenario()) > 0
