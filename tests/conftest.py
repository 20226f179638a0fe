"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from grass_app.config.defaults import SessionConfig, get_default_config
from grass_app.engine import GrassSessionEngine
from grass_app.render.recording import RecordingRenderSurface
from grass_app.state.models import DeviceProfile, Screen, Session
from grass_app.state.runtime import VirtualScheduler

# Tick firings from BEGIN to the terminal calibration tick with defaults:
# 115 firings up to the jump (rewound to tick 87), then 48 more to tick 135.
CALIBRATION_FIRINGS = 163
CALIBRATION_TICK_MS = 100
SETTLE_DELAY_MS = 1500
GRASS_ENTRY_MS = CALIBRATION_FIRINGS * CALIBRATION_TICK_MS + SETTLE_DELAY_MS


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def default_config() -> SessionConfig:
    return get_default_config()


@pytest.fixture
def fixed_random() -> FixedRandom:
    return FixedRandom(0.0)


@pytest.fixture
def make_random():
    """Factory for fixed random sources."""
    return FixedRandom


@pytest.fixture
def pointer_session() -> Session:
    return Session.create(DeviceProfile.POINTER, 45, session_id="test-pointer")


@pytest.fixture
def touch_session() -> Session:
    return Session.create(DeviceProfile.TOUCH, 15, session_id="test-touch")


@pytest.fixture
def grass_session(pointer_session: Session) -> Session:
    """Pointer session sitting on GRASS with every condition satisfied."""
    return pointer_session.with_changes(
        screen=Screen.GRASS,
        calibration_complete=True,
        is_touching_grass=True,
        is_tab_focused=True,
    )


@pytest.fixture
def empty_config_dir(tmp_path: Path) -> Path:
    """Config directory without session.yaml, so only defaults apply."""
    return tmp_path


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def surface() -> RecordingRenderSurface:
    return RecordingRenderSurface(coarse_pointer=False)


@pytest.fixture
def engine(surface, scheduler, fixed_random, empty_config_dir) -> GrassSessionEngine:
    return GrassSessionEngine(
        surface,
        scheduler=scheduler,
        rng=fixed_random,
        config_dir=empty_config_dir,
    )


@pytest.fixture
def make_engine(scheduler, fixed_random, empty_config_dir):
    """Factory for engines on a custom surface."""

    def factory(surface, **kwargs) -> GrassSessionEngine:
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("rng", fixed_random)
        kwargs.setdefault("config_dir", empty_config_dir)
        return GrassSessionEngine(surface, **kwargs)

    return factory


@pytest.fixture
def run_to_grass(scheduler: VirtualScheduler):
    """Begin a session and run calibration through the settle delay."""

    def run(engine: GrassSessionEngine) -> GrassSessionEngine:
        engine.begin()
        scheduler.advance(GRASS_ENTRY_MS)
        assert engine.session.screen == Screen.GRASS
        return engine

    return run
