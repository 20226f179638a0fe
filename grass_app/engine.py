"""
Main session engine coordinator.

Owns the one live Session and everything around it: the scheduler, the
active screen scope, the random source and the render surface. All
environment signals and timer firings enter through ``dispatch``.

Environment event → Screen scope → Reducer → Session → SessionView → Render
"""

import random
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.defaults import SessionConfig
from .config.loader import load_session_config
from .logging.config import get_state_logger
from .render.base import RenderSurface
from .state.models import (
    DeviceProfile,
    EventType,
    Session,
    SessionEvent,
    SessionView,
    StateTransition,
    TimerKind,
)
from .state.runtime import AsyncioScheduler, Scheduler, ScreenScope
from .state.transitions import screen_listeners, screen_timers, transition_handler
from .utils.selection import RandomSource

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)

Subscriber = Callable[[SessionView], None]

_TIMER_EVENTS = {
    TimerKind.CALIBRATION_TICK: EventType.CALIBRATION_TICK,
    TimerKind.CALIBRATION_SETTLE: EventType.CALIBRATION_SETTLED,
    TimerKind.GRASS_COUNTDOWN: EventType.GRASS_TICK,
    TimerKind.MOVEMENT_WINDOW: EventType.MOVEMENT_WINDOW_RESET,
}


class GrassSessionEngine:
    """
    Coordinator for one browsing session of the grass experience.

    Manages the session lifecycle:
    LANDING → CALIBRATING → GRASS → INTROSPECTION → VALIDATION → (reset)
    """

    def __init__(
        self,
        surface: RenderSurface,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[RandomSource] = None,
        config_dir: Optional[Path] = None,
        config_overrides: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize the engine and render the landing screen.

        Args:
            surface: Render surface to draw on and to query for capabilities
            scheduler: Timer scheduler, an AsyncioScheduler on the running loop by default
            rng: Random source for prompt and response draws
            config_dir: Directory holding session.yaml
            config_overrides: Highest-precedence configuration overrides
        """
        self.logger = logger
        self.surface = surface
        self.scheduler = scheduler or AsyncioScheduler()
        self.rng: RandomSource = rng or random.Random()
        self.config_dir = config_dir
        self.config_overrides = config_overrides

        self._subscribers: list[Subscriber] = []
        self._scope: Optional[ScreenScope] = None
        self.config: SessionConfig
        self._session: Session

        self._boot()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _probe_device_profile(self) -> DeviceProfile:
        """Ask the surface for pointer capability once; unknown means pointer."""
        try:
            coarse = self.surface.is_coarse_pointer()
        except Exception as e:
            self.logger.warning(
                "Device capability query failed, using pointer profile",
                surface=self.surface.name,
                error=str(e)
            )
            coarse = None
        return DeviceProfile.from_coarse_pointer(coarse)

    def _probe_focus(self) -> bool:
        try:
            return bool(self.surface.has_focus())
        except Exception as e:
            self.logger.warning(
                "Focus query failed, assuming focused",
                surface=self.surface.name,
                error=str(e)
            )
            return True

    def _boot(self) -> None:
        """Build a brand new session, as a full page load would."""
        profile = self._probe_device_profile()
        self.config = load_session_config(
            profile.value,
            overrides=self.config_overrides,
            config_dir=self.config_dir,
        )
        self._session = Session.create(
            profile,
            self.config.grass.duration_for(profile == DeviceProfile.TOUCH),
        )
        self._enter_scope()

        self.logger.info(
            "Session started",
            session_id=self._session.session_id,
            device_profile=profile.value,
            grass_timer=self._session.grass_timer,
        )
        self._publish()

    def _enter_scope(self) -> None:
        """Release the previous screen's scope, then acquire the current one's."""
        if self._scope is not None:
            self._scope.release()

        session = self._session
        self._scope = ScreenScope(
            session.screen,
            self.scheduler,
            screen_listeners(session.screen, session.device_profile),
            session_id=session.session_id,
        )

    # ------------------------------------------------------------------
    # Event ingestion
    # ------------------------------------------------------------------

    def dispatch(self, event: SessionEvent) -> StateTransition:
        """
        Feed one event to the session.

        Events the active screen is not listening to are dropped.

        Args:
            event: Environment signal, user intent or timer firing

        Returns:
            The transition that was applied (``accepted=False`` when dropped)
        """
        assert self._scope is not None

        if not self._scope.accepts(event.type):
            self.logger.debug(
                "Event ignored outside its screen",
                session_id=self._session.session_id,
                screen=self._session.screen.value,
                event_type=event.type.value,
            )
            return StateTransition(
                session=self._session,
                previous_screen=self._session.screen,
                trigger=event.type,
                accepted=False,
            )

        transition = transition_handler.reduce(self._session, event, self.config, self.rng)
        self._apply(transition)
        return transition

    def _apply(self, transition: StateTransition) -> None:
        assert self._scope is not None

        if transition.trigger == EventType.RESET and transition.screen_changed:
            # Reset is a reload: nothing, not even the device profile, carries over
            self._scope.release()
            self._scope = None
            self._boot()
            return

        self._session = transition.session

        if transition.screen_changed:
            self._enter_scope()
        else:
            for kind in transition.cancel_timers:
                self._scope.cancel_timer(kind)

        for kind in transition.start_timers:
            self._start_timer(kind)

        self._publish()

    def _start_timer(self, kind: TimerKind) -> None:
        assert self._scope is not None

        calibration = self.config.calibration
        grass = self.config.grass
        schedule = {
            TimerKind.CALIBRATION_TICK: (calibration.tick_ms, True),
            TimerKind.CALIBRATION_SETTLE: (calibration.settle_delay_ms, False),
            TimerKind.GRASS_COUNTDOWN: (grass.tick_ms, True),
            TimerKind.MOVEMENT_WINDOW: (grass.movement_window_ms, True),
        }
        interval_ms, repeating = schedule[kind]

        self._scope.start_timer(
            kind,
            interval_ms,
            lambda: self._on_timer(kind),
            repeating=repeating,
        )

    def _on_timer(self, kind: TimerKind) -> None:
        event_type = _TIMER_EVENTS[kind]
        if event_type == EventType.CALIBRATION_SETTLED:
            event = SessionEvent(type=event_type, focused=self._probe_focus())
        else:
            event = SessionEvent.of(event_type)
        self.dispatch(event)

    # ------------------------------------------------------------------
    # Render surface intents and signals
    # ------------------------------------------------------------------

    def begin(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.BEGIN))

    def change_text(self, text: str) -> StateTransition:
        return self.dispatch(SessionEvent.text_changed(text))

    def submit(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.SUBMIT))

    def reset(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.RESET))

    def window_focus(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.WINDOW_FOCUS))

    def window_blur(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.WINDOW_BLUR))

    def pointer_move(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.POINTER_MOVE))

    def pointer_enter(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.POINTER_ENTER))

    def pointer_leave(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.POINTER_LEAVE))

    def touch_start(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.TOUCH_START))

    def touch_end(self) -> StateTransition:
        return self.dispatch(SessionEvent.of(EventType.TOUCH_END))

    # ------------------------------------------------------------------
    # View model
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def view(self) -> SessionView:
        return SessionView.from_session(self._session, self.config.grass.image_asset)

    @property
    def scope(self) -> Optional[ScreenScope]:
        return self._scope

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """
        Receive every published view; the current one is delivered immediately.

        Returns:
            Callable that removes the subscription
        """
        self._subscribers.append(subscriber)
        subscriber(self.view)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def _publish(self) -> None:
        view = self.view
        self.surface.render(view)
        for subscriber in list(self._subscribers):
            subscriber(view)

    def close(self) -> None:
        """Release the active scope; no timer fires afterwards."""
        if self._scope is not None:
            self._scope.release()
        self.logger.info("Session closed", session_id=self._session.session_id)
