"""
State transition handling for the session lifecycle.

This module owns the single reducer ``(session, event) -> StateTransition``,
the table of which events each screen listens to, the timers each screen
acquires on entry, and the guard that keeps screen changes forward-only.
"""

from typing import Optional

import structlog

from ..config.defaults import SessionConfig
from ..errors import StateTransitionError
from ..logging.config import get_state_logger, log_state_transition
from ..utils.selection import RandomSource
from . import machine
from .models import (
    DeviceProfile,
    EventType,
    Screen,
    Session,
    SessionEvent,
    StateTransition,
    TimerKind,
)

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)


_POINTER_REGION_EVENTS = frozenset({EventType.POINTER_ENTER, EventType.POINTER_LEAVE})
_TOUCH_REGION_EVENTS = frozenset({EventType.TOUCH_START, EventType.TOUCH_END})

_SCREEN_LISTENERS: dict[Screen, frozenset[EventType]] = {
    Screen.LANDING: frozenset({EventType.BEGIN}),
    Screen.CALIBRATING: frozenset({
        EventType.CALIBRATION_TICK,
        EventType.CALIBRATION_SETTLED,
    }),
    Screen.GRASS: frozenset({
        EventType.GRASS_TICK,
        EventType.MOVEMENT_WINDOW_RESET,
        EventType.WINDOW_FOCUS,
        EventType.WINDOW_BLUR,
        EventType.POINTER_MOVE,
    }),
    Screen.INTROSPECTION: frozenset({EventType.TEXT_CHANGED, EventType.SUBMIT}),
    Screen.VALIDATION: frozenset({EventType.RESET}),
}

# Countdown starts first: on a shared instant each tick judges the movement
# window that is just closing, then the window resets
SCREEN_TIMERS: dict[Screen, tuple[TimerKind, ...]] = {
    Screen.CALIBRATING: (TimerKind.CALIBRATION_TICK,),
    Screen.GRASS: (TimerKind.GRASS_COUNTDOWN, TimerKind.MOVEMENT_WINDOW),
}

_FORWARD_EDGES = {
    (Screen.LANDING, Screen.CALIBRATING),
    (Screen.CALIBRATING, Screen.GRASS),
    (Screen.GRASS, Screen.INTROSPECTION),
    (Screen.INTROSPECTION, Screen.VALIDATION),
}


def screen_listeners(screen: Screen, profile: DeviceProfile) -> frozenset[EventType]:
    """
    Event types a screen's scope accepts.

    On GRASS the region events depend on the device profile: pointer
    enter/leave for mouse devices, touch start/end for touch devices.
    The two sets are never both active.
    """
    listeners = _SCREEN_LISTENERS[screen]
    if screen == Screen.GRASS:
        region = _TOUCH_REGION_EVENTS if profile == DeviceProfile.TOUCH else _POINTER_REGION_EVENTS
        listeners = listeners | region
    return listeners


def screen_timers(screen: Screen) -> tuple[TimerKind, ...]:
    """Timers a screen acquires on entry."""
    return SCREEN_TIMERS.get(screen, ())


class StateTransitionHandler:
    """Reduces events into new sessions with logging and validation."""

    def __init__(self):
        self.logger = logger

    def _validate_transition(
        self,
        previous: Session,
        current: Session,
        trigger: EventType
    ) -> None:
        """Reject any screen change that is not the next forward step or a reset."""
        if previous.screen == current.screen:
            return

        edge = (previous.screen, current.screen)
        if edge in _FORWARD_EDGES:
            return

        if edge == (Screen.VALIDATION, Screen.LANDING) and trigger == EventType.RESET:
            return

        raise StateTransitionError(
            f"Invalid screen transition from {previous.screen.value} to {current.screen.value}",
            current_state=previous.screen.value,
            attempted_transition=f"{current.screen.value} via {trigger.value}",
            context={"session_id": previous.session_id},
        )

    def _step(
        self,
        session: Session,
        event: SessionEvent,
        cfg: SessionConfig,
        rng: RandomSource
    ) -> tuple[Session, tuple[TimerKind, ...], tuple[TimerKind, ...]]:
        """Compute the next session and any in-scope timer directives."""
        kind = event.type

        if kind == EventType.BEGIN:
            return session.with_screen(Screen.CALIBRATING), (), ()

        if kind == EventType.CALIBRATION_TICK:
            updated = machine.advance_calibration(session, cfg.calibration)
            if updated.calibration_complete and not session.calibration_complete:
                # Terminal tick: the tick timer stops here, settle delay takes over
                return updated, (TimerKind.CALIBRATION_TICK,), (TimerKind.CALIBRATION_SETTLE,)
            return updated, (), ()

        if kind == EventType.CALIBRATION_SETTLED:
            if not session.calibration_complete:
                return session, (), ()
            focused = True if event.focused is None else event.focused
            return machine.enter_grass(session, focused=focused), (), ()

        if kind == EventType.GRASS_TICK:
            return machine.advance_grass_countdown(session, rng), (), ()

        if kind == EventType.MOVEMENT_WINDOW_RESET:
            return machine.reset_movement_window(session), (), ()

        if kind == EventType.WINDOW_FOCUS:
            return machine.set_tab_focus(session, True), (), ()

        if kind == EventType.WINDOW_BLUR:
            return machine.set_tab_focus(session, False), (), ()

        if kind == EventType.POINTER_MOVE:
            return machine.register_pointer_move(session, cfg.grass.movement_threshold), (), ()

        if kind in (EventType.POINTER_ENTER, EventType.TOUCH_START):
            return machine.set_touching_grass(session, True), (), ()

        if kind in (EventType.POINTER_LEAVE, EventType.TOUCH_END):
            return machine.set_touching_grass(session, False), (), ()

        if kind == EventType.TEXT_CHANGED:
            return session.with_changes(input_text=event.text or ""), (), ()

        if kind == EventType.SUBMIT:
            return machine.submit_introspection(session, rng), (), ()

        if kind == EventType.RESET:
            fresh = Session.create(
                session.device_profile,
                cfg.grass.duration_for(session.is_touch),
            )
            return fresh, (), ()

        return session, (), ()

    def accepts(self, session: Session, event_type: EventType) -> bool:
        return event_type in screen_listeners(session.screen, session.device_profile)

    def reduce(
        self,
        session: Session,
        event: SessionEvent,
        cfg: SessionConfig,
        rng: RandomSource
    ) -> StateTransition:
        """
        Feed one event to the session.

        Events the current screen does not listen to are dropped and come
        back with ``accepted=False`` and the session unchanged.

        Args:
            session: Current session
            event: Incoming event
            cfg: Session configuration
            rng: Random source for prompt and response draws

        Returns:
            StateTransition describing the new session and timer directives

        Raises:
            StateTransitionError: If the computed screen change is illegal
        """
        if not self.accepts(session, event.type):
            self.logger.debug(
                "Event dropped by screen scope",
                session_id=session.session_id,
                screen=session.screen.value,
                event_type=event.type.value,
            )
            return StateTransition(
                session=session,
                previous_screen=session.screen,
                trigger=event.type,
                accepted=False,
            )

        updated, cancel, start = self._step(session, event, cfg, rng)
        self._validate_transition(session, updated, event.type)

        if updated.screen != session.screen:
            start = screen_timers(updated.screen)
            log_state_transition(
                state_logger,
                session_id=session.session_id,
                from_screen=session.screen.value,
                to_screen=updated.screen.value,
                trigger=event.type.value,
                context=self._transition_context(updated),
            )

        return StateTransition(
            session=updated,
            previous_screen=session.screen,
            trigger=event.type,
            cancel_timers=cancel,
            start_timers=start,
        )

    def _transition_context(self, session: Session) -> Optional[dict]:
        if session.screen == Screen.GRASS:
            return {
                "device_profile": session.device_profile.value,
                "grass_timer": session.grass_timer,
                "tab_focused": session.is_tab_focused,
            }
        if session.screen == Screen.INTROSPECTION:
            return {"prompt": session.selected_prompt}
        if session.screen == Screen.VALIDATION:
            # Length only, the text itself stays out of the logs
            return {
                "response": session.selected_response,
                "input_length": len(session.input_text),
            }
        return None


transition_handler = StateTransitionHandler()
