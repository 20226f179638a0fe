"""
Session state machine data models.

This module defines the immutable session record, the events that drive it,
the transition result returned by the reducer, and the view model handed to
render surfaces.
"""

import uuid
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from ..content import CALIBRATION_MESSAGES, GRASS_DEFAULT_MESSAGE


class Screen(str, Enum):
    """Top-level session screens, in their only legal order."""
    LANDING = "landing"
    CALIBRATING = "calibrating"
    GRASS = "grass"
    INTROSPECTION = "introspection"
    VALIDATION = "validation"

    @property
    def order(self) -> int:
        return SCREEN_ORDER.index(self)


SCREEN_ORDER = (
    Screen.LANDING,
    Screen.CALIBRATING,
    Screen.GRASS,
    Screen.INTROSPECTION,
    Screen.VALIDATION,
)


class DeviceProfile(str, Enum):
    """Input capability class, fixed for the whole session."""
    TOUCH = "touch"
    POINTER = "pointer"

    @classmethod
    def from_coarse_pointer(cls, coarse_pointer: Optional[bool]) -> "DeviceProfile":
        """Unknown capability falls back to the pointer profile."""
        return cls.TOUCH if coarse_pointer is True else cls.POINTER


class EventType(str, Enum):
    """Everything the session reacts to."""
    # User intents
    BEGIN = "begin"
    SUBMIT = "submit"
    RESET = "reset"
    TEXT_CHANGED = "text_changed"

    # Environment signals
    WINDOW_FOCUS = "window_focus"
    WINDOW_BLUR = "window_blur"
    POINTER_MOVE = "pointer_move"
    POINTER_ENTER = "pointer_enter"
    POINTER_LEAVE = "pointer_leave"
    TOUCH_START = "touch_start"
    TOUCH_END = "touch_end"

    # Timer firings
    CALIBRATION_TICK = "calibration_tick"
    CALIBRATION_SETTLED = "calibration_settled"
    GRASS_TICK = "grass_tick"
    MOVEMENT_WINDOW_RESET = "movement_window_reset"


class TimerKind(str, Enum):
    """Scheduled callbacks owned by a screen scope."""
    CALIBRATION_TICK = "calibration_tick"        # repeating
    CALIBRATION_SETTLE = "calibration_settle"    # one-shot
    GRASS_COUNTDOWN = "grass_countdown"          # repeating
    MOVEMENT_WINDOW = "movement_window"          # repeating


@dataclass(frozen=True)
class SessionEvent:
    """A single input to the reducer."""

    type: EventType
    text: Optional[str] = None                       # Only for TEXT_CHANGED
    focused: Optional[bool] = None                   # Focus probe taken when GRASS is entered

    @classmethod
    def of(cls, event_type: EventType) -> "SessionEvent":
        return cls(type=event_type)

    @classmethod
    def text_changed(cls, text: str) -> "SessionEvent":
        return cls(type=EventType.TEXT_CHANGED, text=text)


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Session:
    """Everything the session knows, for the lifetime of one page load."""

    screen: Screen = Screen.LANDING
    device_profile: DeviceProfile = DeviceProfile.POINTER
    session_id: str = field(default_factory=_new_session_id)

    # Calibration
    calibration_ticks: int = 0
    calibration_progress: float = 0.0
    calibration_message_index: int = 0               # High-water mark, never regresses
    calibration_text: str = CALIBRATION_MESSAGES[0]
    calibration_jumped: bool = False
    calibration_complete: bool = False

    # Grass
    grass_timer: int = 45
    grass_message: str = GRASS_DEFAULT_MESSAGE
    is_touching_grass: bool = False
    is_tab_focused: bool = True
    is_mouse_moving_too_much: bool = False
    mouse_move_count: int = 0                        # Moves in the current window

    # Introspection and validation
    selected_prompt: str = ""
    selected_response: str = ""
    input_text: str = ""

    @classmethod
    def create(
        cls,
        device_profile: DeviceProfile,
        grass_duration: int,
        session_id: Optional[str] = None
    ) -> "Session":
        """Fresh LANDING session for a device profile."""
        return cls(
            device_profile=device_profile,
            session_id=session_id or _new_session_id(),
            grass_timer=grass_duration,
        )

    @property
    def is_touch(self) -> bool:
        return self.device_profile == DeviceProfile.TOUCH

    @property
    def is_grass_valid(self) -> bool:
        """Focused, not over-moving and touching, all at once."""
        return (self.is_tab_focused
                and not self.is_mouse_moving_too_much
                and self.is_touching_grass)

    def with_screen(self, screen: Screen) -> "Session":
        """Create new session on another screen."""
        return replace(self, screen=screen)

    def with_changes(self, **changes: Any) -> "Session":
        """Create new session with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class StateTransition:
    """Result of feeding one event to the reducer."""

    session: Session
    previous_screen: Screen
    trigger: EventType

    # Timer directives for the active scope, applied in this order
    cancel_timers: tuple[TimerKind, ...] = ()
    start_timers: tuple[TimerKind, ...] = ()

    accepted: bool = True                            # False when the event was dropped

    @property
    def screen_changed(self) -> bool:
        return self.session.screen != self.previous_screen


@dataclass(frozen=True)
class SessionView:
    """Presentation-only snapshot handed to render surfaces."""

    screen: Screen
    calibration_text: str
    calibration_progress: float
    grass_message: str
    grass_timer: int
    grass_asset: str
    device_profile: DeviceProfile
    prompt: str
    input_text: str
    response: str

    @classmethod
    def from_session(cls, session: Session, grass_asset: str = "/grass.jpg") -> "SessionView":
        return cls(
            screen=session.screen,
            calibration_text=session.calibration_text,
            calibration_progress=session.calibration_progress,
            grass_message=session.grass_message,
            grass_timer=session.grass_timer,
            grass_asset=grass_asset,
            device_profile=session.device_profile,
            prompt=session.selected_prompt,
            input_text=session.input_text,
            response=session.selected_response,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["screen"] = self.screen.value
        data["device_profile"] = self.device_profile.value
        return data
