"""
Core session step functions.

Every function here is pure: it takes the current Session (plus config and,
where a draw is needed, a random source) and returns a new Session. Timers,
listeners and rendering live elsewhere.
"""

import math
from collections.abc import Sequence

from ..config.defaults import CalibrationParams
from ..content import (
    CALIBRATION_DONE_MESSAGE,
    CALIBRATION_JUMP_MESSAGE,
    CALIBRATION_MESSAGES,
    GRASS_DEFAULT_MESSAGE,
    GRASS_FOCUS_LOST_MESSAGE,
    GRASS_MOVING_MESSAGE,
    GRASS_NOT_TOUCHING_POINTER_MESSAGE,
    GRASS_NOT_TOUCHING_TOUCH_MESSAGE,
    PROMPTS,
    RESPONSES,
)
from ..logging.config import get_state_logger
from ..utils.selection import RandomSource, pick_uniform
from .models import Screen, Session

state_logger = get_state_logger(__name__)

MAX_RUNNING_PROGRESS = 99.0
COMPLETE_PROGRESS = 100.0


def calibration_total_ticks(cfg: CalibrationParams, message_count: int) -> int:
    """Ticks the progress curve expects before reaching 100%."""
    return message_count * cfg.ticks_per_message


def calibration_target_progress(ticks: int, total_ticks: int) -> float:
    """Unclamped progress percentage for a tick count."""
    return ticks / total_ticks * 100


def advance_calibration(
    session: Session,
    cfg: CalibrationParams,
    messages: Sequence[str] = CALIBRATION_MESSAGES
) -> Session:
    """
    Advance the fake calibration curve by one tick.

    The curve is linear in ticks. The first time progress passes
    ``cfg.jump_threshold_pct`` the tick counter is rewound to
    ``cfg.rewind_fraction`` of the total, once. The message index is a
    high-water mark, so the rewind pulls the bar back but never the text.
    Completion only happens once the jump has fired and progress is back
    at 100; until then displayed progress is clamped to [0, 99].

    Args:
        session: Current session on the CALIBRATING screen
        cfg: Calibration parameters
        messages: Calibration message list

    Returns:
        New session; ``calibration_complete`` is set on the terminal tick
    """
    if session.calibration_complete:
        return session

    ticks = session.calibration_ticks + 1
    message_index = session.calibration_message_index
    text = session.calibration_text
    jumped = session.calibration_jumped

    candidate = ticks // cfg.ticks_per_message
    if message_index < candidate < len(messages):
        message_index = candidate
        text = messages[candidate]

    total_ticks = calibration_total_ticks(cfg, len(messages))
    target = calibration_target_progress(ticks, total_ticks)

    if target > cfg.jump_threshold_pct and not jumped:
        jumped = True
        text = CALIBRATION_JUMP_MESSAGE
        rewound = math.floor(cfg.rewind_fraction * total_ticks)
        state_logger.info(
            "Calibration jump fired",
            session_id=session.session_id,
            at_tick=ticks,
            rewound_to=rewound,
            progress_before=target,
        )
        ticks = rewound

    target = calibration_target_progress(ticks, total_ticks)

    if target >= COMPLETE_PROGRESS and jumped:
        state_logger.info(
            "Calibration complete",
            session_id=session.session_id,
            ticks=ticks,
        )
        return session.with_changes(
            calibration_ticks=ticks,
            calibration_progress=COMPLETE_PROGRESS,
            calibration_message_index=message_index,
            calibration_text=CALIBRATION_DONE_MESSAGE,
            calibration_jumped=True,
            calibration_complete=True,
        )

    return session.with_changes(
        calibration_ticks=ticks,
        calibration_progress=min(max(0.0, target), MAX_RUNNING_PROGRESS),
        calibration_message_index=message_index,
        calibration_text=text,
        calibration_jumped=jumped,
    )


def grass_message_for(session: Session) -> str:
    """Message for the first failing condition: focus, then movement, then touch."""
    if not session.is_tab_focused:
        return GRASS_FOCUS_LOST_MESSAGE
    if session.is_mouse_moving_too_much:
        return GRASS_MOVING_MESSAGE
    if not session.is_touching_grass:
        if session.is_touch:
            return GRASS_NOT_TOUCHING_TOUCH_MESSAGE
        return GRASS_NOT_TOUCHING_POINTER_MESSAGE
    return GRASS_DEFAULT_MESSAGE


def enter_grass(session: Session, focused: bool = True) -> Session:
    """Move to GRASS with fresh validity flags and tab focus re-synced."""
    return session.with_changes(
        screen=Screen.GRASS,
        grass_message=GRASS_DEFAULT_MESSAGE,
        is_tab_focused=focused,
        is_touching_grass=False,
        is_mouse_moving_too_much=False,
        mouse_move_count=0,
    )


def set_tab_focus(session: Session, focused: bool) -> Session:
    updated = session.with_changes(is_tab_focused=focused)
    return updated.with_changes(grass_message=grass_message_for(updated))


def set_touching_grass(session: Session, touching: bool) -> Session:
    # Message catches up on the next countdown tick
    return session.with_changes(is_touching_grass=touching)


def register_pointer_move(session: Session, threshold: int) -> Session:
    """Count one pointer move in the current window."""
    count = session.mouse_move_count + 1
    if count <= threshold:
        return session.with_changes(mouse_move_count=count)

    updated = session.with_changes(
        mouse_move_count=count,
        is_mouse_moving_too_much=True,
    )
    return updated.with_changes(grass_message=grass_message_for(updated))


def reset_movement_window(session: Session) -> Session:
    return session.with_changes(
        mouse_move_count=0,
        is_mouse_moving_too_much=False,
    )


def advance_grass_countdown(
    session: Session,
    rng: RandomSource,
    prompts: Sequence[str] = PROMPTS
) -> Session:
    """
    Run one countdown tick.

    The message is recomputed every tick. The timer only moves when the
    session is valid, and the tick that would take it to zero instead
    parks it at zero and enters INTROSPECTION.
    """
    message = grass_message_for(session)

    if not session.is_grass_valid:
        return session.with_changes(grass_message=message)

    if session.grass_timer <= 1:
        return enter_introspection(
            session.with_changes(grass_timer=0, grass_message=message),
            rng,
            prompts,
        )

    return session.with_changes(
        grass_timer=session.grass_timer - 1,
        grass_message=message,
    )


def enter_introspection(
    session: Session,
    rng: RandomSource,
    prompts: Sequence[str] = PROMPTS
) -> Session:
    """Move to INTROSPECTION, drawing the prompt if none was drawn yet."""
    prompt = session.selected_prompt or pick_uniform(prompts, rng)
    return session.with_changes(
        screen=Screen.INTROSPECTION,
        selected_prompt=prompt,
    )


def submit_introspection(
    session: Session,
    rng: RandomSource,
    responses: Sequence[str] = RESPONSES
) -> Session:
    """Move to VALIDATION with a canned response. Input text is never checked."""
    response = session.selected_response or pick_uniform(responses, rng)
    return session.with_changes(
        screen=Screen.VALIDATION,
        selected_response=response,
    )
