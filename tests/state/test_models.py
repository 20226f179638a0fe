"""Tests for session data models."""

import dataclasses

import pytest

from grass_app.content import CALIBRATION_MESSAGES, GRASS_DEFAULT_MESSAGE
from grass_app.state.models import (
    SCREEN_ORDER,
    DeviceProfile,
    EventType,
    Screen,
    Session,
    SessionEvent,
    SessionView,
    StateTransition,
)


class TestScreen:
    def test_order_is_linear(self):
        assert [screen.order for screen in SCREEN_ORDER] == [0, 1, 2, 3, 4]
        assert Screen.LANDING.order < Screen.VALIDATION.order

    def test_values(self):
        assert Screen("grass") is Screen.GRASS


class TestDeviceProfile:
    @pytest.mark.parametrize("coarse,expected", [
        (True, DeviceProfile.TOUCH),
        (False, DeviceProfile.POINTER),
        (None, DeviceProfile.POINTER),
    ])
    def test_from_coarse_pointer(self, coarse, expected):
        assert DeviceProfile.from_coarse_pointer(coarse) == expected


class TestSession:
    """Test the immutable session record."""

    def test_defaults(self):
        session = Session()
        assert session.screen == Screen.LANDING
        assert session.calibration_progress == 0.0
        assert session.calibration_message_index == 0
        assert session.calibration_text == CALIBRATION_MESSAGES[0]
        assert session.grass_message == GRASS_DEFAULT_MESSAGE
        assert session.is_tab_focused is True
        assert session.is_touching_grass is False
        assert session.selected_prompt == ""
        assert session.selected_response == ""
        assert len(session.session_id) == 12

    def test_create_uses_profile_duration(self):
        session = Session.create(DeviceProfile.TOUCH, 15, session_id="abc")
        assert session.session_id == "abc"
        assert session.grass_timer == 15
        assert session.is_touch is True

    def test_session_ids_are_unique(self):
        assert Session().session_id != Session().session_id

    def test_frozen(self):
        session = Session()
        with pytest.raises(dataclasses.FrozenInstanceError):
            session.grass_timer = 3

    def test_with_changes_returns_new_instance(self):
        session = Session(session_id="same")
        updated = session.with_changes(grass_timer=10, is_touching_grass=True)
        assert updated is not session
        assert updated.session_id == "same"
        assert updated.grass_timer == 10
        assert session.grass_timer == 45

    def test_with_screen(self):
        assert Session().with_screen(Screen.CALIBRATING).screen == Screen.CALIBRATING

    @pytest.mark.parametrize("focused,moving,touching,valid", [
        (True, False, True, True),
        (False, False, True, False),
        (True, True, True, False),
        (True, False, False, False),
    ])
    def test_is_grass_valid(self, focused, moving, touching, valid):
        session = Session(
            is_tab_focused=focused,
            is_mouse_moving_too_much=moving,
            is_touching_grass=touching,
        )
        assert session.is_grass_valid is valid


class TestSessionEvent:
    def test_of(self):
        event = SessionEvent.of(EventType.BEGIN)
        assert event.type == EventType.BEGIN
        assert event.text is None
        assert event.focused is None

    def test_text_changed(self):
        event = SessionEvent.text_changed("hello")
        assert event.type == EventType.TEXT_CHANGED
        assert event.text == "hello"


class TestStateTransition:
    def test_screen_changed(self):
        session = Session(screen=Screen.CALIBRATING)
        changed = StateTransition(session, Screen.LANDING, EventType.BEGIN)
        same = StateTransition(session, Screen.CALIBRATING, EventType.CALIBRATION_TICK)
        assert changed.screen_changed is True
        assert same.screen_changed is False
        assert changed.accepted is True


class TestSessionView:
    def test_from_session(self):
        session = Session(
            screen=Screen.INTROSPECTION,
            device_profile=DeviceProfile.TOUCH,
            selected_prompt="prompt",
            input_text="typed",
        )
        view = SessionView.from_session(session, "/meadow.jpg")
        assert view.screen == Screen.INTROSPECTION
        assert view.prompt == "prompt"
        assert view.input_text == "typed"
        assert view.response == ""
        assert view.grass_asset == "/meadow.jpg"

    def test_to_dict_uses_plain_values(self):
        view = SessionView.from_session(Session())
        data = view.to_dict()
        assert data["screen"] == "landing"
        assert data["device_profile"] == "pointer"
        assert data["grass_asset"] == "/grass.jpg"
        assert set(data) == {
            "screen", "calibration_text", "calibration_progress", "grass_message",
            "grass_timer", "grass_asset", "device_profile", "prompt", "input_text",
            "response",
        }

    def test_views_compare_by_value(self):
        session = Session()
        assert SessionView.from_session(session) == SessionView.from_session(session)
