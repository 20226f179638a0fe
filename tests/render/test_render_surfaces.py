"""Tests for render surfaces."""

import json
from io import StringIO

import pytest

from grass_app.content import LANDING_TITLE, VALIDATION_RESET_LABEL
from grass_app.render.recording import RecordingRenderSurface
from grass_app.render.stdout_surface import StdoutRenderSurface
from grass_app.state.models import Screen, Session, SessionView


def view_for(**changes) -> SessionView:
    return SessionView.from_session(Session(session_id="render").with_changes(**changes))


class TestStdoutRenderSurface:
    """Test the line-per-view stdout surface."""

    def test_pretty_landing(self):
        stream = StringIO()
        StdoutRenderSurface(stream=stream).render(view_for())
        line = stream.getvalue().strip()
        assert line.startswith(LANDING_TITLE)

    def test_pretty_calibration_bar(self):
        stream = StringIO()
        surface = StdoutRenderSurface(stream=stream)
        surface.render(view_for(
            screen=Screen.CALIBRATING,
            calibration_progress=50.0,
            calibration_text="Locating grass",
        ))
        assert stream.getvalue().strip() == "[##########----------]  50.0% Locating grass"

    def test_pretty_grass(self):
        stream = StringIO()
        StdoutRenderSurface(stream=stream).render(view_for(screen=Screen.GRASS, grass_timer=12))
        assert stream.getvalue().strip() == "(/grass.jpg) Look at this grass. 12s"

    def test_pretty_validation(self):
        stream = StringIO()
        StdoutRenderSurface(stream=stream).render(
            view_for(screen=Screen.VALIDATION, selected_response="Nice.")
        )
        line = stream.getvalue().strip()
        assert line.startswith("Nice.")
        assert line.endswith(f"[{VALIDATION_RESET_LABEL}]")

    def test_json_format(self):
        stream = StringIO()
        surface = StdoutRenderSurface(format="json", stream=stream)
        surface.render(view_for(screen=Screen.INTROSPECTION, selected_prompt="Why?"))

        data = json.loads(stream.getvalue())
        assert data["screen"] == "introspection"
        assert data["prompt"] == "Why?"
        assert data["device_profile"] == "pointer"

    def test_identical_views_printed_once(self):
        stream = StringIO()
        surface = StdoutRenderSurface(stream=stream)
        surface.render(view_for())
        surface.render(view_for())
        surface.render(view_for(screen=Screen.CALIBRATING))

        assert len(stream.getvalue().splitlines()) == 2
        assert surface.get_stats()["render_count"] == 2

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError):
            StdoutRenderSurface(format="xml")

    def test_capabilities(self):
        surface = StdoutRenderSurface(stream=StringIO(), coarse_pointer=True)
        assert surface.is_coarse_pointer() is True
        assert surface.has_focus() is True


class TestRecordingRenderSurface:
    def test_records_frames_and_screens(self):
        surface = RecordingRenderSurface()
        surface.render(view_for())
        surface.render(view_for(screen=Screen.CALIBRATING))
        surface.render(view_for(screen=Screen.CALIBRATING, calibration_progress=1.0))
        surface.render(view_for())

        assert len(surface.frames) == 4
        assert surface.screens() == [Screen.LANDING, Screen.CALIBRATING, Screen.LANDING]
        assert len(surface.frames_on(Screen.CALIBRATING)) == 2
        assert surface.last.screen == Screen.LANDING

        surface.clear()
        assert surface.last is None

    def test_defaults(self):
        surface = RecordingRenderSurface()
        assert surface.is_coarse_pointer() is None
        assert surface.has_focus() is True
