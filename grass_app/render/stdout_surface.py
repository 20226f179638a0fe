"""Standard output render surface."""

import json
import sys
from typing import Optional, TextIO

from ..content import (
    INTROSPECTION_SUBMIT_LABEL,
    LANDING_BEGIN_LABEL,
    LANDING_TAGLINE,
    LANDING_TITLE,
    VALIDATION_FOOTER,
    VALIDATION_HEADLINE,
    VALIDATION_RESET_LABEL,
)
from ..state.models import Screen, SessionView
from .base import RenderSurface

BAR_WIDTH = 20


class StdoutRenderSurface(RenderSurface):
    """Prints one line per changed view, either pretty or as JSON."""

    def __init__(
        self,
        name: str = "stdout",
        format: str = "pretty",
        stream: Optional[TextIO] = None,
        coarse_pointer: Optional[bool] = None
    ):
        super().__init__(name)
        if format not in ("pretty", "json"):
            raise ValueError(f"Unsupported format: {format}")
        self.format = format
        self.stream = stream or sys.stdout
        self.coarse_pointer = coarse_pointer
        self._last_view: Optional[SessionView] = None

    def render(self, view: SessionView) -> None:
        """Print the view unless it matches the previous one."""
        if view == self._last_view:
            return
        self._last_view = view

        print(self._format_view(view), file=self.stream, flush=True)
        self._render_count += 1

    def is_coarse_pointer(self) -> Optional[bool]:
        return self.coarse_pointer

    def _format_view(self, view: SessionView) -> str:
        if self.format == "json":
            return json.dumps(view.to_dict(), ensure_ascii=False)

        if view.screen == Screen.LANDING:
            return f"{LANDING_TITLE} | {LANDING_TAGLINE} [{LANDING_BEGIN_LABEL}]"

        if view.screen == Screen.CALIBRATING:
            filled = int(view.calibration_progress / 100 * BAR_WIDTH)
            bar = "#" * filled + "-" * (BAR_WIDTH - filled)
            return f"[{bar}] {view.calibration_progress:5.1f}% {view.calibration_text}"

        if view.screen == Screen.GRASS:
            return f"({view.grass_asset}) {view.grass_message} {view.grass_timer}s"

        if view.screen == Screen.INTROSPECTION:
            return f"{view.prompt} > {view.input_text} [{INTROSPECTION_SUBMIT_LABEL}]"

        return (f"{view.response} {VALIDATION_HEADLINE} {VALIDATION_FOOTER} "
                f"[{VALIDATION_RESET_LABEL}]")
