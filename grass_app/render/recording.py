"""In-memory render surface that keeps every frame."""

from typing import Optional

from ..state.models import Screen, SessionView
from .base import RenderSurface


class RecordingRenderSurface(RenderSurface):
    """Records rendered views; capability answers are plain attributes."""

    def __init__(
        self,
        name: str = "recording",
        coarse_pointer: Optional[bool] = None,
        focused: bool = True
    ):
        super().__init__(name)
        self.coarse_pointer = coarse_pointer
        self.focused = focused
        self.frames: list[SessionView] = []

    def render(self, view: SessionView) -> None:
        self.frames.append(view)
        self._render_count += 1

    def is_coarse_pointer(self) -> Optional[bool]:
        return self.coarse_pointer

    def has_focus(self) -> bool:
        return self.focused

    @property
    def last(self) -> Optional[SessionView]:
        return self.frames[-1] if self.frames else None

    def screens(self) -> list[Screen]:
        """Distinct screens in the order they were first shown."""
        seen: list[Screen] = []
        for frame in self.frames:
            if not seen or seen[-1] != frame.screen:
                seen.append(frame.screen)
        return seen

    def frames_on(self, screen: Screen) -> list[SessionView]:
        return [frame for frame in self.frames if frame.screen == screen]

    def clear(self) -> None:
        self.frames.clear()
