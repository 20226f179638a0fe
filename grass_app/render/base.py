"""Base class for render surfaces."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog

from ..state.models import SessionView


class RenderSurface(ABC):
    """
    Something that can show exactly one screen at a time.

    Surfaces hold no logic. They draw the view they are given and answer
    two capability questions for the engine.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"render.{name}")
        self._render_count = 0

    @abstractmethod
    def render(self, view: SessionView) -> None:
        """
        Draw one view.

        Args:
            view: Snapshot of everything the current screen displays
        """

    def is_coarse_pointer(self) -> Optional[bool]:
        """Whether the primary input is a coarse (touch) pointer; None if unknown."""
        return None

    def has_focus(self) -> bool:
        """Whether the window currently has focus."""
        return True

    def get_stats(self) -> dict[str, Any]:
        """Get render statistics."""
        return {
            "name": self.name,
            "render_count": self._render_count,
        }
