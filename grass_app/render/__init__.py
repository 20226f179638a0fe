"""
Render surfaces: presentation-only consumers of SessionView snapshots.
"""
from .base import RenderSurface
from .recording import RecordingRenderSurface
from .stdout_surface import StdoutRenderSurface

__all__ = ["RenderSurface", "RecordingRenderSurface", "StdoutRenderSurface"]
