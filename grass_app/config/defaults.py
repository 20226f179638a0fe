"""Default configuration parameters for the grass session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CalibrationParams:
    """Fake calibration progress curve parameters."""
    tick_ms: int = 100                       # Wall time per calibration tick
    ticks_per_message: int = 15              # 1.5s per message at 100ms ticks

    # Jump event
    jump_threshold_pct: float = 85.0         # Progress that fires the one-time jump
    rewind_fraction: float = 0.65            # Fraction of total ticks rewound to

    settle_delay_ms: int = 1500              # Pause on 100% before the grass screen


@dataclass(frozen=True)
class GrassParams:
    """Grass countdown and validity parameters."""
    tick_ms: int = 1000                      # Countdown tick

    # Countdown start per device profile, in ticks
    touch_duration_s: int = 15
    pointer_duration_s: int = 45

    # Pointer movement window
    movement_window_ms: int = 1000           # Counter reset period
    movement_threshold: int = 40             # Moves above this mean "too much"

    image_asset: str = "/grass.jpg"

    def duration_for(self, is_touch: bool) -> int:
        """Initial countdown for a device profile."""
        return self.touch_duration_s if is_touch else self.pointer_duration_s


@dataclass(frozen=True)
class SessionConfig:
    """Complete session configuration."""
    calibration: CalibrationParams
    grass: GrassParams


def get_default_config() -> SessionConfig:
    """Get the default configuration instance."""
    return SessionConfig(
        calibration=CalibrationParams(),
        grass=GrassParams(),
    )
