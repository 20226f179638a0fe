"""
Error classification for the grass session core.

The session itself has no user-visible failure states. These exceptions
mark internal invariant violations and bad configuration only.
"""

from .configuration import ConfigurationError
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    TimerScopeError,
)

__all__ = [
    # Configuration
    "ConfigurationError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    "TimerScopeError",
]
