"""
System failure error classifications for unrecoverable errors.

These exceptions represent broken invariants in the session state machine
or its timer substrate. A reload is the only way out of them.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateTransitionError(SystemFailureError):
    """Screen transition that would break the forward-only screen order."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class TimerScopeError(SystemFailureError):
    """Timer or listener acquired on a screen scope that was already released."""

    def __init__(self, message: str, scope_screen: Optional[str] = None,
                 resource: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.scope_screen = scope_screen
        self.resource = resource
