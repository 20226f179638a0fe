"""
Utility functions module.

Small helpers shared by the state machine and the engine.
"""
