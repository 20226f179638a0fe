"""
Session state machine and timer runtime module.

Manages the screen lifecycle LANDING → CALIBRATING → GRASS → INTROSPECTION
→ VALIDATION and the scoped timers and listeners each screen owns.
"""
