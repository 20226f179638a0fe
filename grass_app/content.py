"""
Fixed copy shown by the session screens.

All lists are tuples so they cannot change during a session. Selection
from PROMPTS and RESPONSES goes through utils.selection.pick_uniform.
"""

PROMPTS = (
    "Who do you miss but pretend you don’t?",
    "What was the last time you felt normal?",
    "Name one person you should text but won’t.",
    "Be honest. Are you cooked?",
    "What version of you do you think about at night?",
    "Do you think they remember you?",
)

RESPONSES = (
    "Damn.",
    "Yeah.",
    "That tracks.",
    "Fair enough.",
    "Oof.",
    "Whatever.",
    "Sure.",
)

CALIBRATION_MESSAGES = (
    "Calibrating your emotional state…",
    "Grabbing coffee…",
    "Pretending to work…",
    "Judging your browsing history…",
    "Almost there (that's a lie)…",
    "Forgot what I was doing…",
    "Realigning chakras…",
    "Buffering emotional damage…",
    "Do you really have nothing better to do?",
)

CALIBRATION_JUMP_MESSAGE = "Wait, nevermind…"
CALIBRATION_DONE_MESSAGE = "Yeah okay close enough."

# Grass messages, in priority order of the condition they report
GRASS_FOCUS_LOST_MESSAGE = "Don’t cheat."
GRASS_MOVING_MESSAGE = "Relax."
GRASS_NOT_TOUCHING_POINTER_MESSAGE = "Touch the grass."
GRASS_NOT_TOUCHING_TOUCH_MESSAGE = "Hold the grass."
GRASS_DEFAULT_MESSAGE = "Look at this grass."

LANDING_TITLE = "Touch Grass Simulator"
LANDING_TAGLINE = "“An app for people who refuse to go outside.”"
LANDING_BEGIN_LABEL = "Begin Healing"

INTROSPECTION_SUBMIT_LABEL = "I’m Done Thinking"

VALIDATION_HEADLINE = "Session Complete 🌱"
VALIDATION_FOOTER = "You are now 0.7% more grounded."
VALIDATION_RESET_LABEL = "Leave"
