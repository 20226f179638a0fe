"""
Grass App - Touch Grass Simulator session core

A small, timer-driven session state machine behind a novelty "touch grass"
experience: landing, fake calibration, a grass countdown gated on focus,
pointer calm and touch, an introspection prompt and a canned validation.
"""

__version__ = "0.1.0"
__author__ = "Grass App Team"
