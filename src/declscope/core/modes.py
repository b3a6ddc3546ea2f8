"""Behavioral switches shared by the resolution engine and its configuration."""

from enum import Enum


class TraversalDirection(str, Enum):
    """Order in which inherited members appear relative to local ones."""

    TOP_DOWN = "TOP_DOWN"  # ancestors and interfaces first
    BOTTOM_UP = "BOTTOM_UP"  # local declarations first


class CyclePolicy(str, Enum):
    """What to do when a nested class extends one of its enclosing classes."""

    FAIL = "FAIL"
    ABORT_BRANCH = "ABORT_BRANCH"
