"""Dispatcher state machine."""

from enum import Enum, auto


class State(Enum):
    IDLE = auto()
    SCHEDULED = auto()
    FIRING = auto()
    CANCELLED = auto()
