"""Busy states of a character and the progress kept for each."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class State(IntEnum):
    """What a character is busy doing; processed in this order each frame."""

    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    JUMP = 2
    ATTACK = 3
    DROP = 4
    FAST_MOVE = 5


@dataclass
class StateInfo:
    """The animation frame a busy state has reached."""

    frame: int = 0


@dataclass
class MoveStateInfo(StateInfo):
    """A walking state with the distance to cover per frame."""

    speed: float = 0.0