"""Signals, keyboard dispatch and a millisecond scheduler."""

from __future__ import annotations

import heapq
import itertools
from enum import IntEnum
from typing import Any, Callable


class Signal:
    """A list of callables that are invoked in connection order on emit."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        self._slots.append(slot)

    def disconnect(self, slot: Callable[..., Any]) -> None:
        """Remove one connection of ``slot``; raises ValueError if absent."""
        self._slots.remove(slot)

    def emit(self, *args: Any) -> None:
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)


class Key(IntEnum):
    """Key codes understood by the game."""

    SPACE = 0x20
    A = 0x41
    D = 0x44
    J = 0x4A
    K = 0x4B
    L = 0x4C


class KeyDispatcher:
    """Turns raw key events into press/release signals, dropping auto-repeats."""

    def __init__(self) -> None:
        self.pressed = Signal()
        self.released = Signal()

    def press(self, key: int, auto_repeat: bool = False) -> bool:
        """Emit ``pressed`` unless the event is an auto-repeat; return whether it was emitted."""
        if auto_repeat:
            return False
        self.pressed.emit(key)
        return True

    def release(self, key: int, auto_repeat: bool = False) -> bool:
        """Emit ``released`` unless the event is an auto-repeat; return whether it was emitted."""
        if auto_repeat:
            return False
        self.released.emit(key)
        return True


class Scheduler:
    """Runs callbacks once their delay, measured in milliseconds, has passed."""

    def __init__(self, now_ms: int = 0) -> None:
        self.now_ms = now_ms
        self._queue: list[tuple[int, int, Callable[[], Any]]] = []
        self._order = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], Any]) -> None:
        if delay_ms < 0:
            raise ValueError("delay must not be negative")
        heapq.heappush(self._queue, (self.now_ms + delay_ms, next(self._order), callback))

    def run_due(self, now_ms: int) -> int:
        """Advance the clock and run every callback that is due; return how many ran."""
        self.now_ms = max(self.now_ms, now_ms)
        ran = 0
        while self._queue and self._queue[0][0] <= self.now_ms:
            _, _, callback = heapq.heappop(self._queue)
            callback()
            ran += 1
        return ran

    def cancel_all(self) -> None:
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)