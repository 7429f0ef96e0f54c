# tower_jumper/game/clock.py
from __future__ import annotations
import itertools
from typing import Callable, Dict, Protocol

FrameCallback = Callable[[], None]


class FrameClock(Protocol):
    """requestAnimationFrame-style scheduler: one-shot callbacks run on the next frame."""
    def request(self, callback: FrameCallback) -> int: ...
    def cancel(self, handle: int) -> None: ...


class ManualFrameClock:
    """
    Frame clock driven by whoever owns the real loop (the pygame shell, the
    gym env, tests). `run_frame` runs the callbacks pending at call time;
    callbacks requested while running wait for the next frame.
    """
    def __init__(self):
        self._ids = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}
        self.frames = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_frame(self) -> int:
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback()
        self.frames += 1
        return len(due)
