"""Frame-stepped animations driven by Bokeh periodic callbacks."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from bokeh.document import Document

from gtd_charts.config import ANIMATION_FRAME_MS

logger = logging.getLogger(__name__)


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


@dataclass
class Tween:
    start: float
    end: float
    duration: float
    delay: float = 0.0

    @property
    def finish(self) -> float:
        return self.delay + self.duration

    def value_at(self, elapsed: float) -> float:
        if elapsed <= self.delay:
            return self.start
        if self.duration <= 0:
            return self.end
        t = (elapsed - self.delay) / self.duration
        if t >= 1:
            return self.end
        return self.start + (self.end - self.start) * ease_cubic_in_out(t)


class Animator:
    """Run one animation at a time on a document.

    Without a document every animation jumps straight to its last frame.
    Starting a new animation interrupts the running one.
    """

    def __init__(
        self,
        doc: Optional[Document] = None,
        frame_ms: int = ANIMATION_FRAME_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.doc = doc
        self.frame_ms = frame_ms
        self.clock = clock
        self._callback = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def run(self, frame: Callable[[float], None], duration_ms: float) -> None:
        self.stop()
        if self.doc is None:
            frame(duration_ms)
            return

        started = self.clock()

        def tick() -> None:
            elapsed = (self.clock() - started) * 1000
            frame(min(elapsed, duration_ms))
            if elapsed >= duration_ms:
                self.stop()

        frame(0.0)
        self._callback = self.doc.add_periodic_callback(tick, self.frame_ms)

    def stop(self) -> None:
        if self._callback is None:
            return
        try:
            self.doc.remove_periodic_callback(self._callback)
        except ValueError:
            logger.debug("Periodic callback already removed")
        self._callback = None
