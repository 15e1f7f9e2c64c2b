"""Small scale helpers the Bokeh ranges are derived from."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)


def tick_increment(start: float, stop: float, count: int = 10) -> float:
    """Step between round ticks; negative values encode ``1 / step``."""
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= E10 else 5 if error >= E5 else 2 if error >= E2 else 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def nice_domain(start: float, stop: float, count: int = 10) -> Tuple[float, float]:
    """Extend ``[start, stop]`` outward to round tick values."""
    if not (math.isfinite(start) and math.isfinite(stop)) or stop <= start:
        return start, stop
    previous = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == previous:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        previous = step
    return start + 0.0, stop + 0.0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class BandScale:
    """Evenly spaced bands over a numeric range, with the same inner and outer padding."""

    domain: List[str]
    range: Tuple[float, float] = (0.0, 1.0)
    padding: float = 0.1
    _index: Dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.domain = list(self.domain)
        self._index = {label: i for i, label in enumerate(self.domain)}

    @property
    def step(self) -> float:
        n = len(self.domain)
        r0, r1 = self.range
        return (r1 - r0) / max(1.0, n - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def start(self, label: str) -> float:
        return self.range[0] + self.step * (self.padding + self._index[label])

    def center(self, label: str) -> float:
        return self.start(label) + self.bandwidth / 2

    def centers(self) -> List[float]:
        return [self.center(label) for label in self.domain]

    def locate(self, x: float) -> Optional[str]:
        """Return the label whose band contains ``x``, or None in the padding."""
        for label in self.domain:
            left = self.start(label)
            if left <= x <= left + self.bandwidth:
                return label
        return None

    def with_domain(self, domain: Sequence[str]) -> "BandScale":
        return BandScale(domain=list(domain), range=self.range, padding=self.padding)
