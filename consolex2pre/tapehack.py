"""Input trim, slew-dependent darkening, discontinuity and tape saturation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

DSC_BUF = 256
SATURATION_CLAMP = 2.305929007734908
GOLDEN_ANGLE = 2.39996322972865332223
MIN_DISCONTINUITY = 0.00001
_AVERAGE_SIZES = (32, 16, 8, 4, 2)
_TRIM_SCALES = {0: 0.5, 1: 1.0, 2: 2.0, 3: 4.0, 4: 8.0}


def trim_gain(trim: float, more: float) -> float:
    """Input gain set by the Trim and More knobs."""
    gain = (more * 2.0) + 1.0
    return gain * _TRIM_SCALES.get(int(trim * 4.0), 1.0)


def discontinuity_amount(more: float, overallscale: float) -> float:
    """Scaling into the discontinuity stage, never below a small floor."""
    return max(((more * 0.42) ** 3.0) * overallscale, MIN_DISCONTINUITY)


def taylor_saturate(sample: float) -> float:
    """Clamp and bend a sample with a truncated sine series."""
    sample = max(min(sample, SATURATION_CLAMP), -SATURATION_CLAMP)
    addtwo = sample * sample
    empower = sample * addtwo
    sample -= empower / 6.0
    empower *= addtwo
    sample += empower / 69.0
    empower *= addtwo
    sample -= empower / 2530.08
    empower *= addtwo
    sample += empower / 224985.6
    empower *= addtwo
    sample -= empower / 9979200.0
    return sample


@dataclass
class _Channel:
    averages: List[List[float]] = field(
        default_factory=lambda: [[0.0] * size for size in _AVERAGE_SIZES]
    )
    last_slew: float = 0.0
    last_sample: float = 0.0
    delay: List[float] = field(default_factory=lambda: [0.0] * (DSC_BUF + 5))
    delay_pos: float = 0.0
    delay_index: int = 1

    def darken(self, sample: float, position: int, spacing: int) -> float:
        dark = sample
        for size, buffer in zip(_AVERAGE_SIZES, self.averages):
            if spacing > size - 1:
                buffer[position % size] = dark
                dark = sum(buffer) / size
        return dark

    def slew_weight(self, sample: float, overallscale: float) -> float:
        self.last_slew += abs(self.last_sample - sample)
        self.last_sample = sample
        weight = min(
            self.last_slew * self.last_slew * (0.0635 - (overallscale * 0.0018436)), 1.0
        )
        self.last_slew = max(self.last_slew * 0.78, GOLDEN_ANGLE)
        return weight

    def _tap(self, delay: int) -> float:
        index = self.delay_index - delay
        if index < 0:
            index += DSC_BUF
        return self.delay[index]

    def discontinuity(self, sample: float, amount: float) -> float:
        sample *= amount
        self.delay[self.delay_index] = sample
        self.delay_pos *= 0.5
        self.delay_pos += abs((sample * ((sample * 0.25) - 0.5)) * 0.5)
        if not self.delay_pos <= 1.0:
            self.delay_pos = 1.0
        scaled = self.delay_pos * DSC_BUF
        delay = math.floor(scaled)
        frac = scaled - delay
        out = self._tap(delay) * (1.0 - frac)
        out += self._tap(delay + 1) * frac
        self.delay_index += 1
        if self.delay_index >= DSC_BUF:
            self.delay_index = 0
        return out / amount


class TapeHack:
    """Stereo darkening, discontinuity and saturation with running state."""

    def __init__(self) -> None:
        self._left = _Channel()
        self._right = _Channel()
        self._position = 0

    def process(
        self,
        left: float,
        right: float,
        spacing: int,
        overallscale: float,
        discontinuity: float,
    ) -> Tuple[float, float]:
        """Process one already trimmed stereo sample."""
        if self._position > 31:
            self._position = 0
        channels = ((self._left, left), (self._right, right))
        darks = [ch.darken(sample, self._position, spacing) for ch, sample in channels]
        self._position += 1
        results = []
        for (ch, sample), dark in zip(channels, darks):
            weight = ch.slew_weight(sample, overallscale)
            sample = (sample * (1.0 - weight)) + (dark * weight)
            sample = ch.discontinuity(sample, discontinuity)
            results.append(taylor_saturate(sample))
        return results[0], results[1]