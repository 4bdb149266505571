"""Smoothed highpass and lowpass cascades of two-pole filter stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

HIGHPASS_STAGES = 21
LOWPASS_STAGES = 13
MIN_LOWPASS = 0.002


def _zeros(count: int) -> List[float]:
    return [0.0] * count


@dataclass
class _FilterBank:
    """Position and angle state for a cascade of stages on both channels."""

    size: int
    position: List[List[float]] = field(init=False)
    angle: List[List[float]] = field(init=False)
    bypassed: bool = False

    def __post_init__(self) -> None:
        self.position = [_zeros(self.size), _zeros(self.size)]
        self.angle = [_zeros(self.size), _zeros(self.size)]

    def clear(self) -> None:
        for channel in (0, 1):
            self.position[channel] = _zeros(self.size)
            self.angle[channel] = _zeros(self.size)


def _stage(position: List[float], angle: List[float], index: int,
           sample: float, freq: float) -> float:
    angle[index] = (angle[index] * (1.0 - freq)) + ((sample - position[index]) * freq)
    sample = ((position[index] + (angle[index] * freq)) * (1.0 - freq)) + (sample * freq)
    position[index] = ((position[index] + (angle[index] * freq)) * (1.0 - freq)) + (sample * freq)
    return sample


class Cabs:
    """Stereo highpass and lowpass whose cutoffs glide across each block."""

    def __init__(self) -> None:
        self.lowpass_from = 1.0
        self.lowpass_to = 1.0
        self.highpass_from = 0.0
        self.highpass_to = 0.0
        self._high = _FilterBank(HIGHPASS_STAGES + 1)
        self._low = _FilterBank(LOWPASS_STAGES + 1)

    def set_knobs(self, lowpass: float, highpass: float, overallscale: float) -> None:
        """Start a new block: the previous targets become the glide start points."""
        self.lowpass_from = self.lowpass_to
        self.lowpass_to = max(lowpass, MIN_LOWPASS) ** overallscale
        self.highpass_from = self.highpass_to
        self.highpass_to = highpass ** (overallscale + 2.0)

    def _highpass(self, left: float, right: float, freq: float) -> Tuple[float, float]:
        bank = self._high
        if freq > 0.0:
            outputs = []
            for channel, sample in ((0, left), (1, right)):
                low = sample
                position, angle = bank.position[channel], bank.angle[channel]
                for index in range(HIGHPASS_STAGES):
                    low = _stage(position, angle, index, low, freq)
                    sample -= low * (1.0 / HIGHPASS_STAGES)
                outputs.append(sample)
            bank.bypassed = False
            return outputs[0], outputs[1]
        if not bank.bypassed:
            bank.bypassed = True
            bank.clear()
        return left, right

    def _lowpass(self, left: float, right: float, freq: float) -> Tuple[float, float]:
        bank = self._low
        if freq < 1.0:
            outputs = []
            for channel, sample in ((0, left), (1, right)):
                position, angle = bank.position[channel], bank.angle[channel]
                for index in range(LOWPASS_STAGES):
                    sample = _stage(position, angle, index, sample, freq)
                outputs.append(sample)
            bank.bypassed = False
            return outputs[0], outputs[1]
        if not bank.bypassed:
            bank.bypassed = True
            bank.clear()
        return left, right

    def process(self, left: float, right: float, position: float) -> Tuple[float, float]:
        """Filter one stereo sample; ``position`` is its place in the block, 0..1."""
        hfreq = (self.highpass_from * position) + (self.highpass_to * (1.0 - position))
        left, right = self._highpass(left, right, hfreq)
        lfreq = (self.lowpass_from * position) + (self.lowpass_to * (1.0 - position))
        return self._lowpass(left, right, lfreq)