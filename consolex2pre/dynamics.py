"""Bezier-reconstructed compressor and gate with metering lights."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

MIN_REZ = 0.0001
MIN_GATE = 0.000001
_LIGHT_SCALE = 64.0


@dataclass(frozen=True)
class Lights:
    """Indicator levels for one metering window."""

    comp: float
    gate: float
    attack: float
    release: float


@dataclass
class _Channel:
    peak: float = 0.0
    floor: float = 0.0
    gate: float = 2.0
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    ctrl: float = 0.0

    def shift(self) -> None:
        if self.gate < 1.0:
            self.ctrl /= self.gate
        self.c = self.b
        self.b = self.a
        self.a = self.ctrl
        self.ctrl = 0.0
        self.peak = 0.0

    def curve(self, cycle: float) -> float:
        cb = (self.c * (1.0 - cycle)) + (self.b * cycle)
        ba = (self.b * (1.0 - cycle)) + (self.a * cycle)
        return (self.b + (cb * (1.0 - cycle)) + (ba * cycle)) * 0.5


def _clamp(value: float, low: float, high: float) -> float:
    return max(min(value, high), low)


class Dynamics:
    """Stereo compressor with gate, sharing one control cycle."""

    def __init__(self) -> None:
        self._left = _Channel()
        self._right = _Channel()
        self._cycle = 1.0
        self.threshold = 0.0
        self.attack = MIN_REZ
        self.release = MIN_REZ
        self.gate = 0.0
        self.overallscale = 1.0
        self._max_comp = 1.0
        self._max_gate = 1.0
        self._max_attack = 0.0
        self._max_release = 0.0
        self._base_comp = 0.0
        self._base_gate = 0.0

    def configure(self, threshold: float, attack: float, release: float,
                  gate: float, overallscale: float) -> None:
        """Set the knob values (each 0..1) for the coming block."""
        self.threshold = ((1.0 - threshold) ** 4.0) * 8.0
        self.attack = _clamp(((1.0 - attack) ** 4.0) / overallscale, MIN_REZ, 1.0)
        self.release = _clamp(((1.0 - release) ** 4.0) / overallscale, MIN_REZ, 1.0)
        self.gate = gate ** 4.0
        self.overallscale = overallscale

    def _track_gate(self, channel: _Channel, sample: float) -> None:
        rate = min(self.attack, self.release)
        if abs(sample) > self.gate:
            channel.gate = self.overallscale / rate
        else:
            channel.gate = max(MIN_GATE, channel.gate - rate)

    def process(self, left: float, right: float) -> Tuple[float, float]:
        """Compress and gate one stereo sample."""
        for sample in (right, left):
            level = abs(sample * _LIGHT_SCALE)
            if self._base_comp < level:
                self._base_comp = min(level, 1.0)
            if self._base_gate < level:
                self._base_gate = min(level, 1.0)

        self._track_gate(self._left, left)
        self._track_gate(self._right, right)
        self._max_gate = min(self._max_gate, self._left.gate, self._right.gate)

        over = max(abs(left), abs(right)) > self.threshold
        self._max_attack = _clamp(
            self._max_attack + (-self.attack if over else self.attack), 0.0, 1.0)
        self._max_release = _clamp(
            self._max_release + (-self.release if over else self._max_attack), 0.0, 1.0)

        if self.threshold > 0.0:
            left *= self.threshold + 1.0
            right *= self.threshold + 1.0

        for channel, sample in ((self._left, left), (self._right, right)):
            channel.peak = max(channel.peak, abs(sample))
            channel.floor = max(channel.floor - self.release, abs(sample))
        self._cycle += self.attack
        self._left.ctrl += self._left.floor * self.attack
        self._right.ctrl += self._right.floor * self.attack

        if self._cycle > 1.0:
            self._cycle -= 1.0
            self._left.shift()
            self._right.shift()

        if self.threshold > 0.0:
            curve_l = self._left.curve(self._cycle)
            curve_r = self._right.curve(self._cycle)
            left *= 1.0 - min(curve_l * self.threshold, 1.0)
            right *= 1.0 - min(curve_r * self.threshold, 1.0)
            self._max_comp = min(self._max_comp, 1.0 - curve_l ** 2.0, 1.0 - curve_r ** 2.0)
        return left, right

    def lights(self) -> Lights:
        """Report the indicator levels and start a new metering window."""
        report = Lights(
            comp=self._max_comp,
            gate=1.0 - self._max_gate,
            attack=self._max_attack,
            release=self._max_release,
        )
        self._max_comp = self._base_comp
        self._max_gate = self._base_gate
        self._base_comp = 0.0
        self._base_gate = 0.0
        return report