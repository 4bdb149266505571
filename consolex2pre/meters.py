"""Level, slew and zero-crossing meters fed one stereo sample at a time."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

from .params import AudioMessageKind, AudioToUIMessage

REFERENCE_RATE = 44100.0
RMS_WINDOW = 1881.0
SLEW_SCALE = 28000.0


@dataclass(frozen=True)
class MeterReport:
    """Meter readings for one window, scaled as the display expects."""

    slew_left: float
    slew_right: float
    peak_left: float
    peak_right: float
    rms_left: float
    rms_right: float
    zero_left: float
    zero_right: float

    def messages(self) -> List[AudioToUIMessage]:
        """The readings as messages for the interface, in sending order."""
        pairs = (
            (AudioMessageKind.SLEW_LEFT, self.slew_left),
            (AudioMessageKind.SLEW_RIGHT, self.slew_right),
            (AudioMessageKind.PEAK_LEFT, self.peak_left),
            (AudioMessageKind.PEAK_RIGHT, self.peak_right),
            (AudioMessageKind.RMS_LEFT, self.rms_left),
            (AudioMessageKind.RMS_RIGHT, self.rms_right),
            (AudioMessageKind.ZERO_LEFT, self.zero_left),
            (AudioMessageKind.ZERO_RIGHT, self.zero_right),
        )
        return [AudioToUIMessage(kind, value) for kind, value in pairs]


@dataclass
class _ChannelMeter:
    zero_scale: float
    sample_rate: float
    slew: float = 0.0
    peak: float = 0.0
    rms: float = 0.0
    previous: float = 0.0
    zero: float = 0.0
    longest_zero: float = 0.0
    was_positive: bool = False

    def update(self, sample: float) -> None:
        slew = (abs(sample - self.previous) / SLEW_SCALE) * self.sample_rate
        if slew > self.slew:
            self.slew = slew
        self.previous = sample
        rectified = abs(sample)
        if rectified > self.peak:
            self.peak = rectified
        self.rms += rectified * rectified
        self.zero += self.zero_scale
        if self.longest_zero < self.zero:
            self.longest_zero = self.zero
        if self.was_positive and sample < 0.0:
            self.was_positive = False
            self.zero = 0.0
        elif not self.was_positive and sample > 0.0:
            self.was_positive = True
            self.zero = 0.0

    def reset_window(self) -> None:
        self.slew = 0.0
        self.peak = 0.0
        self.rms = 0.0
        self.zero = 0.0
        self.longest_zero = 0.0


@dataclass
class Meters:
    """Accumulates meter readings until a window's worth of samples is in."""

    sample_rate: float
    count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not self.sample_rate > 0.0:
            raise ValueError("sample_rate must be positive")
        zero_scale = (1.0 / self.sample_rate) * REFERENCE_RATE
        self.window = (RMS_WINDOW / REFERENCE_RATE) * self.sample_rate
        self._left = _ChannelMeter(zero_scale, self.sample_rate)
        self._right = _ChannelMeter(zero_scale, self.sample_rate)

    def update(self, left: float, right: float) -> None:
        """Feed one output sample pair."""
        self._left.update(left)
        self._right.update(right)
        self.count += 1

    def ready(self) -> bool:
        """True once more samples than one window have been fed."""
        return self.count > self.window

    def take_report(self) -> MeterReport:
        """Return the window's readings and start a new window."""
        count = self.count

        def rms(total: float) -> float:
            return math.sqrt(math.sqrt(total / count)) if count else 0.0

        report = MeterReport(
            slew_left=self._left.slew,
            slew_right=self._right.slew,
            peak_left=math.sqrt(self._left.peak),
            peak_right=math.sqrt(self._right.peak),
            rms_left=rms(self._left.rms),
            rms_right=rms(self._right.rms),
            zero_left=self._left.longest_zero,
            zero_right=self._right.longest_zero,
        )
        self._left.reset_window()
        self._right.reset_window()
        self.count = 0
        return report