"""Four band crossover EQ built from cascaded biquads and one-pole filters."""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

LEFT = 0
RIGHT = 1
_RESO_SCALES = (2.24697960, 0.80193774, 0.55495813)
_MIN_FREQ = 0.00025
_MAX_FREQ = 0.4999


def band_gain(knob: float) -> float:
    """Gain of a band from its knob; 0.5 is unity."""
    g = (knob - 0.5) * 2.0
    return 1.0 + (g * abs(g) * abs(g))


class Biquad:
    """Stereo lowpass biquad with separate state per channel."""

    def __init__(self) -> None:
        self.freq = 0.0
        self.reso = 0.0
        self.a0 = self.a1 = self.a2 = 0.0
        self.b1 = self.b2 = 0.0
        self._s1 = [0.0, 0.0]
        self._s2 = [0.0, 0.0]

    def set_coefficients(self, freq: float, reso: float) -> None:
        """Set the normalised cutoff (fraction of sample rate) and resonance."""
        self.freq = freq
        self.reso = reso
        k = math.tan(math.pi * freq)
        norm = 1.0 / (1.0 + k / reso + k * k)
        self.a0 = k * k * norm
        self.a1 = 2.0 * self.a0
        self.a2 = self.a0
        self.b1 = 2.0 * (k * k - 1.0) * norm
        self.b2 = (1.0 - k / reso + k * k) * norm

    def process(self, sample: float, channel: int = LEFT) -> float:
        """Filter one sample on the given channel (LEFT or RIGHT)."""
        if channel not in (LEFT, RIGHT):
            raise ValueError(f"channel must be {LEFT} or {RIGHT}, not {channel!r}")
        out = (sample * self.a0) + self._s1[channel]
        self._s1[channel] = (sample * self.a1) - (out * self.b1) + self._s2[channel]
        self._s2[channel] = (sample * self.a2) - (out * self.b2)
        return out


class SmoothEQ:
    """Three crossover stages of biquads followed by a one-pole stage."""

    def __init__(self) -> None:
        self.high = [Biquad() for _ in range(3)]
        self.mid = [Biquad() for _ in range(3)]
        self.low = [Biquad() for _ in range(3)]
        self._iir: List[List[float]] = [[0.0, 0.0] for _ in range(3)]
        self.gains: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
        self.coefs: Tuple[float, float, float] = (0.0, 0.0, 0.0)
        self.eq_off = True

    @staticmethod
    def _tune(biquads: Sequence[Biquad], f: float, q: float, sample_rate: float) -> float:
        freq = max(min((f ** 3 * 20000.0) / sample_rate, _MAX_FREQ), _MIN_FREQ)
        omega = 2.0 * math.pi * ((f ** 3 * 20000.0) / sample_rate)
        k = 2.0 - math.cos(omega)
        for biquad, scale in zip(biquads, _RESO_SCALES):
            biquad.set_coefficients(freq, scale * q)
        return -math.sqrt((k * k) - 1.0) + k

    def update(
        self, gains: Sequence[float], freqs: Sequence[float], sample_rate: float
    ) -> None:
        """Set knob values (high, high-mid, low-mid, bass) for gain and frequency."""
        treble, highmid, lowmid, bass = (band_gain(k) for k in gains)
        self.gains = (treble, highmid, lowmid, bass)
        self.coefs = (0.0, 0.0, 0.0)
        self.eq_off = all(g == 1.0 for g in self.gains)
        if self.eq_off:
            return
        tr, hm, lm, bs = (f - 0.5 for f in freqs)
        high_f = 0.75 + ((tr + tr + tr + hm) * 0.125)
        bass_f = 0.25 + ((lm + bs + bs + bs) * 0.125)
        mid_f = (high_f * 0.5) + (bass_f * 0.5) + ((hm + lm) * 0.125)
        high_q = max(min(1.0 + (hm - tr), 4.0), 0.125)
        mid_q = max(min(1.0 + (lm - hm), 4.0), 0.125)
        low_q = max(min(1.0 + (bs - lm), 4.0), 0.125)
        self.coefs = (
            self._tune(self.high, high_f, high_q, sample_rate),
            self._tune(self.mid, mid_f, mid_q, sample_rate),
            self._tune(self.low, bass_f, low_q, sample_rate),
        )

    def _mix(self, bass: float, lowmid: float, highmid: float, treble: float) -> float:
        tg, hmg, lmg, bg = self.gains
        return (bass * bg) + (lowmid * lmg) + (highmid * hmg) + (treble * tg)

    def _channel(self, treble: float, channel: int) -> float:
        for high, mid, low in zip(self.high, self.mid, self.low):
            highmid = high.process(treble, channel)
            treble -= highmid
            lowmid = mid.process(highmid, channel)
            highmid -= lowmid
            bass = low.process(lowmid, channel)
            lowmid -= bass
            treble = self._mix(bass, lowmid, highmid, treble)
        high_c, mid_c, low_c = self.coefs
        high_iir, mid_iir, low_iir = self._iir
        high_iir[channel] = (high_iir[channel] * high_c) + (treble * (1.0 - high_c))
        highmid = high_iir[channel]
        treble -= highmid
        mid_iir[channel] = (mid_iir[channel] * mid_c) + (highmid * (1.0 - mid_c))
        lowmid = mid_iir[channel]
        highmid -= lowmid
        low_iir[channel] = (low_iir[channel] * low_c) + (lowmid * (1.0 - low_c))
        bass = low_iir[channel]
        lowmid -= bass
        return self._mix(bass, lowmid, highmid, treble)

    def process(self, left: float, right: float) -> Tuple[float, float]:
        """Equalise one stereo sample; unchanged when all gains are unity."""
        if self.eq_off:
            return left, right
        return self._channel(left, LEFT), self._channel(right, RIGHT)