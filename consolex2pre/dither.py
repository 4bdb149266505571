"""Xorshift noise source and floating point dither."""

from __future__ import annotations

import math
import random
import struct
from typing import Optional, Tuple

_MASK32 = 0xFFFFFFFF
_RAND_MAX = 0x7FFFFFFF
_MIN_SEED = 16386
_NOISE_CENTRE = 0x7FFFFFFF
_SCALE_SINGLE = 5.5e-36
_SCALE_DOUBLE = 1.1e-44


def xorshift32(state: int) -> int:
    """Advance a 32-bit xorshift generator by one step."""
    state &= _MASK32
    state ^= (state << 13) & _MASK32
    state ^= state >> 17
    state ^= (state << 5) & _MASK32
    return state


def initial_seed(rng: Optional[random.Random] = None) -> int:
    """Pick a start state of at least 16386, as a fresh instance does."""
    source = rng if rng is not None else random
    seed = 1
    while seed < _MIN_SEED:
        seed = (source.randint(0, _RAND_MAX) * _MASK32) & _MASK32
    return seed


def _exponent(sample: float, double_precision: bool) -> int:
    if not double_precision:
        try:
            sample = struct.unpack("<f", struct.pack("<f", sample))[0]
        except OverflowError:
            return 0
    if not math.isfinite(sample):
        return 0
    return math.frexp(sample)[1]


def dither_sample(sample: float, state: int, double_precision: bool = False) -> Tuple[float, int]:
    """Add noise scaled to the sample's exponent.

    Returns the dithered sample and the advanced noise state.
    """
    expon = _exponent(sample, double_precision)
    state = xorshift32(state)
    scale = _SCALE_DOUBLE if double_precision else _SCALE_SINGLE
    noise = (state - _NOISE_CENTRE) * scale
    try:
        offset = math.ldexp(noise, expon + 62)
    except OverflowError:
        offset = math.copysign(math.inf, noise) if noise else math.nan
    return sample + offset, state