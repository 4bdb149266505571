import math
import random

import pytest

from consolex2pre.tapehack import (
    MIN_DISCONTINUITY,
    SATURATION_CLAMP,
    TapeHack,
    discontinuity_amount,
    taylor_saturate,
    trim_gain,
)


@pytest.mark.parametrize("more", [0.0, 0.3, 1.0])
def test_trim_steps_scale_the_unity_setting(more):
    unity = trim_gain(0.25, more)
    assert unity == (more * 2.0) + 1.0
    assert trim_gain(0.0, more) == unity * 0.5
    assert trim_gain(0.5, more) == unity * 2.0
    assert trim_gain(0.75, more) == unity * 4.0
    assert trim_gain(1.0, more) == unity * 8.0


def test_discontinuity_floor():
    assert discontinuity_amount(0.0, 1.0) == MIN_DISCONTINUITY


def test_discontinuity_grows_with_more():
    assert discontinuity_amount(1.0, 1.0) > discontinuity_amount(0.5, 1.0)
    assert discontinuity_amount(0.5, 2.0) == pytest.approx(2 * discontinuity_amount(0.5, 1.0))


def test_saturate_zero_and_odd():
    assert taylor_saturate(0.0) == 0.0
    for x in (0.1, 0.7, 1.5, 2.2):
        assert taylor_saturate(-x) == -taylor_saturate(x)


def test_saturate_clamps_large_values():
    assert taylor_saturate(10.0) == taylor_saturate(SATURATION_CLAMP)
    assert taylor_saturate(-50.0) == taylor_saturate(-SATURATION_CLAMP)


def test_saturate_close_to_sine_for_small_input():
    assert abs(taylor_saturate(0.1) - math.sin(0.1)) < 1e-6


def test_silence_stays_silent():
    hack = TapeHack()
    outputs = [hack.process(0.0, 0.0, 2, 1.0, discontinuity_amount(0.5, 1.0)) for _ in range(50)]
    assert all(out == (0.0, 0.0) for out in outputs)


def test_identical_channels_match():
    hack = TapeHack()
    rng = random.Random(3)
    amount = discontinuity_amount(0.8, 1.0)
    for _ in range(300):
        x = rng.uniform(-1, 1)
        left, right = hack.process(x, x, 8, 4.0, amount)
        assert left == right


def test_deterministic_between_instances():
    a, b = TapeHack(), TapeHack()
    rng = random.Random(11)
    samples = [rng.uniform(-2, 2) for _ in range(200)]
    amount = discontinuity_amount(0.6, 1.0)
    out_a = [a.process(s, -s, 4, 2.0, amount) for s in samples]
    out_b = [b.process(s, -s, 4, 2.0, amount) for s in samples]
    assert out_a == out_b


@pytest.mark.parametrize("spacing", [2, 4, 16, 32])
def test_constant_input_settles_on_saturated_value(spacing):
    hack = TapeHack()
    amount = discontinuity_amount(0.5, 1.0)
    out = (0.0, 0.0)
    for _ in range(700):
        out = hack.process(0.3, -0.3, spacing, 1.0, amount)
    assert out[0] == pytest.approx(taylor_saturate(0.3), rel=1e-6)
    assert out[1] == pytest.approx(taylor_saturate(-0.3), rel=1e-6)