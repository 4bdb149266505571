import math

import pytest

from consolex2pre.meters import Meters
from consolex2pre.params import AudioMessageKind


def test_not_ready_until_window_is_exceeded():
    meters = Meters(44100.0)
    for _ in range(1881):
        meters.update(0.1, 0.1)
    assert not meters.ready()
    meters.update(0.1, 0.1)
    assert meters.ready()


def test_window_scales_with_sample_rate():
    slow = Meters(44100.0)
    fast = Meters(88200.0)
    assert fast.window == pytest.approx(slow.window * 2.0)


def test_peak_is_square_root_of_largest_level():
    meters = Meters(44100.0)
    meters.update(0.25, -0.64)
    meters.update(0.1, 0.2)
    report = meters.take_report()
    assert report.peak_left == pytest.approx(math.sqrt(0.25))
    assert report.peak_right == pytest.approx(math.sqrt(0.64))


def test_rms_of_constant_signal():
    meters = Meters(44100.0)
    level = 0.0625
    for _ in range(50):
        meters.update(level, -level)
    report = meters.take_report()
    expected = math.sqrt(math.sqrt(level * level))
    assert report.rms_left == pytest.approx(expected)
    assert report.rms_right == pytest.approx(expected)


def test_slew_uses_sample_rate_scaling():
    meters = Meters(28000.0)
    meters.update(0.0, 0.0)
    meters.update(0.3, -0.5)
    report = meters.take_report()
    assert report.slew_left == pytest.approx(0.3)
    assert report.slew_right == pytest.approx(0.5)


def test_steady_signal_has_longer_zero_run_than_alternating():
    steady = Meters(44100.0)
    alternating = Meters(44100.0)
    for n in range(20):
        steady.update(0.5, 0.5)
        sign = 1.0 if n % 2 == 0 else -1.0
        alternating.update(0.5 * sign, 0.5 * sign)
    steady_report = steady.take_report()
    alt_report = alternating.take_report()
    assert steady_report.zero_left > alt_report.zero_left
    assert alt_report.zero_left == pytest.approx(1.0)


def test_report_resets_window():
    meters = Meters(44100.0)
    for _ in range(2000):
        meters.update(0.5, 0.5)
    assert meters.ready()
    meters.take_report()
    assert meters.count == 0
    assert not meters.ready()
    empty = meters.take_report()
    assert empty.peak_left == 0.0
    assert empty.rms_right == 0.0
    assert empty.zero_left == 0.0


def test_report_messages_order():
    meters = Meters(44100.0)
    meters.update(0.25, 0.25)
    report = meters.take_report()
    messages = report.messages()
    assert [m.kind for m in messages[:2]] == [
        AudioMessageKind.SLEW_LEFT,
        AudioMessageKind.SLEW_RIGHT,
    ]
    assert messages[2].kind is AudioMessageKind.PEAK_LEFT
    assert messages[2].new_value == report.peak_left
    assert len(messages) == 8


def test_rejects_non_positive_sample_rate():
    with pytest.raises(ValueError):
        Meters(0.0)