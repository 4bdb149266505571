import pytest

from consolex2pre.dynamics import Dynamics


def make(threshold=1.0, attack=0.5, release=0.5, gate=0.0, overallscale=1.0):
    dyn = Dynamics()
    dyn.configure(threshold, attack, release, gate, overallscale)
    return dyn


def test_threshold_off_leaves_signal_untouched():
    dyn = make()
    samples = [0.2, -0.9, 0.5, 0.05, -0.3]
    assert [dyn.process(s, s * 0.5) for s in samples] == [(s, s * 0.5) for s in samples]


def test_configure_clamps_rates():
    dyn = make(threshold=0.0, attack=0.0, release=1.0, gate=1.0, overallscale=0.5)
    assert dyn.threshold == 8.0
    assert dyn.attack == 1.0
    assert dyn.release == pytest.approx(0.0001)
    assert dyn.gate == 1.0


def test_compression_keeps_sign_and_bounds():
    dyn = make(threshold=0.0)
    for n in range(2000):
        s = 0.8 if n % 2 else -0.8
        left, right = dyn.process(s, -s)
        assert abs(left) <= abs(s) * 9.0 + 1e-12
        assert left * s >= 0.0
        assert right * -s >= 0.0


def test_compression_reduces_gain_on_loud_signal():
    dyn = make(threshold=0.0)
    out = 0.0
    for _ in range(2000):
        out, _ = dyn.process(0.8, 0.8)
    assert out < 0.8 * 9.0
    assert dyn.lights().comp < 1.0


def test_lights_start_new_window():
    dyn = make()
    dyn.process(0.5, 0.5)
    first = dyn.lights()
    assert first.comp == 1.0
    assert first.gate == 0.0
    second = dyn.lights()
    # the new window starts from the signal level seen in the last one
    assert second.comp == 1.0
    assert second.gate == 0.0
    third = dyn.lights()
    assert third.comp == 0.0
    assert third.gate == 1.0


def test_gate_light_when_signal_below_gate():
    dyn = make(gate=1.0)
    for _ in range(200):
        dyn.process(0.01, 0.01)
    assert dyn.lights().gate == pytest.approx(1.0, abs=1e-5)


def test_gate_light_dark_when_signal_above_gate():
    dyn = make(gate=0.0)
    for _ in range(200):
        dyn.process(0.01, 0.01)
    assert dyn.lights().gate == 0.0


def test_attack_and_release_lights_stay_in_range():
    dyn = make(threshold=0.3)
    for n in range(500):
        s = 1.0 if n % 50 < 25 else 0.0001
        dyn.process(s, s)
        lights = dyn.lights()
        assert 0.0 <= lights.attack <= 1.0
        assert 0.0 <= lights.release <= 1.0