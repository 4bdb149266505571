import pytest

from consolex2pre.params import (
    AudioMessageKind,
    AudioToUIMessage,
    MessageQueue,
    Param,
    ParameterSet,
    UIMessageKind,
    UIToAudioMessage,
)


def test_there_are_seventeen_parameters_in_order():
    params = ParameterSet()
    assert len(params.values()) == 17
    assert Param.from_id("trim") is Param.TRIM
    assert int(Param.from_id("trim")) == 0
    fader = Param.from_id("fader")
    assert int(fader) == 16
    assert fader.label == "Fader"


def test_defaults_match_source():
    params = ParameterSet()
    assert params.values() == [
        0.25, 0.0, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5,
        1.0, 0.5, 0.5, 0.0, 1.0, 0.0, 0.5,
    ]


def test_from_id_round_trip():
    for param in Param:
        assert Param.from_id(param.ident) is param


def test_from_id_unknown_raises():
    with pytest.raises(KeyError):
        Param.from_id("nonexistent")


def test_ids_are_unique():
    found = {Param.from_id(p.ident) for p in Param}
    assert len(found) == 17
    assert found == set(Param)


def test_set_and_get():
    params = ParameterSet()
    params[Param.MORE] = 0.75
    assert params[Param.MORE] == 0.75
    assert params[int(Param.MORE)] == 0.75


@pytest.mark.parametrize("value,expected", [(1.5, 1.0), (-2.0, 0.0), (0.0, 0.0), (1.0, 1.0)])
def test_values_are_clamped(value, expected):
    params = ParameterSet()
    params[Param.GATE] = value
    assert params[Param.GATE] == expected


def test_values_are_single_precision():
    params = ParameterSet()
    params[Param.HIGH] = 0.1
    assert params[Param.HIGH] != 0.1
    assert abs(params[Param.HIGH] - 0.1) < 1e-8


def test_values_returns_copy():
    params = ParameterSet()
    snapshot = params.values()
    snapshot[0] = 0.9
    assert params[Param.TRIM] == 0.25


def test_listeners_are_notified():
    params = ParameterSet()
    seen = []
    params.listeners.append(lambda p, v: seen.append((p, v)))
    params[Param.FADER] = 2.0
    assert seen == [(Param.FADER, 1.0)]


def test_queue_is_fifo():
    queue = MessageQueue()
    first = UIToAudioMessage(UIMessageKind.BEGIN_EDIT, Param.BASS)
    second = UIToAudioMessage(UIMessageKind.NEW_VALUE, Param.BASS, 0.3)
    assert queue.push(first)
    assert queue.push(second)
    assert len(queue) == 2
    assert queue.pop() == first
    assert queue.pop() == second
    assert queue.pop() is None


def test_queue_holds_one_less_than_capacity():
    queue = MessageQueue(4)
    msg = AudioToUIMessage(AudioMessageKind.INCREMENT, 1200.0)
    assert [queue.push(msg) for _ in range(4)] == [True, True, True, False]
    assert len(queue) == 3
    queue.pop()
    assert queue.push(msg)


def test_queue_default_capacity():
    queue = MessageQueue()
    assert queue.capacity == 4096


def test_queue_rejects_bad_capacity():
    with pytest.raises(ValueError):
        MessageQueue(0)