import struct

import pytest

from consolex2pre.params import Param, ParameterSet
from consolex2pre.state import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    PluginState,
    clamp_size,
    load_state,
    save_state,
)


def _defaults():
    return ParameterSet().values()


def test_clamp_size_replaces_out_of_range():
    assert clamp_size(5, 20000) == (618, 375)


def test_clamp_size_keeps_valid_size():
    assert clamp_size(800, 600) == (800, 600)


def test_round_trip_defaults():
    values = _defaults()
    state = load_state(save_state(values, 700, 400))
    assert state == PluginState(tuple(values), 700, 400)


def test_binary_header():
    data = save_state(_defaults(), 618, 375)
    magic, length = struct.unpack_from("<II", data)
    assert magic == 0x21324356
    assert length == len(data) - 9
    assert data.endswith(b"\x00")


def test_xml_contents():
    data = save_state(_defaults(), 618, 375)
    text = data[8:-1].decode("utf-8")
    assert "<consolex2pre" in text
    assert 'streamingVersion="8524"' in text
    assert 'awcx2p_0="0.25"' in text


def test_save_clamps_size():
    state = load_state(save_state(_defaults(), 2, 99999))
    assert (state.width, state.height) == (DEFAULT_WIDTH, DEFAULT_HEIGHT)


def test_wrong_value_count_rejected():
    with pytest.raises(ValueError):
        save_state([0.5, 0.5], 618, 375)


def test_garbage_is_ignored():
    assert load_state(b"not a state blob at all") is None
    assert load_state(b"") is None


def test_other_tag_is_ignored():
    body = b'<other awcx2p_0="0.5"/>\x00'
    data = struct.pack("<II", 0x21324356, len(body) - 1) + body
    assert load_state(data) is None


def test_missing_attributes_use_defaults():
    body = b'<consolex2pre awcx2p_3="0.75"/>\x00'
    data = struct.pack("<II", 0x21324356, len(body) - 1) + body
    state = load_state(data)
    assert state.values[3] == 0.75
    assert state.values[0] == 0.0
    assert (state.width, state.height) == (DEFAULT_WIDTH, DEFAULT_HEIGHT)
    assert len(state.values) == len(Param)