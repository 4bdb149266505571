"""Saving and restoring plugin state as a binary-wrapped XML document."""

from __future__ import annotations

import re
import struct
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .params import Param

TAG = "consolex2pre"
STREAMING_VERSION = 8524
PREFIX = "awcx2p_"
MAGIC = 0x21324356
DEFAULT_WIDTH = 618
DEFAULT_HEIGHT = 375
MIN_SIZE = 8
MAX_SIZE = 16386
_HEADER = struct.Struct("<II")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class PluginState:
    """Parameter values and editor size restored from saved state."""

    values: Tuple[float, ...]
    width: int
    height: int


def clamp_size(width: int, height: int) -> Tuple[int, int]:
    """Replace an out-of-range editor size with the default one."""
    if width < MIN_SIZE or width > MAX_SIZE:
        width = DEFAULT_WIDTH
    if height < MIN_SIZE or height > MAX_SIZE:
        height = DEFAULT_HEIGHT
    return width, height


def _format_float(value: float) -> str:
    """Shortest text that reads back as the same single precision value."""
    target = struct.unpack("<f", struct.pack("<f", value))[0]
    for digits in range(1, 10):
        text = f"{target:.{digits}g}"
        if struct.unpack("<f", struct.pack("<f", float(text)))[0] == target:
            return text
    return repr(target)


def save_state(values: Sequence[float], width: int, height: int) -> bytes:
    """Serialise parameter values and editor size."""
    values = list(values)
    if len(values) != len(Param):
        raise ValueError(f"expected {len(Param)} values, got {len(values)}")
    width, height = clamp_size(width, height)
    root = ET.Element(TAG)
    root.set("streamingVersion", str(STREAMING_VERSION))
    for index, value in enumerate(values):
        root.set(f"{PREFIX}{index}", _format_float(float(value)))
    root.set(f"{PREFIX}width", str(width))
    root.set(f"{PREFIX}height", str(height))
    text = '<?xml version="1.0" encoding="UTF-8"?> ' + ET.tostring(root, encoding="unicode")
    body = text.encode("utf-8") + b"\x00"
    return _HEADER.pack(MAGIC, len(body) - 1) + body


def _int_attribute(element: ET.Element, name: str) -> int:
    match = _INT_PREFIX.match(element.get(name, ""))
    return int(match.group(1)) if match else 0


def _float_attribute(element: ET.Element, name: str) -> float:
    try:
        return float(element.get(name, "0"))
    except ValueError:
        return 0.0


def load_state(data: bytes) -> Optional[PluginState]:
    """Restore state saved by save_state; None if the data is not recognised."""
    data = bytes(data)
    if len(data) <= _HEADER.size:
        return None
    magic, length = _HEADER.unpack_from(data)
    if magic != MAGIC or length <= 0:
        return None
    raw = data[_HEADER.size:_HEADER.size + length]
    text = raw.decode("utf-8", errors="replace").split("\x00", 1)[0]
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return None
    if root.tag != TAG:
        return None
    values = tuple(_float_attribute(root, f"{PREFIX}{p.value}") for p in Param)
    width, height = clamp_size(
        _int_attribute(root, f"{PREFIX}width"),
        _int_attribute(root, f"{PREFIX}height"),
    )
    return PluginState(values, width, height)