"""Plugin parameters and the message queues between the audio and UI sides."""

from __future__ import annotations

import struct
from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Callable, Deque, Generic, List, Optional, TypeVar


def _to_float32(value: float) -> float:
    """Round a value to single precision, as the host stores parameters."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


class Param(IntEnum):
    """The knobs of the preamp, in host order."""

    TRIM = (0, "trim", "Trim", 0.25)
    MORE = (1, "more", "More", 0.0)
    HIGH = (2, "high", "High", 0.5)
    HMID = (3, "hmid", "HMid", 0.5)
    LMID = (4, "lmid", "LMid", 0.5)
    BASS = (5, "bass", "Bass", 0.5)
    HIGH_FREQ = (6, "highf", "HighF", 0.5)
    HMID_FREQ = (7, "hmidf", "HMidF", 0.5)
    LMID_FREQ = (8, "lmidf", "LMidF", 0.5)
    BASS_FREQ = (9, "bassf", "BassF", 0.5)
    THRESHOLD = (10, "thresh", "Threshold", 1.0)
    ATTACK = (11, "attack", "Attack", 0.5)
    RELEASE = (12, "release", "Release", 0.5)
    GATE = (13, "gate", "Gate", 0.0)
    LOWPASS = (14, "lowpass", "Lowpass", 1.0)
    HIGHPASS = (15, "highpass", "Highpass", 0.0)
    FADER = (16, "fader", "Fader", 0.5)

    def __new__(cls, index: int, ident: str, label: str, default: float) -> "Param":
        obj = int.__new__(cls, index)
        obj._value_ = index
        obj.ident = ident
        obj.label = label
        obj.default = default
        return obj

    @classmethod
    def from_id(cls, ident: str) -> "Param":
        """Look a parameter up by its internal identifier."""
        for param in cls:
            if param.ident == ident:
                return param
        raise KeyError(ident)


Listener = Callable[[Param, float], None]


class ParameterSet:
    """Current values of all parameters, each held in the range 0..1."""

    MINIMUM = 0.0
    MAXIMUM = 1.0

    def __init__(self) -> None:
        self._values: List[float] = [_to_float32(p.default) for p in Param]
        self.listeners: List[Listener] = []

    def __getitem__(self, param: Param) -> float:
        return self._values[Param(param)]

    def __setitem__(self, param: Param, value: float) -> None:
        param = Param(param)
        clamped = min(max(float(value), self.MINIMUM), self.MAXIMUM)
        self._values[param] = _to_float32(clamped)
        for listener in self.listeners:
            listener(param, self._values[param])

    def __len__(self) -> int:
        return len(self._values)

    def values(self) -> List[float]:
        """All values in parameter order."""
        return list(self._values)


class UIMessageKind(Enum):
    NEW_VALUE = auto()
    BEGIN_EDIT = auto()
    END_EDIT = auto()


@dataclass(frozen=True)
class UIToAudioMessage:
    """Something the interface tells the audio side."""

    kind: UIMessageKind
    which: Param
    new_value: float = 0.0


class AudioMessageKind(Enum):
    NEW_VALUE = auto()
    RMS_LEFT = auto()
    RMS_RIGHT = auto()
    PEAK_LEFT = auto()
    PEAK_RIGHT = auto()
    SLEW_LEFT = auto()
    SLEW_RIGHT = auto()
    ZERO_LEFT = auto()
    ZERO_RIGHT = auto()
    BLINKEN_COMP = auto()
    BLINKEN_GATE = auto()
    BLINKEN_ATK = auto()
    BLINKEN_RLS = auto()
    INCREMENT = auto()


@dataclass(frozen=True)
class AudioToUIMessage:
    """Something the audio side tells the interface."""

    kind: AudioMessageKind
    new_value: float = 0.0
    which: Optional[Param] = None


T = TypeVar("T")


class MessageQueue(Generic[T]):
    """Bounded FIFO of messages.

    Like a ring buffer of ``capacity`` slots it holds at most
    ``capacity - 1`` messages; a push onto a full queue is refused.
    """

    def __init__(self, capacity: int = 4096) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: Deque[T] = deque()

    def push(self, message: T) -> bool:
        """Append a message; return False if the queue is full."""
        if len(self._items) >= self.capacity - 1:
            return False
        self._items.append(message)
        return True

    def pop(self) -> Optional[T]:
        """Take the oldest message, or None when the queue is empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)