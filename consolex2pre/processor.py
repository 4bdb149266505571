"""The complete channel strip: trim, tape, EQ, dynamics, filters, fader and meters."""

from __future__ import annotations

import math
import struct
from typing import Callable, Iterable, List, Optional, Set, Tuple

from .cabs import Cabs
from .dither import dither_sample, initial_seed
from .dynamics import Dynamics
from .eq import SmoothEQ
from .meters import REFERENCE_RATE, Meters
from .params import (
    AudioMessageKind,
    AudioToUIMessage,
    MessageQueue,
    Param,
    ParameterSet,
    UIMessageKind,
    UIToAudioMessage,
)
from .state import clamp_size, load_state, save_state
from .tapehack import TapeHack, discontinuity_amount, trim_gain

DENORMAL_FLOOR = 1.18e-23
DENORMAL_FILL = 1.18e-17
INCREMENT_VALUE = 1200.0

SizeListener = Callable[[int, int], None]


def _single(value: float) -> float:
    """Round to single precision, overflowing to infinity as a float cast does."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _fader_gain(gain: float) -> float:
    if gain > 1.0:
        gain *= gain
    if gain < 1.0:
        gain = 1.0 - (1.0 - gain) ** 2
    return gain


class ConsoleX2Pre:
    """Stereo console preamp processing blocks of samples."""

    name = "ConsoleX2Pre"
    accepts_midi = False
    produces_midi = False
    is_midi_effect = False
    supports_double_precision = True
    tail_length_seconds = 0.0

    def __init__(self, sample_rate: float = 44100.0) -> None:
        if not sample_rate > 0.0:
            raise ValueError("sample_rate must be positive")
        self.sample_rate = float(sample_rate)
        self.params = ParameterSet()
        self.params.listeners.append(self._parameter_changed)
        self.ui_to_audio: MessageQueue[UIToAudioMessage] = MessageQueue()
        self.audio_to_ui: MessageQueue[AudioToUIMessage] = MessageQueue()
        self.editing: Set[Param] = set()
        self.size_listeners: List[SizeListener] = []
        self.width = 618
        self.height = 375
        self.tapehack = TapeHack()
        self.eq = SmoothEQ()
        self.dynamics = Dynamics()
        self.cabs = Cabs()
        self.meters = Meters(self.sample_rate)
        self._fader_from = 0.5
        self._fader_to = 0.5
        self.fpd_left = initial_seed()
        self.fpd_right = initial_seed()

    def _parameter_changed(self, param: Param, value: float) -> None:
        self.audio_to_ui.push(
            AudioToUIMessage(AudioMessageKind.NEW_VALUE, value, param)
        )

    def set_parameter(self, param: Param, value: float) -> None:
        """Set a parameter (0..1) as the host would, notifying the interface."""
        self.params[param] = value

    def _handle_ui_messages(self) -> None:
        while (message := self.ui_to_audio.pop()) is not None:
            if message.kind is UIMessageKind.NEW_VALUE:
                self.params[message.which] = message.new_value
            elif message.kind is UIMessageKind.BEGIN_EDIT:
                self.editing.add(message.which)
            elif message.kind is UIMessageKind.END_EDIT:
                self.editing.discard(message.which)

    def _configure_block(self, overallscale: float) -> None:
        p = self.params
        self.eq.update(
            (p[Param.HIGH], p[Param.HMID], p[Param.LMID], p[Param.BASS]),
            (p[Param.HIGH_FREQ], p[Param.HMID_FREQ], p[Param.LMID_FREQ], p[Param.BASS_FREQ]),
            self.sample_rate,
        )
        self.dynamics.configure(
            p[Param.THRESHOLD], p[Param.ATTACK], p[Param.RELEASE], p[Param.GATE],
            overallscale,
        )
        self.cabs.set_knobs(p[Param.LOWPASS], p[Param.HIGHPASS], overallscale)
        self._fader_from = self._fader_to
        self._fader_to = p[Param.FADER] * 2.0

    def process_block(
        self,
        left: Iterable[float],
        right: Iterable[float],
        double_precision: bool = False,
    ) -> Tuple[List[float], List[float]]:
        """Process one block of stereo samples and return the output channels."""
        left = list(left)
        right = list(right)
        if len(left) != len(right):
            raise ValueError("left and right channels must have the same length")
        self._handle_ui_messages()

        convert = float if double_precision else _single
        overallscale = self.sample_rate / REFERENCE_RATE
        spacing = min(max(math.floor(overallscale * 2.0), 2), 32)
        more = self.params[Param.MORE]
        trim = trim_gain(self.params[Param.TRIM], more)
        tapehack_on = more != 0.0
        discontinuity = discontinuity_amount(more, overallscale)
        self._configure_block(overallscale)

        frames = len(left)
        out_left: List[float] = []
        out_right: List[float] = []
        for index, (sample_l, sample_r) in enumerate(zip(left, right)):
            sample_l = convert(sample_l)
            sample_r = convert(sample_r)
            if abs(sample_l) < DENORMAL_FLOOR:
                sample_l = self.fpd_left * DENORMAL_FILL
            if abs(sample_r) < DENORMAL_FLOOR:
                sample_r = self.fpd_right * DENORMAL_FILL
            sample_l *= trim
            sample_r *= trim
            if tapehack_on:
                sample_l, sample_r = self.tapehack.process(
                    sample_l, sample_r, spacing, overallscale, discontinuity
                )
            sample_l, sample_r = self.eq.process(sample_l, sample_r)
            sample_l, sample_r = self.dynamics.process(sample_l, sample_r)

            position = index / frames
            sample_l, sample_r = self.cabs.process(sample_l, sample_r, position)
            gain = _fader_gain(
                (self._fader_from * position) + (self._fader_to * (1.0 - position))
            )
            sample_l *= gain
            sample_r *= gain

            self.meters.update(sample_l, sample_r)
            sample_l, self.fpd_left = dither_sample(sample_l, self.fpd_left, double_precision)
            sample_r, self.fpd_right = dither_sample(sample_r, self.fpd_right, double_precision)
            out_left.append(convert(sample_l))
            out_right.append(convert(sample_r))

        if self.meters.ready():
            self._send_report()
        return out_left, out_right

    def _send_report(self) -> None:
        messages = self.meters.take_report().messages()
        lights = self.dynamics.lights()
        messages.extend(
            AudioToUIMessage(kind, value)
            for kind, value in (
                (AudioMessageKind.BLINKEN_COMP, lights.comp),
                (AudioMessageKind.BLINKEN_GATE, lights.gate),
                (AudioMessageKind.BLINKEN_ATK, lights.attack),
                (AudioMessageKind.BLINKEN_RLS, lights.release),
                (AudioMessageKind.INCREMENT, INCREMENT_VALUE),
            )
        )
        for message in messages:
            self.audio_to_ui.push(message)

    def get_state(self) -> bytes:
        """Serialise parameter values and editor size."""
        self.width, self.height = clamp_size(self.width, self.height)
        return save_state(self.params.values(), self.width, self.height)

    def set_state(self, data: bytes) -> bool:
        """Restore saved state; return False if the data was not recognised."""
        state = load_state(data)
        if state is None:
            return False
        for param, value in zip(Param, state.values):
            self.params[param] = value
        self.update_plugin_size(state.width, state.height)
        return True

    def update_plugin_size(self, width: int, height: int) -> None:
        """Record the editor size and tell anyone listening."""
        self.width = width
        self.height = height
        for listener in self.size_listeners:
            listener(width, height)

    def pending_messages(self, limit: Optional[int] = None) -> List[AudioToUIMessage]:
        """Drain up to ``limit`` messages meant for the interface."""
        drained: List[AudioToUIMessage] = []
        while limit is None or len(drained) < limit:
            message = self.audio_to_ui.pop()
            if message is None:
                break
            drained.append(message)
        return drained