"""Command line front end: run a WAV file through the preamp."""

from __future__ import annotations

import argparse
import random
import struct
import sys
import wave
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .dither import initial_seed
from .params import Param
from .processor import ConsoleX2Pre

_FORMATS = {1: "B", 2: "<h", 4: "<i"}


@dataclass
class _Audio:
    rate: int
    channels: int
    width: int
    left: List[float]
    right: List[float]


def _decode(raw: bytes, width: int) -> List[float]:
    scale = float(1 << (8 * width - 1))
    if width == 1:
        return [(value - 128) / scale for (value,) in struct.iter_unpack("B", raw)]
    if width == 3:
        return [
            int.from_bytes(chunk, "little", signed=True) / scale
            for (chunk,) in struct.iter_unpack("3s", raw)
        ]
    if width in _FORMATS:
        return [value / scale for (value,) in struct.iter_unpack(_FORMATS[width], raw)]
    raise ValueError(f"unsupported sample width: {width} bytes")


def _quantise(sample: float, scale: float) -> int:
    if sample != sample:
        sample = 0.0
    value = round(min(max(sample, -1.0), 1.0) * scale)
    return int(min(max(value, -scale), scale - 1))


def _encode(samples: Sequence[float], width: int) -> bytes:
    scale = float(1 << (8 * width - 1))
    values = [_quantise(s, scale) for s in samples]
    if width == 1:
        return bytes(v + 128 for v in values)
    if width == 3:
        return b"".join(v.to_bytes(3, "little", signed=True) for v in values)
    return struct.pack(f"<{len(values)}{_FORMATS[width][-1]}", *values)


def _read_wav(path: str) -> _Audio:
    with wave.open(path, "rb") as reader:
        channels = reader.getnchannels()
        width = reader.getsampwidth()
        rate = reader.getframerate()
        raw = reader.readframes(reader.getnframes())
    if channels not in (1, 2):
        raise ValueError(f"only mono or stereo files are supported, not {channels} channels")
    samples = _decode(raw, width)
    if channels == 1:
        return _Audio(rate, channels, width, samples, list(samples))
    return _Audio(rate, channels, width, samples[0::2], samples[1::2])


def _write_wav(path: str, audio: _Audio) -> None:
    if audio.channels == 1:
        samples = audio.left
    else:
        samples = [s for pair in zip(audio.left, audio.right) for s in pair]
    with wave.open(path, "wb") as writer:
        writer.setnchannels(audio.channels)
        writer.setsampwidth(audio.width)
        writer.setframerate(audio.rate)
        writer.writeframes(_encode(samples, audio.width))


def _parse_setting(parser: argparse.ArgumentParser, text: str) -> Tuple[Param, float]:
    ident, sep, value = text.partition("=")
    if not sep:
        parser.error(f"setting must look like NAME=VALUE: {text!r}")
    try:
        param = Param.from_id(ident.strip().lower())
    except KeyError:
        parser.error(f"unknown parameter: {ident!r}")
    try:
        number = float(value)
    except ValueError:
        parser.error(f"not a number: {value!r}")
    return param, number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="consolex2pre",
        description="Run a WAV file through the console preamp.",
    )
    parser.add_argument("input", nargs="?", help="input WAV file")
    parser.add_argument("output", nargs="?", help="output WAV file")
    parser.add_argument(
        "-s", "--set", action="append", default=[], metavar="NAME=VALUE",
        help="set a parameter (0..1); repeatable",
    )
    parser.add_argument("--block-size", type=int, default=512, help="samples per block")
    parser.add_argument("--seed", type=int, help="seed for the dither noise")
    parser.add_argument(
        "--single-precision", action="store_true",
        help="process as single precision samples",
    )
    parser.add_argument("--list", action="store_true", help="list parameters and exit")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.list:
        for param in Param:
            print(f"{param.ident}\t{param.label}\t{param.default}")
        return 0
    if args.input is None or args.output is None:
        parser.error("input and output files are required")
    if args.block_size < 1:
        parser.error("block size must be at least 1")
    settings = [_parse_setting(parser, text) for text in args.set]

    try:
        audio = _read_wav(args.input)
    except (OSError, EOFError, wave.Error, ValueError) as exc:
        print(f"consolex2pre: {exc}", file=sys.stderr)
        return 1

    processor = ConsoleX2Pre(audio.rate)
    for param, value in settings:
        processor.set_parameter(param, value)
    if args.seed is not None:
        rng = random.Random(args.seed)
        processor.fpd_left = initial_seed(rng)
        processor.fpd_right = initial_seed(rng)

    out_left: List[float] = []
    out_right: List[float] = []
    step = args.block_size
    for start in range(0, len(audio.left), step):
        block_l, block_r = processor.process_block(
            audio.left[start:start + step],
            audio.right[start:start + step],
            not args.single_precision,
        )
        out_left.extend(block_l)
        out_right.extend(block_r)

    result = _Audio(audio.rate, audio.channels, audio.width, out_left, out_right)
    try:
        _write_wav(args.output, result)
    except (OSError, wave.Error) as exc:
        print(f"consolex2pre: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())