# consolex2pre

A stereo console preamp channel strip written in pure Python. It needs
nothing outside the standard library.

Each stereo sample passes through these stages in this order:

1. **Trim and tape hack** (`consolex2pre.tapehack`). The trim knob sets
   the input level in steps of ×0.5, ×1, ×2, ×4 and ×8. The "more"
   control raises the level further. When "more" is above zero, it also
   adds three things: slew-dependent darkening, a discontinuity delay,
   and a soft saturation curve (`taylor_saturate`).
2. **Smooth EQ** (`consolex2pre.eq.SmoothEQ`). There are four bands:
   high, high-mid, low-mid and bass. Each band has its own gain and
   frequency knob. Three cascaded biquad crossover stages split the
   bands, and a final stage of one-pole filters follows them. When all
   four gains sit at unity, the EQ is skipped.
3. **Dynamics** (`consolex2pre.dynamics.Dynamics`). A compressor with
   threshold, attack and release controls, plus a gate. It drives
   indicator levels for compression, gating, attack and release.
4. **Cabs** (`consolex2pre.cabs.Cabs`). A 21-stage highpass and a
   13-stage lowpass. Their cutoffs glide from the previous block's
   setting to the new one across each block.
5. **Fader.** An output gain that is smoothed across the block.
6. **Dither** (`consolex2pre.dither`). Xorshift noise scaled to the
   exponent of each sample. The noise level depends on the precision:
   one level for single precision and another for double precision.

A meter section (`consolex2pre.meters.Meters`) measures the output of
each channel:

- peak
- RMS
- slew
- longest interval between zero crossings

Readings build up over each block. At the end of a block, a report is
produced once more than 1881/44100 of a second of audio has been fed
in.

## Installation

```
pip install .
```

To also install the test dependencies:

```
pip install ".[test]"
```

## Using the processor

```python
from consolex2pre.params import Param
from consolex2pre.processor import ConsoleX2Pre

console = ConsoleX2Pre(48000.0)
console.set_parameter(Param.MORE, 0.3)
left = [0.0, 0.1, 0.2, 0.1]
right = [0.0, -0.1, -0.2, -0.1]
out_left, out_right = console.process_block(left, right, True)
```

`process_block(left, right, double_precision=False)` returns two new
lists of samples. It raises `ValueError` if the two channels differ in
length. With `double_precision` false, each input and output sample is
rounded to single precision.

`set_parameter(param, value)` sets a control. Values are clamped to the
range 0.0 to 1.0. The parameters are the members of
`consolex2pre.params.Param`, in this order:

| Member      | Identifier | Default |
|-------------|------------|---------|
| TRIM        | trim       | 0.25    |
| MORE        | more       | 0.0     |
| HIGH        | high       | 0.5     |
| HMID        | hmid       | 0.5     |
| LMID        | lmid       | 0.5     |
| BASS        | bass       | 0.5     |
| HIGH_FREQ   | highf      | 0.5     |
| HMID_FREQ   | hmidf      | 0.5     |
| LMID_FREQ   | lmidf      | 0.5     |
| BASS_FREQ   | bassf      | 0.5     |
| THRESHOLD   | thresh     | 1.0     |
| ATTACK      | attack     | 0.5     |
| RELEASE     | release    | 0.5     |
| GATE        | gate       | 0.0     |
| LOWPASS     | lowpass    | 1.0     |
| HIGHPASS    | highpass   | 0.0     |
| FADER       | fader      | 0.5     |

At these defaults the tape hack, EQ, compressor and filters do nothing.
The fader settles at unity gain, and dither is still added.

### Saving and restoring settings

- `ConsoleX2Pre.get_state()` returns the parameter values and the
  editor size as bytes: an XML document behind a short binary header.
- `ConsoleX2Pre.set_state(data)` restores them. It returns `False` if
  the data is not recognised.
- Editor sizes outside 8 to 16386 are replaced by the default of
  618 × 375. The same check is available as
  `consolex2pre.state.clamp_size`.
- The module-level functions `save_state` and `load_state` do the same
  work without a processor.

### Talking to a user interface

An interface and the audio side exchange messages through two
`consolex2pre.params.MessageQueue` instances on the processor:

- `ui_to_audio` carries `UIToAudioMessage` items from the interface:
  new values, and the start and end of edits. The audio side reads them
  at the start of each block.
- `audio_to_ui` carries `AudioToUIMessage` items to the interface:
  parameter changes, meter readings, indicator levels and an
  `INCREMENT` marker. `ConsoleX2Pre.pending_messages(limit)` drains
  them.

`ConsoleX2Pre.update_plugin_size(width, height)` records the editor
size. It also calls every function in `size_listeners`.

## Command line

```
consolex2pre input.wav output.wav --set more=0.4 --set fader=0.6
```

This reads a mono or stereo PCM WAV file with 8, 16, 24 or 32-bit
samples. It runs the file through the processor and writes the result
in the same format.

Options:

- `-s`, `--set NAME=VALUE`: set a parameter by its identifier. You can
  give this option more than once.
- `--block-size N`: samples per processing block (default 512).
- `--seed N`: seed the dither noise, so that the output can be
  repeated.
- `--single-precision`: process in single precision. The default is
  double precision.
- `--list`: print each parameter's identifier, label and default, then
  exit.

Run `consolex2pre --help` for the full usage.

## What it does not do

There is no graphical editor and no real-time audio input or output.
The processor works on lists of samples, and the command works on WAV
files. The message queues and the size listeners are there for an
interface to connect to. The package does not include one.