# superwav

Building blocks for playing sound through an array of loudspeakers with
wave field synthesis (WFS):

- `superwav.convolution`: direct convolution (input side, output side and a
  range-limited form), FFT convolution and block-wise streaming convolvers
  (`OverlapAddConvolver`, `OverlapSaveConvolver`).
- `superwav.wfs`: which speakers are active for a virtual source position,
  with each speaker's gain and delay in samples, and per-channel buffers
  built from a song's samples.
- `superwav.benchmark`: times buffer generation for a growing number of
  speakers, reading songs from PCM WAV files.
- `superwav.messages`: parses the comma-separated `Name:value` control
  messages into a `Message` dataclass.
- `superwav.configfile`: a reader for configuration files in the libconfig
  text format (groups become dicts, lists and arrays become Python lists).
- `superwav.settings`: card, sound, speaker and server settings read from
  such a file.
- `superwav.server`: a TCP server that numbers its clients and tells them
  when to start playing.
- `superwav.utils`: millisecond timestamps, flag toggling, splitting and
  non-blocking key polling.

## Installation

```
pip install .
```

`numpy` is the only runtime dependency. To run the tests:

```
pip install ".[test]"
pytest
```

## Library use

### Convolution

```python
from superwav.convolution import convolve, input_side_conv, output_side_conv

x = [0, -1, -1, 2, 1, 1]
h = [1, 0, -1, 1]

input_side_conv(x, h)    # same result as output_side_conv(x, h)
convolve([1, 1, 1, 1, 1], [1, 1, 1])   # [1.0, 2.0, 3.0, 3.0, 3.0, 2.0, 1.0]
```

The output has `len(x) + len(h) - 1` samples; empty inputs raise
`ValueError`. `fft_convolve` gives the same result through zero-padded FFTs,
`next_pow2` returns the smallest power of two not below its argument, and
`error_check(a, b)` returns the sum of `a - b`.

To process a long signal in fixed-size blocks, create a convolver once and
feed it one block at a time; shorter blocks are padded with zeros. The block
size must not be smaller than the kernel.

```python
from superwav.convolution import OverlapAddConvolver

convolver = OverlapAddConvolver(kernel=h, block_size=8)
for block in blocks:
    out = convolver.process(block)   # block_size samples
```

`OverlapSaveConvolver` has the same interface and works in the frequency
domain.

### Wave field synthesis

```python
from superwav.wfs import DEFAULT_SPEAKERS, wave_field_synthesis, generate_song_wfs

result = wave_field_synthesis(DEFAULT_SPEAKERS, 0.0, 11.0)
buffers = generate_song_wfs(samples, result, index=0, buffer_size=512)
```

`Speaker(x, y, theta)` is a speaker facing `theta` degrees. A speaker is
active when the source's angle lies within 90 degrees of that direction.
`WFSResult` holds `active`, `positions` (the index, or -1 when inactive),
`delays` and `amplitudes`. `generate_song_wfs` returns an integer array of
shape `(channels, buffer_size)`; inactive channels are silent. A source that
coincides with a speaker raises `ValueError`.

### Messages

```python
from superwav.messages import process_message

msg = process_message("Action:client,StartTime:0,ClientPosX:7,ClientPosY:5")
msg.action, msg.client_pos_x   # ('client', 7)
```

Unknown names are ignored; a field without a value raises `ValueError`.

### Configuration

```python
from superwav.configfile import load, lookup
from superwav.settings import client_card, client_sound

config = load("default.cfg")
lookup(config, "client.card.pcm_name")
card = client_card(config)
```

Read and parse failures, and missing or mistyped settings, raise
`ConfigError`.

## Commands

| Command                                 | What it does                                                             |
|-----------------------------------------|--------------------------------------------------------------------------|
| `superwav-server PORT`                  | Starts the start-time server on `PORT` (`-h` prints usage).              |
| `superwav-wfs [X Y]`                    | Prints activity, gains and delays of the four-speaker setup for a source (default 0, 11). |
| `superwav-benchmark [WAV ...]`          | Times buffer generation; options `--blocks`, `--max-speakers`, `--step`, `--buffer-size`. |
| `superwav-convolution [LX [LH [BS]]]`   | Compares the convolution methods on a seeded random signal and prints timings. |
| `superwav-messages [MESSAGE ...]`       | Parses the given messages, or built-in examples, and prints their fields. |
| `superwav-config [FILE]`                | Prints the store name and the book and movie inventory in a configuration file (default `example.cfg`). |
| `superwav-settings [FILE]`              | Prints the card, sound, speaker and server settings (default `./configFolder/default.cfg`). |

### Server keys

While `superwav-server` runs it accepts up to 30 clients, sends each its
number on connection, and reads single keys from standard input:

- `a`: launch a local client program (`./../client/SuperWavAppClient localhost PORT`).
- `s`: tell every client to start in ten seconds. This works only once.
- `p`: read a client number from the next line and tell that client to play.
- `e`: send client number -1 to every client, then exit.

Each notification has the form `StartTime: <milliseconds>,IDClient: <id>`.

## What this package does not do

It does not play sound and has no client: nothing here opens a sound card or
connects to the server. The `a` key only starts an external program at the
path above, which must be supplied separately. The benchmark measures buffer
generation only.