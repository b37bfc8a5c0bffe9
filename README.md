# mdu

A pure-Python implementation of the Multi-Decoder-Update (MDU) protocol, used
to configure and update model railway decoders over the track signal.

The package is a library; it has no command line program.

## Contents

- `mdu.crc` – `Crc8` (Dallas/Maxim, polynomial 0x31), `Crc32` (the protocol's
  own "CRC32": a shift register with polynomial 0x04C11DB7, started at
  `0xFFFFFFFF` and augmented by four zero bytes when read), and the one-shot
  functions `crc8` and `crc32`.
- `mdu.command` – the `Command` codes (an `IntEnum`, e.g. `Command.PING`,
  `Command.ZSU_UPDATE`, `Command.ZPP_EXIT`).
- `mdu.timing` – `TransferRate` (`FALLBACK`, `FAST`, `MEDIUM`, `SLOW`,
  `DEFAULT`), the `Timing` table `TIMINGS` built by `make_timing`, the
  `is_one`/`is_zero`/`is_ackreq` checks with their `is_fallback_*`
  counterparts, and `time2bit`, which classifies a measured time as a `Bit`
  (`ZERO`, `ONE`, `ACKREQ` or `INVALID`).
- `mdu.utility` – big-endian helpers `data2uint16`, `data2uint32`,
  `data2uint64`, `uint16_to_bytes`, `uint32_to_bytes`, and
  `make_salsa20_cipher`, which derives the decoder specific Salsa20 cipher
  from a decoder ID, an 8 byte IV and a master key of at least 32 bytes.
- `mdu.packet` – packet builders and `packet2command`.
- `mdu.rx` – the decoder side: `Receiver`, `BinaryTreeSearch`, `EntryPoint`
  and the update receivers `ZppReceiver`, `ZsuReceiver`, `ZppZsuReceiver`.
- `mdu.tx.encoder` – the command station side: `MduEncoder`, `EncoderConfig`,
  `Symbol` and `encode_packet`.

## Installation

```
pip install .
```

Python 3.10 or later is required. Salsa20 support comes from `pycryptodome`.

## Checksums

```python
from mdu.crc import Crc8, crc8, crc32

assert crc8(b"Hello World") == 26
assert crc32(b"Hello World") == 0x29EE5C18

crc = Crc8()
crc.update(b"Hello ")
crc.update(b"World")
assert crc.value() == 26
```

`update` takes a single byte (an `int` in 0..255) or any iterable of bytes.
`Crc32.value()` does not disturb the running state, so more data can follow.

## Building packets

```python
from mdu.command import Command
from mdu.packet import make_busy_packet, make_ping_packet, packet2command

ping = make_ping_packet(0, 0)          # ping every decoder
assert packet2command(ping) is Command.PING

busy = make_busy_packet()
```

Available builders, all returning `bytes`:

- `make_short_ping_packet(decoder_id)` – ping by the top byte of a decoder ID
- `make_ping_packet(serial_number, decoder_id)` – 0 in either field matches any
- `make_config_transfer_rate_packet(transfer_rate)`
- `make_binary_tree_search_packet(byte)`
- `make_cv_read_packet(cv_number, pos)` and `make_cv_write_packet(cv_number, byte)`
- `make_busy_packet()`
- `make_zsu_salsa20_iv_packet(iv)` – `iv` must be 8 bytes
- `make_zsu_erase_packet(begin_addr, end_addr)`
- `make_zsu_update_packet(addr, data)` – `data` must be 64 bytes

Short commands end in a CRC8; the ZSU update packet ends in a CRC32.
`packet2command` returns a `Command`, or the plain integer for unknown codes.
`MAX_PACKET_SIZE` is the largest packet a receiver accepts.

## Classifying times

```python
from mdu.timing import Bit, TransferRate, time2bit

assert time2bit(75, TransferRate.DEFAULT) is Bit.ONE
assert time2bit(150, TransferRate.DEFAULT) is Bit.ZERO
```

Times that match the fallback rate are always accepted, whatever rate is
currently configured.

## Writing a decoder

Subclass `Receiver` and supply the three hardware hooks:

```python
from mdu.rx.base import Receiver, ReceiverConfig


class MyDecoder(Receiver):
    def ackbit(self, us):
        ...  # drive a current pulse of `us` microseconds

    def read_cv(self, cv_addr, pos):
        ...  # return True if bit `pos` of the CV is set

    def write_cv(self, cv_addr, byte):
        ...  # store the CV, return True on success


decoder = MyDecoder(ReceiverConfig(serial_number=0x12345678, decoder_id=0x01020300))
```

Feed every measured time in µs to `receive()` (typically from a timer
interrupt) and call `execute()` from the main loop to act on the oldest
completed packet. `pending()` tells how many packets wait, `active()` becomes
true after the first preamble, and `selected()`/`select()` read and set
whether the decoder is addressed. Up to two packets are queued; the receiver
answers in channel 1 (nack: incomplete packets, CRC errors) and channel 2
(ack) by calling `ackbit`.

Ping, transfer rate configuration, binary tree search and CV read/write are
handled by `Receiver` itself; other commands go to the update receivers:

- `ZppReceiver` – sound project updates. Implement `zpp_valid`,
  `load_code_valid`, `erase_zpp`, `write_zpp`, `end_zpp` and `exit_zpp`.
  Until `zpp_valid` accepted a ZppValidQuery, every other ZPP command is
  acknowledged in channel 2.
- `ZsuReceiver(config, salsa20_master_key)` – firmware updates. Implement
  `erase_zsu`, `write_zsu` and `exit_zsu`. Update data is decrypted with the
  cipher set up by the ZsuSalsa20IV command before `write_zsu` sees it.
- `ZppZsuReceiver(config, salsa20_master_key)` – both of the above.

### Binary tree search

`BinaryTreeSearch()(serial_number, decoder_id, pos)` answers one search step:
position 255 starts a new search, 0..62 ack if the bit is set, 64..126 ack if
it is clear, 128..190 and 192..254 stop answering if the bit is set or clear.

### Entering update mode

`EntryPoint(EntryConfig(serial_number, decoder_id, zpp_entry, zsu_entry))`
watches CV verify commands: pass each one to `verify(cv_addr, byte)` with a
0-based CV address. CV8 = 0xFE followed by the ZPP sequence on CV105/CV106
calls `zpp_entry`; CV8 = 0xFF followed by the decoder ID (or zeros) calls
`zsu_entry`. The second half may be the serial number or zeros. Repeats are
ignored; anything else starts over.

## Encoding for the track

```python
from mdu.packet import make_busy_packet
from mdu.tx.encoder import EncoderConfig, encode_packet

symbols = encode_packet(make_busy_packet(), EncoderConfig(transfer_rate=0, num_preamble=20, num_ackreq=10))
```

A packet becomes the preamble, each byte as a zero start bit and eight data
bits (most significant first), an end bit and the ackreq bits. Every `Symbol`
holds two durations at one level, and the level alternates starting low.
`EncoderConfig` raises `ValueError` for a transfer rate outside 0..4, a
preamble outside 14..255 or an ackreq count other than 0 or 10..255.

`MduEncoder(config).encode(data, space)` does the same in pieces: it returns
at most `space` symbols with an `EncodeState` (`COMPLETE`, `MEM_FULL`) and
continues on the next call; `reset()` drops a partly encoded packet.

## What is not included

- No builders for the ZPP commands; ZPP packets must be assembled by hand.
- No hardware access: current pulses, CV storage and flash writes are the
  hooks your subclass supplies, and the encoder only produces symbols.

## Running the tests

```
pip install .[test]
pytest
```