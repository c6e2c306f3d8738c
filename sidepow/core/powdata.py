"""Genesis proof-of-work seed data.

The mainchain `getscgenesisinfo` RPC reports the (time, bits) pairs of the
blocks preceding the sidechain's genesis mainchain block as one hex string:
8-byte records of two little-endian 32-bit integers, newest record first.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

RECORD_FORMAT = "<iI"
RECORD_SIZE = struct.calcsize(RECORD_FORMAT)


class PowDataError(ValueError):
    pass


@dataclass(frozen=True)
class TimeBits:
    """Timestamp and compact target of one mainchain block."""

    time: int
    bits: int

    def to_dict(self) -> dict:
        return {"time": self.time, "bits": self.bits}

    @classmethod
    def from_dict(cls, d: dict) -> TimeBits:
        return cls(time=d["time"], bits=d["bits"])


def parse_pow_data(pow_data: str) -> list[TimeBits]:
    """Decode the newest-first hex feed into oldest-first samples."""
    try:
        raw = bytes.fromhex(pow_data.strip())
    except ValueError as e:
        raise PowDataError(f"pow data is not valid hex: {e}") from e
    if len(raw) % RECORD_SIZE != 0:
        raise PowDataError(
            f"pow data length {len(raw)} is not a multiple of {RECORD_SIZE}"
        )
    samples = [
        TimeBits(time=time, bits=bits)
        for time, bits in struct.iter_unpack(RECORD_FORMAT, raw)
    ]
    samples.reverse()
    return samples


def serialize_pow_data(samples: list[TimeBits]) -> str:
    """Encode oldest-first samples as the newest-first hex feed."""
    raw = b"".join(
        struct.pack(RECORD_FORMAT, s.time, s.bits) for s in reversed(samples)
    )
    return raw.hex()
