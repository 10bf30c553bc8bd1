"""Fixed-width SPLICE header: declared length, version string and tempo.

Layout following the 6-byte signature::

  8 bytes   big-endian u64, count of bytes that follow this field
  32 bytes  version text, cut at the first zero byte
  4 bytes   little-endian IEEE-754 float32 tempo

The declared length covers the version and tempo fields too, so the
track records own ``declared_length - 36`` bytes.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from .errors import CorruptFileError
from .structs import (
    HEADER_FIELDS_SIZE,
    LENGTH_FIELD_SIZE,
    TEMPO_FIELD_SIZE,
    VERSION_FIELD_SIZE,
    null_terminated,
    read_exact,
)


def _read_field(stream: BinaryIO, size: int, label: str) -> bytes:
    raw = read_exact(stream, size)
    if len(raw) != size:
        raise CorruptFileError(
            f"file too short for {label} ({len(raw)} of {size} bytes)"
        )
    return raw


@dataclass(frozen=True)
class SpliceHeader:
    declared_length: int
    version: str
    tempo: float

    @property
    def track_bytes(self) -> int:
        """Bytes left for track records once version and tempo are consumed."""

        return self.declared_length - HEADER_FIELDS_SIZE

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "SpliceHeader":
        raw_length = _read_field(stream, LENGTH_FIELD_SIZE, "length field")
        (declared_length,) = struct.unpack(">Q", raw_length)
        if declared_length < HEADER_FIELDS_SIZE:
            raise CorruptFileError(
                f"declared length {declared_length} cannot hold version and tempo "
                f"({HEADER_FIELDS_SIZE} bytes)"
            )

        version = null_terminated(_read_field(stream, VERSION_FIELD_SIZE, "version"))
        (tempo,) = struct.unpack("<f", _read_field(stream, TEMPO_FIELD_SIZE, "tempo"))

        return cls(declared_length=declared_length, version=version, tempo=tempo)
