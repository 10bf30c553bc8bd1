from __future__ import annotations

from typing import BinaryIO

from .errors import CorruptFileError, FormatError, TruncatedRecordError


MAGIC = b"SPLICE"  # 53 50 4C 49 43 45
MAGIC_SIZE = len(MAGIC)
LENGTH_FIELD_SIZE = 8
VERSION_FIELD_SIZE = 32
TEMPO_FIELD_SIZE = 4
HEADER_FIELDS_SIZE = VERSION_FIELD_SIZE + TEMPO_FIELD_SIZE  # counted by the length field

TRACK_INDEX_SIZE = 4
TRACK_NAME_LENGTH_SIZE = 1
STEP_COUNT = 16
TRACK_FIXED_SIZE = TRACK_INDEX_SIZE + TRACK_NAME_LENGTH_SIZE + STEP_COUNT

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"  # undecodable bytes survive a re-encode

BYTE_ORDER_PREFIX = {"little": "<", "big": ">"}


def struct_prefix(byteorder: str) -> str:
    """Return the ``struct`` prefix for ``"little"`` or ``"big"``."""

    try:
        return BYTE_ORDER_PREFIX[byteorder]
    except KeyError:
        raise ValueError(f"unsupported byte order {byteorder!r}") from None


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to `size` bytes, looping over short reads.

    Returns fewer than `size` bytes only when the stream is exhausted.
    """

    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def decode_text(raw: bytes) -> str:
    return raw.decode(TEXT_ENCODING, errors=TEXT_ERRORS)


def null_terminated(raw: bytes) -> str:
    """Decode a fixed-width field that ends at its first zero byte, if any."""

    end = raw.find(b"\x00")
    if end == -1:
        return decode_text(raw)
    return decode_text(raw[:end])


def read_name(stream: BinaryIO, length: int) -> str:
    """Read an exact-length name; no trimming and no null handling."""

    raw = read_exact(stream, length)
    if len(raw) != length:
        raise TruncatedRecordError(
            f"track name cut short ({len(raw)} of {length} bytes)"
        )
    return decode_text(raw)


def verify_magic(stream: BinaryIO) -> None:
    """Consume the 6-byte signature and confirm it reads ``SPLICE``."""

    raw = read_exact(stream, MAGIC_SIZE)
    if len(raw) != MAGIC_SIZE:
        raise CorruptFileError(
            f"file too short for signature ({len(raw)} bytes, need {MAGIC_SIZE})"
        )
    if raw != MAGIC:
        raise FormatError(f"unknown file format: bad magic {raw.hex()}")
