"""Variable-length track records.

Each record is::

  4 bytes   u32 track index
  1 byte    name length N
  N bytes   name, taken verbatim
  16 bytes  one byte per step, nonzero = active
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Tuple

from .errors import TruncatedRecordError
from .render import render_track
from .structs import (
    STEP_COUNT,
    TEXT_ENCODING,
    TEXT_ERRORS,
    TRACK_FIXED_SIZE,
    TRACK_INDEX_SIZE,
    TRACK_NAME_LENGTH_SIZE,
    read_exact,
    read_name,
    struct_prefix,
)


@dataclass(frozen=True)
class Track:
    index: int
    name: str
    steps: Tuple[bool, ...]
    # Bytes the record occupied on disk; only used for length accounting.
    size_in_bytes: int = field(default=-1, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.steps) != STEP_COUNT:
            raise ValueError(
                f"track {self.index} has {len(self.steps)} steps, expected {STEP_COUNT}"
            )
        object.__setattr__(self, "steps", tuple(bool(step) for step in self.steps))
        if self.size_in_bytes < 0:
            name_length = len(self.name.encode(TEXT_ENCODING, TEXT_ERRORS))
            object.__setattr__(self, "size_in_bytes", TRACK_FIXED_SIZE + name_length)

    @property
    def active_steps(self) -> list[int]:
        """0-based positions of the active steps."""

        return [pos for pos, active in enumerate(self.steps) if active]

    def __str__(self) -> str:
        return render_track(self)


def read_track(stream: BinaryIO, byteorder: str = "little") -> Track | None:
    """Decode one track record from the current stream position.

    Returns None if the stream is already exhausted, i.e. it ended exactly
    on a record boundary. A record that starts but cannot be completed
    raises TruncatedRecordError.
    """

    prefix = struct_prefix(byteorder)

    raw_index = read_exact(stream, TRACK_INDEX_SIZE)
    if not raw_index:
        return None
    if len(raw_index) != TRACK_INDEX_SIZE:
        raise TruncatedRecordError(
            f"track index cut short ({len(raw_index)} of {TRACK_INDEX_SIZE} bytes)"
        )
    (index,) = struct.unpack(prefix + "I", raw_index)

    raw_length = read_exact(stream, TRACK_NAME_LENGTH_SIZE)
    if len(raw_length) != TRACK_NAME_LENGTH_SIZE:
        raise TruncatedRecordError(f"track {index}: name length missing")
    (name_length,) = struct.unpack(prefix + "B", raw_length)

    try:
        name = read_name(stream, name_length)
    except TruncatedRecordError as err:
        raise TruncatedRecordError(f"track {index}: {err}") from None

    raw_steps = read_exact(stream, STEP_COUNT)
    if len(raw_steps) != STEP_COUNT:
        raise TruncatedRecordError(
            f"track {index} ({name!r}): steps cut short "
            f"({len(raw_steps)} of {STEP_COUNT} bytes)"
        )

    return Track(
        index=index,
        name=name,
        steps=tuple(value != 0 for value in raw_steps),
        size_in_bytes=TRACK_FIXED_SIZE + name_length,
    )
