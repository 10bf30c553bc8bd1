"""Decode a complete SPLICE pattern.

The track loop stops on one of two independent conditions:

* the declared length is used up -- authoritative; any bytes after it
  are ignored. A record that runs past the declared length is kept and
  ends the loop;
* the stream ends on a record boundary while declared bytes remain.
  In strict mode (the default) that is a truncated file. With
  ``strict=False`` the file is accepted as a short pattern.
"""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import BinaryIO, List, Tuple

from .errors import ResourceError, TruncatedRecordError
from .header import SpliceHeader
from .render import render_pattern
from .structs import verify_magic
from .track import Track, read_track


TRACK_BYTE_ORDER = "little"


@dataclass(frozen=True)
class Pattern:
    """Decoded drum pattern: version string, tempo and tracks in file order."""

    version: str
    tempo: float
    tracks: Tuple[Track, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tracks", tuple(self.tracks))

    def __str__(self) -> str:
        return render_pattern(self)


def read_tracks(stream: BinaryIO, remaining: int, *, strict: bool = True) -> List[Track]:
    """Read track records until `remaining` declared bytes are consumed."""

    tracks: List[Track] = []
    while remaining > 0:
        track = read_track(stream, TRACK_BYTE_ORDER)
        if track is None:
            if strict:
                raise TruncatedRecordError(
                    f"stream ended after {len(tracks)} tracks with "
                    f"{remaining} declared bytes unread"
                )
            break

        tracks.append(track)
        # A record running past the declared length still ends the loop.
        remaining = max(0, remaining - track.size_in_bytes)
    return tracks


def decode(stream: BinaryIO, *, strict: bool = True) -> Pattern:
    """Decode a pattern from an open binary stream.

    The stream is read sequentially and left open; the caller owns it.
    """

    verify_magic(stream)
    header = SpliceHeader.from_stream(stream)
    tracks = read_tracks(stream, header.track_bytes, strict=strict)
    return Pattern(version=header.version, tempo=header.tempo, tracks=tuple(tracks))


def decode_bytes(data: bytes, *, strict: bool = True) -> Pattern:
    return decode(io.BytesIO(data), strict=strict)


def _release(stream: BinaryIO, path: str | os.PathLike[str]) -> ResourceError | None:
    try:
        stream.close()
    except OSError as err:
        release_error = ResourceError(f"could not close {os.fspath(path)}: {err}")
        release_error.__cause__ = err
        return release_error
    return None


def decode_file(path: str | os.PathLike[str], *, strict: bool = True) -> Pattern:
    """Open `path`, decode it and close it on every exit path.

    If closing fails after a successful decode, ResourceError is raised.
    If closing fails while a decode error is propagating, the decode error
    is re-raised with the ResourceError attached as ``release_error``.
    """

    stream = open(path, "rb")
    try:
        pattern = decode(stream, strict=strict)
    except BaseException as err:
        release_error = _release(stream, path)
        if release_error is not None:
            err.release_error = release_error  # type: ignore[attr-defined]
            err.add_note(str(release_error))
        raise

    release_error = _release(stream, path)
    if release_error is not None:
        raise release_error
    return pattern
