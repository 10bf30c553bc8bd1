"""Text rendering for decoded patterns.

Example::

  Saved with HW Version: 0.808-alpha
  Tempo: 120
  (0) kick	|x---|x---|x---|x---|
"""

from __future__ import annotations

import math
import struct
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .pattern import Pattern
    from .track import Track


STEP_GROUP = 4
ACTIVE = "x"
INACTIVE = "-"
DELIMITER = "|"


FLOAT32_MAX_DIGITS = 9
EXPONENT_THRESHOLD = 6  # exponent form from 1e+06 upwards


def _float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _shortest_precision(value: float) -> int:
    """Fewest significant digits that read back as the same float32."""

    for precision in range(1, FLOAT32_MAX_DIGITS + 1):
        try:
            if _float32(float(f"{value:.{precision - 1}e}")) == value:
                return precision
        except OverflowError:
            continue
    return 17


def format_tempo(tempo: float) -> str:
    """Shortest general format of a float32 tempo.

    ``120.0 -> "120"``, ``100.0001 -> "100.0001"``, ``1234567.0 -> "1.234567e+06"``.
    Exponent form is used below 1e-04 and from 1e+06 on.
    """

    if math.isnan(tempo):
        return "NaN"
    if math.isinf(tempo):
        return "+Inf" if tempo > 0 else "-Inf"

    precision = _shortest_precision(tempo)
    scientific = f"{tempo:.{precision - 1}e}"
    exponent = int(scientific.partition("e")[2])
    if exponent < -4 or exponent >= EXPONENT_THRESHOLD:
        return scientific
    return f"{tempo:.{max(0, precision - 1 - exponent)}f}"


def render_steps(steps) -> str:
    parts: list[str] = []
    for pos, active in enumerate(steps):
        if pos % STEP_GROUP == 0:
            parts.append(DELIMITER)
        parts.append(ACTIVE if active else INACTIVE)
    parts.append(DELIMITER)
    return "".join(parts)


def render_track(track: "Track") -> str:
    return f"({track.index}) {track.name}\t{render_steps(track.steps)}"


def render_pattern(pattern: "Pattern") -> str:
    lines = [
        f"Saved with HW Version: {pattern.version}\n",
        f"Tempo: {format_tempo(pattern.tempo)}\n",
    ]
    lines.extend(f"{render_track(track)}\n" for track in pattern.tracks)
    return "".join(lines)
