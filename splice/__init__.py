"""Decoder and text renderer for SPLICE drum pattern files."""

from .errors import (  # noqa: F401
    CorruptFileError,
    FormatError,
    ResourceError,
    SpliceError,
    TruncatedRecordError,
)
from .header import SpliceHeader  # noqa: F401
from .pattern import (  # noqa: F401
    Pattern,
    decode,
    decode_bytes,
    decode_file,
    read_tracks,
)
from .render import format_tempo, render_pattern, render_track  # noqa: F401
from .structs import (  # noqa: F401
    HEADER_FIELDS_SIZE,
    MAGIC,
    STEP_COUNT,
    TRACK_FIXED_SIZE,
    verify_magic,
)
from .track import Track, read_track  # noqa: F401
