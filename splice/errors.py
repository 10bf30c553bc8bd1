"""Exception hierarchy for SPLICE decoding."""

from __future__ import annotations


class SpliceError(Exception):
    """Base exception for all SPLICE decoding errors."""


class FormatError(SpliceError, ValueError):
    """The stream does not start with the SPLICE signature."""


class CorruptFileError(SpliceError, ValueError):
    """A fixed-width header field is missing or inconsistent.

    Subclasses ValueError so callers that already guard parsing with
    ``except ValueError`` keep working.
    """


class TruncatedRecordError(SpliceError, ValueError):
    """A track record started but the stream ended before it was complete."""


class ResourceError(SpliceError, OSError):
    """The underlying byte stream could not be released."""
