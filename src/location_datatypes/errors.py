"""Error taxonomy for format and API-shape conversions.

Multi-record converters catch MalformedInputError and UnsupportedRecordError
per record, log them and move on. Whole-document converters let them
propagate.
"""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for every error raised by location_datatypes."""


class MalformedInputError(ConversionError):
    """Required fields are absent or unparseable.

    Attributes:
        record: Index or identifier of the offending record, if known.
    """

    def __init__(self, message: str, record: int | str | None = None) -> None:
        super().__init__(message)
        self.record = record


class MissingGeometryError(ConversionError):
    """A geometry variant carries neither coordinates nor an encoded string."""


class MissingLegDataError(MissingGeometryError):
    """A route leg has no geometry and no usable start/end positions."""

    def __init__(self, leg_index: int) -> None:
        super().__init__(f"Route leg {leg_index} has no geometry or positions")
        self.leg_index = leg_index


class UnsupportedRecordError(ConversionError):
    """A record type the converter does not handle (skipped, not fatal)."""
