"""Parse NMEA 0183 $GPRMC / $GPGGA sentences into TracePoints.

Coordinates are degrees + decimal minutes with a hemisphere letter
(latitude ddmm.mmmm, longitude dddmm.mmmm) and are converted to signed
decimal degrees. $GPRMC also carries the UTC date and time and the speed
over ground in knots; $GPGGA has a time but no date, so it yields a
position only.

GPRMC fields:
    1 time, 2 status, 3 lat, 4 N/S, 5 lon, 6 E/W, 7 speed (knots),
    8 track, 9 date (ddmmyy), 10 magnetic variation, 11 E/W
GPGGA fields:
    1 time, 2 lat, 3 N/S, 4 lon, 5 E/W, 6 fix quality, 7 satellites,
    8 HDOP, 9 altitude, 10 unit, 11 geoid height, 12 unit,
    13 DGPS age, 14 DGPS station
"""

from __future__ import annotations

from loguru import logger

from location_datatypes.config import settings
from location_datatypes.errors import MalformedInputError, UnsupportedRecordError
from location_datatypes.models import TracePoint

_KNOTS_TO_KMH = 1.852

_GPRMC_MIN_FIELDS = 12
_GPGGA_MIN_FIELDS = 14


def nmea_to_trace_points(nmea_string: str) -> list[TracePoint]:
    """Convert newline-separated NMEA sentences into TracePoints.

    Each sentence is converted independently; malformed and unsupported
    sentences are logged and skipped.
    """
    points: list[TracePoint] = []
    lines = [line.strip() for line in nmea_string.splitlines()]
    for idx, sentence in enumerate(line for line in lines if line):
        try:
            points.append(parse_sentence(sentence))
        except (MalformedInputError, UnsupportedRecordError) as exc:
            logger.warning(f"Skipping NMEA sentence {idx}: {exc}")

    logger.debug(f"Parsed {len(points)} trace points from NMEA")
    return points


def parse_sentence(sentence: str) -> TracePoint:
    """Dispatch a single sentence on its identifier.

    Raises:
        UnsupportedRecordError: For sentence types other than GPRMC/GPGGA.
    """
    if sentence.startswith("$GPRMC"):
        return parse_gprmc(sentence)
    if sentence.startswith("$GPGGA"):
        return parse_gpgga(sentence)
    raise UnsupportedRecordError(
        f"Unsupported NMEA sentence {sentence.split(',')[0]}"
    )


def parse_gprmc(sentence: str) -> TracePoint:
    """Convert a $GPRMC sentence (position, UTC timestamp, speed)."""
    parts = _split(sentence)
    if len(parts) < _GPRMC_MIN_FIELDS:
        raise MalformedInputError("GPRMC sentence has too few fields")

    time_str, lat_str, lat_dir, lon_str, lon_dir, speed_str, date_str = (
        parts[1], parts[3], parts[4], parts[5], parts[6], parts[7], parts[9]
    )
    point = TracePoint(position=[
        parse_longitude(lon_str, lon_dir),
        parse_latitude(lat_str, lat_dir),
    ])

    if time_str and date_str:
        point.timestamp = to_iso_timestamp(date_str, time_str)

    if speed_str:
        try:
            knots = float(speed_str)
        except ValueError as exc:
            raise MalformedInputError(f"invalid speed {speed_str!r}") from exc
        point.speed = round(knots * _KNOTS_TO_KMH, settings.speed_precision)

    return point


def parse_gpgga(sentence: str) -> TracePoint:
    """Convert a $GPGGA sentence (position only)."""
    parts = _split(sentence)
    if len(parts) < _GPGGA_MIN_FIELDS:
        raise MalformedInputError("GPGGA sentence has too few fields")

    return TracePoint(position=[
        parse_longitude(parts[4], parts[5]),
        parse_latitude(parts[2], parts[3]),
    ])


def parse_latitude(value: str, hemisphere: str) -> float:
    """ddmm.mmmm + N/S -> signed decimal degrees."""
    return _parse_coordinate(value, hemisphere, 2, "S")


def parse_longitude(value: str, hemisphere: str) -> float:
    """dddmm.mmmm + E/W -> signed decimal degrees."""
    return _parse_coordinate(value, hemisphere, 3, "W")


def expand_two_digit_year(year: str) -> int:
    """Expand an NMEA two-digit year around the pivot (80 -> 1980, 79 -> 2079)."""
    yy = int(year)
    return 2000 + yy if yy < settings.nmea_pivot_year else 1900 + yy


def to_iso_timestamp(date_str: str, time_str: str) -> str:
    """Build an ISO 8601 UTC timestamp from ddmmyy and hhmmss[.sss]."""
    if (
        len(date_str) != 6 or not date_str.isdigit()
        or len(time_str) < 6 or not time_str[:6].isdigit()
    ):
        raise MalformedInputError(
            f"invalid date/time {date_str!r} {time_str!r}"
        )

    day, month, year = date_str[0:2], date_str[2:4], date_str[4:6]
    hours, minutes, seconds = time_str[0:2], time_str[2:4], time_str[4:6]
    fraction = time_str[7:] if len(time_str) > 7 else ""
    millis = (fraction + "000")[:3]

    return (
        f"{expand_two_digit_year(year)}-{month}-{day}"
        f"T{hours}:{minutes}:{seconds}.{millis}Z"
    )


def _split(sentence: str) -> list[str]:
    """Split a sentence into fields, dropping the *hh checksum."""
    return sentence.split("*", 1)[0].split(",")


def _parse_coordinate(
    value: str, hemisphere: str, degree_digits: int, negative: str
) -> float:
    if not value or not hemisphere:
        raise MalformedInputError("missing coordinate or hemisphere")
    try:
        degrees = float(value[:degree_digits])
        minutes = float(value[degree_digits:])
    except ValueError as exc:
        raise MalformedInputError(f"invalid coordinate {value!r}") from exc

    result = degrees + minutes / 60
    if hemisphere == negative:
        result = -result
    return round(result, settings.coordinate_precision)
