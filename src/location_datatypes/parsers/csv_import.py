"""Parse CSV trace logs into TracePoints.

Uses stdlib csv module. Recognized columns (names can be remapped):

    latitude, longitude   required, decimal degrees
    speed_kmh             km/h
    speed_mps             m/s, converted to km/h
    speed_mph             mph, converted to km/h
    timestamp             ISO 8601, passed through verbatim
    heading               degrees (0-360)

If several speed columns exist, speed_kmh wins, then speed_mps, then
speed_mph. Positions are stored as [lng, lat] (GeoJSON convention).
"""

from __future__ import annotations

import csv
import io

from loguru import logger

from location_datatypes.errors import MalformedInputError
from location_datatypes.models import TracePoint

_MPS_TO_KMH = 3.6
_MPH_TO_KMH = 1.60934

# Speed columns in precedence order, with their factor to km/h.
_SPEED_COLUMNS = (
    ("speed_kmh", 1.0),
    ("speed_mps", _MPS_TO_KMH),
    ("speed_mph", _MPH_TO_KMH),
)


def csv_to_trace_points(
    csv_string: str,
    column_mapping: dict[str, str] | None = None,
    columns: list[str] | None = None,
) -> list[TracePoint]:
    """Parse a CSV string into TracePoints.

    Args:
        csv_string: Raw CSV content. The first line is the header unless
            columns is given.
        column_mapping: Maps a recognized column name to the header actually
            used in the file, e.g. {"latitude": "y", "longitude": "x"}.
        columns: Column names for a file without a header row. Every line,
            including the first, is then read as data.

    Returns:
        One TracePoint per data row. Rows with unparseable numbers are
        logged and skipped.

    Raises:
        MalformedInputError: If there is no header or no latitude/longitude
            column.
    """
    reader = csv.DictReader(io.StringIO(csv_string.strip()), fieldnames=columns)
    try:
        headers = [h.strip() for h in reader.fieldnames or []]
    except csv.Error as exc:
        raise MalformedInputError(f"Invalid CSV: {exc}") from exc
    if not headers:
        raise MalformedInputError("CSV has no header row")

    resolved = _resolve_columns(headers, column_mapping or {})
    for required in ("latitude", "longitude"):
        if required not in resolved:
            raise MalformedInputError(f"CSV has no {required} column")

    points: list[TracePoint] = []
    try:
        for idx, raw in enumerate(reader):
            row = {
                (k or "").strip(): (v or "").strip()
                for k, v in raw.items()
                if isinstance(v, str) or v is None
            }
            if not any(row.values()):
                continue
            try:
                points.append(_row_to_trace_point(row, resolved))
            except MalformedInputError as exc:
                logger.warning(f"Skipping CSV row {idx}: {exc}")
    except csv.Error as exc:
        raise MalformedInputError(f"Invalid CSV: {exc}") from exc

    logger.debug(f"Parsed {len(points)} trace points from CSV")
    return points


def _resolve_columns(
    headers: list[str], column_mapping: dict[str, str]
) -> dict[str, str]:
    """Map each recognized column name to the header holding it."""
    reverse = {actual: name for name, actual in column_mapping.items()}
    return {reverse.get(header, header): header for header in headers}


def _row_to_trace_point(row: dict[str, str], columns: dict[str, str]) -> TracePoint:
    latitude = _parse_float(row, columns["latitude"])
    longitude = _parse_float(row, columns["longitude"])
    point = TracePoint(position=[longitude, latitude])

    for name, factor in _SPEED_COLUMNS:
        if name in columns:
            if row.get(columns[name]):
                point.speed = _parse_float(row, columns[name]) * factor
            break

    timestamp = row.get(columns.get("timestamp", ""), "")
    if timestamp:
        point.timestamp = timestamp

    if row.get(columns.get("heading", "")):
        point.heading = _parse_float(row, columns["heading"])

    return point


def _parse_float(row: dict[str, str], header: str) -> float:
    try:
        return float(row[header])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedInputError(
            f"{header!r} is not a number: {row.get(header)!r}"
        ) from exc
