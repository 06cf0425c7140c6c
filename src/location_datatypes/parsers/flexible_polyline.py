"""Decode a flexible polyline string into TracePoints."""

from __future__ import annotations

from loguru import logger

from location_datatypes.config import settings
from location_datatypes.geometry import decode_flexible_polyline
from location_datatypes.models import TracePoint


def flexible_polyline_to_trace_points(encoded: str) -> list[TracePoint]:
    """Convert a flexible polyline (optionally "FP:"-prefixed) to TracePoints.

    Raises:
        MalformedInputError: If the string cannot be decoded.
    """
    precision = settings.coordinate_precision
    points = [
        TracePoint(position=[round(lng, precision), round(lat, precision)])
        for lng, lat in decode_flexible_polyline(encoded)
    ]
    logger.debug(f"Decoded {len(points)} trace points from flexible polyline")
    return points
