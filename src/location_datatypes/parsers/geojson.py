"""Convert a GeoJSON FeatureCollection of GPS samples into TracePoints.

Point features become one TracePoint, LineString features one per vertex.
Recognized properties (shared by every vertex of a LineString):

    timestamp_msec   epoch milliseconds, converted to ISO 8601 UTC
    speed_mps        m/s, converted to km/h
    heading          degrees (0-360)

Coordinates are already in [lng, lat] order; altitude is dropped.
"""

from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger

from location_datatypes.config import settings
from location_datatypes.errors import MalformedInputError, UnsupportedRecordError
from location_datatypes.models import TracePoint

_MPS_TO_KMH = 3.6


def feature_collection_to_trace_points(feature_collection: dict) -> list[TracePoint]:
    """Convert Point/LineString features into TracePoints.

    Features without geometry are skipped; other geometry types and
    malformed features are logged and skipped.
    """
    points: list[TracePoint] = []
    for idx, feature in enumerate(feature_collection.get("features") or []):
        if not isinstance(feature, dict) or not feature.get("geometry"):
            continue
        try:
            points.extend(_feature_to_trace_points(feature))
        except (MalformedInputError, UnsupportedRecordError) as exc:
            logger.warning(f"Skipping GeoJSON feature {idx}: {exc}")

    logger.debug(f"Converted {len(points)} trace points from GeoJSON")
    return points


def _feature_to_trace_points(feature: dict) -> list[TracePoint]:
    geometry = feature["geometry"]
    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")

    if geom_type == "Point":
        positions = [coordinates]
    elif geom_type == "LineString":
        positions = coordinates
    else:
        raise UnsupportedRecordError(f"Unsupported geometry type {geom_type}")
    if not positions or any(not p or len(p) < 2 for p in positions):
        raise MalformedInputError("geometry has no usable coordinates")

    properties = feature.get("properties") or {}
    return [
        _to_trace_point(position[:2], properties) for position in positions
    ]


def _to_trace_point(position: list[float], properties: dict) -> TracePoint:
    point = TracePoint(position=list(position))

    timestamp_msec = properties.get("timestamp_msec")
    if timestamp_msec:
        point.timestamp = _epoch_millis_to_iso(timestamp_msec)

    speed_mps = properties.get("speed_mps")
    if speed_mps:
        point.speed = round(
            float(speed_mps) * _MPS_TO_KMH, settings.speed_precision
        )

    heading = properties.get("heading")
    if heading:
        point.heading = float(heading)

    return point


def _epoch_millis_to_iso(millis: int | float) -> str:
    """1700470800000 -> '2023-11-20T09:00:00.000Z'."""
    try:
        moment = datetime.fromtimestamp(float(millis) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise MalformedInputError(f"invalid timestamp_msec {millis!r}") from exc
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
