"""Normalize API geometry variants into GeoJSON geometries.

API geometries carry either explicit coordinates (``LineString``,
``Polygon``) or an encoded flexible polyline (``Polyline``,
``PolylinePolygon``). Both are turned into GeoJSON dicts with [lng, lat]
positions.
"""

from __future__ import annotations

import flexpolyline
from pyproj import Geod

from location_datatypes.config import settings
from location_datatypes.errors import MalformedInputError, MissingGeometryError

_FP_PREFIX = "FP:"

_GEOD = Geod(ellps="WGS84")


def decode_flexible_polyline(encoded: str) -> list[list[float]]:
    """Decode a flexible polyline string into [lng, lat] positions.

    Accepts an optional "FP:" prefix. A third dimension, if encoded, is
    dropped.

    Raises:
        MalformedInputError: If the string cannot be decoded.
    """
    if encoded.startswith(_FP_PREFIX):
        encoded = encoded[len(_FP_PREFIX):]
    if not encoded:
        raise MalformedInputError("Empty flexible polyline")
    try:
        decoded = flexpolyline.decode(encoded)
    # A truncated header surfaces as RuntimeError (StopIteration in a generator).
    except (ValueError, IndexError, RuntimeError) as exc:
        raise MalformedInputError(f"Invalid flexible polyline: {exc}") from exc
    return [[point[1], point[0]] for point in decoded]


def extract_line(geometry: dict) -> dict:
    """Return a GeoJSON LineString from a LineString/Polyline variant.

    Raises:
        MissingGeometryError: If neither field is present.
    """
    if geometry.get("LineString"):
        return {"type": "LineString", "coordinates": geometry["LineString"]}
    if geometry.get("Polyline"):
        return {
            "type": "LineString",
            "coordinates": decode_flexible_polyline(geometry["Polyline"]),
        }
    raise MissingGeometryError(
        "Geometry is missing both the LineString and Polyline fields"
    )


def extract_polygon(geometry: dict) -> dict:
    """Return a GeoJSON Polygon from a Polygon/PolylinePolygon variant.

    Raises:
        MissingGeometryError: If neither field is present.
    """
    if geometry.get("Polygon"):
        return {"type": "Polygon", "coordinates": geometry["Polygon"]}
    if geometry.get("PolylinePolygon"):
        return {
            "type": "Polygon",
            "coordinates": [
                decode_flexible_polyline(ring)
                for ring in geometry["PolylinePolygon"]
            ],
        }
    raise MissingGeometryError(
        "Geometry is missing both the Polygon and PolylinePolygon fields"
    )


def circle_to_polygon(
    center: list[float], radius: float, steps: int | None = None
) -> dict:
    """Approximate a circle as a closed GeoJSON Polygon.

    Args:
        center: [lng, lat] of the circle's center.
        radius: Radius in meters.
        steps: Number of vertices (defaults to settings.circle_steps).

    Returns:
        Polygon with a single counter-clockwise ring of steps + 1 positions.

    Raises:
        ValueError: If steps is below 3.
    """
    if steps is None:
        steps = settings.circle_steps
    if steps < 3:
        raise ValueError(f"A circle polygon needs at least 3 steps, got {steps}")
    azimuths = [-360.0 * i / steps for i in range(steps)]
    lngs, lats, _ = _GEOD.fwd(
        [center[0]] * steps,
        [center[1]] * steps,
        azimuths,
        [radius] * steps,
    )
    ring = [[lng, lat] for lng, lat in zip(lngs, lats)]
    ring.append(list(ring[0]))
    return {"type": "Polygon", "coordinates": [ring]}


def convert_geometry(
    geometry: dict | None, properties: dict | None = None
) -> dict | None:
    """Convert an API geometry (Point/LineString/Polygon/Circle) to a Feature.

    The first member that is set decides the geometry type. Circles are
    approximated as polygons and their center and radius are added to the
    feature's properties.

    Returns:
        A GeoJSON Feature dict, or None if no member is set.
    """
    if not geometry:
        return None

    for geom_type, coordinates in geometry.items():
        if coordinates is None:
            continue
        if geom_type in ("Point", "LineString", "Polygon"):
            return {
                "type": "Feature",
                "properties": dict(properties or {}),
                "geometry": {"type": geom_type, "coordinates": coordinates},
            }
        if geom_type == "Circle":
            center = coordinates.get("Center")
            radius = coordinates.get("Radius")
            if center is None or radius is None:
                return None
            return {
                "type": "Feature",
                "properties": {
                    "center": center,
                    "radius": radius,
                    **(properties or {}),
                },
                "geometry": circle_to_polygon(center, radius),
            }
        return None
    return None
