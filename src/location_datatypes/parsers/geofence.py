"""Convert a GeoJSON FeatureCollection into BatchPutGeofence request entries.

The feature id becomes GeofenceId. A feature whose properties carry
"center" and "radius" becomes a Circle geofence; any other Polygon feature
becomes a Polygon geofence.
"""

from __future__ import annotations

from loguru import logger


def feature_collection_to_geofences(feature_collection: dict) -> list[dict]:
    """Convert Polygon features into geofence request entries.

    Features with no geometry, no coordinates or a non-Polygon geometry are
    skipped.
    """
    entries: list[dict] = []
    for idx, feature in enumerate(feature_collection.get("features") or []):
        entry = _feature_to_geofence(feature)
        if entry is None:
            logger.warning(f"Skipping feature {idx}: not a Polygon geofence")
            continue
        entries.append(entry)
    return entries


def _feature_to_geofence(feature: dict | None) -> dict | None:
    if not feature:
        return None
    geometry = feature.get("geometry")
    if not geometry or geometry.get("type") != "Polygon":
        return None
    if not geometry.get("coordinates"):
        return None

    properties = feature.get("properties") or {}
    if properties.get("center") is not None and properties.get("radius") is not None:
        fence = {
            "Circle": {
                "Center": properties["center"],
                "Radius": properties["radius"],
            }
        }
    else:
        fence = {"Polygon": geometry["coordinates"]}

    return {"GeofenceId": feature.get("id"), "Geometry": fence}
