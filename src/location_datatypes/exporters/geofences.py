"""Export geofences (GetGeofence, PutGeofence, ListGeofences, BatchPutGeofence) to GeoJSON.

Polygon geofences keep their rings. Circle geofences are approximated as
polygons and carry "center" and "radius" properties so they can be turned
back into circles by the geofence parser.
"""

from __future__ import annotations

import enum

from location_datatypes.collection import feature_collection, strip_metadata
from location_datatypes.geometry import convert_geometry


class GeofenceResponseKind(enum.Enum):
    SINGLE = "Geometry"
    ENTRIES = "Entries"


def classify_geofence_response(response: dict) -> GeofenceResponseKind:
    """Tell a single geofence from a list/batch of geofences."""
    if "Entries" in response and "Geometry" not in response:
        return GeofenceResponseKind.ENTRIES
    return GeofenceResponseKind.SINGLE


def geofences_to_feature_collection(response: dict) -> dict:
    """Export geofences to a FeatureCollection of Polygons.

    Geofences without a usable geometry are dropped.
    """
    if classify_geofence_response(response) is GeofenceResponseKind.SINGLE:
        geofences = [response]
    else:
        geofences = response.get("Entries") or []
    return feature_collection([_geofence_to_feature(g) for g in geofences])


def _geofence_to_feature(geofence: dict | None) -> dict | None:
    if not geofence:
        return None

    properties = strip_metadata({
        k: v for k, v in geofence.items() if k not in ("Geometry", "GeofenceId")
    })
    feature = convert_geometry(geofence.get("Geometry"), properties)
    if feature is None:
        return None

    if "GeofenceId" in geofence:
        feature["id"] = geofence["GeofenceId"]
    return feature
