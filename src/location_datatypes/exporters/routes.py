"""Export a CalculateRoute response to GeoJSON.

By default the route becomes one MultiLineString feature, one line per leg
(legs without Geometry are skipped). With merge_legs=True the legs are
stitched into a single LineString instead. Route fields other than Legs
become the feature's properties (unset fields omitted); Summary.RouteBBox
becomes its bbox. Flattening lifts the Summary's fields to top-level keys.
"""

from __future__ import annotations

import copy

from loguru import logger

from location_datatypes.collection import empty_feature_collection, strip_metadata
from location_datatypes.errors import MissingGeometryError
from location_datatypes.flatten import flatten_properties as _flatten
from location_datatypes.geometry import extract_line
from location_datatypes.legs import OnError, stitch_legs


def route_to_feature_collection(
    route: dict, flatten_properties: bool = False, merge_legs: bool = False
) -> dict:
    """Export a CalculateRoute response to a FeatureCollection.

    Args:
        route: CalculateRoute response with Legs and Summary.
        flatten_properties: Flatten the nested properties.
        merge_legs: Emit one LineString for the whole route instead of a
            MultiLineString with a line per leg.

    Returns:
        FeatureCollection with a single feature, or an empty one if the
        route has no legs or no leg has a geometry.
    """
    legs = route.get("Legs")
    if not legs:
        return empty_feature_collection()

    if merge_legs:
        geometry = stitch_legs(legs, on_error="skip")
        if not geometry["coordinates"]:
            return empty_feature_collection()
    else:
        lines = _leg_lines(legs)
        if not lines:
            return empty_feature_collection()
        geometry = {"type": "MultiLineString", "coordinates": lines}

    properties = strip_metadata({
        k: v for k, v in route.items() if k != "Legs" and v is not None
    })
    bbox = None
    if isinstance(properties.get("Summary"), dict):
        properties["Summary"] = copy.copy(properties["Summary"])
        bbox = properties["Summary"].pop("RouteBBox", None)

    feature: dict = {"type": "Feature"}
    if bbox is not None:
        feature["bbox"] = bbox
    feature["properties"] = (
        _flatten_route_properties(properties) if flatten_properties else properties
    )
    feature["geometry"] = geometry
    return {"type": "FeatureCollection", "features": [feature]}


def legs_to_line_string(legs: list[dict] | None, on_error: OnError = "raise") -> dict:
    """Connect route legs into a single GeoJSON LineString.

    Requires the route to be calculated with IncludeLegGeometry, otherwise
    only the legs' start and end positions are available.
    """
    return stitch_legs(legs, on_error=on_error)


def _flatten_route_properties(properties: dict) -> dict:
    """Flatten with the Summary's fields lifted to top-level keys."""
    summary = properties.get("Summary")
    rest = {k: v for k, v in properties.items() if k != "Summary"}
    flat = _flatten(rest)
    if isinstance(summary, dict):
        flat.update(_flatten(summary))
    return flat


def _leg_lines(legs: list[dict]) -> list[list[list[float]]]:
    lines = []
    for index, leg in enumerate(legs):
        try:
            lines.append(extract_line((leg or {}).get("Geometry") or {})["coordinates"])
        except MissingGeometryError:
            logger.warning(f"Skipping route leg {index}: no Geometry")
    return lines
