"""Export GeoRoutes responses (CalculateRoutes, CalculateIsolines,
OptimizeWaypoints, SnapToRoads) to GeoJSON FeatureCollections.

Every emitted feature carries a "FeatureType" property naming what it
represents (Leg, Span, TravelStepGeometry, ...). Properties come from the
record a feature was built from, never from its parents, so a Leg feature
holds the leg's metadata but none of the route's.

Feature ids are sequential integers within each collection. Properties are
flattened by default since MapLibre expressions cannot reach nested values.
"""

from __future__ import annotations

import copy
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field

from location_datatypes.collection import add_feature, strip_metadata
from location_datatypes.config import settings
from location_datatypes.errors import MissingGeometryError
from location_datatypes.flatten import flatten_properties as _flatten
from location_datatypes.geometry import extract_line, extract_polygon
from location_datatypes.slices import slice_lines, slice_start_points

_LEG_DETAIL_KEYS = ("VehicleLegDetails", "PedestrianLegDetails", "FerryLegDetails")


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class GeoRoutesOptions(BaseModel):
    """Options shared by every GeoRoutes exporter."""
    flatten_properties: bool = Field(
        default_factory=lambda: settings.flatten_properties
    )
    # Log and skip a route leg or isoline geometry that cannot be decoded
    # instead of raising.
    skip_errors: bool = False


class CalculateRoutesOptions(GeoRoutesOptions):
    """Which features to emit for each route."""
    include_legs: bool = True
    include_travel_step_geometry: bool = False
    include_spans: bool = False
    include_leg_arrival_departure_positions: bool = False
    include_travel_step_start_positions: bool = False


class CalculateIsolinesOptions(GeoRoutesOptions):
    pass


class OptimizeWaypointsOptions(GeoRoutesOptions):
    pass


class SnapToRoadsOptions(GeoRoutesOptions):
    """Which features to emit for a snapped trace."""
    include_snapped_geometry: bool = True
    include_snapped_trace_point_original_positions: bool = False
    include_snapped_trace_point_snapped_positions: bool = False
    include_original_to_snapped_position_lines: bool = False


def _resolve(model: type[BaseModel], options: Optional[BaseModel], overrides: dict):
    if options is None:
        return model(**overrides)
    return options.model_copy(update=overrides) if overrides else options


# ---------------------------------------------------------------------------
# CalculateRoutes
# ---------------------------------------------------------------------------

def calculate_routes_response_to_feature_collections(
    response: dict,
    options: Optional[CalculateRoutesOptions] = None,
    **overrides,
) -> list[dict]:
    """Export a CalculateRoutes response, one FeatureCollection per route.

    Args:
        response: CalculateRoutes response.
        options: Which features to emit. Keyword overrides (e.g.
            include_spans=True) are applied on top.

    Raises:
        MissingGeometryError: A leg geometry has fewer than two positions
            or cannot be resolved, unless skip_errors is set.
    """
    opts = _resolve(CalculateRoutesOptions, options, overrides)
    collections = []
    for route_index, route in enumerate(response.get("Routes") or []):
        collection: dict = {"type": "FeatureCollection", "features": []}
        for leg_index, leg in enumerate(route.get("Legs") or []):
            if not leg.get("Geometry"):
                continue
            try:
                _add_leg(collection, leg, opts)
            except MissingGeometryError as exc:
                if not opts.skip_errors:
                    raise
                logger.warning(
                    f"Skipping route {route_index} leg {leg_index}: {exc}"
                )
        collections.append(collection)
    return collections


def _add_leg(collection: dict, leg: dict, opts: CalculateRoutesOptions) -> None:
    line = extract_line(leg["Geometry"])
    if len(line["coordinates"]) < 2:
        raise MissingGeometryError("Route leg has invalid geometry.")

    details = next((leg[k] for k in _LEG_DETAIL_KEYS if leg.get(k)), None)
    flatten = opts.flatten_properties

    if opts.include_legs:
        properties = {k: v for k, v in leg.items() if k != "Geometry"}
        properties["FeatureType"] = "Leg"
        add_feature(collection, line, properties, flatten)

    if opts.include_leg_arrival_departure_positions and details:
        for feature_type in ("Departure", "Arrival"):
            stop = details.get(feature_type)
            if not stop:
                continue
            properties = copy.deepcopy(stop)
            position = (properties.get("Place") or {}).pop("Position", None)
            if position is None:
                continue
            properties["FeatureType"] = feature_type
            add_feature(
                collection, {"type": "Point", "coordinates": position},
                properties, flatten,
            )

    details = details or {}
    if opts.include_travel_step_geometry:
        for geometry, properties in slice_lines(
            line, details.get("TravelSteps"), "TravelStepGeometry"
        ):
            add_feature(collection, geometry, properties, flatten)

    if opts.include_travel_step_start_positions:
        for geometry, properties in slice_start_points(
            line, details.get("TravelSteps"), "TravelStepStartPosition"
        ):
            add_feature(collection, geometry, properties, flatten)

    if opts.include_spans:
        for geometry, properties in slice_lines(line, details.get("Spans"), "Span"):
            add_feature(collection, geometry, properties, flatten)


# ---------------------------------------------------------------------------
# CalculateIsolines
# ---------------------------------------------------------------------------

def calculate_isolines_response_to_feature_collection(
    response: dict,
    options: Optional[CalculateIsolinesOptions] = None,
    **overrides,
) -> dict:
    """Export a CalculateIsolines response.

    Each isoline becomes a Feature with a GeometryCollection of its polygons
    followed by its connection lines. Isolines with no geometry are dropped.
    """
    opts = _resolve(CalculateIsolinesOptions, options, overrides)
    collection: dict = {"type": "FeatureCollection", "features": []}

    for index, isoline in enumerate(response.get("Isolines") or []):
        geometries = []
        try:
            for shape in isoline.get("Geometries") or []:
                polygon = extract_polygon(shape)
                if polygon["coordinates"]:
                    geometries.append(polygon)
            for connection in isoline.get("Connections") or []:
                connection_line = extract_line(connection.get("Geometry") or {})
                if len(connection_line["coordinates"]) > 1:
                    geometries.append(connection_line)
        except MissingGeometryError as exc:
            if not opts.skip_errors:
                raise
            logger.warning(f"Skipping isoline {index}: {exc}")
            continue

        if not geometries:
            continue
        properties = {
            k: v for k, v in isoline.items()
            if k not in ("Geometries", "Connections")
        }
        collection["features"].append({
            "type": "Feature",
            "id": len(collection["features"]),
            "properties": _flatten(properties) if opts.flatten_properties else properties,
            "geometry": {"type": "GeometryCollection", "geometries": geometries},
        })
    return collection


# ---------------------------------------------------------------------------
# OptimizeWaypoints
# ---------------------------------------------------------------------------

def optimize_waypoints_response_to_feature_collection(
    response: dict,
    options: Optional[OptimizeWaypointsOptions] = None,
    **overrides,
) -> dict:
    """Export an OptimizeWaypoints response.

    Impeding waypoints (why optimization failed) come first, then the
    optimized waypoints in their optimized order.
    """
    opts = _resolve(OptimizeWaypointsOptions, options, overrides)
    collection: dict = {"type": "FeatureCollection", "features": []}

    for key, feature_type in (
        ("ImpedingWaypoints", "ImpedingWaypoint"),
        ("OptimizedWaypoints", "OptimizedWaypoint"),
    ):
        for waypoint in response.get(key) or []:
            properties = {k: v for k, v in waypoint.items() if k != "Position"}
            properties["FeatureType"] = feature_type
            add_feature(
                collection,
                {"type": "Point", "coordinates": waypoint.get("Position")},
                properties,
                opts.flatten_properties,
            )
    return collection


# ---------------------------------------------------------------------------
# SnapToRoads
# ---------------------------------------------------------------------------

def snap_to_roads_response_to_feature_collection(
    response: dict,
    options: Optional[SnapToRoadsOptions] = None,
    **overrides,
) -> dict:
    """Export a SnapToRoads response.

    Raises:
        MissingGeometryError: The snapped geometry is requested but absent.
    """
    opts = _resolve(SnapToRoadsOptions, options, overrides)
    flatten = opts.flatten_properties
    collection: dict = {"type": "FeatureCollection", "features": []}

    if opts.include_snapped_geometry:
        properties = strip_metadata({
            k: v for k, v in response.items()
            if k not in ("SnappedGeometry", "SnappedGeometryFormat", "SnappedTracePoints")
        })
        properties["FeatureType"] = "SnappedGeometry"
        add_feature(
            collection,
            extract_line(response.get("SnappedGeometry") or {}),
            properties,
            flatten,
        )

    for trace_point in response.get("SnappedTracePoints") or []:
        original = trace_point.get("OriginalPosition")
        snapped = trace_point.get("SnappedPosition")
        base = {
            k: v for k, v in trace_point.items()
            if k not in ("OriginalPosition", "SnappedPosition")
        }

        if opts.include_snapped_trace_point_original_positions:
            add_feature(
                collection,
                {"type": "Point", "coordinates": original},
                {**base, "FeatureType": "SnappedTracePointOriginalPosition"},
                flatten,
            )
        if opts.include_snapped_trace_point_snapped_positions:
            add_feature(
                collection,
                {"type": "Point", "coordinates": snapped},
                {**base, "FeatureType": "SnappedTracePointSnappedPosition"},
                flatten,
            )
        if opts.include_original_to_snapped_position_lines:
            add_feature(
                collection,
                {"type": "LineString", "coordinates": [original, snapped]},
                {**base, "FeatureType": "OriginalToSnappedPositionLine"},
                flatten,
            )
    return collection
