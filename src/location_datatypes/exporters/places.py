"""Export place responses (GetPlace, SearchPlaceIndexForText/Position) to GeoJSON.

A GetPlace response holds one "Place"; search responses hold "Results",
each wrapping a "Place". The place's Geometry.Point becomes the feature's
geometry and is removed from its properties.
"""

from __future__ import annotations

import copy
import enum

from location_datatypes.collection import feature_collection
from location_datatypes.errors import MalformedInputError
from location_datatypes.flatten import flatten_properties as _flatten


class PlaceResponseKind(enum.Enum):
    SINGLE = "Place"
    RESULTS = "Results"


def classify_place_response(response: dict) -> PlaceResponseKind:
    """Tell a single-place response from a search response.

    Raises:
        MalformedInputError: If neither Place nor Results is present.
    """
    if "Place" in response:
        return PlaceResponseKind.SINGLE
    if "Results" in response:
        return PlaceResponseKind.RESULTS
    raise MalformedInputError("Results and Place properties cannot be found.")


def place_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a place or search response to a FeatureCollection of Points.

    Places without a Point geometry are dropped. With flatten_properties,
    nested fields become dot-joined keys such as "Place.Categories.0".
    """
    if classify_place_response(response) is PlaceResponseKind.SINGLE:
        containers = [response]
    else:
        containers = response.get("Results") or []
    return feature_collection(
        [_place_to_feature(c, flatten_properties) for c in containers if c]
    )


def _place_to_feature(container: dict, flatten: bool) -> dict | None:
    coordinates = place_container_to_point(container)
    if coordinates is None:
        return None

    properties = copy.deepcopy(container)
    properties["Place"].pop("Geometry", None)
    place_id = properties.pop("PlaceId", None)
    if flatten:
        properties = _flatten(properties)

    feature = {"type": "Feature", "properties": properties, "geometry": coordinates}
    if place_id is not None:
        feature["id"] = place_id
    return feature


def position_to_point(position: list[float] | None) -> dict | None:
    """Wrap a raw [lng, lat] position into a GeoJSON Point (None passes through)."""
    if position is None:
        return None
    return {"type": "Point", "coordinates": position}


def place_to_point(place: dict) -> dict | None:
    """GeoJSON Point of a Place, or None if it has no Point geometry."""
    return position_to_point((place.get("Geometry") or {}).get("Point"))


def place_container_to_point(container: dict) -> dict | None:
    """GeoJSON Point of an object wrapping a Place (search result, GetPlace)."""
    return place_to_point(container.get("Place") or {})


def place_containers_to_points(
    containers: list[dict], keep_undefined: bool = False
) -> list[dict | None]:
    """Points for a list of place containers.

    Args:
        containers: Search results or GetPlace responses.
        keep_undefined: Keep a None entry for containers without a point.
    """
    points = [place_container_to_point(c) for c in containers]
    return [p for p in points if keep_undefined or p is not None]
