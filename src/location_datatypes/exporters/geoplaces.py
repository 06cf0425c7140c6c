"""Export GeoPlaces responses to GeoJSON FeatureCollections of Points.

GetPlace yields a single feature; Geocode, ReverseGeocode, SearchNearby,
SearchText and Suggest yield one feature per result item. PlaceId becomes
the feature id and Position its geometry; both are removed from the
properties together with the SDK's $metadata. Items without a position
are dropped.
"""

from __future__ import annotations

import copy

from location_datatypes.collection import feature_collection, strip_metadata
from location_datatypes.flatten import flatten_properties as _flatten


def get_place_response_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a GetPlace response."""
    return feature_collection([_result_to_feature(response, flatten_properties)])


def geocode_response_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a Geocode response."""
    return _result_items_to_collection(response, flatten_properties)


def reverse_geocode_response_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a ReverseGeocode response."""
    return _result_items_to_collection(response, flatten_properties)


def search_nearby_response_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a SearchNearby response."""
    return _result_items_to_collection(response, flatten_properties)


def search_text_response_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a SearchText response."""
    return _result_items_to_collection(response, flatten_properties)


def suggest_response_to_feature_collection(
    response: dict, flatten_properties: bool = False
) -> dict:
    """Export a Suggest response.

    Suggest items nest the place under "Place"; query suggestions have no
    place and are dropped.
    """
    features = []
    for item in response.get("ResultItems") or []:
        place = item.get("Place") or {}
        properties = copy.deepcopy(item)
        if "Place" in properties and properties["Place"] is not None:
            properties["Place"].pop("PlaceId", None)
            properties["Place"].pop("Position", None)
        features.append(_point_feature(
            place.get("PlaceId"), place.get("Position"), properties,
            flatten_properties,
        ))
    return feature_collection(features)


def _result_items_to_collection(response: dict, flatten: bool) -> dict:
    return feature_collection([
        _result_to_feature(item, flatten)
        for item in response.get("ResultItems") or []
    ])


def _result_to_feature(result: dict, flatten: bool) -> dict | None:
    properties = {
        k: v for k, v in result.items() if k not in ("PlaceId", "Position")
    }
    return _point_feature(
        result.get("PlaceId"), result.get("Position"), properties, flatten
    )


def _point_feature(
    place_id: str | None,
    position: list[float] | None,
    properties: dict,
    flatten: bool,
) -> dict | None:
    if not position:
        return None
    properties = strip_metadata(properties)
    return {
        "type": "Feature",
        "id": place_id,
        "properties": _flatten(properties) if flatten else properties,
        "geometry": {"type": "Point", "coordinates": position},
    }
