"""GeoJSON FeatureCollection helpers shared by the exporters."""

from __future__ import annotations

from location_datatypes.flatten import flatten_properties

# Present on every AWS SDK response; describes the call, not the data.
_SDK_METADATA_KEY = "$metadata"


def empty_feature_collection() -> dict:
    """Return a FeatureCollection with no features."""
    return {"type": "FeatureCollection", "features": []}


def feature_collection(features: list[dict | None] | None) -> dict:
    """Wrap features in a FeatureCollection, dropping None entries."""
    return {
        "type": "FeatureCollection",
        "features": [f for f in features or [] if f],
    }


def add_feature(
    collection: dict, geometry: dict, properties: dict, flatten: bool
) -> None:
    """Append a feature whose id is its index in the collection."""
    features = collection["features"]
    features.append({
        "type": "Feature",
        "id": len(features),
        "properties": flatten_properties(properties) if flatten else properties,
        "geometry": geometry,
    })


def strip_metadata(properties: dict) -> dict:
    """Return a shallow copy of properties without the SDK's $metadata."""
    return {k: v for k, v in properties.items() if k != _SDK_METADATA_KEY}
