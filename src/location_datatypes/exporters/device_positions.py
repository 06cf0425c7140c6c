"""Export tracker responses to GeoJSON FeatureCollections of Points.

GetDevicePosition holds a single position; BatchGetDevicePosition and
GetDevicePositionHistory hold "DevicePositions"; ListDevicePositions holds
"Entries". DeviceId becomes the feature id, Position its geometry, and
every other field stays in the properties.
"""

from __future__ import annotations

import enum

from location_datatypes.collection import feature_collection, strip_metadata
from location_datatypes.errors import MalformedInputError
from location_datatypes.exporters.places import position_to_point


class DevicePositionResponseKind(enum.Enum):
    SINGLE = "Position"
    DEVICE_POSITIONS = "DevicePositions"
    ENTRIES = "Entries"


def classify_device_position_response(response: dict) -> DevicePositionResponseKind:
    """Tell single-position, batch/history and list responses apart.

    Raises:
        MalformedInputError: If none of the three shapes matches.
    """
    for kind in DevicePositionResponseKind:
        if kind.value in response:
            return kind
    raise MalformedInputError(
        "Position, DevicePositions, and Entries properties cannot be found."
    )


def device_positions_to_feature_collection(response: dict) -> dict:
    """Export a device-position response; positions without Position are dropped."""
    kind = classify_device_position_response(response)
    if kind is DevicePositionResponseKind.SINGLE:
        positions = [response]
    else:
        positions = response.get(kind.value) or []
    return feature_collection([_to_feature(p) for p in positions if p])


def _to_feature(device_position: dict) -> dict | None:
    point = device_position_to_point(device_position)
    if point is None:
        return None

    properties = strip_metadata(
        {k: v for k, v in device_position.items() if k != "Position"}
    )
    feature = {"type": "Feature", "properties": properties, "geometry": point}
    if device_position.get("DeviceId") is not None:
        feature["id"] = device_position["DeviceId"]
    return feature


def device_position_to_point(device_position: dict) -> dict | None:
    """GeoJSON Point of a device position, or None without a Position."""
    return position_to_point(device_position.get("Position"))


def device_positions_to_points(
    device_positions: list[dict], keep_undefined: bool = False
) -> list[dict | None]:
    """Points for a list of device positions.

    Args:
        device_positions: Entries of a batch, history or list response.
        keep_undefined: Keep a None entry for positions without a Position.
    """
    points = [device_position_to_point(p) for p in device_positions]
    return [p for p in points if keep_undefined or p is not None]
