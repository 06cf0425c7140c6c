"""Flatten nested API structures into single-level property maps.

Map renderers such as MapLibre cannot address nested properties, so
``{"Address": {"StreetComponents": [{"Suffix": "St"}]}}`` becomes
``{"Address.StreetComponents.0.Suffix": "St"}``. Coordinate-shaped values
are kept whole.
"""

from __future__ import annotations

from typing import Any

# Arrays that are a single datatype (a [lng, lat] position, a bounding box,
# a list of positions forming one line), not a list of values.
DO_NOT_FLATTEN = frozenset({
    "Geometry",
    "Position",
    "Center",
    "BiasPosition",
    "QueryPosition",
    "DeparturePosition",
    "DestinationPosition",
    "StartPosition",
    "EndPosition",
    "Point",
    "SnappedDestination",
    "SnappedOrigin",
    "Destination",
    "Origin",
    "OriginalPosition",
    "SnappedPosition",
    "MapView",
    "BoundingBox",
    "FilterBBox",
    "ResultBBox",
    "RouteBBox",
    "LineString",
})

# Lists whose entries are each a whole ring or line: split one level only.
PARTIAL_FLATTEN = frozenset({
    "Polygon",
})


def flatten_properties(value: Any, prefix: str = "") -> dict[str, Any]:
    """Flatten a nested dict/list into dot-joined keys.

    Args:
        value: A dict or list. Anything else yields an empty dict.
        prefix: Key prefix for every entry produced.

    Returns:
        Flat dict whose insertion order follows a depth-first traversal.
    """
    if not isinstance(value, (dict, list)):
        return {}

    result: dict[str, Any] = {}

    if isinstance(value, list):
        for index, entry in enumerate(value):
            key = _join(prefix, index)
            if isinstance(entry, (dict, list)):
                result.update(flatten_properties(entry, key))
            else:
                result[key] = entry
        return result

    for name, entry in value.items():
        key = _join(prefix, name)
        if not isinstance(entry, (dict, list)):
            result[key] = entry
        elif name in DO_NOT_FLATTEN:
            result[key] = entry
        elif name in PARTIAL_FLATTEN and isinstance(entry, list):
            for index, ring in enumerate(entry):
                result[_join(key, index)] = ring
        else:
            result.update(flatten_properties(entry, key))
    return result


def _join(prefix: str, key: object) -> str:
    return f"{prefix}.{key}" if prefix else str(key)
