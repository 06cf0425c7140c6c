"""Cut a leg's LineString into the pieces described by its sub-records.

Travel steps and spans carry a GeometryOffset: the index in the leg's
LineString where that record starts. A record ends at the next record's
offset (inclusive, so neighbouring pieces share a position) or at the end
of the line.
"""

from __future__ import annotations

from typing import Iterator


def slice_lines(
    line: dict, markers: list[dict] | None, feature_type: str
) -> Iterator[tuple[dict, dict]]:
    """Yield (LineString, properties) for each marker spanning >= 2 positions."""
    for positions, properties in _slices(line, markers, feature_type):
        if len(positions) > 1:
            yield {"type": "LineString", "coordinates": positions}, properties


def slice_start_points(
    line: dict, markers: list[dict] | None, feature_type: str
) -> Iterator[tuple[dict, dict]]:
    """Yield (Point, properties) at the first position of each marker's slice."""
    for positions, properties in _slices(line, markers, feature_type):
        if positions:
            yield {"type": "Point", "coordinates": positions[0]}, properties


def _slices(
    line: dict, markers: list[dict] | None, feature_type: str
) -> Iterator[tuple[list, dict]]:
    if not markers:
        return

    coordinates = line["coordinates"]
    last = len(markers) - 1
    for index, marker in enumerate(markers):
        start = marker.get("GeometryOffset", 0)
        if index < last:
            end = markers[index + 1].get("GeometryOffset", 0) + 1
        else:
            end = len(coordinates)

        properties = {k: v for k, v in marker.items() if k != "GeometryOffset"}
        properties["FeatureType"] = feature_type
        yield coordinates[start:end], properties
