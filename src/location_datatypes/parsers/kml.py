"""Parse KML Placemarks into TracePoints using xml.etree.ElementTree.

Handles Placemark/Point and Placemark/LineString, plus an optional
Placemark/TimeStamp/when applied to every point of the placemark.
KML coordinate format: "lng,lat,alt lng,lat,alt" (longitude first); the
altitude is ignored. Positions stored as [lng, lat] (GeoJSON convention).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from loguru import logger

from location_datatypes.config import settings
from location_datatypes.errors import MalformedInputError, UnsupportedRecordError
from location_datatypes.models import TracePoint


def kml_to_trace_points(kml_string: str) -> list[TracePoint]:
    """Parse a KML XML string into TracePoints.

    Args:
        kml_string: Raw KML XML content.

    Returns:
        TracePoints for every Point and LineString placemark, in document
        order. Other placemarks are logged and skipped.

    Raises:
        MalformedInputError: If the XML is invalid.
    """
    try:
        root = ET.fromstring(kml_string)
    except ET.ParseError as exc:
        raise MalformedInputError(f"Invalid KML document: {exc}") from exc

    ns = _detect_namespace(root)
    points: list[TracePoint] = []
    for idx, pm in enumerate(root.iter(f"{ns}Placemark")):
        try:
            points.extend(_parse_placemark(pm, ns))
        except (MalformedInputError, UnsupportedRecordError) as exc:
            logger.warning(f"Skipping KML placemark {idx}: {exc}")

    logger.debug(f"Parsed {len(points)} trace points from KML")
    return points


def _detect_namespace(root: ET.Element) -> str:
    """Detect KML namespace from root element tag."""
    tag = root.tag
    if "{" in tag:
        return tag.split("}")[0] + "}"
    return ""


def _find_child(parent: ET.Element, tag: str, ns: str) -> ET.Element | None:
    """Find a direct or nested child element by tag."""
    return parent.find(f".//{ns}{tag}")


def _get_text(parent: ET.Element, tag: str, ns: str) -> str:
    """Get text content of a child element."""
    elem = _find_child(parent, tag, ns)
    if elem is not None and elem.text:
        return elem.text.strip()
    return ""


def _parse_placemark(pm: ET.Element, ns: str) -> list[TracePoint]:
    """Convert one Placemark into its TracePoints."""
    timestamp = ""
    time_stamp = _find_child(pm, "TimeStamp", ns)
    if time_stamp is not None:
        timestamp = _get_text(time_stamp, "when", ns)

    point = _find_child(pm, "Point", ns)
    if point is not None:
        positions = _parse_coordinates(point, ns)[:1]
    else:
        linestring = _find_child(pm, "LineString", ns)
        if linestring is None:
            raise UnsupportedRecordError("placemark has no Point or LineString")
        positions = _parse_coordinates(linestring, ns)

    return [
        TracePoint(position=position, timestamp=timestamp or None)
        for position in positions
    ]


def _parse_coordinates(geom_elem: ET.Element, ns: str) -> list[list[float]]:
    """Parse a <coordinates> string: 'lng,lat,alt lng,lat,alt ...'

    Returns list of rounded [lng, lat] arrays.
    """
    text = _get_text(geom_elem, "coordinates", ns)
    if not text:
        raise MalformedInputError("geometry has no coordinates")

    precision = settings.coordinate_precision
    coords = []
    for token in text.split():
        parts = token.split(",")
        try:
            lng = float(parts[0])
            lat = float(parts[1])
        except (ValueError, IndexError) as exc:
            raise MalformedInputError(f"invalid coordinate {token!r}") from exc
        coords.append([round(lng, precision), round(lat, precision)])
    return coords
