"""Parse GPX 1.1 tracks into TracePoints using xml.etree.ElementTree.

Handles trk/trkseg/trkpt. Extracts time and the speed extension
(<extensions><speed>, meters per second, any namespace).

GPX uses lat/lon attributes on elements (latitude first).
All positions stored as [lng, lat] (GeoJSON convention).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from loguru import logger

from location_datatypes.config import settings
from location_datatypes.errors import MalformedInputError
from location_datatypes.models import TracePoint

_MPS_TO_KMH = 3.6


def gpx_to_trace_points(gpx_string: str) -> list[TracePoint]:
    """Parse a GPX XML string into TracePoints.

    Every trkpt of every trkseg of every trk is converted, in document order.

    Args:
        gpx_string: Raw GPX XML content.

    Returns:
        List of TracePoints. Track points without usable lat/lon are logged
        and skipped.

    Raises:
        MalformedInputError: If the XML is invalid or contains no track.
    """
    try:
        root = ET.fromstring(gpx_string)
    except ET.ParseError as exc:
        raise MalformedInputError(f"Invalid GPX document: {exc}") from exc

    ns = _detect_namespace(root)
    tracks = _find_all(root, "trk", ns)
    if not tracks:
        raise MalformedInputError("GPX document contains no <trk> element")

    points: list[TracePoint] = []
    idx = 0
    for trk in tracks:
        for seg in _find_all(trk, "trkseg", ns):
            for trkpt in _find_all(seg, "trkpt", ns):
                try:
                    points.append(_parse_track_point(trkpt, ns))
                except MalformedInputError as exc:
                    logger.warning(f"Skipping GPX trkpt {idx}: {exc}")
                idx += 1

    logger.debug(f"Parsed {len(points)} trace points from GPX")
    return points


def _detect_namespace(root: ET.Element) -> str:
    """Detect GPX namespace from root tag."""
    tag = root.tag
    if "{" in tag:
        return tag.split("}")[0] + "}"
    return ""


def _find_all(parent: ET.Element, tag: str, ns: str) -> list[ET.Element]:
    """Find all direct children with the given tag."""
    full_tag = f"{ns}{tag}" if ns else tag
    return parent.findall(full_tag)


def _get_child_text(parent: ET.Element, tag: str, ns: str) -> str:
    """Get text of a direct child element."""
    full_tag = f"{ns}{tag}" if ns else tag
    elem = parent.find(full_tag)
    if elem is not None and elem.text:
        return elem.text.strip()
    return ""


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_track_point(trkpt: ET.Element, ns: str) -> TracePoint:
    """Convert a trkpt element into a TracePoint."""
    precision = settings.coordinate_precision
    try:
        lat = float(trkpt.attrib["lat"])
        lon = float(trkpt.attrib["lon"])
    except (KeyError, ValueError) as exc:
        raise MalformedInputError(f"invalid lat/lon {dict(trkpt.attrib)}") from exc

    point = TracePoint(position=[round(lon, precision), round(lat, precision)])

    speed = _extension_speed(trkpt, ns)
    if speed is not None:
        point.speed = round(speed * _MPS_TO_KMH, settings.speed_precision)

    time_str = _get_child_text(trkpt, "time", ns)
    if time_str:
        point.timestamp = time_str

    return point


def _extension_speed(trkpt: ET.Element, ns: str) -> float | None:
    """Speed in m/s from the trkpt's extensions, if present and numeric."""
    extensions = trkpt.find(f"{ns}extensions" if ns else "extensions")
    if extensions is None:
        return None
    for elem in extensions.iter():
        if _local_name(elem.tag) == "speed" and elem.text and elem.text.strip():
            try:
                return float(elem.text)
            except ValueError:
                logger.warning(f"Ignoring non-numeric GPX speed {elem.text!r}")
                return None
    return None
