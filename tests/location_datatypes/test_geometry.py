"""Tests for geometry extraction — LineString/Polyline, Polygon, circles."""

import flexpolyline
import pytest
from pyproj import Geod

from location_datatypes.errors import MalformedInputError, MissingGeometryError
from location_datatypes.geometry import (
    circle_to_polygon,
    convert_geometry,
    decode_flexible_polyline,
    extract_line,
    extract_polygon,
)

LAT_LNG = [(37.77493, -122.41942), (37.77503, -122.42016), (37.77522, -122.42099)]


@pytest.fixture
def encoded():
    return flexpolyline.encode(LAT_LNG)


class TestDecodeFlexiblePolyline:
    """Wrap the flexible polyline decoder."""

    def test_decodes_to_lng_lat(self, encoded):
        """Decoded pairs are reordered to [lng, lat]."""
        positions = decode_flexible_polyline(encoded)
        assert len(positions) == 3
        assert positions[0][0] == pytest.approx(-122.41942, abs=1e-5)
        assert positions[0][1] == pytest.approx(37.77493, abs=1e-5)

    def test_fp_prefix_stripped(self, encoded):
        """An 'FP:' prefix is ignored."""
        assert decode_flexible_polyline("FP:" + encoded) == decode_flexible_polyline(encoded)

    def test_invalid_string(self):
        """Garbage raises MalformedInputError."""
        with pytest.raises(MalformedInputError):
            decode_flexible_polyline("~~~~")

    @pytest.mark.parametrize("encoded", ["", "FP:"])
    def test_empty_string(self, encoded):
        """An empty string, with or without prefix, is malformed."""
        with pytest.raises(MalformedInputError):
            decode_flexible_polyline(encoded)


class TestExtractLine:
    """LineString vs Polyline variants."""

    def test_explicit_line_string(self):
        """Explicit coordinates are used as-is."""
        line = extract_line({"LineString": [[1, 2], [3, 4]]})
        assert line == {"type": "LineString", "coordinates": [[1, 2], [3, 4]]}

    def test_polyline_decoded(self, encoded):
        """An encoded Polyline is decoded in order."""
        line = extract_line({"Polyline": encoded})
        assert line["type"] == "LineString"
        assert [p[1] for p in line["coordinates"]] == pytest.approx(
            [lat for lat, _ in LAT_LNG], abs=1e-5
        )

    def test_empty_line_string_falls_back_to_polyline(self, encoded):
        """An empty LineString array does not win over a Polyline."""
        line = extract_line({"LineString": [], "Polyline": encoded})
        assert len(line["coordinates"]) == 3

    def test_missing_both(self):
        """Neither field raises MissingGeometryError."""
        with pytest.raises(MissingGeometryError):
            extract_line({})


class TestExtractPolygon:
    """Polygon vs PolylinePolygon variants."""

    def test_explicit_polygon(self):
        rings = [[[0, 0], [1, 0], [1, 1], [0, 0]]]
        assert extract_polygon({"Polygon": rings}) == {"type": "Polygon", "coordinates": rings}

    def test_polyline_polygon_decoded_per_ring(self, encoded):
        """Each encoded ring becomes a ring of [lng, lat] positions."""
        polygon = extract_polygon({"PolylinePolygon": [encoded, encoded]})
        assert len(polygon["coordinates"]) == 2
        assert len(polygon["coordinates"][1]) == 3

    def test_missing_both(self):
        with pytest.raises(MissingGeometryError):
            extract_polygon({"Polygon": None})


class TestCircleToPolygon:
    """Approximate circular geofences."""

    def test_ring_closed_and_on_radius(self):
        """Every vertex lies on the circle and the ring is closed."""
        polygon = circle_to_polygon([-123.1, 49.2], 100.0, steps=16)
        ring = polygon["coordinates"][0]
        assert polygon["type"] == "Polygon"
        assert len(ring) == 17
        assert ring[0] == ring[-1]
        geod = Geod(ellps="WGS84")
        for lng, lat in ring:
            _, _, dist = geod.inv(-123.1, 49.2, lng, lat)
            assert dist == pytest.approx(100.0, abs=1e-3)

    def test_default_steps(self):
        """Defaults to 64 vertices plus the closing one."""
        ring = circle_to_polygon([0, 0], 30)["coordinates"][0]
        assert len(ring) == 65

    def test_explicit_steps_not_replaced_by_default(self):
        with pytest.raises(ValueError):
            circle_to_polygon([0, 0], 30, steps=0)

    def test_too_few_steps(self):
        with pytest.raises(ValueError):
            circle_to_polygon([0, 0], 30, steps=2)

    def test_minimum_steps(self):
        assert len(circle_to_polygon([0, 0], 30, steps=3)["coordinates"][0]) == 4


class TestConvertGeometry:
    """API geometry to GeoJSON Feature."""

    def test_polygon(self):
        rings = [[[1, 2], [1, 3], [2, 3], [1, 2]]]
        feature = convert_geometry({"Polygon": rings}, {"Status": "ACTIVE"})
        assert feature["geometry"] == {"type": "Polygon", "coordinates": rings}
        assert feature["properties"] == {"Status": "ACTIVE"}

    def test_point(self):
        feature = convert_geometry({"Point": [1, 2]})
        assert feature["geometry"] == {"type": "Point", "coordinates": [1, 2]}

    def test_circle_adds_center_radius(self):
        """Circles become polygons carrying center and radius properties."""
        feature = convert_geometry({"Circle": {"Center": [0, 0], "Radius": 30}}, {"Status": "ACTIVE"})
        assert feature["geometry"]["type"] == "Polygon"
        assert feature["properties"] == {"center": [0, 0], "radius": 30, "Status": "ACTIVE"}

    def test_none_members_skipped(self):
        """The first member that is set decides the type."""
        feature = convert_geometry({"Polygon": None, "Point": [5, 6]})
        assert feature["geometry"]["type"] == "Point"

    def test_empty(self):
        assert convert_geometry(None) is None
        assert convert_geometry({}) is None
