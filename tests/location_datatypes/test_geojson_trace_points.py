"""Tests for GeoJSON trace points — Point/LineString features, properties."""

import pytest

from location_datatypes.parsers.geojson import feature_collection_to_trace_points

SAMPLES = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {
                "provider": "gps",
                "timestamp_msec": 1700470800000,
                "heading": 189.6,
                "speed_mps": 0.87,
            },
            "geometry": {"type": "Point", "coordinates": [-122.41942389, 37.77492856]},
        },
        {
            "type": "Feature",
            "properties": {
                "timestamp_msec": 1700470815000,
                "heading": 201.3,
                "speed_mps": 4.12,
            },
            "geometry": {"type": "Point", "coordinates": [-122.42015672, 37.77503214, 45.6]},
        },
    ],
}


class TestGeoJSONTracePoints:
    """Convert GeoJSON GPS samples into TracePoints."""

    def test_point_features(self):
        points = feature_collection_to_trace_points(SAMPLES)
        assert points[0].as_dict() == {
            "Position": [-122.41942389, 37.77492856],
            "Timestamp": "2023-11-20T09:00:00.000Z",
            "Speed": pytest.approx(3.13),
            "Heading": 189.6,
        }
        assert points[1].timestamp == "2023-11-20T09:00:15.000Z"
        assert points[1].speed == pytest.approx(14.83)

    def test_altitude_dropped(self):
        points = feature_collection_to_trace_points(SAMPLES)
        assert points[1].position == [-122.42015672, 37.77503214]

    def test_line_string_vertices(self):
        """Each LineString vertex becomes a point sharing the properties."""
        collection = {
            "type": "FeatureCollection",
            "features": [{
                "type": "Feature",
                "properties": {"heading": 90},
                "geometry": {"type": "LineString", "coordinates": [[1, 2, 3], [4, 5, 6]]},
            }],
        }
        points = feature_collection_to_trace_points(collection)
        assert [p.position for p in points] == [[1, 2], [4, 5]]
        assert all(p.heading == 90.0 for p in points)

    def test_unsupported_and_empty_skipped(self):
        """Null geometries and polygons are skipped."""
        collection = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {}, "geometry": None},
                {
                    "type": "Feature",
                    "properties": {},
                    "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [0, 0]]]},
                },
                {"type": "Feature", "properties": None, "geometry": {"type": "Point", "coordinates": [7, 8]}},
            ],
        }
        points = feature_collection_to_trace_points(collection)
        assert [p.as_dict() for p in points] == [{"Position": [7, 8]}]
