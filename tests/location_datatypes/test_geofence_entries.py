"""Tests for GeoJSON to geofence request entries."""

from location_datatypes.parsers.geofence import feature_collection_to_geofences

POLYGON = [[[1, 2], [1, 3], [2, 3], [1, 2]]]


class TestGeofenceEntries:
    """Convert Polygon features into BatchPutGeofence entries."""

    def test_polygon_and_circle_and_empty(self):
        """Polygons and circles convert; empty or non-polygon features are skipped."""
        collection = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "id": "polygon-fence",
                    "properties": {"Status": "ACTIVE"},
                    "geometry": {"type": "Polygon", "coordinates": POLYGON},
                },
                {
                    "type": "Feature",
                    "id": "circular-fence",
                    "properties": {"Status": "ACTIVE", "center": [0, 0], "radius": 30},
                    "geometry": {"type": "Polygon", "coordinates": [[[1, 1]]]},
                },
                {"type": "Feature", "id": "null-1", "properties": {}, "geometry": None},
                {
                    "type": "Feature",
                    "id": "null-2",
                    "properties": {},
                    "geometry": {"type": "Point", "coordinates": [1, 1]},
                },
                {
                    "type": "Feature",
                    "id": "null-3",
                    "properties": {},
                    "geometry": {"type": "Polygon", "coordinates": None},
                },
            ],
        }
        assert feature_collection_to_geofences(collection) == [
            {"GeofenceId": "polygon-fence", "Geometry": {"Polygon": POLYGON}},
            {
                "GeofenceId": "circular-fence",
                "Geometry": {"Circle": {"Center": [0, 0], "Radius": 30}},
            },
        ]

    def test_empty_collection(self):
        assert feature_collection_to_geofences({"type": "FeatureCollection", "features": []}) == []
