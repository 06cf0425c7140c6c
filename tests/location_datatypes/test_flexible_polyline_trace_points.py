"""Tests for flexible polyline trace points."""

import flexpolyline
import pytest

from location_datatypes.errors import MalformedInputError
from location_datatypes.parsers.flexible_polyline import flexible_polyline_to_trace_points


class TestFlexiblePolylineTracePoints:
    """Decode flexible polylines into TracePoints."""

    def test_decodes_lng_lat(self):
        encoded = flexpolyline.encode([(37.77493, -122.4194151), (37.77503, -122.4201567)], precision=7)
        points = flexible_polyline_to_trace_points("FP:" + encoded)
        assert len(points) == 2
        assert points[0].position == [-122.419415, 37.77493]
        assert points[1].position == [-122.420157, 37.77503]
        assert points[0].speed is None

    def test_third_dimension_dropped(self):
        encoded = flexpolyline.encode(
            [(1.0, 2.0, 10.0), (1.5, 2.5, 20.0)], third_dim=flexpolyline.ALTITUDE
        )
        points = flexible_polyline_to_trace_points(encoded)
        assert [p.position for p in points] == [[2.0, 1.0], [2.5, 1.5]]

    def test_invalid(self):
        with pytest.raises(MalformedInputError):
            flexible_polyline_to_trace_points("~~~~")

    @pytest.mark.parametrize("encoded", ["", "FP:"])
    def test_empty(self, encoded):
        with pytest.raises(MalformedInputError):
            flexible_polyline_to_trace_points(encoded)
