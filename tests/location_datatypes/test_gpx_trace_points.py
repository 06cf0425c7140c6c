"""Tests for GPX trace points — track points, speed extension, errors."""

import pytest

from location_datatypes.errors import MalformedInputError
from location_datatypes.parsers.gpx import gpx_to_trace_points

TRACK_GPX = """\
<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test"
     xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>San Francisco</name>
    <trkseg>
      <trkpt lat="37.774930" lon="-122.419424">
        <extensions>
          <speed>5.08</speed>
        </extensions>
        <time>2024-11-19T14:45:00Z</time>
      </trkpt>
      <trkpt lat="37.775032" lon="-122.420157">
        <extensions>
          <speed>6.28</speed>
        </extensions>
        <time>2024-11-19T14:46:30Z</time>
      </trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="37.77522" lon="-122.42099"/>
    </trkseg>
  </trk>
</gpx>
"""

GARMIN_GPX = """\
<gpx xmlns="http://www.topografix.com/GPX/1/1"
     xmlns:gpxtpx="http://www.garmin.com/xmlschemas/TrackPointExtension/v1">
  <trk><trkseg>
    <trkpt lat="1.0" lon="2.0">
      <extensions>
        <gpxtpx:TrackPointExtension><gpxtpx:speed>10</gpxtpx:speed></gpxtpx:TrackPointExtension>
      </extensions>
    </trkpt>
  </trkseg></trk>
</gpx>
"""


class TestGPXTracePoints:
    """Parse GPX tracks into TracePoints."""

    def test_track_points(self):
        """Every trkpt in every segment becomes a point, lng first."""
        points = gpx_to_trace_points(TRACK_GPX)
        assert len(points) == 3
        assert points[0].position == [-122.419424, 37.77493]
        assert points[2].position == [-122.42099, 37.77522]

    def test_speed_and_time(self):
        """Speed m/s -> km/h rounded to 2 places; time passed through."""
        points = gpx_to_trace_points(TRACK_GPX)
        assert points[0].speed == pytest.approx(18.29)
        assert points[1].speed == pytest.approx(22.61)
        assert points[0].timestamp == "2024-11-19T14:45:00Z"
        assert points[2].speed is None
        assert points[2].timestamp is None

    def test_namespaced_speed_extension(self):
        """A speed element in a vendor namespace is found."""
        points = gpx_to_trace_points(GARMIN_GPX)
        assert points[0].speed == pytest.approx(36.0)

    def test_no_namespace(self):
        gpx = '<gpx><trk><trkseg><trkpt lat="1" lon="2"/></trkseg></trk></gpx>'
        assert gpx_to_trace_points(gpx)[0].position == [2.0, 1.0]

    def test_bad_point_skipped(self):
        """A trkpt without lon is skipped."""
        gpx = '<gpx><trk><trkseg><trkpt lat="1"/><trkpt lat="3" lon="4"/></trkseg></trk></gpx>'
        points = gpx_to_trace_points(gpx)
        assert [p.position for p in points] == [[4.0, 3.0]]

    def test_invalid_xml(self):
        with pytest.raises(MalformedInputError):
            gpx_to_trace_points("<gpx><trk>")

    def test_no_track(self):
        with pytest.raises(MalformedInputError):
            gpx_to_trace_points('<gpx><wpt lat="1" lon="2"/></gpx>')
