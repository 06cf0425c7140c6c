"""Convert between geospatial trace formats and location/routing API shapes.

Parsers turn CSV, GPX, KML, NMEA, flexible polyline and GeoJSON into
TracePoints or geofence request entries. Exporters turn place, geofence,
device-position and route responses into GeoJSON FeatureCollections.
All XML/CSV/JSON handling uses the stdlib (xml.etree.ElementTree, csv).
"""

from location_datatypes.errors import (
    ConversionError,
    MalformedInputError,
    MissingGeometryError,
    MissingLegDataError,
    UnsupportedRecordError,
)
from location_datatypes.flatten import flatten_properties
from location_datatypes.legs import stitch_legs
from location_datatypes.models import TracePoint

__all__ = [
    "ConversionError",
    "MalformedInputError",
    "MissingGeometryError",
    "MissingLegDataError",
    "TracePoint",
    "UnsupportedRecordError",
    "flatten_properties",
    "stitch_legs",
]
