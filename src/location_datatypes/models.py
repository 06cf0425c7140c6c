"""TracePoint dataclass shared by every "to trace points" converter.

All positions are stored in GeoJSON convention: [lng, lat].
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TracePoint:
    """A single GPS sample, shaped for a road-snapping request.

    Attributes:
        position: [lng, lat] in WGS84 decimal degrees.
        speed: Speed in km/h.
        timestamp: ISO 8601 timestamp, passed through as given.
        heading: Direction of travel in degrees (0-360).
    """

    position: list[float]
    speed: float | None = None
    timestamp: str | None = None
    heading: float | None = None

    def as_dict(self) -> dict:
        """Return the API request entry, omitting unset fields."""
        entry: dict = {"Position": list(self.position)}
        if self.speed is not None:
            entry["Speed"] = self.speed
        if self.timestamp is not None:
            entry["Timestamp"] = self.timestamp
        if self.heading is not None:
            entry["Heading"] = self.heading
        return entry
