"""Join the legs of a route into one continuous LineString.

Adjacent legs share an endpoint: the last position of leg N is the first
position of leg N+1, so every leg after the one that seeds the line
contributes all of its positions but the first.
"""

from __future__ import annotations

from typing import Iterable, Literal

from loguru import logger

from location_datatypes.errors import MissingGeometryError, MissingLegDataError
from location_datatypes.geometry import extract_line

OnError = Literal["raise", "skip"]


def stitch_legs(legs: Iterable[dict] | None, on_error: OnError = "raise") -> dict:
    """Concatenate route legs into a single GeoJSON LineString.

    A leg's geometry takes precedence over its StartPosition/EndPosition.

    Args:
        legs: Ordered route legs (dicts with Geometry, StartPosition,
            EndPosition).
        on_error: "raise" to fail on a leg with no usable data, "skip" to
            log it and continue.

    Returns:
        LineString dict; its coordinates are empty if no leg contributed.

    Raises:
        MissingLegDataError: A leg has no usable data and on_error="raise".
    """
    if on_error not in ("raise", "skip"):
        raise ValueError(f"Unknown on_error policy: {on_error!r}")

    # None until some leg seeds the line.
    acc: list[list[float]] | None = None
    for index, leg in enumerate(legs or []):
        contribution = (
            _seed_positions(leg) if acc is None else _continuation_positions(leg)
        )
        if contribution is None:
            if on_error == "raise":
                raise MissingLegDataError(index)
            logger.warning(f"Skipping route leg {index}: no geometry or positions")
            continue
        acc = contribution if acc is None else acc + contribution

    return {"type": "LineString", "coordinates": acc or []}


def _leg_line(leg: dict) -> list[list[float]] | None:
    try:
        return list(extract_line(leg.get("Geometry") or {})["coordinates"])
    except MissingGeometryError:
        return None


def _seed_positions(leg: dict | None) -> list[list[float]] | None:
    """Positions contributed by the leg that starts the line."""
    if not leg:
        return None
    line = _leg_line(leg)
    if line:
        return line
    start, end = leg.get("StartPosition"), leg.get("EndPosition")
    if start is not None and end is not None:
        return [start, end]
    return None


def _continuation_positions(leg: dict | None) -> list[list[float]] | None:
    """Positions contributed by a leg joining an existing line."""
    if not leg:
        return None
    line = _leg_line(leg)
    if line:
        return line[1:]
    end = leg.get("EndPosition")
    if end is not None:
        return [end]
    return None
