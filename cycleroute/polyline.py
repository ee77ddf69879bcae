from __future__ import annotations

import math
from collections.abc import Iterable

import polyline

from .errors import EncodingError


def _check_coordinates(coords: Iterable[tuple[float, float]]) -> list[tuple[float, float]]:
    checked: list[tuple[float, float]] = []
    for idx, (lon, lat) in enumerate(coords):
        if not (math.isfinite(lat) and math.isfinite(lon)) or not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise EncodingError(
                reason_code="polyline_encoding_failed",
                message=f"coordinate #{idx} ({lon}, {lat}) is out of range",
                details={"index": idx, "lon": lon, "lat": lat},
            )
        checked.append((lon, lat))
    return checked


def encode_polyline(coords: Iterable[tuple[float, float]], precision: int = 5) -> str:
    """Encode ``(lon, lat)`` pairs with the polyline algorithm (latitude first)."""
    return str(polyline.encode(_check_coordinates(coords), precision, geojson=True))


def decode_polyline(encoded: str, precision: int = 5) -> list[tuple[float, float]]:
    """Decode a polyline string into ``(lon, lat)`` pairs."""
    return [(float(lon), float(lat)) for lon, lat in polyline.decode(encoded, precision, geojson=True)]
