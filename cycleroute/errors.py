from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "osm_fetch_failed",
        "osm_decode_failed",
        "unknown_node_reference",
        "graph_cache_corrupt",
        "no_route_found",
        "route_chain_broken",
        "polyline_encoding_failed",
        "internal_error",
    }
)


@dataclass
class CycleRouteError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class FetchError(CycleRouteError):
    pass


class DecodeError(CycleRouteError):
    pass


class CacheCorruptionError(CycleRouteError):
    pass


class NoRouteFoundError(CycleRouteError):
    pass


class EncodingError(CycleRouteError):
    pass


def normalize_reason_code(reason_code: str, *, default: str = "internal_error") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
