from __future__ import annotations

from collections.abc import Mapping

from .settings import Settings

FORWARD_ONEWAY_VALUES = frozenset({"yes", "true", "1"})


def is_cyclable_way(tags: Mapping[str, str], *, settings: Settings) -> bool:
    """Return True when a way with ``tags`` can carry a bicycle.

    A way must be a road (any ``highway`` tag), paved or of unknown surface,
    and must not match any of the configured inaccessible ``(key, value)`` pairs.
    """
    if "highway" not in tags:
        return False
    surface = tags.get("surface")
    if surface is not None and surface not in settings.paved_surfaces:
        return False
    return all(tags.get(key) != value for key, value in settings.inaccessible_tags)


def is_oneway(tags: Mapping[str, str]) -> bool:
    raw = str(tags.get("oneway", "")).strip().lower()
    return raw in FORWARD_ONEWAY_VALUES
