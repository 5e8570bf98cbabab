"""Site hazard indicators and their weight table.

Hazards are passed around as a plain ``name -> bool`` mapping. Weights live
in a separate table so they can be audited and revised without touching the
scoring code. Unknown indicator names are ignored and missing ones count as
absent.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

HAZARD_TABLE_VERSION = "HI-001"

# Percentage points added to the base TreeScore when an indicator is present.
HAZARD_WEIGHTS: dict[str, float] = {
    "pool": 15,
    "fence": 10,
    "structures": 20,
    "utilities": 25,
    "permitting": 30,
    "steep_terrain": 12,
    "soft_soil": 8,
    "limited_access": 18,
    "nearby_vehicles": 14,
    "glass_windows": 9,
    "septic_tank": 7,
    "overhead_lines": 22,
    "underground_utilities": 19,
}

HAZARD_INDICATORS: tuple[str, ...] = tuple(HAZARD_WEIGHTS)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def canonical_hazard_name(name: str) -> str:
    """Map ``steepTerrain`` / ``steep-terrain`` style names to ``steep_terrain``."""
    return _CAMEL_BOUNDARY.sub("_", name.strip()).replace("-", "_").lower()


def normalize_hazards(hazards: Mapping[str, Any] | None) -> dict[str, bool]:
    """Return a complete indicator mapping with every known name present.

    Unknown keys are dropped rather than rejected. Only a real ``True`` marks
    an indicator present, so strings such as ``"false"`` count as absent.
    """
    normalized = {name: False for name in HAZARD_INDICATORS}
    if not hazards:
        return normalized

    for raw_name, present in hazards.items():
        name = canonical_hazard_name(str(raw_name))
        if name in normalized:
            normalized[name] = present is True
    return normalized


def active_hazards(hazards: Mapping[str, Any] | None) -> list[str]:
    normalized = normalize_hazards(hazards)
    return [name for name in HAZARD_INDICATORS if normalized[name]]
