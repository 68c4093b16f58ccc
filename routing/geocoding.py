"""
Purpose: Lenient address -> coordinate resolution for requests that arrive
without coordinates.
What it does:
Matches the address against a small table of known Nairobi areas. Anything
unrecognised falls back to the city centre, and the result says so.

Rule: Never raises for an unknown address. The caller decides what an
approximate location means for the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .geo import Coordinates

logger = logging.getLogger(__name__)

CITY_CENTER = Coordinates(-1.2921, 36.8219)

KNOWN_AREAS: Dict[str, Coordinates] = {
    "cbd": Coordinates(-1.2921, 36.8219),
    "westlands": Coordinates(-1.2654, 36.7969),
    "kilimani": Coordinates(-1.3001, 36.7830),
    "karen": Coordinates(-1.3176, 36.7520),
    "nairobi": Coordinates(-1.2921, 36.8219),
}


@dataclass(frozen=True)
class GeocodeResult:
    coordinates: Coordinates
    is_fallback: bool
    matched_area: Optional[str] = None


def geocode(address: Optional[str], areas: Optional[Dict[str, Coordinates]] = None) -> GeocodeResult:
    areas = areas if areas is not None else KNOWN_AREAS
    lowered = (address or "").lower()

    # first table entry contained in the address wins
    for area, coordinates in areas.items():
        if area in lowered:
            return GeocodeResult(coordinates=coordinates, is_fallback=False, matched_area=area)

    logger.warning("Could not geocode %r, falling back to city centre", address)
    return GeocodeResult(coordinates=CITY_CENTER, is_fallback=True)
