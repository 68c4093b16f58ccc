"""
Purpose: Geodistance primitives shared by matching and route planning.
What it does:
- Defines the internal Coordinates value object (lat, lng)
- Computes haversine great-circle distance in kilometers
- Builds the ~111 m grid key used by the traffic table

Rule: No traffic, weather or policy here. Pure geometry only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

EARTH_RADIUS_KM = 6371.0

# Traffic cells are keyed by coordinates rounded to 3 decimals (~111 m).
CELL_PRECISION = 3


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    @classmethod
    def from_tuple(cls, latlng: Tuple[float, float]) -> Coordinates:
        lat, lng = latlng
        return cls(lat=float(lat), lng=float(lng))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


def haversine_km(point_a: Coordinates, point_b: Coordinates) -> float:
    """
    Great-circle distance between two points on a sphere of radius 6371 km.

    Symmetric by construction: the squared-sine terms and the cosine product
    do not depend on argument order, so haversine_km(a, b) == haversine_km(b, a).
    """
    lat_a = math.radians(point_a.lat)
    lat_b = math.radians(point_b.lat)
    delta_lat = lat_b - lat_a
    delta_lng = math.radians(point_b.lng - point_a.lng)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat_a) * math.cos(lat_b) * math.sin(delta_lng / 2) ** 2
    )
    # clamp against float drift pushing a slightly past 1.0
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def cell_key(coordinates: Coordinates) -> str:
    """
    Grid key for the traffic table, e.g. "-1.292,36.821".
    """
    return f"{coordinates.lat:.{CELL_PRECISION}f},{coordinates.lng:.{CELL_PRECISION}f}"
