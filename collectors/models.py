"""
Purpose: Core data models for the collectors domain.
What it does:
Defines the structure of a Collector (vehicle, specializations, workload,
reputation) without relying on any persistence layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, Optional

from pickups.models import WasteType
from routing.geo import Coordinates


@dataclass(frozen=True)
class CollectorLocation:
    coordinates: Coordinates
    last_updated: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Collector:
    """
    A purely stateless representation of a Collector at a specific point in time.
    The roster swaps whole instances when the workload changes.
    """
    id: str
    name: str
    location: CollectorLocation
    specializations: FrozenSet[WasteType]

    vehicle_capacity_kg: float
    current_load: int  # active assignments
    max_load: int
    rating: float  # 0.0 - 5.0
    response_time_min: float  # average, minutes
    online: bool
    phone: str
    vehicle_type: Optional[str] = None

    @property
    def coordinates(self) -> Coordinates:
        return self.location.coordinates

    @property
    def load_ratio(self) -> float:
        if self.max_load <= 0:
            return 1.0
        return self.current_load / self.max_load

    @property
    def has_free_slot(self) -> bool:
        return self.current_load < self.max_load

    def specializes_in(self, waste_type: WasteType) -> bool:
        return waste_type in self.specializations

    @classmethod
    def new(
        cls,
        collector_id: str,
        name: str,
        lat: float,
        lng: float,
        specializations: Iterable[str | WasteType],
        vehicle_capacity_kg: float,
        max_load: int,
        current_load: int = 0,
        rating: float = 0.0,
        response_time_min: float = 15.0,
        online: bool = True,
        phone: str = "",
        vehicle_type: Optional[str] = None,
        last_updated: Optional[datetime] = None,
    ) -> Collector:
        if max_load < 0 or not 0 <= current_load <= max_load:
            raise ValueError(
                f"Collector {collector_id}: need 0 <= current_load <= max_load, got {current_load}/{max_load}"
            )
        if not 0.0 <= rating <= 5.0:
            raise ValueError(f"Collector {collector_id}: rating must be within 0..5, got {rating}")
        if vehicle_capacity_kg < 0:
            raise ValueError(f"Collector {collector_id}: vehicle_capacity_kg must be >= 0")

        return cls(
            id=collector_id,
            name=name,
            location=CollectorLocation(
                coordinates=Coordinates(lat=float(lat), lng=float(lng)),
                last_updated=last_updated or datetime.now(),
            ),
            specializations=frozenset(WasteType(s) for s in specializations),
            vehicle_capacity_kg=float(vehicle_capacity_kg),
            current_load=current_load,
            max_load=max_load,
            rating=float(rating),
            response_time_min=float(response_time_min),
            online=online,
            phone=phone,
            vehicle_type=vehicle_type,
        )
