"""
Purpose: Domain models for the Pickups capability.
What it does:
- Defines core data structures:
- ServiceRequest (id, client, waste type, quantity, location, urgency, price, status)
- RequestLocation (address + coordinates, flagged when approximate)
- PriceEstimate (base price x surge multiplier = final price)
- OptimizedRoute / RouteWaypoint / OptimizationBenefit (output of route planning)

Defines enums/constants:
- WasteType = plastic | organic | electronic | hazardous | mixed
- Urgency = normal | urgent | emergency
- RequestStatus = pending | matched | accepted | en_route | arrived | collecting | completed | cancelled
- PreferredTime = asap | scheduled

Rule: No distance math, no scoring, no routing. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid

from routing.geo import Coordinates


class WasteType(str, Enum):
    PLASTIC = "plastic"
    ORGANIC = "organic"
    ELECTRONIC = "electronic"
    HAZARDOUS = "hazardous"
    MIXED = "mixed"


class Urgency(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class PreferredTime(str, Enum):
    ASAP = "asap"
    SCHEDULED = "scheduled"


class RequestStatus(str, Enum):
    PENDING = "pending"
    MATCHED = "matched"
    ACCEPTED = "accepted"
    EN_ROUTE = "en_route"
    ARRIVED = "arrived"
    COLLECTING = "collecting"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PriceEstimate:
    """
    Surge pricing is computed upstream; the engine only reads final_price.
    """
    base_price: float
    surge_multiplier: float
    final_price: float
    currency: str = "KES"

    @staticmethod
    def new(base_price: float, surge_multiplier: float = 1.0, currency: str = "KES") -> PriceEstimate:
        if base_price < 0:
            raise ValueError("base_price must be >= 0")
        if surge_multiplier <= 0:
            raise ValueError("surge_multiplier must be > 0")
        return PriceEstimate(
            base_price=base_price,
            surge_multiplier=surge_multiplier,
            final_price=round(base_price * surge_multiplier, 2),
            currency=currency,
        )


@dataclass
class RequestLocation:
    address: str
    coordinates: Optional[Coordinates] = None
    # True when coordinates came from the geocoding fallback, not a real fix
    is_approximate: bool = False


@dataclass
class ServiceRequest:
    """
    A single waste-collection request as handed over by the submission layer.
    """

    id: str
    client_id: str
    waste_type: WasteType
    quantity_kg: float
    location: RequestLocation
    urgency: Urgency
    price_estimate: PriceEstimate

    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    preferred_time: Optional[PreferredTime] = None
    scheduled_time: Optional[datetime] = None
    description: Optional[str] = None

    @property
    def final_price(self) -> float:
        return self.price_estimate.final_price

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self.location.coordinates

    @staticmethod  # Factory method that accepts raw strings from the submission layer
    def new(
        request_id: str,
        client_id: str,
        waste_type: str | WasteType,
        quantity_kg: float,
        address: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        urgency: str | Urgency = Urgency.NORMAL,
        base_price: float = 0.0,
        surge_multiplier: float = 1.0,
        preferred_time: str | PreferredTime | None = None,
        created_at: Optional[datetime] = None,
    ) -> ServiceRequest:
        if quantity_kg <= 0:
            raise ValueError(f"Request {request_id}: quantity_kg must be > 0, got {quantity_kg}")

        coordinates = None
        if lat is not None and lng is not None:
            coordinates = Coordinates(lat=float(lat), lng=float(lng))

        return ServiceRequest(
            id=request_id,
            client_id=client_id,
            waste_type=WasteType(waste_type),
            quantity_kg=float(quantity_kg),
            location=RequestLocation(address=address, coordinates=coordinates),
            urgency=Urgency(urgency),
            price_estimate=PriceEstimate.new(base_price, surge_multiplier),
            preferred_time=PreferredTime(preferred_time) if preferred_time is not None else None,
            created_at=created_at or datetime.now(),
        )


@dataclass(frozen=True)
class RouteWaypoint:
    """
    One stop in a proposed route.
    """
    request_id: str
    coordinates: Coordinates
    address: str
    estimated_arrival: datetime
    waste_type: WasteType
    quantity_kg: float


@dataclass(frozen=True)
class OptimizationBenefit:
    """
    Gain of the optimized ordering over visiting the same stops in input order.
    All fields are clamped at zero.
    """
    time_saved_min: float = 0.0
    fuel_saved_l: float = 0.0
    additional_earnings: float = 0.0


@dataclass
class OptimizedRoute:
    """
    Output of route planning (ephemeral, persisted by the route-acceptance flow).
    """
    route_id: str
    collector_id: str
    requests: List[ServiceRequest]
    waypoints: List[RouteWaypoint]

    total_distance_km: float = 0.0
    estimated_duration_min: float = 0.0
    total_earnings: float = 0.0
    efficiency: float = 0.0
    optimization: OptimizationBenefit = field(default_factory=OptimizationBenefit)

    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        """
        True when nothing compatible was available: no stops, nothing to drive.
        """
        return not self.waypoints

    @staticmethod
    def empty(collector_id: str, created_at: Optional[datetime] = None) -> OptimizedRoute:
        return OptimizedRoute(
            route_id=str(uuid.uuid4()),
            collector_id=collector_id,
            requests=[],
            waypoints=[],
            created_at=created_at or datetime.now(),
        )
