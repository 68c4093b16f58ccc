"""
Purpose: Central configuration for multi-stop route planning (single source of truth).
What it does:

Stores all tunable thresholds/caps:

MAX_STOPS = 8

URGENCY_WEIGHTS = normal 10 / urgent 25 / emergency 40

DWELL = clamp(quantity / 10, 5, 15) minutes

STOP_BUFFER_MIN = 10

FUEL_L_PER_KM = 0.1, EARNINGS_PER_MINUTE_SAVED = 2 (KES)

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from pickups.models import Urgency
from routing.conditions import CongestionLevel


@dataclass(frozen=True)
class RoutePlanningPolicy:
    """
    Central configuration for route construction.

    Notes:
    - max_stops is a complexity guardrail: requests ranked below it are dropped,
      not reconsidered.
    - priority = urgency + proximity + price + asap bonus - traffic penalty
    """

    # --- Route size cap ---
    max_stops: int = 8

    # --- Priority scoring ---
    urgency_weights: Dict[Urgency, float] = field(
        default_factory=lambda: {
            Urgency.NORMAL: 10.0,
            Urgency.URGENT: 25.0,
            Urgency.EMERGENCY: 40.0,
        }
    )
    # Proximity term: max(0, proximity_max_points - proximity_decay_per_km * km)
    proximity_max_points: float = 50.0
    proximity_decay_per_km: float = 2.0
    # 1 point per KES 10 of final price
    price_points_divisor: float = 10.0
    asap_bonus: float = 20.0
    traffic_penalties: Dict[CongestionLevel, float] = field(
        default_factory=lambda: {
            CongestionLevel.HIGH: 20.0,
            CongestionLevel.MEDIUM: 10.0,
            CongestionLevel.LOW: 0.0,
        }
    )

    # --- Time at each stop ---
    dwell_kg_per_minute: float = 10.0
    min_dwell_min: float = 5.0
    max_dwell_min: float = 15.0
    # Flat buffer added to waypoint ETAs for every stop already behind us
    stop_buffer_min: float = 10.0

    # --- Efficiency score ---
    efficiency_per_km_weight: float = 2.0
    efficiency_per_minute_weight: float = 5.0
    efficiency_cap: float = 100.0

    # --- Savings vs naive ordering ---
    fuel_l_per_km: float = 0.1
    earnings_per_minute_saved: float = 2.0

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if self.max_stops < 1:
            raise ValueError("max_stops must be >= 1")

        if set(self.urgency_weights) != set(Urgency):
            raise ValueError("urgency_weights must cover every urgency level")

        if self.dwell_kg_per_minute <= 0:
            raise ValueError("dwell_kg_per_minute must be > 0")

        if self.min_dwell_min < 0 or self.max_dwell_min < self.min_dwell_min:
            raise ValueError("need 0 <= min_dwell_min <= max_dwell_min")

        if self.stop_buffer_min < 0:
            raise ValueError("stop_buffer_min must be >= 0")

        if self.price_points_divisor <= 0:
            raise ValueError("price_points_divisor must be > 0")


def default_planning_policy() -> RoutePlanningPolicy:
    """
    Convenience factory for the default policy.
    """
    p = RoutePlanningPolicy()
    p.validate()
    return p


def rush_hour_planning_policy() -> RoutePlanningPolicy:
    """
    Example: shorter routes and heavier traffic avoidance during rush hour.
    You can wire this up later to the time-of-day multiplier.
    """
    p = RoutePlanningPolicy(
        max_stops=6,
        proximity_decay_per_km=3.0,  # distance hurts more when roads are jammed
        traffic_penalties={
            CongestionLevel.HIGH: 30.0,
            CongestionLevel.MEDIUM: 15.0,
            CongestionLevel.LOW: 0.0,
        },
        stop_buffer_min=15.0,
    )
    p.validate()
    return p
