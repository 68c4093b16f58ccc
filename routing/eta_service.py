#Purpose: ETA estimation policy.
#Converts straight-line distances into travel-time predictions used by:
#single-request matching ("collector arrives in X")
#multi-stop route planning (hop durations, waypoint ETAs)
#Two models live behind one estimator, chosen by the caller:
#QUICK           -> fixed base speed scaled by a time-of-day traffic multiplier
#CONDITION_AWARE -> traffic-cell speed at the destination, scaled down by weather

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .conditions import ConditionModel, ConditionSnapshot
from .geo import Coordinates


class TravelTimeModel(str, Enum):
    QUICK = "quick"
    CONDITION_AWARE = "condition_aware"


@dataclass(frozen=True)
class TravelTimePolicy:
    """
    Tunable speeds and multipliers for both travel-time models.
    """

    # --- Quick model (matching) ---
    quick_base_speed_kmh: float = 30.0
    rush_hour_multiplier: float = 2.0
    midday_multiplier: float = 1.3
    # Inclusive hour ranges, local time.
    morning_rush_hours: tuple = (7, 9)
    evening_rush_hours: tuple = (17, 19)
    midday_hours: tuple = (10, 16)

    # --- Condition-aware model (route planning) ---
    condition_base_speed_kmh: float = 40.0

    def validate(self) -> None:
        if self.quick_base_speed_kmh <= 0 or self.condition_base_speed_kmh <= 0:
            raise ValueError("base speeds must be > 0")
        if self.rush_hour_multiplier < 1.0 or self.midday_multiplier < 1.0:
            raise ValueError("traffic multipliers must be >= 1.0")


class TravelTimeEstimator:
    """
    One entry point for both travel-time models.
    """

    def __init__(self, conditions: ConditionModel | ConditionSnapshot, policy: Optional[TravelTimePolicy] = None):
        self.conditions = conditions
        self.policy = policy or TravelTimePolicy()
        self.policy.validate()

    def pinned(self) -> TravelTimeEstimator:
        """
        Same models over a frozen copy of the current conditions, so a
        multi-hop calculation never mixes two traffic or weather states.
        """
        return TravelTimeEstimator(self.conditions.snapshot(), self.policy)

    def estimate_minutes(
        self,
        distance_km: float,
        model: TravelTimeModel,
        *,
        destination: Optional[Coordinates] = None,
        at: Optional[datetime] = None,
    ) -> float:
        if model == TravelTimeModel.QUICK:
            return self.quick_minutes(distance_km, at or datetime.now())
        if model == TravelTimeModel.CONDITION_AWARE:
            if destination is None:
                raise ValueError("condition-aware estimate needs a destination")
            return self.condition_aware_minutes(distance_km, destination)
        raise NotImplementedError(f"Unsupported travel time model: {model}")

    def time_of_day_multiplier(self, at: datetime) -> float:
        hour = at.hour
        p = self.policy
        if _in_hours(hour, p.morning_rush_hours) or _in_hours(hour, p.evening_rush_hours):
            return p.rush_hour_multiplier
        if _in_hours(hour, p.midday_hours):
            return p.midday_multiplier
        return 1.0

    def quick_minutes(self, distance_km: float, at: datetime) -> float:
        base_minutes = distance_km / self.policy.quick_base_speed_kmh * 60
        return base_minutes * self.time_of_day_multiplier(at)

    def effective_speed_kmh(self, destination: Coordinates) -> float:
        speed = self.policy.condition_base_speed_kmh
        traffic = self.conditions.lookup_traffic(destination)
        if traffic is not None:
            speed = traffic.average_speed_kmh
        weather = self.conditions.weather
        return speed * (1 - weather.speed_reduction_pct / 100)

    def condition_aware_minutes(self, distance_km: float, destination: Coordinates) -> float:
        speed = self.effective_speed_kmh(destination)
        if speed <= 0:
            # 100% weather speed reduction: nothing moves
            return math.inf if distance_km > 0 else 0.0
        return distance_km / speed * 60

    def adjusted_distance_km(self, distance_km: float, destination: Coordinates) -> float:
        """
        Distance inflated by the destination cell's delay factor and by weather.
        Used to pick the next stop and to accumulate route distance.
        """
        adjusted = distance_km
        traffic = self.conditions.lookup_traffic(destination)
        if traffic is not None:
            adjusted *= traffic.delay_factor
        adjusted *= 1 + self.conditions.weather.speed_reduction_pct / 100
        return adjusted


def _in_hours(hour: int, hours: tuple) -> bool:
    start, end = hours
    return start <= hour <= end
