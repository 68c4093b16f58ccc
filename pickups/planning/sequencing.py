# pickups/planning/sequencing.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Sequence

from pickups.models import ServiceRequest
from routing.eta_service import TravelTimeEstimator
from routing.geo import Coordinates, haversine_km

from .policy import RoutePlanningPolicy


@dataclass(frozen=True)
class RouteLeg:
    """
    One hop of a sequenced route, from the previous tail to `request`.
    Cumulative fields include this hop.
    """
    request: ServiceRequest
    distance_km: float  # condition-adjusted
    travel_min: float
    dwell_min: float
    cumulative_distance_km: float
    cumulative_duration_min: float
    estimated_arrival: datetime


@dataclass
class SequenceResult:
    legs: List[RouteLeg] = field(default_factory=list)
    total_distance_km: float = 0.0
    total_duration_min: float = 0.0

    @property
    def requests(self) -> List[ServiceRequest]:
        return [leg.request for leg in self.legs]


def dwell_minutes(quantity_kg: float, policy: RoutePlanningPolicy) -> float:
    """
    Time spent loading at a stop: quantity / 10, clamped to [5, 15] minutes.
    """
    raw = quantity_kg / policy.dwell_kg_per_minute
    return min(policy.max_dwell_min, max(policy.min_dwell_min, raw))


def build_greedy_sequence(
    origin: Coordinates,
    requests: Sequence[ServiceRequest],
    estimator: TravelTimeEstimator,
    policy: RoutePlanningPolicy,
    *,
    now: datetime,
) -> SequenceResult:
    """
    Nearest-neighbour construction.

    From the current tail, repeatedly pick the unvisited request with the
    smallest condition-adjusted distance (haversine x cell delay x weather).
    Ties keep the earlier request in `requests`.
    """
    remaining = list(requests)
    ordered: List[ServiceRequest] = []
    tail = origin

    while remaining:
        nearest_index = 0
        nearest_distance = float("inf")

        for index, request in enumerate(remaining):
            adjusted = estimator.adjusted_distance_km(
                haversine_km(tail, request.coordinates),
                request.coordinates,
            )
            if adjusted < nearest_distance:
                nearest_distance = adjusted
                nearest_index = index

        next_request = remaining.pop(nearest_index)
        ordered.append(next_request)
        tail = next_request.coordinates

    return walk_sequence(origin, ordered, estimator, policy, now=now)


def walk_sequence(
    origin: Coordinates,
    ordered: Sequence[ServiceRequest],
    estimator: TravelTimeEstimator,
    policy: RoutePlanningPolicy,
    *,
    now: datetime,
) -> SequenceResult:
    """
    Accumulate distance, duration and ETAs along a fixed visiting order.

    Each hop adds its adjusted distance, the condition-aware travel time of
    that distance and the dwell time at the stop. The ETA of stop k is
    now + travel time of hops 1..k + one stop buffer per earlier stop.
    Used for both the optimized and the naive ordering so they stay comparable.
    """
    result = SequenceResult()
    tail = origin
    cumulative_travel_min = 0.0

    for stop_index, request in enumerate(ordered):
        destination = request.coordinates
        distance = estimator.adjusted_distance_km(haversine_km(tail, destination), destination)
        travel = estimator.condition_aware_minutes(distance, destination)
        dwell = dwell_minutes(request.quantity_kg, policy)

        cumulative_travel_min += travel
        result.total_distance_km += distance
        result.total_duration_min += travel + dwell

        eta_minutes = cumulative_travel_min + policy.stop_buffer_min * stop_index
        result.legs.append(
            RouteLeg(
                request=request,
                distance_km=distance,
                travel_min=travel,
                dwell_min=dwell,
                cumulative_distance_km=result.total_distance_km,
                cumulative_duration_min=result.total_duration_min,
                estimated_arrival=now + timedelta(minutes=eta_minutes),
            )
        )
        tail = destination

    return result
