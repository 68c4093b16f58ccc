"""
Purpose: Rank compatible requests before the route is built.
What it does:

Computes for each request a composite priority:

urgency weight (normal 10 / urgent 25 / emergency 40)

+ proximity = max(0, 50 - 2 x km from the route origin)

+ earnings = final_price / 10

+ 20 if the client asked for "asap"

- traffic penalty at the pickup cell (high 20 / medium 10 / low or no data 0)

Sorts descending (stable, so equal scores keep their input order).

Rule: Prioritization chooses what to visit; it does not decide the visiting order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from pickups.models import PreferredTime, ServiceRequest
from routing.conditions import ConditionModel, ConditionSnapshot
from routing.geo import Coordinates, haversine_km

from .policy import RoutePlanningPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrioritizedRequest:
    request: ServiceRequest
    priority: float
    distance_from_origin_km: float


def priority_score(
    request: ServiceRequest,
    origin: Coordinates,
    conditions: ConditionModel | ConditionSnapshot,
    policy: RoutePlanningPolicy,
) -> PrioritizedRequest:
    destination = request.coordinates
    distance = haversine_km(origin, destination)

    score = policy.urgency_weights[request.urgency]
    score += max(0.0, policy.proximity_max_points - policy.proximity_decay_per_km * distance)
    score += request.final_price / policy.price_points_divisor

    if request.preferred_time == PreferredTime.ASAP:
        score += policy.asap_bonus

    traffic = conditions.lookup_traffic(destination)
    if traffic is not None:
        score -= policy.traffic_penalties.get(traffic.congestion_level, 0.0)

    return PrioritizedRequest(request=request, priority=score, distance_from_origin_km=distance)


def prioritize_requests(
    requests: Sequence[ServiceRequest],
    origin: Coordinates,
    conditions: ConditionModel | ConditionSnapshot,
    policy: RoutePlanningPolicy,
) -> List[PrioritizedRequest]:
    ranked = [priority_score(r, origin, conditions, policy) for r in requests]
    ranked.sort(key=lambda p: p.priority, reverse=True)

    if ranked:
        logger.debug(
            "Prioritized %d requests, top %s (%.1f)",
            len(ranked), ranked[0].request.id, ranked[0].priority,
        )
    return ranked
