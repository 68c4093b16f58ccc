"""
Purpose: Build one collector's multi-stop pickup route.
What it does:
1) Resolves missing pickup coordinates, then keeps only requests the collector can serve (type, capacity, within 20 km)
2) Ranks them by priority and keeps the top max_stops
3) Orders the kept requests nearest-neighbour on condition-adjusted distance
4) Derives waypoints with ETAs, totals, earnings and an efficiency score
5) Compares against visiting the same requests in the order they arrived

Rule: Planning only. Nothing here changes a request status or a collector load.
The traffic and weather read at the start hold for the whole plan.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Sequence

from collectors.models import Collector
from dispatch.candidate_filter import filter_compatible_requests
from pickups.locating import ensure_coordinates
from pickups.models import OptimizationBenefit, OptimizedRoute, RouteWaypoint, ServiceRequest
from routing.conditions import ConditionSnapshot
from routing.geo import Coordinates

from .policy import RoutePlanningPolicy
from .prioritization import prioritize_requests
from .sequencing import SequenceResult, build_greedy_sequence, walk_sequence

if TYPE_CHECKING:
    from dispatch.context import DispatchContext

logger = logging.getLogger(__name__)


def route_efficiency(
    total_earnings: float,
    total_distance_km: float,
    total_duration_min: float,
    policy: RoutePlanningPolicy,
) -> float:
    """
    min(100, earnings/km x 2 + earnings/min x 5), rounded.
    A route that earns without moving is as good as it gets.
    """
    if total_earnings <= 0:
        return 0.0
    if total_distance_km <= 0 or total_duration_min <= 0:
        return policy.efficiency_cap

    raw = (
        (total_earnings / total_distance_km) * policy.efficiency_per_km_weight
        + (total_earnings / total_duration_min) * policy.efficiency_per_minute_weight
    )
    return float(round(min(policy.efficiency_cap, raw)))


def optimization_benefit(
    optimized: SequenceResult,
    naive: SequenceResult,
    policy: RoutePlanningPolicy,
) -> OptimizationBenefit:
    time_saved = max(0.0, naive.total_duration_min - optimized.total_duration_min)
    distance_saved = max(0.0, naive.total_distance_km - optimized.total_distance_km)
    return OptimizationBenefit(
        time_saved_min=time_saved,
        fuel_saved_l=distance_saved * policy.fuel_l_per_km,
        additional_earnings=max(0.0, float(round(time_saved * policy.earnings_per_minute_saved))),
    )


def select_requests(
    context: DispatchContext,
    collector: Collector,
    available_requests: Sequence[ServiceRequest],
    origin: Coordinates,
    conditions: ConditionSnapshot,
) -> List[ServiceRequest]:
    """
    Compatible requests, highest priority first, capped at max_stops.
    """
    policy = context.planning_policy
    compatible = filter_compatible_requests(
        collector, available_requests, context.dispatch_policy.cutoffs
    )
    ranked = prioritize_requests(compatible, origin, conditions, policy)
    return [p.request for p in ranked[: policy.max_stops]]


def optimize_route(
    context: DispatchContext,
    collector: Collector,
    available_requests: Sequence[ServiceRequest],
    current_location: Optional[Coordinates] = None,
) -> OptimizedRoute:
    policy = context.planning_policy
    now: datetime = context.now()
    origin = current_location or collector.coordinates

    # One condition state for the whole plan, naive walk included
    estimator = context.estimator.pinned()

    for request in available_requests:
        ensure_coordinates(request)

    selected = select_requests(context, collector, available_requests, origin, estimator.conditions)
    if not selected:
        logger.info("No compatible requests for collector %s", collector.id)
        return OptimizedRoute.empty(collector.id, created_at=now)

    optimized = build_greedy_sequence(origin, selected, estimator, policy, now=now)

    # Same requests, arrival order, same origin and cost model
    selected_ids = {r.id for r in selected}
    arrival_order = [r for r in available_requests if r.id in selected_ids]
    naive = walk_sequence(origin, arrival_order, estimator, policy, now=now)

    waypoints = [
        RouteWaypoint(
            request_id=leg.request.id,
            coordinates=leg.request.coordinates,
            address=leg.request.location.address,
            estimated_arrival=leg.estimated_arrival,
            waste_type=leg.request.waste_type,
            quantity_kg=leg.request.quantity_kg,
        )
        for leg in optimized.legs
    ]
    total_earnings = sum(r.final_price for r in optimized.requests)

    route = OptimizedRoute(
        route_id=str(uuid.uuid4()),
        collector_id=collector.id,
        requests=optimized.requests,
        waypoints=waypoints,
        total_distance_km=optimized.total_distance_km,
        estimated_duration_min=optimized.total_duration_min,
        total_earnings=total_earnings,
        efficiency=route_efficiency(
            total_earnings, optimized.total_distance_km, optimized.total_duration_min, policy
        ),
        optimization=optimization_benefit(optimized, naive, policy),
        created_at=now,
    )

    logger.info(
        "Route %s for collector %s: %d stops, %.2f km, %.0f min, efficiency %.0f",
        route.route_id, collector.id, len(route.requests),
        route.total_distance_km, route.estimated_duration_min, route.efficiency,
    )
    return route
