"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Takes a pending ServiceRequest, scores every collector in range, broadcasts
the offer to the best few and publishes the match to the client. Also the
one entry point for planning a collector's multi-stop route.

Rule: All arithmetic happens before any collaborator is called. The push
service and the real-time transport are fire-and-forget.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Protocol, Sequence

from collectors.models import Collector
from collectors.roster import RosterError
from pickups.locating import ensure_coordinates
from pickups.models import OptimizedRoute, RequestStatus, ServiceRequest
from pickups.state_machine import RequestStateException, transition_request_to_matched
from routing.conditions import WeatherState
from routing.eta_service import TravelTimeModel
from routing.geo import Coordinates, haversine_km

from .context import DispatchContext
from .scoring import MatchResult, rank_candidates, score_collector

logger = logging.getLogger(__name__)


class PushService(Protocol):
    def notify_collectors(self, collector_ids: List[str], request: ServiceRequest) -> Any:
        ...


class RealtimeTransport(Protocol):
    def broadcast_request_update(self, payload: Dict[str, Any]) -> Any:
        ...


@dataclass(frozen=True)
class BroadcastPayload:
    request_id: str
    status: str
    matched_collector_id: str
    matched_collector_name: str
    collector_phone: str
    eta: str  # local wall-clock time, HH:MM:SS

    def to_dict(self) -> Dict[str, str]:
        return {
            "requestId": self.request_id,
            "status": self.status,
            "matchedCollectorId": self.matched_collector_id,
            "matchedCollectorName": self.matched_collector_name,
            "collectorPhone": self.collector_phone,
            "eta": self.eta,
        }


class DispatchEngine:
    """
    Matches requests to collectors and plans routes against one DispatchContext.
    """

    def __init__(self, context: Optional[DispatchContext] = None, push_service=None, realtime_transport=None):
        self.context = context or DispatchContext()
        self.push_service: Optional[PushService] = push_service
        self.realtime_transport: Optional[RealtimeTransport] = realtime_transport

    # --- Matching ---

    def find_nearby_collectors(self, request: ServiceRequest) -> List[MatchResult]:
        policy = self.context.dispatch_policy
        destination = ensure_coordinates(request)
        now = self.context.now()

        matches: List[MatchResult] = []
        for collector in self.context.roster.all():
            distance = haversine_km(collector.coordinates, destination)
            if distance > policy.cutoffs.match_range_km:
                continue

            breakdown = score_collector(request, collector, policy.weights)
            if not breakdown.is_viable:
                continue

            minutes = self.context.estimator.estimate_minutes(distance, TravelTimeModel.QUICK, at=now)
            matches.append(
                MatchResult(
                    collector=collector,
                    distance_km=round(distance, policy.distance_precision),
                    estimated_time_min=int(round(minutes)),
                    score=breakdown.score,
                    reasons=breakdown.reasons,
                )
            )

        ranked = rank_candidates(matches)
        logger.info("Request %s: %d viable collectors within %.0f km", request.id, len(ranked), policy.cutoffs.match_range_km)
        return ranked

    def match_request(self, request: ServiceRequest) -> Optional[MatchResult]:
        """
        Best collector for the request, or None if nobody viable is in range.
        """
        matches = self.find_nearby_collectors(request)
        if not matches:
            logger.info("No viable match for request %s", request.id)
            return None
        return matches[0]

    def broadcast_to_collectors(self, request: ServiceRequest, matches: Sequence[MatchResult]) -> Optional[BroadcastPayload]:
        if not matches:
            return None

        top = list(matches[: self.context.dispatch_policy.broadcast_top_n])
        collector_ids = [m.collector.id for m in top]
        best = top[0]

        # Check, reserve and transition as one step: a request is broadcast once
        with self.context.broadcast_lock:
            if request.status != RequestStatus.PENDING:
                raise RequestStateException(
                    f"Request {request.id} is not PENDING. Current: {request.status.value}"
                )

            # 1. Reserve a workload slot on every notified collector
            self._reserve_slots(collector_ids)

            # 2. Request leaves the pending pool
            transition_request_to_matched(request)

        eta = self.context.now() + timedelta(minutes=best.estimated_time_min)
        payload = BroadcastPayload(
            request_id=request.id,
            status=request.status.value,
            matched_collector_id=best.collector.id,
            matched_collector_name=best.collector.name,
            collector_phone=best.collector.phone,
            eta=eta.strftime("%H:%M:%S"),
        )

        # 3. Fire notifications
        if self.push_service:
            self.push_service.notify_collectors(collector_ids, request)
        if self.realtime_transport:
            self.realtime_transport.broadcast_request_update(payload.to_dict())

        logger.info("Broadcast request %s to %s", request.id, ", ".join(collector_ids))
        return payload

    def _reserve_slots(self, collector_ids: List[str]) -> None:
        """
        All or nothing: if one reservation fails, the ones already made are released.
        """
        reserved: List[str] = []
        try:
            for collector_id in collector_ids:
                self.context.roster.increment_load(collector_id)
                reserved.append(collector_id)
        except RosterError:
            for collector_id in reserved:
                self.context.roster.release_load(collector_id)
            raise

    # --- Routing ---

    def optimize_route(
        self,
        collector: Collector,
        available_requests: Sequence[ServiceRequest],
        current_location: Optional[Coordinates] = None,
    ) -> OptimizedRoute:
        # Imported here: the planner depends on this package's candidate filter
        from pickups.planning.engine import optimize_route

        return optimize_route(self.context, collector, available_requests, current_location)

    # --- Conditions / roster upkeep ---

    def refresh_traffic(self) -> int:
        return self.context.conditions.refresh_traffic()

    def set_weather(self, state: WeatherState) -> None:
        self.context.conditions.set_weather(state)

    def release_collector(self, collector_id: str) -> Collector:
        """
        Give back the slot reserved by a broadcast (offer declined or timed out).
        """
        return self.context.roster.release_load(collector_id)
