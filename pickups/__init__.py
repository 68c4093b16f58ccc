"""
Pickups domain package.

Public API:
- Domain models: ServiceRequest, RequestLocation, PriceEstimate,
  WasteType, Urgency, RequestStatus, PreferredTime
- Route output: OptimizedRoute, RouteWaypoint, OptimizationBenefit
- Status transitions: transition_request, transition_request_to_matched, cancel_request

Should not contain business logic.
"""
from .models import (
    OptimizationBenefit,
    OptimizedRoute,
    PreferredTime,
    PriceEstimate,
    RequestLocation,
    RequestStatus,
    RouteWaypoint,
    ServiceRequest,
    Urgency,
    WasteType,
)
from .state_machine import (
    RequestStateException,
    cancel_request,
    transition_request,
    transition_request_to_matched,
)

__all__ = [
    "OptimizationBenefit",
    "OptimizedRoute",
    "RouteWaypoint",
    "PreferredTime",
    "PriceEstimate",
    "RequestLocation",
    "RequestStatus",
    "ServiceRequest",
    "Urgency",
    "WasteType",
    "RequestStateException",
    "transition_request",
    "transition_request_to_matched",
    "cancel_request",
]
