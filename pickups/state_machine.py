from typing import Dict, FrozenSet

from .models import RequestStatus, ServiceRequest


class RequestStateException(Exception):
    """Raised when an invalid request status transition is attempted."""
    pass


# Forward lifecycle plus the three states a request may still be cancelled from.
ALLOWED_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.MATCHED, RequestStatus.CANCELLED}),
    RequestStatus.MATCHED: frozenset({RequestStatus.ACCEPTED}),
    RequestStatus.ACCEPTED: frozenset({RequestStatus.EN_ROUTE, RequestStatus.CANCELLED}),
    RequestStatus.EN_ROUTE: frozenset({RequestStatus.ARRIVED, RequestStatus.CANCELLED}),
    RequestStatus.ARRIVED: frozenset({RequestStatus.COLLECTING}),
    RequestStatus.COLLECTING: frozenset({RequestStatus.COMPLETED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def transition_request(request: ServiceRequest, target: RequestStatus) -> ServiceRequest:
    """
    Generic guarded transition. Mutates and returns the request.
    """
    if not can_transition(request.status, target):
        raise RequestStateException(
            f"Cannot transition request {request.id} from {request.status.value} to {target.value}"
        )
    request.status = target
    return request


def transition_request_to_matched(request: ServiceRequest) -> ServiceRequest:
    """
    The only transition the dispatch engine performs itself:
    called once the request has been broadcast to its best collectors.
    """
    if request.status != RequestStatus.PENDING:
        raise RequestStateException(
            f"Request {request.id} is not PENDING. Current: {request.status.value}"
        )
    request.status = RequestStatus.MATCHED
    return request


def cancel_request(request: ServiceRequest) -> ServiceRequest:
    """
    Called by the collector-status layer. Only pending, accepted and
    en-route requests can still be cancelled.
    """
    return transition_request(request, RequestStatus.CANCELLED)
