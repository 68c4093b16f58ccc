#Purpose: Non-scoring hard eligibility filtering (rule gates).
#Decides whether a collector can serve a request at all, before any ranking:
#waste type must be one of the collector's specializations
#quantity must fit the vehicle
#pickup must lie within the route-planning radius (20 km by default)
#The stricter 10 km matching radius is applied by the dispatcher, not here.
#Pure predicates: a request without resolved coordinates is not compatible;
#callers geocode first (pickups.locating.ensure_coordinates).

#Output: "rule-qualified" requests for one collector (still not ranked).

from typing import List, Optional, Sequence

from collectors.models import Collector
from collectors.policy import DistanceCutoff
from pickups.models import ServiceRequest
from routing.geo import haversine_km


def is_compatible(
    collector: Collector,
    request: ServiceRequest,
    cutoffs: Optional[DistanceCutoff] = None,
) -> bool:
    cutoffs = cutoffs or DistanceCutoff()

    # Waste type gate comes first: no other attribute can compensate for it
    if not collector.specializes_in(request.waste_type):
        return False

    if request.quantity_kg > collector.vehicle_capacity_kg:
        return False

    if request.coordinates is None:
        return False

    distance = haversine_km(collector.coordinates, request.coordinates)
    return distance <= cutoffs.route_range_km


def filter_compatible_requests(
    collector: Collector,
    requests: Sequence[ServiceRequest],
    cutoffs: Optional[DistanceCutoff] = None,
) -> List[ServiceRequest]:
    """
    Returns only requests this collector can serve, preserving input order.
    """
    return [request for request in requests if is_compatible(collector, request, cutoffs)]
