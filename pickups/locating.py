from routing.geo import Coordinates
from routing.geocoding import geocode

from .models import ServiceRequest


def ensure_coordinates(request: ServiceRequest) -> Coordinates:
    """
    Return the request's coordinates, geocoding the address first if the
    submission layer sent none. A fallback fix is written back and flagged
    with location.is_approximate so later layers can tell it from a real one.
    """
    if request.location.coordinates is not None:
        return request.location.coordinates

    result = geocode(request.location.address)
    request.location.coordinates = result.coordinates
    request.location.is_approximate = result.is_fallback
    return result.coordinates
