#Marks routing as a package.
#Re-exports the public geometry / travel-time / conditions API so other
#packages import from routing without knowing internal file names.
#No business logic.

from .geo import Coordinates, haversine_km, cell_key
from .conditions import (
    ConditionModel,
    ConditionSnapshot,
    CongestionLevel,
    LiveFeedTrafficProvider,
    SafetyRisk,
    StaticTrafficProvider,
    TrafficCell,
    TrafficProviderType,
    WeatherCondition,
    WeatherState,
    default_nairobi_traffic,
)
from .eta_service import TravelTimeEstimator, TravelTimeModel, TravelTimePolicy
from .geocoding import GeocodeResult, geocode
from .traffic_feed_client import TrafficFeedClient, TrafficFeedError

__all__ = [
    "Coordinates",
    "haversine_km",
    "cell_key",
    "ConditionModel",
    "ConditionSnapshot",
    "CongestionLevel",
    "LiveFeedTrafficProvider",
    "SafetyRisk",
    "StaticTrafficProvider",
    "TrafficCell",
    "TrafficProviderType",
    "WeatherCondition",
    "WeatherState",
    "default_nairobi_traffic",
    "TravelTimeEstimator",
    "TravelTimeModel",
    "TravelTimePolicy",
    "GeocodeResult",
    "geocode",
    "TrafficFeedClient",
    "TrafficFeedError",
]
