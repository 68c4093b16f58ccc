"""
Route planning subpackage for the Pickups domain.

Public API:
- optimize_route
- RoutePlanningPolicy
- prioritize_requests, build_greedy_sequence
"""

from .engine import optimize_route, route_efficiency
from .policy import RoutePlanningPolicy, default_planning_policy, rush_hour_planning_policy
from .prioritization import PrioritizedRequest, prioritize_requests
from .sequencing import RouteLeg, SequenceResult, build_greedy_sequence, dwell_minutes, walk_sequence

__all__ = [
    "optimize_route",
    "route_efficiency",
    "RoutePlanningPolicy",
    "default_planning_policy",
    "rush_hour_planning_policy",
    "PrioritizedRequest",
    "prioritize_requests",
    "RouteLeg",
    "SequenceResult",
    "build_greedy_sequence",
    "dwell_minutes",
    "walk_sequence",
]
