"""
Collectors domain package.

Public API:
- Domain models: Collector, CollectorLocation
- Shared state: CollectorRoster, RosterError
- Configuration: DispatchPolicy, DistanceCutoff, ScoringWeights
"""
from .models import Collector, CollectorLocation
from .policy import DispatchPolicy, DistanceCutoff, ScoringWeights, default_dispatch_policy
from .roster import CollectorRoster, RosterError

__all__ = [
    "Collector",
    "CollectorLocation",
    "CollectorRoster",
    "RosterError",
    "DispatchPolicy",
    "DistanceCutoff",
    "ScoringWeights",
    "default_dispatch_policy",
]
