"""
Purpose: The explicit state a dispatch call runs against.
What it does:
Bundles the collector roster, the condition model, the travel-time estimator,
both policies and a clock into one object that every matching / routing call
receives. Tests build a fresh context each; production keeps one per process.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional

from collectors.models import Collector
from collectors.policy import DispatchPolicy, default_dispatch_policy
from collectors.roster import CollectorRoster
from pickups.planning.policy import RoutePlanningPolicy, default_planning_policy
from routing.conditions import ConditionModel
from routing.eta_service import TravelTimeEstimator, TravelTimePolicy

Clock = Callable[[], datetime]


@dataclass
class DispatchContext:
    roster: CollectorRoster = field(default_factory=CollectorRoster)
    conditions: ConditionModel = field(default_factory=ConditionModel)
    dispatch_policy: DispatchPolicy = field(default_factory=default_dispatch_policy)
    planning_policy: RoutePlanningPolicy = field(default_factory=default_planning_policy)
    travel_policy: TravelTimePolicy = field(default_factory=TravelTimePolicy)
    # Local wall clock; injected so ETAs and time-of-day traffic are testable
    clock: Clock = datetime.now

    def __post_init__(self) -> None:
        self.dispatch_policy.validate()
        self.planning_policy.validate()
        self.estimator = TravelTimeEstimator(self.conditions, self.travel_policy)
        # Serializes the pending check, slot reservations and status change of a broadcast
        self.broadcast_lock = threading.Lock()

    def now(self) -> datetime:
        return self.clock()

    @classmethod
    def with_collectors(
        cls,
        collectors: Iterable[Collector],
        conditions: Optional[ConditionModel] = None,
        **kwargs,
    ) -> DispatchContext:
        return cls(
            roster=CollectorRoster(collectors),
            conditions=conditions or ConditionModel(),
            **kwargs,
        )
