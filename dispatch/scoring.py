#Purpose: Ranking model (the "who is best" layer).
#Takes one request and one collector and produces an additive score plus the
#reasons behind it, so the UI can explain a match.
#Hard disqualifiers (offline, no free slot) short-circuit to zero.
#The score is floored at zero and has no ceiling: compare rankings, not magnitudes.
#Never raises.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from collectors.models import Collector
from collectors.policy import ScoringWeights
from pickups.models import ServiceRequest, Urgency

logger = logging.getLogger(__name__)

REASON_OFFLINE = "Collector is offline"
REASON_AT_CAPACITY = "Collector is at capacity"
REASON_SPECIALIZES = "Specializes in this waste type"
REASON_NOT_SPECIALIZED = "Does not specialize in this waste type"
REASON_HIGHLY_RATED = "Highly rated collector"
REASON_FAST_RESPONSE = "Fast response time"
REASON_SLOW_RESPONSE = "Slow response time"
REASON_LOW_WORKLOAD = "Low current workload"
REASON_HIGH_WORKLOAD = "High current workload"
REASON_EMERGENCY_READY = "Available for emergency requests"


@dataclass(frozen=True)
class ScoreBreakdown:
    score: float
    reasons: List[str] = field(default_factory=list)

    @property
    def is_viable(self) -> bool:
        return self.score > 0


@dataclass(frozen=True)
class MatchResult:
    """
    One viable collector for a request, as shown to dispatch and to the client.
    distance_km is rounded to 2 decimals, estimated_time_min to whole minutes.
    """
    collector: Collector
    distance_km: float
    estimated_time_min: int
    score: float
    reasons: List[str] = field(default_factory=list)


def score_collector(
    request: ServiceRequest,
    collector: Collector,
    weights: Optional[ScoringWeights] = None,
) -> ScoreBreakdown:
    w = weights or ScoringWeights()

    if not collector.online:
        return ScoreBreakdown(0.0, [REASON_OFFLINE])

    if collector.current_load >= collector.max_load:
        return ScoreBreakdown(0.0, [REASON_AT_CAPACITY])

    score = 0.0
    reasons: List[str] = []

    # specialization
    if collector.specializes_in(request.waste_type):
        score += w.specialization_bonus
        reasons.append(REASON_SPECIALIZES)
    else:
        score += w.specialization_penalty
        reasons.append(REASON_NOT_SPECIALIZED)

    # reputation
    score += collector.rating * w.rating_multiplier
    if collector.rating >= w.highly_rated_threshold:
        reasons.append(REASON_HIGHLY_RATED)

    # responsiveness
    if collector.response_time_min <= w.fast_response_max_min:
        score += w.fast_response_bonus
        reasons.append(REASON_FAST_RESPONSE)
    elif collector.response_time_min > w.slow_response_min:
        score += w.slow_response_penalty
        reasons.append(REASON_SLOW_RESPONSE)

    # workload
    load_ratio = collector.load_ratio
    if load_ratio <= w.low_workload_ratio:
        score += w.low_workload_bonus
        reasons.append(REASON_LOW_WORKLOAD)
    elif load_ratio >= w.high_workload_ratio:
        score += w.high_workload_penalty
        reasons.append(REASON_HIGH_WORKLOAD)

    if request.urgency == Urgency.EMERGENCY and collector.response_time_min <= w.emergency_response_max_min:
        score += w.emergency_bonus
        reasons.append(REASON_EMERGENCY_READY)

    final = max(0.0, score)
    logger.debug("Scored collector %s for request %s: %.1f", collector.id, request.id, final)
    return ScoreBreakdown(final, reasons)


def rank_candidates(matches: Sequence[MatchResult]) -> List[MatchResult]:
    """
    Best first: highest score, ties broken by the nearer collector.
    """
    return sorted(matches, key=lambda m: (-m.score, m.distance_km))
