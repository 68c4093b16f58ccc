#Expose the high-level pipeline pieces:
#Candidate filtering (hard rules)
#Scoring / ranking
#DispatchEngine orchestrator (the "one call" entry point)

from .candidate_filter import filter_compatible_requests, is_compatible
from .context import DispatchContext
from .dispatcher import BroadcastPayload, DispatchEngine, PushService, RealtimeTransport
from .scoring import MatchResult, ScoreBreakdown, rank_candidates, score_collector

__all__ = [
    "filter_compatible_requests",
    "is_compatible",
    "DispatchContext",
    "BroadcastPayload",
    "DispatchEngine",
    "PushService",
    "RealtimeTransport",
    "MatchResult",
    "ScoreBreakdown",
    "rank_candidates",
    "score_collector",
]
