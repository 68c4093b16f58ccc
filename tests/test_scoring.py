import pytest

from collectors.policy import ScoringWeights
from dispatch.scoring import (
    REASON_AT_CAPACITY,
    REASON_EMERGENCY_READY,
    REASON_FAST_RESPONSE,
    REASON_HIGH_WORKLOAD,
    REASON_HIGHLY_RATED,
    REASON_LOW_WORKLOAD,
    REASON_NOT_SPECIALIZED,
    REASON_OFFLINE,
    REASON_SLOW_RESPONSE,
    REASON_SPECIALIZES,
    MatchResult,
    rank_candidates,
    score_collector,
)


def test_offline_collector_scores_zero(make_collector, make_request):
    collector = make_collector(online=False, rating=5.0, response_time_min=5)

    result = score_collector(make_request(), collector)

    assert result.score == 0
    assert result.reasons == [REASON_OFFLINE]
    assert not result.is_viable


def test_collector_at_capacity_scores_zero(make_collector, make_request):
    collector = make_collector(current_load=5, max_load=5, rating=5.0)

    result = score_collector(make_request(), collector)

    assert result.score == 0
    assert result.reasons == [REASON_AT_CAPACITY]


def test_specialist_beats_non_specialist(make_collector, make_request):
    """
    Plastic / 25 kg / urgent request:
    B = 30 (specialization) + 45 (rating) + 15 (fast) + 10 (load 1/5)        = 100
    C = -20 (specialization) + 42 (rating) + 0 (20 min) + 10 (load 0/4)     = 32
    """
    request = make_request(quantity_kg=25.0, urgency="urgent")
    b = make_collector("B", specializations=["plastic"], rating=4.5, response_time_min=10, current_load=1, max_load=5)
    c = make_collector("C", specializations=["organic"], rating=4.2, response_time_min=20, current_load=0, max_load=4)

    score_b = score_collector(request, b)
    score_c = score_collector(request, c)

    assert score_b.score == pytest.approx(100.0)
    assert score_b.reasons == [REASON_SPECIALIZES, REASON_HIGHLY_RATED, REASON_FAST_RESPONSE, REASON_LOW_WORKLOAD]

    assert score_c.score == pytest.approx(32.0)
    assert score_c.reasons == [REASON_NOT_SPECIALIZED, REASON_LOW_WORKLOAD]


def test_slow_and_busy_collector_is_penalized(make_collector, make_request):
    # 30 + 40 - 10 (slow) - 10 (load 4/5)
    collector = make_collector(rating=4.0, response_time_min=45, current_load=4, max_load=5)

    result = score_collector(make_request(), collector)

    assert result.score == pytest.approx(50.0)
    assert REASON_SLOW_RESPONSE in result.reasons
    assert REASON_HIGH_WORKLOAD in result.reasons


def test_emergency_bonus_needs_quick_response(make_collector, make_request):
    emergency = make_request(urgency="emergency")
    quick = make_collector("quick", response_time_min=10, rating=4.0)
    slower = make_collector("slower", response_time_min=12, rating=4.0)

    quick_score = score_collector(emergency, quick)
    slower_score = score_collector(emergency, slower)

    # both get the fast response bonus, only one the emergency bonus
    assert quick_score.score - slower_score.score == pytest.approx(20.0)
    assert REASON_EMERGENCY_READY in quick_score.reasons
    assert REASON_EMERGENCY_READY not in slower_score.reasons


def test_score_is_floored_at_zero(make_collector, make_request):
    # -20 + 0 - 10 - 10 = -40
    collector = make_collector(specializations=["organic"], rating=0.0, response_time_min=60, current_load=4, max_load=5)

    result = score_collector(make_request(waste_type="plastic"), collector)

    assert result.score == 0.0


def test_custom_weights_are_respected(make_collector, make_request):
    weights = ScoringWeights(specialization_bonus=100.0)
    collector = make_collector(rating=0.0, response_time_min=20, current_load=3, max_load=5)

    assert score_collector(make_request(), collector, weights).score == pytest.approx(100.0)


def test_rank_candidates_orders_by_score_then_distance(make_collector):
    collector = make_collector()
    matches = [
        MatchResult(collector, distance_km=3.0, estimated_time_min=6, score=50.0),
        MatchResult(collector, distance_km=1.0, estimated_time_min=2, score=50.0),
        MatchResult(collector, distance_km=9.0, estimated_time_min=18, score=80.0),
    ]

    ranked = rank_candidates(matches)

    assert [(m.score, m.distance_km) for m in ranked] == [(80.0, 9.0), (50.0, 1.0), (50.0, 3.0)]
