from datetime import timedelta

import pytest

from dispatch.candidate_filter import is_compatible
from dispatch.dispatcher import DispatchEngine
from pickups.planning.engine import optimize_route, route_efficiency
from pickups.planning.policy import RoutePlanningPolicy, default_planning_policy
from pickups.planning.prioritization import prioritize_requests
from pickups.planning.sequencing import build_greedy_sequence, dwell_minutes
from routing.conditions import (
    ConditionModel,
    CongestionLevel,
    StaticTrafficProvider,
    TrafficCell,
    WeatherCondition,
    WeatherState,
)
from routing.geo import Coordinates
from routing.geocoding import CITY_CENTER

from conftest import CBD, EVENING


def north(degrees):
    return CBD[0] + degrees, CBD[1]


@pytest.fixture
def collector(make_collector):
    return make_collector("truck", specializations=["plastic", "organic"], vehicle_capacity_kg=1000.0)


def test_three_stops_visited_nearest_first(collector, make_request, make_context):
    """
    Requests submitted far -> near -> mid along one line are visited near -> mid -> far,
    and the route earns exactly the sum of their final prices.
    """
    far = make_request(*north(0.03), base_price=250.0, request_id="far")
    near = make_request(*north(0.01), base_price=300.0, surge_multiplier=1.5, request_id="near")
    mid = make_request(*north(0.02), waste_type="organic", base_price=120.5, request_id="mid")
    context = make_context([collector])

    route = optimize_route(context, collector, [far, near, mid])

    # 1. Nearest-neighbour order from the collector's position
    assert [w.request_id for w in route.waypoints] == ["near", "mid", "far"]
    assert [r.id for r in route.requests] == ["near", "mid", "far"]

    # 2. Exact earnings: 250 + 450 + 120.5
    assert route.total_earnings == pytest.approx(820.5)

    # 3. No traffic or weather: adjusted distance is plain haversine, ~3.34 km
    assert route.total_distance_km == pytest.approx(3.3359, rel=1e-3)

    # 4. Travel at 40 km/h plus 5 min dwell per 20 kg stop
    assert route.estimated_duration_min == pytest.approx(3.3359 / 40 * 60 + 15, rel=1e-3)
    assert route.efficiency == 100.0
    assert route.created_at == EVENING
    assert not route.is_empty


def test_waypoint_etas_include_stop_buffer(collector, make_request, make_context):
    requests = [make_request(*north(0.01 * i), request_id=f"r{i}") for i in (1, 2, 3)]
    context = make_context([collector])

    route = optimize_route(context, collector, requests)
    hop_min = 1.11195 / 40 * 60

    expected = [
        EVENING + timedelta(minutes=hop_min),
        EVENING + timedelta(minutes=2 * hop_min + 10),
        EVENING + timedelta(minutes=3 * hop_min + 20),
    ]
    for waypoint, eta in zip(route.waypoints, expected):
        assert abs((waypoint.estimated_arrival - eta).total_seconds()) < 1


def test_benefit_against_input_order(collector, make_request, make_context):
    far = make_request(*north(0.03), request_id="far")
    near = make_request(*north(0.01), request_id="near")
    mid = make_request(*north(0.02), request_id="mid")
    context = make_context([collector])

    route = optimize_route(context, collector, [far, near, mid])
    benefit = route.optimization

    # naive: 3.34 out, 2.22 back, 1.11 forward = 6.67 km vs 3.34 km optimized
    assert benefit.fuel_saved_l == pytest.approx(0.3336, rel=1e-2)
    assert benefit.time_saved_min == pytest.approx(3.3359 / 40 * 60, rel=1e-2)
    assert benefit.additional_earnings == 10.0


def test_already_optimal_input_saves_nothing(collector, make_request, make_context):
    requests = [make_request(*north(0.01 * i)) for i in (1, 2, 3)]
    route = optimize_route(make_context([collector]), collector, requests)

    assert route.optimization.time_saved_min == pytest.approx(0.0, abs=1e-9)
    assert route.optimization.fuel_saved_l == pytest.approx(0.0, abs=1e-9)
    assert route.optimization.additional_earnings == 0.0


def test_route_capped_at_eight_stops_keeps_high_priority(collector, make_request, make_context):
    requests = [make_request(*north(0.001 * i), base_price=0.0, request_id=f"normal-{i}") for i in range(1, 11)]
    emergency = make_request(*north(0.05), base_price=0.0, urgency="emergency", request_id="emergency")

    route = optimize_route(make_context([collector]), collector, requests + [emergency])

    assert len(route.requests) == 8
    assert "emergency" in [r.id for r in route.requests]


def test_fewer_requests_than_cap_all_kept(collector, make_request, make_context):
    requests = [make_request(*north(0.005 * i)) for i in range(1, 6)]

    route = optimize_route(make_context([collector]), collector, requests)

    assert len(route.requests) == 5
    assert len(route.waypoints) == 5


def test_incompatible_requests_give_empty_route(collector, make_request, make_context):
    requests = [
        make_request(waste_type="electronic"),                  # not a specialization
        make_request(quantity_kg=1500.0),                       # exceeds the truck
        make_request(*north(0.2)),                              # ~22 km away
    ]

    route = optimize_route(make_context([collector]), collector, requests)

    assert route.is_empty
    assert route.requests == []
    assert route.total_distance_km == 0.0
    assert route.total_earnings == 0.0
    assert route.efficiency == 0.0
    assert route.collector_id == "truck"


def test_request_without_coordinates_is_not_compatible(collector, make_request):
    request = make_request(lat=None, lng=None, address="Unknown yard")

    assert is_compatible(collector, request) is False

    # the filter never geocodes
    assert request.location.coordinates is None
    assert request.location.is_approximate is False


def test_route_geocodes_requests_without_coordinates(collector, make_request, make_context):
    request = make_request(lat=None, lng=None, address="Unknown yard", request_id="yard")

    route = optimize_route(make_context([collector]), collector, [request])

    # 1. Resolved to the city centre, where the truck stands
    assert [r.id for r in route.requests] == ["yard"]
    assert request.coordinates == CITY_CENTER
    assert request.location.is_approximate is True

    # 2. Zero-distance leg
    assert route.total_distance_km == pytest.approx(0.0)


def test_route_range_is_wider_than_match_range(collector, make_request, make_context):
    # ~15.6 km: too far to be matched, close enough to be routed
    request = make_request(*north(0.14))

    route = optimize_route(make_context([collector]), collector, [request])

    assert len(route.requests) == 1


def test_current_location_overrides_collector_position(collector, make_request, make_context):
    requests = [make_request(*north(0.01 * i), request_id=f"r{i}") for i in (1, 2, 3)]

    route = optimize_route(
        make_context([collector]), collector, requests,
        current_location=Coordinates(*north(0.04)),
    )

    assert [w.request_id for w in route.waypoints] == ["r3", "r2", "r1"]


def test_heavy_traffic_inflates_distance(collector, make_request, make_context):
    request = make_request(*north(0.01))
    cell = TrafficCell(request.coordinates, CongestionLevel.HIGH, 20.0, 1.8)
    conditions = ConditionModel(StaticTrafficProvider([cell]))
    conditions.set_weather(WeatherState(WeatherCondition.RAIN, speed_reduction_pct=20.0))

    route = optimize_route(make_context([collector], conditions=conditions), collector, [request])

    # 1.112 km x 1.8 delay x 1.2 weather, then 16 km/h effective speed
    assert route.total_distance_km == pytest.approx(1.11195 * 1.8 * 1.2, rel=1e-3)
    assert route.estimated_duration_min == pytest.approx(1.11195 * 1.8 * 1.2 / 16 * 60 + 5, rel=1e-3)


def test_engine_exposes_route_planning(collector, make_request, make_context):
    engine = DispatchEngine(make_context([collector]))

    route = engine.optimize_route(collector, [make_request(*north(0.01))])

    assert len(route.waypoints) == 1


def test_cumulative_totals_never_decrease(make_context, make_request):
    context = make_context()
    policy = default_planning_policy()
    requests = [make_request(*north(0.003 * i), quantity_kg=30.0 * i) for i in range(1, 8)]

    result = build_greedy_sequence(Coordinates(*CBD), requests, context.estimator, policy, now=EVENING)

    distances = [leg.cumulative_distance_km for leg in result.legs]
    durations = [leg.cumulative_duration_min for leg in result.legs]
    arrivals = [leg.estimated_arrival for leg in result.legs]
    assert distances == sorted(distances)
    assert durations == sorted(durations)
    assert arrivals == sorted(arrivals)
    assert result.total_distance_km == pytest.approx(distances[-1])


@pytest.mark.parametrize("quantity, expected", [(20.0, 5.0), (100.0, 10.0), (500.0, 15.0)])
def test_dwell_time_is_clamped(quantity, expected):
    assert dwell_minutes(quantity, default_planning_policy()) == expected


def test_route_efficiency_formula():
    policy = default_planning_policy()

    # 10/10 x 2 + 10/10 x 5
    assert route_efficiency(10.0, 10.0, 10.0, policy) == 7.0
    assert route_efficiency(1000.0, 1.0, 10.0, policy) == 100.0
    assert route_efficiency(50.0, 0.0, 0.0, policy) == 100.0
    assert route_efficiency(0.0, 5.0, 20.0, policy) == 0.0


def test_prioritization_penalizes_congested_pickups(make_request):
    # same distance from the origin, one north and one south
    request_clear = make_request(*north(0.01), request_id="clear")
    request_jammed = make_request(*north(-0.01), request_id="jammed")
    cell = TrafficCell(request_jammed.coordinates, CongestionLevel.HIGH, 20.0, 1.8)
    conditions = ConditionModel(StaticTrafficProvider([cell]))

    ranked = prioritize_requests([request_jammed, request_clear], Coordinates(*CBD), conditions, default_planning_policy())

    assert [p.request.id for p in ranked] == ["clear", "jammed"]
    assert ranked[0].priority - ranked[1].priority == pytest.approx(20.0, abs=0.1)


def test_prioritization_asap_and_urgency(make_request):
    policy = RoutePlanningPolicy()
    origin = Coordinates(*CBD)
    normal = make_request(base_price=0.0, request_id="normal")
    asap = make_request(base_price=0.0, preferred_time="asap", request_id="asap")
    urgent = make_request(base_price=0.0, urgency="urgent", request_id="urgent")

    ranked = prioritize_requests([normal, asap, urgent], origin, ConditionModel(), policy)

    # normal 10 + 50, asap 10 + 50 + 20, urgent 25 + 50
    assert [(p.request.id, p.priority) for p in ranked] == [("asap", 80.0), ("urgent", 75.0), ("normal", 60.0)]
