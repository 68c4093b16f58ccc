from datetime import datetime

import pytest

from routing.conditions import (
    ConditionModel,
    CongestionLevel,
    StaticTrafficProvider,
    TrafficCell,
    WeatherCondition,
    WeatherState,
)
from routing.eta_service import TravelTimeEstimator, TravelTimeModel, TravelTimePolicy
from routing.geo import Coordinates

JAMMED = Coordinates(-1.292, 36.821)
OPEN_ROAD = Coordinates(-1.400, 36.900)


@pytest.fixture
def estimator():
    cells = [TrafficCell(JAMMED, CongestionLevel.HIGH, 20.0, 1.8)]
    return TravelTimeEstimator(ConditionModel(StaticTrafficProvider(cells)))


def at_hour(hour):
    return datetime(2026, 3, 4, hour, 30)


@pytest.mark.parametrize(
    "hour, expected",
    [
        (6, 20.0),   # off-peak: 10 km at 30 km/h
        (7, 40.0),   # morning rush, inclusive start
        (9, 40.0),   # morning rush, inclusive end
        (10, 26.0),  # midday
        (16, 26.0),
        (17, 40.0),  # evening rush
        (19, 40.0),
        (21, 20.0),
    ],
)
def test_quick_model_time_of_day_multiplier(estimator, hour, expected):
    minutes = estimator.estimate_minutes(10.0, TravelTimeModel.QUICK, at=at_hour(hour))
    assert minutes == pytest.approx(expected)


def test_condition_aware_uses_base_speed_without_traffic(estimator):
    assert estimator.condition_aware_minutes(10.0, OPEN_ROAD) == pytest.approx(15.0)


def test_condition_aware_uses_cell_speed(estimator):
    assert estimator.condition_aware_minutes(10.0, JAMMED) == pytest.approx(30.0)


def test_weather_slows_condition_aware_model(estimator):
    estimator.conditions.set_weather(WeatherState(WeatherCondition.HEAVY_RAIN, speed_reduction_pct=25.0))

    # 40 km/h x 0.75 = 30 km/h
    assert estimator.condition_aware_minutes(10.0, OPEN_ROAD) == pytest.approx(20.0)
    # 20 km/h x 0.75 = 15 km/h
    assert estimator.condition_aware_minutes(10.0, JAMMED) == pytest.approx(40.0)


def test_adjusted_distance_applies_delay_and_weather(estimator):
    assert estimator.adjusted_distance_km(10.0, OPEN_ROAD) == pytest.approx(10.0)
    assert estimator.adjusted_distance_km(10.0, JAMMED) == pytest.approx(18.0)

    estimator.conditions.set_weather(WeatherState(WeatherCondition.RAIN, speed_reduction_pct=25.0))
    assert estimator.adjusted_distance_km(10.0, JAMMED) == pytest.approx(22.5)


def test_condition_aware_requires_destination(estimator):
    with pytest.raises(ValueError):
        estimator.estimate_minutes(5.0, TravelTimeModel.CONDITION_AWARE)


def test_custom_policy_changes_base_speed():
    estimator = TravelTimeEstimator(ConditionModel(), TravelTimePolicy(quick_base_speed_kmh=60.0))
    assert estimator.quick_minutes(10.0, at_hour(22)) == pytest.approx(10.0)


def test_policy_validation_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        TravelTimePolicy(condition_base_speed_kmh=0).validate()


def test_pinned_estimator_ignores_later_condition_changes(estimator):
    """
    A pinned estimator keeps answering from the conditions it was pinned to,
    while the live one follows every update.
    """
    pinned = estimator.pinned()

    estimator.conditions.set_weather(WeatherState(WeatherCondition.HEAVY_RAIN, 50.0))
    estimator.conditions.put_traffic(TrafficCell(JAMMED, CongestionLevel.LOW, 60.0, 1.0))

    # 1. Pinned: 20 km/h jam, clear sky
    assert pinned.condition_aware_minutes(10.0, JAMMED) == pytest.approx(30.0)
    assert pinned.adjusted_distance_km(10.0, JAMMED) == pytest.approx(18.0)

    # 2. Live: 60 km/h halved by rain
    assert estimator.condition_aware_minutes(10.0, JAMMED) == pytest.approx(20.0)
    assert estimator.adjusted_distance_km(10.0, JAMMED) == pytest.approx(15.0)
