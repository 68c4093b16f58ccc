from datetime import datetime

import pytest

from collectors.models import Collector
from dispatch.context import DispatchContext
from pickups.models import ServiceRequest

# Nairobi CBD
CBD = (-1.2921, 36.8219)

# 21:00 sits outside every rush-hour window, so the quick model runs at base speed
EVENING = datetime(2026, 3, 4, 21, 0, 0)


@pytest.fixture
def make_collector():
    def _make(collector_id="c-1", lat=CBD[0], lng=CBD[1], specializations=("plastic",), **overrides):
        params = dict(
            vehicle_capacity_kg=1000.0,
            max_load=5,
            current_load=0,
            rating=4.0,
            response_time_min=20,
            online=True,
            phone="+254 700 000 000",
        )
        params.update(overrides)
        return Collector.new(collector_id, f"Collector {collector_id}", lat, lng, list(specializations), **params)

    return _make


@pytest.fixture
def make_request():
    counter = {"n": 0}

    def _make(lat=CBD[0], lng=CBD[1], waste_type="plastic", quantity_kg=20.0, **overrides):
        counter["n"] += 1
        params = dict(address=f"{counter['n']} Test Road", urgency="normal", base_price=100.0)
        params.update(overrides)
        request_id = params.pop("request_id", f"req-{counter['n']}")
        return ServiceRequest.new(request_id, "client-1", waste_type, quantity_kg, lat=lat, lng=lng, **params)

    return _make


@pytest.fixture
def make_context():
    def _make(collectors=(), now=EVENING, **kwargs):
        return DispatchContext.with_collectors(collectors, clock=lambda: now, **kwargs)

    return _make
