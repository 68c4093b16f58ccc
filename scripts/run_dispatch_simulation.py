import csv
import logging
import os
import random
import time
from collections import defaultdict
from typing import List

from collectors.models import Collector
from dispatch.context import DispatchContext
from dispatch.dispatcher import DispatchEngine
from pickups.models import RequestStatus, ServiceRequest
from routing.conditions import (
    ConditionModel,
    SafetyRisk,
    StaticTrafficProvider,
    WeatherCondition,
    WeatherState,
    default_nairobi_traffic,
)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class MockPushService:
    def __init__(self):
        self.sent = []

    def notify_collectors(self, collector_ids, request):
        self.sent.append((request.id, list(collector_ids)))


class MockRealtimeTransport:
    def __init__(self):
        self.updates = []

    def broadcast_request_update(self, payload):
        self.updates.append(payload)


def load_collectors(filepath="sampledata/collectors.csv") -> List[Collector]:
    collectors = []
    with open(os.path.join(BASE_DIR, filepath), "r") as file:
        reader = csv.DictReader(file)
        for row in reader:
            collectors.append(
                Collector.new(
                    row["collector_id"],
                    row["name"],
                    float(row["lat"]),
                    float(row["lng"]),
                    row["specializations"].split("|"),
                    float(row["vehicle_capacity_kg"]),
                    int(row["max_load"]),
                    current_load=int(row["current_load"]),
                    rating=float(row["rating"]),
                    response_time_min=float(row["response_time_min"]),
                    online=row["online"] == "True",
                    phone=row["phone"],
                    vehicle_type=row["vehicle_type"],
                )
            )
    return collectors


def load_requests(filepath="sampledata/requests.csv", limit=60) -> List[ServiceRequest]:
    requests = []
    with open(os.path.join(BASE_DIR, filepath), "r") as file:
        reader = csv.DictReader(file)
        for row in reader:
            if len(requests) >= limit:
                break
            requests.append(
                ServiceRequest.new(
                    row["request_id"],
                    row["client_id"],
                    row["waste_type"],
                    float(row["quantity_kg"]),
                    row["address"],
                    # Blank coordinates go through the geocoding fallback
                    lat=float(row["lat"]) if row["lat"] else None,
                    lng=float(row["lng"]) if row["lng"] else None,
                    urgency=row["urgency"],
                    base_price=float(row["base_price"]),
                    surge_multiplier=float(row["surge_multiplier"]),
                    preferred_time=row["preferred_time"] or None,
                )
            )
    return requests


def run_simulation(seed=42):
    logging.basicConfig(level=logging.WARNING)
    print("=== STARTING WASTE COLLECTION DISPATCH SIMULATION ===")

    # 1. Load Data
    collectors = load_collectors()
    requests = load_requests(limit=60)
    print(f"Loaded {len(requests)} Requests and {len(collectors)} Collectors.\n")

    # 2. Configure System
    conditions = ConditionModel(
        provider=StaticTrafficProvider(default_nairobi_traffic(), rng=random.Random(seed)),
    )
    context = DispatchContext.with_collectors(collectors, conditions=conditions)
    push_service = MockPushService()
    transport = MockRealtimeTransport()
    engine = DispatchEngine(context, push_service=push_service, realtime_transport=transport)

    # 3. Step 1: Match and broadcast every request
    print("Matching requests to collectors...")
    start_time = time.time()
    matched_by_collector = defaultdict(list)
    unmatched = 0

    output_path = os.path.join(BASE_DIR, "dispatch_results.csv")
    with open(output_path, "w", newline="") as file:
        writer = csv.writer(file)
        writer.writerow(["request_id", "waste_type", "urgency", "matched_collector", "distance_km", "eta_min", "score", "approximate_location"])

        for index, request in enumerate(requests):
            # Conditions shift while the day goes on
            if index % 20 == 0:
                engine.refresh_traffic()

            matches = engine.find_nearby_collectors(request)
            payload = engine.broadcast_to_collectors(request, matches)
            if payload is None:
                unmatched += 1
                writer.writerow([request.id, request.waste_type.value, request.urgency.value, "NONE", "", "", "", request.location.is_approximate])
                continue

            best = matches[0]
            matched_by_collector[best.collector.id].append(request)
            writer.writerow([
                request.id,
                request.waste_type.value,
                request.urgency.value,
                best.collector.id,
                best.distance_km,
                best.estimated_time_min,
                round(best.score, 1),
                request.location.is_approximate,
            ])

    print(f"Matched {len(requests) - unmatched} / {len(requests)} requests in {time.time() - start_time:.2f}s.\n")

    # 4. Step 2: A storm rolls in, then each busy collector gets a route
    engine.set_weather(WeatherState(WeatherCondition.HEAVY_RAIN, 25.0, 40.0, SafetyRisk.MEDIUM))
    pending_pool = [r for r in requests if r.status == RequestStatus.PENDING]

    print("--- Route Plans (heavy rain) ---")
    for collector_id, assigned in matched_by_collector.items():
        collector = context.roster.get(collector_id)
        route = engine.optimize_route(collector, assigned + pending_pool)
        if route.is_empty:
            print(f"{collector_id}: no compatible stops")
            continue

        stops = " -> ".join(w.request_id for w in route.waypoints)
        print(
            f"{collector_id}: {len(route.waypoints)} stops, {route.total_distance_km:.1f} km, "
            f"{route.estimated_duration_min:.0f} min, KES {route.total_earnings:.0f}, "
            f"efficiency {route.efficiency:.0f}, saves {route.optimization.time_saved_min:.0f} min"
        )
        print(f"    {stops}")

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Push notifications sent: {len(push_service.sent)}")
    print(f"Client updates published: {len(transport.updates)}")
    print(f"Results written to '{output_path}'.")


if __name__ == "__main__":
    run_simulation()
