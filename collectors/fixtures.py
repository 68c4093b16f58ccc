"""
Reference roster for demos and the simulation script: four collectors
spread across Nairobi with different specializations and workloads.
"""

from typing import List

from .models import Collector

VEHICLE_CAPACITY_KG = {
    "Truck": 1000.0,
    "Van": 500.0,
    "Bike": 50.0,
}


def nairobi_reference_collectors() -> List[Collector]:
    return [
        Collector.new(
            "collector-1", "Nairobi Waste Collectors Co.", -1.2921, 36.8219,
            ["plastic", "organic", "mixed"],
            vehicle_capacity_kg=VEHICLE_CAPACITY_KG["Truck"],
            current_load=2, max_load=5, rating=4.5, response_time_min=15,
            online=True, phone="+254 712 345 678", vehicle_type="Truck",
        ),
        Collector.new(
            "collector-2", "Westlands Environmental Services", -1.2654, 36.7969,
            ["electronic", "hazardous"],
            vehicle_capacity_kg=VEHICLE_CAPACITY_KG["Van"],
            current_load=1, max_load=3, rating=4.8, response_time_min=10,
            online=True, phone="+254 723 456 789", vehicle_type="Van",
        ),
        Collector.new(
            "collector-3", "Kilimani Green Solutions", -1.3001, 36.7830,
            ["plastic", "organic"],
            vehicle_capacity_kg=VEHICLE_CAPACITY_KG["Bike"],
            current_load=0, max_load=4, rating=4.2, response_time_min=20,
            online=False, phone="+254 734 567 890", vehicle_type="Bike",
        ),
        Collector.new(
            "collector-4", "Karen Waste Management", -1.3176, 36.7520,
            ["organic", "mixed", "hazardous"],
            vehicle_capacity_kg=VEHICLE_CAPACITY_KG["Truck"],
            current_load=3, max_load=6, rating=4.6, response_time_min=12,
            online=True, phone="+254 745 678 901", vehicle_type="Truck",
        ),
    ]
