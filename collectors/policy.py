"""
Purpose: Central configuration for collector matching and broadcasts.
What it does:

Stores all tunable thresholds/caps for finding collectors and pushing offers:

MATCH_RADIUS_KM = 10    (single-request matching)
ROUTE_RADIUS_KM = 20    (multi-stop route compatibility)
BROADCAST_TOP_N = 3
Scoring weights for the additive collector score

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class DistanceCutoff:
    """
    match_range_km bounds single-request matching,
    route_range_km bounds which requests a multi-stop route may include.
    """
    match_range_km: float = 10.0
    route_range_km: float = 20.0

    @classmethod
    def from_env(cls) -> DistanceCutoff:
        """
        Overrides from the environment / .env:
        DISPATCH_MATCH_RADIUS_KM, DISPATCH_ROUTE_RADIUS_KM
        """
        defaults = cls()
        return cls(
            match_range_km=float(os.getenv("DISPATCH_MATCH_RADIUS_KM", defaults.match_range_km)),
            route_range_km=float(os.getenv("DISPATCH_ROUTE_RADIUS_KM", defaults.route_range_km)),
        )

    def validate(self) -> None:
        if self.match_range_km <= 0 or self.route_range_km <= 0:
            raise ValueError("distance cutoffs must be > 0")


@dataclass(frozen=True)
class ScoringWeights:
    # --- Specialization ---
    specialization_bonus: float = 30.0
    specialization_penalty: float = -20.0

    # --- Reputation ---
    rating_multiplier: float = 10.0
    highly_rated_threshold: float = 4.5

    # --- Responsiveness (minutes) ---
    fast_response_max_min: float = 15.0
    fast_response_bonus: float = 15.0
    slow_response_min: float = 30.0
    slow_response_penalty: float = -10.0

    # --- Workload (current_load / max_load) ---
    low_workload_ratio: float = 0.4
    low_workload_bonus: float = 10.0
    high_workload_ratio: float = 0.8
    high_workload_penalty: float = -10.0

    # --- Emergencies ---
    emergency_response_max_min: float = 10.0
    emergency_bonus: float = 20.0


@dataclass(frozen=True)
class DispatchPolicy:
    """
    Central configuration for collector matching thresholds.
    """

    cutoffs: DistanceCutoff = field(default_factory=DistanceCutoff)
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    # --- Broadcast ---
    # How many of the ranked collectors get notified for one request.
    broadcast_top_n: int = 3

    # Decimal places kept on MatchResult.distance_km
    distance_precision: int = 2

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        self.cutoffs.validate()

        if self.broadcast_top_n < 1:
            raise ValueError("broadcast_top_n must be >= 1")

        if self.weights.low_workload_ratio > self.weights.high_workload_ratio:
            raise ValueError("low_workload_ratio must be <= high_workload_ratio")


def default_dispatch_policy() -> DispatchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DispatchPolicy()
    p.validate()
    return p


def env_dispatch_policy() -> DispatchPolicy:
    """
    Default policy with radii taken from the environment.
    """
    p = DispatchPolicy(cutoffs=DistanceCutoff.from_env())
    p.validate()
    return p
