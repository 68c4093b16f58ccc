"""
Purpose: Live road conditions consulted by the condition-aware travel model.
What it does:
- TrafficCell / WeatherState value objects
- TrafficProvider variants (static table with randomized refresh, live feed)
- ConditionModel: the lock-guarded owner of the traffic table and the single
  weather value for one dispatch context
- ConditionSnapshot: a frozen copy of both, read by one route plan

Rule: The refresh cadence belongs to an external scheduler. Nothing here
owns a clock or a background thread.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol

from .geo import Coordinates, cell_key

logger = logging.getLogger(__name__)


class CongestionLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WeatherCondition(str, Enum):
    CLEAR = "clear"
    RAIN = "rain"
    HEAVY_RAIN = "heavy_rain"
    FOG = "fog"


class SafetyRisk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class TrafficCell:
    """
    Congestion snapshot for one ~111 m grid cell.
    delay_factor multiplies distances, average_speed_kmh replaces the base speed.
    """
    coordinates: Coordinates
    congestion_level: CongestionLevel
    average_speed_kmh: float
    delay_factor: float = 1.0

    @property
    def key(self) -> str:
        return cell_key(self.coordinates)


@dataclass(frozen=True)
class WeatherState:
    condition: WeatherCondition = WeatherCondition.CLEAR
    speed_reduction_pct: float = 0.0
    visibility_impact_pct: float = 0.0
    safety_risk: SafetyRisk = SafetyRisk.LOW

    def validate(self) -> None:
        if not 0 <= self.speed_reduction_pct < 100:
            raise ValueError("speed_reduction_pct must be within 0..100 (exclusive)")
        if not 0 <= self.visibility_impact_pct <= 100:
            raise ValueError("visibility_impact_pct must be within 0..100")


# Speed / delay a cell takes on when refresh flips its congestion level.
REFRESH_PROFILES = {
    CongestionLevel.HIGH: (20.0, 1.8),
    CongestionLevel.MEDIUM: (30.0, 1.4),
}

# Chance per refresh call that a cell flips level.
REFRESH_TOGGLE_THRESHOLD = 0.8


class TrafficProviderType(str, Enum):
    STATIC_TABLE = "static_table"
    LIVE_FEED = "live_feed"


class TrafficFeed(Protocol):
    def fetch_cells(self) -> List[TrafficCell]:
        ...


class StaticTrafficProvider:
    """
    In-memory traffic table. refresh() stands in for a real feed by randomly
    escalating / de-escalating congestion cell by cell.
    """
    provider_type = TrafficProviderType.STATIC_TABLE

    def __init__(self, cells: Optional[Iterable[TrafficCell]] = None, rng: Optional[random.Random] = None):
        self._cells: Dict[str, TrafficCell] = {}
        self._rng = rng or random.Random()
        for cell in cells or []:
            self._cells[cell.key] = cell

    def lookup(self, key: str) -> Optional[TrafficCell]:
        return self._cells.get(key)

    def cells(self) -> List[TrafficCell]:
        return list(self._cells.values())

    def put(self, cell: TrafficCell) -> None:
        self._cells[cell.key] = cell

    def fetch(self) -> None:
        # nothing external: the table changes in place
        return None

    def apply(self, fetched=None) -> int:
        """
        Each cell has a 20% chance of toggling: high -> medium, anything else -> high.
        Returns the number of cells that changed.
        """
        changed = 0
        for key, cell in list(self._cells.items()):
            if self._rng.random() <= REFRESH_TOGGLE_THRESHOLD:
                continue

            if cell.congestion_level == CongestionLevel.HIGH:
                new_level = CongestionLevel.MEDIUM
            else:
                new_level = CongestionLevel.HIGH

            speed, delay = REFRESH_PROFILES[new_level]
            self._cells[key] = replace(
                cell,
                congestion_level=new_level,
                average_speed_kmh=speed,
                delay_factor=delay,
            )
            changed += 1

        return changed

    def refresh(self) -> int:
        return self.apply(self.fetch())


class LiveFeedTrafficProvider:
    """
    Traffic table backed by an external feed. fetch() does the blocking feed
    call, apply() swaps the whole table for what it returned. On failure the
    previous table is kept and the feed error propagates to the scheduler.
    """
    provider_type = TrafficProviderType.LIVE_FEED

    def __init__(self, feed: TrafficFeed):
        self._feed = feed
        self._cells: Dict[str, TrafficCell] = {}

    def lookup(self, key: str) -> Optional[TrafficCell]:
        return self._cells.get(key)

    def cells(self) -> List[TrafficCell]:
        return list(self._cells.values())

    def put(self, cell: TrafficCell) -> None:
        self._cells[cell.key] = cell

    def fetch(self) -> List[TrafficCell]:
        try:
            return self._feed.fetch_cells()
        except Exception:
            logger.warning("Traffic feed refresh failed, keeping %d cached cells", len(self._cells))
            raise

    def apply(self, fetched: List[TrafficCell]) -> int:
        self._cells = {cell.key: cell for cell in fetched}
        return len(self._cells)

    def refresh(self) -> int:
        return self.apply(self.fetch())


@dataclass(frozen=True)
class ConditionSnapshot:
    """
    Point-in-time copy of the traffic table and the weather, with the same
    read API as ConditionModel. One route plan reads one snapshot.
    """
    cells: Dict[str, TrafficCell]
    weather: WeatherState

    def lookup_traffic(self, coordinates: Coordinates) -> Optional[TrafficCell]:
        return self.cells.get(cell_key(coordinates))

    def traffic_cells(self) -> List[TrafficCell]:
        return list(self.cells.values())

    def snapshot(self) -> ConditionSnapshot:
        return self


class ConditionModel:
    """
    Process-wide conditions for one dispatch context.

    Reads from matching / routing and writes from refresh_traffic() or
    set_weather() may interleave across threads, so every access goes
    through the same re-entrant lock. Feed I/O never runs under it.
    """

    def __init__(self, provider=None, weather: Optional[WeatherState] = None):
        self._provider = provider if provider is not None else StaticTrafficProvider()
        self._weather = weather or WeatherState()
        self._weather.validate()
        self._lock = threading.RLock()

    @property
    def provider_type(self) -> TrafficProviderType:
        return self._provider.provider_type

    @property
    def weather(self) -> WeatherState:
        with self._lock:
            return self._weather

    def set_weather(self, state: WeatherState) -> None:
        state.validate()
        with self._lock:
            self._weather = state
        logger.info("Weather set to %s (-%s%% speed)", state.condition.value, state.speed_reduction_pct)

    def lookup_traffic(self, coordinates: Coordinates) -> Optional[TrafficCell]:
        with self._lock:
            return self._provider.lookup(cell_key(coordinates))

    def traffic_cells(self) -> List[TrafficCell]:
        with self._lock:
            return self._provider.cells()

    def put_traffic(self, cell: TrafficCell) -> None:
        with self._lock:
            self._provider.put(cell)

    def snapshot(self) -> ConditionSnapshot:
        with self._lock:
            return ConditionSnapshot(
                cells={cell.key: cell for cell in self._provider.cells()},
                weather=self._weather,
            )

    def refresh_traffic(self) -> int:
        fetched = self._provider.fetch()
        with self._lock:
            changed = self._provider.apply(fetched)
        logger.debug("Traffic refresh (%s) touched %d cells", self.provider_type.value, changed)
        return changed


def default_nairobi_traffic() -> List[TrafficCell]:
    """
    Seed table for the main Nairobi hot spots.
    """
    return [
        # CBD
        TrafficCell(Coordinates(-1.292, 36.821), CongestionLevel.HIGH, 20.0, 1.8),
        # Westlands
        TrafficCell(Coordinates(-1.285, 36.820), CongestionLevel.MEDIUM, 35.0, 1.3),
        # Kilimani
        TrafficCell(Coordinates(-1.280, 36.815), CongestionLevel.MEDIUM, 30.0, 1.4),
        # Upper Hill
        TrafficCell(Coordinates(-1.265, 36.810), CongestionLevel.HIGH, 25.0, 1.6),
    ]
