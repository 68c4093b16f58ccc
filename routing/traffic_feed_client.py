#Purpose: The traffic feed "adapter/client".
#Sole responsibility: talk to a congestion feed over HTTP and return TrafficCells.
#Encapsulates feed-specific details:
#URL construction
#timeouts / error handling
#parsing the JSON payload into our internal TrafficCell shape
#It should not contain routing rules or scoring.

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from .conditions import CongestionLevel, TrafficCell
from .geo import Coordinates

# Read the feed base URL from environment
# Example in .env:
# TRAFFIC_FEED_URL=http://localhost:8089
load_dotenv()
TRAFFIC_FEED_URL = os.getenv("TRAFFIC_FEED_URL")

logger = logging.getLogger(__name__)


class TrafficFeedError(Exception):
    """Raised when the traffic feed cannot be reached or returns garbage."""
    pass


class TrafficFeedClient:
    """
    Traffic feed adapter.

    Expects GET {base_url}/cells to answer:
        {
            "code": "Ok",
            "cells": [
                {"lat": -1.292, "lng": 36.821, "congestion": "high",
                 "average_speed": 20, "delay_factor": 1.8},
                ...
            ]
        }
    """

    def __init__(self, base_url: Optional[str] = None, timeout: int = 5, session: Optional[requests.Session] = None):
        self.base_url = base_url or TRAFFIC_FEED_URL
        self.timeout = timeout  # seconds to wait for the feed before giving up
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("Traffic feed URL not set. Please set TRAFFIC_FEED_URL in the .env file.")

    def fetch_cells(self) -> List[TrafficCell]:
        url = f"{self.base_url.rstrip('/')}/cells"

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TrafficFeedError(f"Traffic feed unreachable: {exc}") from exc

        if response.status_code != 200:
            raise TrafficFeedError(f"Traffic feed returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise TrafficFeedError("Traffic feed returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise TrafficFeedError(f"Traffic feed returned a JSON {type(data).__name__}, expected an object")

        if data.get("code") != "Ok":
            raise TrafficFeedError(f"Traffic feed error: {data.get('message', 'Unknown error')}")

        cells = [self._parse_cell(raw) for raw in data.get("cells", [])]
        logger.debug("Fetched %d traffic cells from %s", len(cells), url)
        return cells

    #----------------
    # Internal helpers
    #----------------
    def _parse_cell(self, raw: Dict[str, Any]) -> TrafficCell:
        try:
            delay_factor = max(1.0, float(raw.get("delay_factor", 1.0)))
            average_speed = float(raw["average_speed"])
            if average_speed <= 0:
                raise ValueError("average_speed must be > 0")
            return TrafficCell(
                coordinates=Coordinates(float(raw["lat"]), float(raw["lng"])),
                congestion_level=CongestionLevel(raw["congestion"]),
                average_speed_kmh=average_speed,
                delay_factor=delay_factor,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TrafficFeedError(f"Malformed traffic cell {raw!r}") from exc
