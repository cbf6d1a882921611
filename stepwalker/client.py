"""Position reporting clients.

A client holds the agent's authoritative position and accepts position updates.
Strategies only rely on:

    current_latitude / current_longitude / current_altitude   (properties)
    await update_player_location(lat, lon, alt)                (returns the ack)
"""

import asyncio
import time
from typing import Optional

import requests

from .config import CONFIG
from .errors import PositionUpdateError
from .models import Location


class SimulatedClient:
    """In-memory client: every update is accepted and becomes the new position"""

    def __init__(self, start: Location, latency: float = 0.0):
        self.location = start
        self.latency = latency
        self.updates: list[Location] = []

    @property
    def current_latitude(self) -> float:
        return self.location.lat

    @property
    def current_longitude(self) -> float:
        return self.location.lon

    @property
    def current_altitude(self) -> Optional[float]:
        return self.location.alt

    async def update_player_location(self, lat: float, lon: float,
                                     alt: Optional[float] = None) -> dict:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        self.location = Location(lat, lon, alt)
        self.updates.append(self.location)
        return {"lat": lat, "lon": lon, "alt": alt, "timestamp": time.time()}

    def get_status(self) -> str:
        return f"Simulated ({len(self.updates)} updates)"


class HttpPositionClient:
    """Reports positions by POSTing JSON to an HTTP endpoint.

    The endpoint's JSON response is the acknowledgement. If it echoes `lat`/`lon`
    those become the authoritative position, otherwise the sent values do.
    """

    def __init__(self, start: Location, endpoint: Optional[str] = None,
                 timeout: Optional[float] = None,
                 http: Optional[requests.Session] = None):
        self.location = start
        self.endpoint = endpoint or CONFIG["position_endpoint"]
        if not self.endpoint:
            raise ValueError("HttpPositionClient requires an endpoint URL")
        self.timeout = timeout or CONFIG["request_timeout"]
        self.http = http or requests.Session()
        self.consecutive_failures = 0

    @property
    def current_latitude(self) -> float:
        return self.location.lat

    @property
    def current_longitude(self) -> float:
        return self.location.lon

    @property
    def current_altitude(self) -> Optional[float]:
        return self.location.alt

    def _post(self, payload: dict) -> dict:
        try:
            response = self.http.post(self.endpoint, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            self.consecutive_failures += 1
            raise PositionUpdateError(f"Position update failed: {e}",
                                      details={"endpoint": self.endpoint}) from e

    async def update_player_location(self, lat: float, lon: float,
                                     alt: Optional[float] = None) -> dict:
        payload = {"lat": lat, "lon": lon, "alt": alt}
        ack = await asyncio.to_thread(self._post, payload)
        self.consecutive_failures = 0
        self.location = Location(
            lat=ack.get("lat", lat),
            lon=ack.get("lon", lon),
            alt=ack.get("alt", alt),
        )
        return ack

    def get_status(self) -> str:
        if self.consecutive_failures == 0:
            return f"HTTP OK ({self.endpoint})"
        return f"HTTP: {self.consecutive_failures} consecutive failures"
