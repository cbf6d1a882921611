"""Walking directions via the Google Directions API with disk caching."""

import hashlib
import json
import os
import time
from typing import Optional

import requests

from .config import CONFIG
from .logger import Logger
from .models import DirectionsResult, Location


def _latlng(loc: Location) -> str:
    return f"{loc.lat},{loc.lon}"


def parse_waypoints(data: dict) -> list[Location]:
    """Extract the path from a directions response.

    Takes the start of every step of every leg, then the final end location.
    """
    points = []
    routes = data.get("routes") or []
    if not routes:
        return points
    legs = routes[0].get("legs") or []
    last_end = None
    for leg in legs:
        for step in leg.get("steps", []):
            start = step["start_location"]
            points.append(Location(lat=start["lat"], lon=start["lng"]))
            last_end = step["end_location"]
    if last_end:
        points.append(Location(lat=last_end["lat"], lon=last_end["lng"]))
    return points


class DirectionsService:
    """Fetch walking routes between two locations"""

    def __init__(self, settings: Optional[dict] = None, logger: Optional[Logger] = None,
                 http: Optional[requests.Session] = None):
        settings = settings or CONFIG
        self.url = settings["directions_url"]
        self.api_key = settings["directions_api_key"]
        self.cache_dir = settings["directions_cache_dir"]
        self.cache_max_age = settings["directions_cache_max_age"]
        self.timeout = settings["request_timeout"]
        self.logger = logger or Logger()
        self.http = http or requests.Session()

    def _cache_path(self, params: dict) -> Optional[str]:
        if not self.cache_dir:
            return None
        key = json.dumps({k: v for k, v in params.items() if k != "key"}, sort_keys=True)
        h = hashlib.md5(key.encode()).hexdigest()[:12]
        return os.path.join(self.cache_dir, f"directions_{h}.json")

    def _read_cache(self, path: Optional[str]) -> Optional[dict]:
        if not path or not os.path.exists(path):
            return None
        try:
            age = time.time() - os.path.getmtime(path)
            if age > self.cache_max_age:
                return None
            with open(path) as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError):
            return None

    def _write_cache(self, path: Optional[str], data: dict):
        if not path:
            return
        os.makedirs(self.cache_dir, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f)

    def get_directions(self, origin: Location, via: list[Location],
                       destination: Location) -> DirectionsResult:
        """Ask for a walking route from origin to destination passing through `via`.

        Transport errors are logged and reported as status REQUEST_FAILED with no
        waypoints, so the caller can still head straight for the destination.
        """
        if not self.api_key:
            self.logger.log("No directions API key configured, walking without waypoints")
            return DirectionsResult(status="REQUEST_DENIED", waypoints=[])

        params = {
            "origin": _latlng(origin),
            "destination": _latlng(destination),
            "mode": "walking",
            "key": self.api_key,
        }
        if via:
            params["waypoints"] = "|".join(f"via:{_latlng(p)}" for p in via)

        cache_path = self._cache_path(params)
        data = self._read_cache(cache_path)
        if data is not None:
            self.logger.debug("Using cached directions", {"path": cache_path})
        else:
            try:
                response = self.http.get(self.url, params=params, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
            except requests.RequestException as e:
                self.logger.log(f"Directions request error: {e}")
                return DirectionsResult(status="REQUEST_FAILED", waypoints=[])
            # Only successful routes are worth keeping
            if data.get("status") == "OK":
                self._write_cache(cache_path, data)

        status = data.get("status", "UNKNOWN_ERROR")
        waypoints = parse_waypoints(data)
        self.logger.debug("Directions received", {"status": status, "waypoints": len(waypoints)})
        return DirectionsResult(status=status, waypoints=waypoints)
