"""Per-agent session: settings, position client, notifications and logging."""

import json
import random
from typing import Optional

from .config import CONFIG
from .errors import ConfigError
from .events import EventDispatcher
from .logger import Logger


def load_settings(path: str) -> dict:
    """Load setting overrides from a JSON file.

    Only keys already present in CONFIG are accepted.
    """
    with open(path) as f:
        data = json.load(f)
    unknown = set(data) - set(CONFIG)
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {sorted(unknown)}")
    return data


class Session:
    """Everything one agent needs to walk: who reports positions, and how to walk"""

    def __init__(self, client, settings: Optional[dict] = None,
                 events: Optional[EventDispatcher] = None,
                 logger: Optional[Logger] = None,
                 rng: Optional[random.Random] = None):
        self.client = client
        self.settings = dict(CONFIG)
        if settings:
            unknown = set(settings) - set(CONFIG)
            if unknown:
                raise ConfigError(f"Unknown settings: {sorted(unknown)}")
            self.settings.update(settings)
        self.events = events or EventDispatcher()
        self.logger = logger or Logger()
        self.rng = rng or random.Random()

    def variant_random(self, current_speed: float) -> float:
        """Nudge a km/h walking speed up or down, staying within the configured variant.

        Five calls in nine leave the speed untouched.
        """
        if self.rng.randint(1, 9) <= 5:
            return current_speed

        base = self.settings["walking_speed_kmh"]
        variant = self.settings["walking_speed_variant"]
        delta = self.rng.random() * (0.02 - 0.001) + 0.001
        if self.rng.randint(1, 9) > 5:
            new_speed = min(current_speed + delta, base + variant)
        else:
            new_speed = max(current_speed - delta, base - variant)

        if round(new_speed, 2) != round(current_speed, 2):
            self.logger.debug("Walking speed changed", {
                "old_kmh": round(current_speed, 2), "new_kmh": round(new_speed, 2),
            })
        return new_speed
