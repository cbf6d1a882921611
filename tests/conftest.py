import random

import pytest

from stepwalker import (
    DirectionsResult,
    EventDispatcher,
    Location,
    Logger,
    Session,
    SimulatedClient,
    destination_point,
)


START = Location(51.5007, -0.1246, 12.0)


def north_of(origin: Location, meters: float) -> Location:
    return destination_point(origin, meters, 0)


class FakeClock:
    """Monotonic clock that only moves when told to"""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TimedClient(SimulatedClient):
    """Each update takes `step_time` seconds and moves `progress` of the way"""

    def __init__(self, start: Location, clock: FakeClock, step_time: float = 1.0,
                 progress: float = 1.0):
        super().__init__(start)
        self.clock = clock
        self.step_time = step_time
        self.progress = progress
        self.sent: list[Location] = []

    async def update_player_location(self, lat, lon, alt=None):
        self.clock.now += self.step_time
        self.sent.append(Location(lat, lon, alt))
        here = self.location
        lat = here.lat + (lat - here.lat) * self.progress
        lon = here.lon + (lon - here.lon) * self.progress
        return await super().update_player_location(lat, lon, alt)


class StubDirections:
    """Directions service returning a canned result"""

    def __init__(self, status="OK", waypoints=None):
        self.status = status
        self.waypoints = waypoints or []
        self.calls = []

    def get_directions(self, origin, via, destination):
        self.calls.append((origin, via, destination))
        return DirectionsResult(status=self.status, waypoints=list(self.waypoints))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_session():
    def _make(client, **settings):
        defaults = {"use_walking_speed_variant": False}
        defaults.update(settings)
        return Session(client, settings=defaults, events=EventDispatcher(),
                       logger=Logger(verbose=True), rng=random.Random(7))
    return _make
