"""Walking strategies.

RoutedStrategy asks for walking directions and then walks the route in short
randomized steps, measuring after every step how far and how fast the agent
really moved and carrying any shortfall into the next step.  When directions
are rate limited it hands the whole walk over to StraightLineStrategy.

Both strategies share one entry point:

    ack = await strategy.walk(target, callback, session, cancel_event)

`callback` is an optional coroutine function awaited after every step.
`cancel_event` is anything with `is_set()`; it is checked between steps and
aborts the walk with WalkCancelledError.
"""

import math
import random
import time
from typing import Awaitable, Callable, Optional

from .directions import DirectionsService
from .errors import WalkCancelledError
from .events import EventDispatcher, PathEvent, PositionEvent
from .geo import bearing_to, destination_point, distance_between
from .models import Location, StepPlan

ARRIVAL_DISTANCE = 10  # meters - stop stepping once a step starts this close to the target
WAYPOINT_REACHED_DISTANCE = 2  # meters
SLOW_DOWN_DISTANCE = 40  # meters from target where the approach speed kicks in
SLOW_DOWN_SPEED = 10 / 3.6  # m/s

StepCallback = Optional[Callable[[], Awaitable]]


def randomize_step_length(step_length: float, rng=random) -> float:
    """Pick a step length within +/-30% of the given one, at millimeter resolution"""
    low = math.ceil(step_length * 1000 * 0.7)
    high = math.floor(step_length * 1000 * 1.3)
    if high < max(low, 1):
        # Below millimeter resolution
        return step_length
    return rng.randint(max(low, 1), high) / 1000


def filter_waypoints(points: list[Location], current: Location,
                     min_spacing: float) -> list[Location]:
    """Drop waypoints that crowd their successor, and a leading echo of `current`.

    Of two consecutive points closer than `min_spacing` the earlier one goes.
    Removal can bring new neighbours together on a zig-zag path, so passes
    repeat until no crowded pair is left.  `points` is filtered in place and
    returned.
    """
    while True:
        too_near = [i for i in range(len(points) - 1)
                    if distance_between(points[i], points[i + 1]) < min_spacing]
        if not too_near:
            break
        for i in reversed(too_near):
            del points[i]

    # Directions usually start with the origin itself
    if points and points[0].same_point(current):
        del points[0]
    return points


def current_location(client) -> Location:
    return Location(client.current_latitude, client.current_longitude,
                    client.current_altitude)


def check_cancelled(cancel_event):
    if cancel_event is not None and cancel_event.is_set():
        raise WalkCancelledError("Walk cancelled")


class StraightLineStrategy:
    """Walks directly at the target, one randomized step per position update"""

    def __init__(self, events: Optional[EventDispatcher] = None,
                 clock: Callable[[], float] = time.monotonic, rng=None):
        self.events = events
        self.clock = clock
        self.rng = rng or random.Random()

    async def walk(self, target: Location, callback: StepCallback, session,
                   cancel_event=None):
        client = session.client
        events = self.events or session.events
        settings = session.settings
        step_length = settings["default_step_length"]
        speed_kmh = settings["walking_speed_kmh"]

        current = current_location(client)
        session.logger.log("Walking straight to target", {
            "lat": target.lat, "lon": target.lon,
            "distance_m": round(distance_between(current, target), 1),
        })

        ack = None
        sent_at = None
        while True:
            check_cancelled(cancel_event)
            if settings["use_walking_speed_variant"]:
                speed_kmh = session.variant_random(speed_kmh)
            speed = speed_kmh / 3.6
            # First step covers one second of walking
            elapsed = self.clock() - sent_at if sent_at is not None else 1.0

            remaining = distance_between(current, target)
            distance = min(remaining,
                           max(randomize_step_length(step_length, self.rng), elapsed * speed))
            step = destination_point(current, distance, bearing_to(current, target))

            sent_at = self.clock()
            ack = await client.update_player_location(step.lat, step.lon, step.alt)
            events.send(PositionEvent(step.lat, step.lon))
            if callback is not None:
                await callback()

            current = current_location(client)
            if distance_between(current, target) < WAYPOINT_REACHED_DISTANCE:
                break
        return ack


class RoutedStrategy:
    """Walks a routed path with closed-loop correction of speed and distance.

    Holds per-agent state between walks (current walking speed, directions
    service, fallback strategy), so each agent needs its own instance and must
    not run two walks on it at once.
    """

    def __init__(self, events: Optional[EventDispatcher] = None,
                 directions: Optional[DirectionsService] = None,
                 clock: Callable[[], float] = time.monotonic, rng=None):
        self.events = events
        self.clock = clock
        self.rng = rng or random.Random()
        self.current_walking_speed = 0.0  # km/h, 0 until the first walk starts
        self.walked_points: list[Location] = []
        self._directions = directions
        self._fallback: Optional[StraightLineStrategy] = None

    def _get_directions_instance(self, session) -> DirectionsService:
        if self._directions is None:
            self._directions = DirectionsService(session.settings, logger=session.logger)
        return self._directions

    async def _redirect_to_straight_line(self, target, callback, session, cancel_event):
        if self._fallback is None:
            self._fallback = StraightLineStrategy(self.events, clock=self.clock, rng=self.rng)
        return await self._fallback.walk(target, callback, session, cancel_event)

    async def walk(self, target: Location, callback: StepCallback, session,
                   cancel_event=None):
        """Walk to `target`, returning the last position acknowledgement"""
        directions = self._get_directions_instance(session)
        events = self.events or session.events
        logger = session.logger

        current = current_location(session.client)
        result = directions.get_directions(current, [], target)
        if result.over_query_limit:
            logger.log("Directions quota exceeded, falling back to straight line walking")
            return await self._redirect_to_straight_line(target, callback, session, cancel_event)

        min_spacing = randomize_step_length(session.settings["default_step_length"], self.rng)
        logger.debug("Filtering waypoints", {
            "received": len(result.waypoints), "min_spacing_m": round(min_spacing, 3),
        })
        points = filter_waypoints(result.waypoints, current, min_spacing)
        events.send(PathEvent(is_calculated=True, points=list(points)))

        self.walked_points = []
        ack = await self._walk_waypoints(points, target, callback, session, cancel_event)

        events.send(PathEvent(is_calculated=False, points=list(self.walked_points)))
        return ack

    async def _send(self, client, plan: StepPlan):
        self.walked_points.append(plan.location)
        loc = plan.location
        return await client.update_player_location(loc.lat, loc.lon, loc.alt)

    async def _walk_waypoints(self, points: list[Location], target: Location,
                              callback: StepCallback, session, cancel_event):
        client = session.client
        events = self.events or session.events
        logger = session.logger
        settings = session.settings
        step_length = settings["default_step_length"]
        use_variant = settings["use_walking_speed_variant"]

        legs = list(points)
        if not legs or not legs[-1].same_point(target):
            legs.append(target)

        ack = None
        for waypoint in legs:
            check_cancelled(cancel_event)
            logger.debug("Leading to next waypoint", {"lat": waypoint.lat, "lon": waypoint.lon})
            current = current_location(client)

            if self.current_walking_speed <= 0:
                self.current_walking_speed = settings["walking_speed_kmh"]
            if use_variant:
                self.current_walking_speed = session.variant_random(self.current_walking_speed)
            speed = self.current_walking_speed / 3.6

            # The first step covers at least one second of walking
            bearing = bearing_to(current, waypoint)
            distance = max(randomize_step_length(step_length, self.rng), speed)
            plan = StepPlan(destination_point(current, distance, bearing), bearing, distance, speed)
            logger.debug("Next step", {"distance_m": round(distance, 2), "bearing": round(bearing, 2)})

            previous = current
            sent_at = self.clock()
            ack = await self._send(client, plan)

            # Measured from where the step started, before its effect is observed
            distance_to_target = distance_between(current, target)
            if distance_to_target < ARRIVAL_DISTANCE:
                logger.debug("Target within arrival distance", {
                    "distance_m": round(distance_to_target, 2)})
                break

            while True:
                check_cancelled(cancel_event)

                elapsed = self.clock() - sent_at
                current = current_location(client)
                to_waypoint = distance_between(current, waypoint)
                to_target = distance_between(current, target)

                actual_speed = plan.distance / elapsed if elapsed > 0 else math.inf
                actual_distance = distance_between(previous, current)
                speed_raise = max(speed - actual_speed, 0.0)
                distance_raise = max(plan.distance - actual_distance, 0.0)
                logger.debug("Step measured", {
                    "elapsed_s": round(elapsed, 3),
                    "to_waypoint_m": round(to_waypoint, 3),
                    "to_target_m": round(to_target, 3),
                    "speed_mps": [round(actual_speed, 2), round(speed, 2)],
                    "distance_m": [round(actual_distance, 2), round(plan.distance, 2)],
                    "speed_raise": round(speed_raise, 2),
                    "distance_raise": round(distance_raise, 2),
                })

                if use_variant:
                    self.current_walking_speed = session.variant_random(self.current_walking_speed)
                    speed = self.current_walking_speed / 3.6
                speed += speed_raise
                if to_target < SLOW_DOWN_DISTANCE and speed > SLOW_DOWN_SPEED:
                    speed = SLOW_DOWN_SPEED

                # Never step past the waypoint or the target
                bearing = bearing_to(current, waypoint)
                distance = min(
                    min(to_target, to_waypoint),
                    max(randomize_step_length(step_length, self.rng) + distance_raise,
                        elapsed * speed) + distance_raise,
                )
                plan = StepPlan(destination_point(current, distance, bearing),
                                bearing, distance, speed)
                logger.debug("Next step", {
                    "distance_m": round(distance, 2), "bearing": round(bearing, 2),
                    "speed_mps": round(speed, 2),
                })

                previous = current
                sent_at = self.clock()
                ack = await self._send(client, plan)
                events.send(PositionEvent(plan.location.lat, plan.location.lon))

                if callback is not None:
                    await callback()

                here = current_location(client)
                if distance_between(here, waypoint) < WAYPOINT_REACHED_DISTANCE:
                    break
                # Steps are clamped to the target, so standing on it means no further progress
                if distance_between(here, target) < WAYPOINT_REACHED_DISTANCE:
                    logger.debug("Target reached before waypoint", {
                        "to_waypoint_m": round(distance_between(here, waypoint), 2)})
                    return ack

            events.send(PositionEvent(waypoint.lat, waypoint.lon))

        return ack
