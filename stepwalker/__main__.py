#!/usr/bin/env python3
"""
StepWalker - walk an agent to a destination in small, human-like steps

Usage:
    python -m stepwalker DEST_LAT DEST_LON --lat LAT --lon LON [options]

Options:
    --lat LAT          Starting latitude
    --lon LON          Starting longitude
    --config FILE      JSON file with setting overrides
    --api-key KEY      Google Directions API key (or GOOGLE_DIRECTIONS_API_KEY)
    --speed KMH        Walking speed in km/h
    --step METERS      Default step length in meters
    --no-variant       Walk at a constant speed
    --endpoint URL     Report positions to this HTTP endpoint instead of simulating
    --latency SEC      Simulated delay of every position update (default: 0.5)
    --timeout SEC      Cancel the walk after this many seconds
    --html FILE        Save a map of the planned and walked paths
    --live             Show the walk on a live map in the browser
    --log FILE         Append log lines to FILE
    -v, --verbose      Log every step
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from .client import HttpPositionClient, SimulatedClient
from .errors import StepWalkerError, WalkCancelledError
from .events import EventDispatcher
from .geo import distance_between
from .live_server import LiveMapServer
from .logger import Logger
from .models import Location
from .session import Session, load_settings
from .strategies import RoutedStrategy, current_location
from .viewer import PathRecorder, create_map


def build_settings(args) -> dict:
    settings = load_settings(args.config) if args.config else {}
    api_key = args.api_key or os.environ.get("GOOGLE_DIRECTIONS_API_KEY")
    if api_key:
        settings["directions_api_key"] = api_key
    if args.speed is not None:
        settings["walking_speed_kmh"] = args.speed
    if args.step is not None:
        settings["default_step_length"] = args.step
    if args.no_variant:
        settings["use_walking_speed_variant"] = False
    if args.endpoint:
        settings["position_endpoint"] = args.endpoint
    return settings


async def run_walk(strategy: RoutedStrategy, session: Session, target: Location,
                   timeout: float = None):
    """Walk to target, cancelling after `timeout` seconds if given"""
    cancel_event = asyncio.Event()
    if timeout:
        asyncio.get_running_loop().call_later(timeout, cancel_event.set)

    steps = 0

    async def on_step():
        nonlocal steps
        steps += 1
        if steps % 10 == 0:
            here = current_location(session.client)
            session.logger.log(f"{steps} steps", {
                "remaining_m": round(distance_between(here, target), 1)})

    ack = await strategy.walk(target, on_step, session, cancel_event)
    return ack, steps


def main():
    parser = argparse.ArgumentParser(
        description="Walk an agent to a destination in small, human-like steps"
    )
    parser.add_argument("dest_lat", type=float, help="Destination latitude")
    parser.add_argument("dest_lon", type=float, help="Destination longitude")
    parser.add_argument("--lat", type=float, required=True, help="Starting latitude")
    parser.add_argument("--lon", type=float, required=True, help="Starting longitude")
    parser.add_argument("--config", help="JSON file with setting overrides")
    parser.add_argument("--api-key", help="Google Directions API key")
    parser.add_argument("--speed", type=float, help="Walking speed in km/h")
    parser.add_argument("--step", type=float, help="Default step length in meters")
    parser.add_argument("--no-variant", action="store_true", help="Walk at a constant speed")
    parser.add_argument("--endpoint", help="HTTP endpoint receiving position updates")
    parser.add_argument("--latency", type=float, default=0.5,
                        help="Simulated position update delay in seconds (default: 0.5)")
    parser.add_argument("--timeout", type=float, help="Cancel the walk after SEC seconds")
    parser.add_argument("--html", help="Save a map of the walk to this HTML file")
    parser.add_argument("--live", action="store_true", help="Show a live map in the browser")
    parser.add_argument("--log", help="Append log lines to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step")

    args = parser.parse_args()

    try:
        settings = build_settings(args)
    except (OSError, ValueError) as e:
        print(f"Error loading settings: {e}")
        return 1

    start = Location(args.lat, args.lon)
    target = Location(args.dest_lat, args.dest_lon)

    live_server = None
    if args.live:
        live_server = LiveMapServer()
        live_server.start()

    logger = Logger(args.log, callback=live_server.send_log if live_server else None,
                    verbose=args.verbose)
    events = EventDispatcher()
    recorder = PathRecorder(events)
    if live_server:
        live_server.attach(events)

    if settings.get("position_endpoint"):
        client = HttpPositionClient(start, endpoint=settings["position_endpoint"])
    else:
        client = SimulatedClient(start, latency=args.latency)

    session = Session(client, settings=settings, events=events, logger=logger)
    strategy = RoutedStrategy(events)

    logger.log("Starting walk", {
        "from": [start.lat, start.lon], "to": [target.lat, target.lon],
        "distance_m": round(distance_between(start, target), 1),
    })

    exit_code = 0
    try:
        ack, steps = asyncio.run(run_walk(strategy, session, target, args.timeout))
        here = current_location(client)
        logger.log(f"Walk finished after {steps} steps", {
            "position": [here.lat, here.lon],
            "remaining_m": round(distance_between(here, target), 1),
            "ack": ack,
        })
    except WalkCancelledError:
        logger.log("Walk cancelled")
        exit_code = 1
    except StepWalkerError as e:
        logger.log(f"Walk failed: {e}", e.to_dict())
        exit_code = 1
    except KeyboardInterrupt:
        logger.log("Walk interrupted")
        exit_code = 1

    if args.html and (recorder.planned or recorder.walked):
        m = create_map(recorder.planned, recorder.walked, start=start, target=target)
        m.save(args.html)
        print(f"\nMap saved to: {args.html}")
        print(f"Open in browser: file://{Path(args.html).absolute()}")

    if live_server:
        live_server.stop()
    logger.close()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
