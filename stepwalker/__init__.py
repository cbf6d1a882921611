"""StepWalker - human-like stepwise walking between coordinates."""

from .config import CONFIG
from .models import Location, StepPlan, DirectionsResult, stringify_path
from .errors import StepWalkerError, WalkCancelledError, PositionUpdateError, ConfigError
from .logger import Logger
from .events import EventDispatcher, PathEvent, PositionEvent
from .geo import (
    haversine_distance,
    bearing_between,
    distance_between,
    bearing_to,
    destination_point,
)
from .session import Session, load_settings
from .client import SimulatedClient, HttpPositionClient
from .directions import DirectionsService
from .strategies import (
    RoutedStrategy,
    StraightLineStrategy,
    filter_waypoints,
    randomize_step_length,
)
from .viewer import PathRecorder, create_map
from .live_server import LiveMapServer
from .__main__ import main

__all__ = [
    "CONFIG",
    "Location",
    "StepPlan",
    "DirectionsResult",
    "stringify_path",
    "StepWalkerError",
    "WalkCancelledError",
    "PositionUpdateError",
    "ConfigError",
    "Logger",
    "EventDispatcher",
    "PathEvent",
    "PositionEvent",
    "haversine_distance",
    "bearing_between",
    "distance_between",
    "bearing_to",
    "destination_point",
    "Session",
    "load_settings",
    "SimulatedClient",
    "HttpPositionClient",
    "DirectionsService",
    "RoutedStrategy",
    "StraightLineStrategy",
    "filter_waypoints",
    "randomize_step_length",
    "PathRecorder",
    "create_map",
    "LiveMapServer",
    "main",
]
