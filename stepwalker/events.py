"""Walk notifications: position changes and planned/walked paths."""

from dataclasses import dataclass, field
from typing import Callable

from .models import Location, stringify_path


@dataclass
class PositionEvent:
    lat: float
    lon: float


@dataclass
class PathEvent:
    """A planned (is_calculated=True) or actually walked path"""
    is_calculated: bool
    points: list[Location] = field(default_factory=list)

    @property
    def stringified_path(self) -> str:
        return stringify_path(self.points)


class EventDispatcher:
    """Fans events out to handlers subscribed per event type"""

    def __init__(self):
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable):
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type, handler: Callable):
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def send(self, event):
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)
