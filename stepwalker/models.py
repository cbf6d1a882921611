"""Data classes for StepWalker."""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    alt: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Location":
        return cls(**d)

    def same_point(self, other: "Location") -> bool:
        """Exact lat/lon match, ignoring altitude"""
        return self.lat == other.lat and self.lon == other.lon


@dataclass
class StepPlan:
    """One planned hop: where to report next and how it was derived"""
    location: Location
    bearing: float  # degrees
    distance: float  # meters
    speed: float  # m/s


@dataclass
class DirectionsResult:
    """Outcome of a routing request"""
    status: str
    waypoints: list[Location]

    @property
    def over_query_limit(self) -> bool:
        return self.status == "OVER_QUERY_LIMIT"


def stringify_path(points: list[Location]) -> str:
    """Human-readable path, one `{lat: .., lng: ..}` entry per point"""
    return ",\n".join(f"{{lat: {p.lat}, lng: {p.lon}}}" for p in points)
