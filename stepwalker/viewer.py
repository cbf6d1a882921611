"""Render planned and walked paths on an interactive map."""

from typing import Optional

import folium
from folium import plugins

from .events import EventDispatcher, PathEvent, PositionEvent
from .models import Location


class PathRecorder:
    """Keeps the latest planned/walked paths and every reported position"""

    def __init__(self, events: Optional[EventDispatcher] = None):
        self.planned: list[Location] = []
        self.walked: list[Location] = []
        self.positions: list[tuple[float, float]] = []
        if events:
            self.attach(events)

    def attach(self, events: EventDispatcher):
        events.subscribe(PathEvent, self.on_path)
        events.subscribe(PositionEvent, self.on_position)

    def on_path(self, event: PathEvent):
        if event.is_calculated:
            self.planned = list(event.points)
        else:
            self.walked = list(event.points)

    def on_position(self, event: PositionEvent):
        self.positions.append((event.lat, event.lon))


def create_map(planned: list[Location], walked: list[Location],
               start: Optional[Location] = None,
               target: Optional[Location] = None) -> folium.Map:
    """Create a map with the planned waypoints and the steps actually walked."""
    all_points = list(planned) + list(walked)
    if start:
        all_points.append(start)
    if target:
        all_points.append(target)
    if not all_points:
        raise ValueError("Nothing to draw")

    center_lat = sum(p.lat for p in all_points) / len(all_points)
    center_lon = sum(p.lon for p in all_points) / len(all_points)
    m = folium.Map(location=[center_lat, center_lon], zoom_start=17,
                   tiles="CartoDB positron")

    planned_layer = folium.FeatureGroup(name="Planned path", show=True)
    walked_layer = folium.FeatureGroup(name="Walked path", show=True)

    if len(planned) > 1:
        folium.PolyLine(
            [[p.lat, p.lon] for p in planned],
            color="#3b82f6", weight=4, opacity=0.7, dash_array="6",
            tooltip=f"Planned ({len(planned)} waypoints)",
        ).add_to(planned_layer)
    for i, p in enumerate(planned):
        folium.CircleMarker(
            [p.lat, p.lon], radius=4, color="#3b82f6", fill=True,
            popup=folium.Popup(f"Waypoint {i}<br>{p.lat:.6f}, {p.lon:.6f}", max_width=200),
        ).add_to(planned_layer)

    if len(walked) > 1:
        folium.PolyLine(
            [[p.lat, p.lon] for p in walked],
            color="#ef4444", weight=3, opacity=0.9,
            tooltip=f"Walked ({len(walked)} steps)",
        ).add_to(walked_layer)

    planned_layer.add_to(m)
    walked_layer.add_to(m)

    if start:
        folium.Marker([start.lat, start.lon], popup="Start",
                      icon=folium.Icon(color="blue", icon="home")).add_to(m)
    if target:
        folium.Marker([target.lat, target.lon], popup="Target",
                      icon=folium.Icon(color="red", icon="flag")).add_to(m)

    folium.LayerControl().add_to(m)
    plugins.Fullscreen().add_to(m)
    return m
