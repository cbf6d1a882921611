"""Live map of a walk in progress, served over HTTP and fed over WebSocket."""

import asyncio
import http.server
import json
import socketserver
import threading
import time
import webbrowser
from functools import partial
from typing import Optional

import websockets

from .config import CONFIG
from .events import EventDispatcher, PathEvent, PositionEvent


LIVE_MAP_HTML = '''<!DOCTYPE html>
<html>
<head>
    <title>StepWalker Live</title>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css" />
    <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
    <style>
        body { margin: 0; font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; }
        #map { position: absolute; top: 0; bottom: 0; left: 0; right: 360px; }
        #logs { position: absolute; top: 0; bottom: 0; right: 0; width: 360px; overflow-y: auto;
                background: #1e293b; color: #e2e8f0; font-family: "SF Mono", Monaco, monospace;
                font-size: 12px; padding: 12px; box-sizing: border-box; }
        .log-entry { margin-bottom: 6px; line-height: 1.4; }
        .log-entry .data { color: #38bdf8; }
    </style>
</head>
<body>
    <div id="map"></div>
    <div id="logs"></div>
    <script>
        var map = L.map('map').setView([0, 0], 2);
        L.tileLayer('https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png', {
            attribution: '&copy; OpenStreetMap contributors'
        }).addTo(map);

        var marker = null;
        var trail = L.polyline([], {color: '#ef4444', weight: 3}).addTo(map);
        var planned = L.polyline([], {color: '#3b82f6', weight: 4, dashArray: '6'}).addTo(map);
        var walked = L.polyline([], {color: '#22c55e', weight: 3}).addTo(map);

        function addLog(message, data) {
            var el = document.createElement('div');
            el.className = 'log-entry';
            el.textContent = message;
            if (data) {
                var d = document.createElement('div');
                d.className = 'data';
                d.textContent = JSON.stringify(data);
                el.appendChild(d);
            }
            var logs = document.getElementById('logs');
            logs.appendChild(el);
            logs.scrollTop = logs.scrollHeight;
        }

        function connect() {
            var ws = new WebSocket('ws://localhost:{{WS_PORT}}');
            ws.onmessage = function(event) {
                var msg = JSON.parse(event.data);
                if (msg.type === 'position') {
                    var ll = [msg.data.lat, msg.data.lon];
                    if (!marker) {
                        marker = L.circleMarker(ll, {radius: 7, color: '#ef4444'}).addTo(map);
                        map.setView(ll, 18);
                    }
                    marker.setLatLng(ll);
                    trail.addLatLng(ll);
                } else if (msg.type === 'path') {
                    var pts = msg.data.points.map(function(p) { return [p.lat, p.lon]; });
                    (msg.data.is_calculated ? planned : walked).setLatLngs(pts);
                    if (pts.length > 1) map.fitBounds(L.latLngBounds(pts), {padding: [20, 20]});
                } else if (msg.type === 'log') {
                    addLog(msg.data.message, msg.data.data);
                }
            };
            ws.onclose = function() { setTimeout(connect, 1000); };
        }
        connect();
    </script>
</body>
</html>'''


def event_message(event) -> Optional[dict]:
    """Translate a walk event into the message sent to browsers"""
    if isinstance(event, PositionEvent):
        return {"type": "position", "data": {"lat": event.lat, "lon": event.lon}}
    if isinstance(event, PathEvent):
        return {"type": "path", "data": {
            "is_calculated": event.is_calculated,
            "points": [{"lat": p.lat, "lon": p.lon} for p in event.points],
        }}
    return None


class LiveMapServer:
    """HTTP and WebSocket server showing walk events on a map"""

    def __init__(self, http_port: Optional[int] = None, ws_port: Optional[int] = None):
        self.http_port = http_port or CONFIG["live_http_port"]
        self.ws_port = ws_port or CONFIG["live_ws_port"]
        self.http_thread = None
        self.ws_thread = None
        self.ws_loop = None
        self.connected_clients: set = set()
        self._running = False

    def start(self, open_browser: bool = True):
        """Start HTTP and WebSocket servers in background threads"""
        self._running = True

        self.http_thread = threading.Thread(target=self._run_http_server, daemon=True)
        self.http_thread.start()

        self.ws_thread = threading.Thread(target=self._run_ws_server, daemon=True)
        self.ws_thread.start()

        # Give servers time to start
        time.sleep(0.5)

        url = f"http://localhost:{self.http_port}"
        print(f"Live map available at: {url}")
        if open_browser:
            webbrowser.open(url)

    def attach(self, events: EventDispatcher):
        events.subscribe(PositionEvent, self.send_event)
        events.subscribe(PathEvent, self.send_event)

    def _run_http_server(self):
        handler = partial(_LiveHTTPHandler, self.ws_port)
        with socketserver.TCPServer(("", self.http_port), handler) as httpd:
            httpd.allow_reuse_address = True
            httpd.timeout = 0.5
            while self._running:
                httpd.handle_request()

    def _run_ws_server(self):
        self.ws_loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.ws_loop)

        async def handler(websocket):
            self.connected_clients.add(websocket)
            try:
                async for _ in websocket:
                    pass  # browsers only listen
            finally:
                self.connected_clients.discard(websocket)

        async def main():
            try:
                async with websockets.serve(handler, "localhost", self.ws_port):
                    while self._running:
                        await asyncio.sleep(0.1)
            except OSError as e:
                print(f"WebSocket server error: {e}")

        self.ws_loop.run_until_complete(main())

    def _send_message(self, message: dict):
        """Send a message to all connected WebSocket clients"""
        if not self.connected_clients or not self.ws_loop:
            return

        payload = json.dumps(message)

        async def send_to_all():
            for client in list(self.connected_clients):
                try:
                    await client.send(payload)
                except websockets.ConnectionClosed:
                    self.connected_clients.discard(client)

        asyncio.run_coroutine_threadsafe(send_to_all(), self.ws_loop)

    def send_event(self, event):
        message = event_message(event)
        if message:
            self._send_message(message)

    def send_log(self, message: str, data: Optional[dict] = None):
        """Logger callback: mirror log lines to the browser"""
        self._send_message({"type": "log", "data": {"message": message, "data": data}})

    def stop(self):
        self._running = False


class _LiveHTTPHandler(http.server.SimpleHTTPRequestHandler):
    """Serves the live map page"""

    def __init__(self, ws_port: int, *args, **kwargs):
        self.ws_port = ws_port
        super().__init__(*args, **kwargs)

    def do_GET(self):
        if self.path == '/' or self.path == '/index.html':
            self.send_response(200)
            self.send_header('Content-type', 'text/html')
            self.end_headers()
            html = LIVE_MAP_HTML.replace('{{WS_PORT}}', str(self.ws_port))
            self.wfile.write(html.encode())
        else:
            self.send_error(404)

    def log_message(self, format, *args):
        pass  # Suppress HTTP log messages
