"""Configuration settings for StepWalker."""

CONFIG = {
    "default_step_length": 1.3,  # meters - baseline step, randomized +/-30%
    "walking_speed_kmh": 4.16,  # km/h
    "walking_speed_variant": 1.2,  # km/h - max drift either side of walking_speed_kmh
    "use_walking_speed_variant": True,
    # Routing
    "directions_url": "https://maps.googleapis.com/maps/api/directions/json",
    "directions_api_key": None,
    "directions_cache_dir": "directions_cache",
    "directions_cache_max_age": 24 * 3600,  # seconds
    "request_timeout": 15,  # seconds
    # Position reporting
    "position_endpoint": None,  # URL for HttpPositionClient
    # Live map
    "live_http_port": 8080,
    "live_ws_port": 8765,
}
