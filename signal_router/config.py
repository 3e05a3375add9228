import os
from typing import Dict, Tuple

from dotenv import load_dotenv

load_dotenv()

# openrouteservice configuration
ORS_BASE_URL: str = os.getenv("ORS_BASE_URL", "https://api.openrouteservice.org")
ORS_API_KEY: str = os.getenv("ORS_API_KEY", "")
ORS_PROFILE: str = "driving-car"
REQUEST_TIMEOUT_S: int = 15

# Alternative route hints sent with every directions request
ALTERNATIVE_ROUTES: Dict[str, float] = {
    "share_factor": 0.6,
    "target_count": 2,
}

# Traffic light simulation
TRAFFIC_LIGHTS_PATH: str = os.getenv("TRAFFIC_LIGHTS_PATH", "data/raleigh_traffic_lights.geojson")
LIGHT_TOGGLE_SECONDS: float = 30.0

# Scoring
PENALTY_STRATEGY: str = os.getenv("PENALTY_STRATEGY", "proximity")  # proximity | dense
BASE_DURATION_MODE: str = os.getenv("BASE_DURATION_MODE", "reported")  # reported | speed_limit
RED_LIGHT_PENALTY_S: float = 30.0
SAMPLE_EVERY: int = 5
PROXIMITY_THRESHOLD_M: float = 25.0
DENSE_THRESHOLD_DEG: float = 0.0008

# Speed limit heuristic (mph)
HIGHWAY_MARKERS: Tuple[str, ...] = ("i-", "hwy")
HIGHWAY_SPEED_MPH: float = 70.0
DEFAULT_SPEED_MPH: float = 35.0
METERS_PER_MILE: float = 1609.34

# Presentation
ROUTE_SLOTS: int = 2
HIGHLIGHT_STYLE: Dict[str, object] = {"color": "blue", "weight": 8, "opacity": 0.95, "dash_array": None}
ALTERNATE_STYLE: Dict[str, object] = {"color": "gray", "weight": 5, "opacity": 0.5, "dash_array": "10, 10"}

# Map defaults (Raleigh, NC)
MAP_CENTER: Tuple[float, float] = (35.7796, -78.6382)
MAP_ZOOM: int = 12
LIGHT_MARKER_RADIUS: int = 5
