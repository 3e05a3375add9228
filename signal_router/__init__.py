"""Driving routes scored against a simulated traffic-light layer."""

from .lights import LightTicker, TrafficLightRegistry, load_light_specs
from .models import LightState, RouteCandidate, ScoredRoute, Session, SessionPhase, TrafficLight
from .presenter import DisplaySurface, MapSurface, RoutePresenter
from .scoring import RouteScorer, rank_routes
from .session import RequestStatus, SessionController

__all__ = [
    "DisplaySurface",
    "LightState",
    "LightTicker",
    "MapSurface",
    "RequestStatus",
    "RouteCandidate",
    "RoutePresenter",
    "RouteScorer",
    "ScoredRoute",
    "Session",
    "SessionController",
    "SessionPhase",
    "TrafficLight",
    "TrafficLightRegistry",
    "load_light_specs",
    "rank_routes",
]
