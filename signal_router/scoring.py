from typing import Sequence, Tuple

import numpy as np

from . import config
from .models import LatLng, RouteCandidate, RouteStep, ScoredRoute, TrafficLight, red_lights

EARTH_RADIUS_M = 6371000.0

STRATEGIES = ("proximity", "dense")
BASE_DURATION_MODES = ("reported", "speed_limit")


def haversine_meters(lat1, lon1, lat2, lon2):
    """Great-circle distance in metres. Works on scalars or numpy arrays."""
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(np.asarray(lat2) - lat1)
    d_lambda = np.radians(np.asarray(lon2) - lon1)
    value = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arctan2(np.sqrt(value), np.sqrt(1 - value))


def get_speed_limit(step: RouteStep) -> float:
    """Guess a speed limit (mph) from the road name."""
    name = (step.name or "").lower()
    if any(marker in name for marker in config.HIGHWAY_MARKERS):
        return config.HIGHWAY_SPEED_MPH
    return config.DEFAULT_SPEED_MPH


def estimate_base_seconds(candidate: RouteCandidate) -> float:
    """Drive time from step distances at the inferred speed limits."""
    seconds = 0.0
    for step in candidate.steps:
        miles = step.distance_m / config.METERS_PER_MILE
        seconds += miles / get_speed_limit(step) * 3600
    return seconds


def base_duration(candidate: RouteCandidate, mode: str = "reported") -> float:
    """Base drive time: the service figure, or the speed-limit estimate when asked for and steps exist."""
    if mode == "speed_limit" and candidate.steps:
        return estimate_base_seconds(candidate)
    return candidate.base_duration_s


def proximity_penalty(
    geometry: Sequence[LatLng],
    lights: Sequence[TrafficLight],
    sample_every: int = config.SAMPLE_EVERY,
    threshold_m: float = config.PROXIMITY_THRESHOLD_M,
    penalty_s: float = config.RED_LIGHT_PENALTY_S,
) -> Tuple[float, int]:
    """
    Geodesic check of every Nth route point against each red light.
    A light adds its penalty at most once per route.
    """
    red = red_lights(lights)
    if not red or not geometry:
        return 0.0, 0

    sampled = np.asarray(geometry[::sample_every], dtype=float)
    hits = 0
    for light in red:
        distances = haversine_meters(light.latitude, light.longitude, sampled[:, 0], sampled[:, 1])
        if np.any(distances < threshold_m):
            hits += 1
    return hits * penalty_s, hits


def dense_penalty(
    geometry: Sequence[LatLng],
    lights: Sequence[TrafficLight],
    threshold_deg: float = config.DENSE_THRESHOLD_DEG,
    penalty_s: float = config.RED_LIGHT_PENALTY_S,
) -> Tuple[float, int]:
    """
    Planar check of every route point against every red light.
    Each (point, light) pair within range adds a penalty, so a light the
    route passes twice counts twice.
    """
    red = red_lights(lights)
    if not red or not geometry:
        return 0.0, 0

    points = np.asarray(geometry, dtype=float)
    light_coords = np.array([(light.latitude, light.longitude) for light in red], dtype=float)

    # shape: (points, lights)
    diff = points[:, None, :] - light_coords[None, :, :]
    distances = np.sqrt((diff ** 2).sum(axis=2))
    pairs = int(np.count_nonzero(distances < threshold_deg))
    return pairs * penalty_s, pairs


class RouteScorer:
    """Applies red-light delay to route candidates and ranks them."""

    def __init__(self, strategy: str = None, base_mode: str = None):
        self.strategy = strategy or config.PENALTY_STRATEGY
        self.base_mode = base_mode or config.BASE_DURATION_MODE

        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown penalty strategy: {self.strategy}")
        if self.base_mode not in BASE_DURATION_MODES:
            raise ValueError(f"Unknown base duration mode: {self.base_mode}")

    def penalty(self, candidate: RouteCandidate, lights: Sequence[TrafficLight]) -> Tuple[float, int]:
        if self.strategy == "dense":
            return dense_penalty(candidate.geometry, lights)
        return proximity_penalty(candidate.geometry, lights)

    def score(self, candidate: RouteCandidate, lights: Sequence[TrafficLight], index: int = 0) -> ScoredRoute:
        penalty_seconds, penalized = self.penalty(candidate, lights)
        return ScoredRoute(
            candidate=candidate,
            index=index,
            base_seconds=base_duration(candidate, self.base_mode),
            penalty_seconds=penalty_seconds,
            penalized_lights=penalized,
        )

    def score_all(self, candidates: Sequence[RouteCandidate], lights: Sequence[TrafficLight]) -> list[ScoredRoute]:
        return [self.score(candidate, lights, index=i) for i, candidate in enumerate(candidates)]


def rank_routes(routes: Sequence[ScoredRoute]) -> list[ScoredRoute]:
    """Rank routes by total time (lowest = best); ties keep response order."""
    return sorted(routes, key=lambda r: r.total_seconds)


def describe_ranking(ranked: Sequence[ScoredRoute]) -> str:
    """Short recommendation comparing the best route with the runner-up."""
    if len(ranked) < 2:
        return ""

    best, runner_up = ranked[0], ranked[1]
    saved = (runner_up.total_seconds - best.total_seconds) / 60
    if saved <= 0:
        return f"Routes {best.index + 1} and {runner_up.index + 1} are tied."

    return (
        f"Route {best.index + 1} is {saved:.1f} min faster than Route {runner_up.index + 1} "
        f"({best.penalized_lights} vs {runner_up.penalized_lights} red-light stops)."
    )
