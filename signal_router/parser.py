from typing import List

from .models import RouteCandidate, RouteStep
from .ors_api import ORSError


def parse_steps(properties: dict) -> tuple:
    """Flatten the steps of every segment into RouteSteps."""
    steps = []
    for segment in properties.get("segments", []):
        for step_data in segment.get("steps", []):
            steps.append(RouteStep(
                distance_m=float(step_data.get("distance", 0)),
                duration_s=float(step_data.get("duration", 0)),
                name=step_data.get("name", "") or "",
            ))
    return tuple(steps)


def parse_route(feature: dict) -> RouteCandidate:
    """Parse one ORS GeoJSON route feature into a RouteCandidate."""
    try:
        coordinates = feature["geometry"]["coordinates"]
        properties = feature.get("properties", {})
        summary = properties.get("summary", {})

        # [lng, lat] -> (lat, lng)
        geometry = tuple((float(c[1]), float(c[0])) for c in coordinates)
        steps = parse_steps(properties)
        duration = float(summary.get("duration", sum(s.duration_s for s in steps)))
        distance = float(summary.get("distance", sum(s.distance_m for s in steps)))
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise ORSError(f"Malformed route feature: {e}") from e

    if len(geometry) < 2:
        raise ORSError("Route geometry has fewer than two points")

    return RouteCandidate(
        geometry=geometry,
        base_duration_s=duration,
        steps=steps,
        distance_m=distance,
    )


def parse_directions(directions_data: dict) -> List[RouteCandidate]:
    """Parse an ORS directions FeatureCollection, keeping response order."""
    features = directions_data.get("features")
    if not features:
        raise ORSError("No routes found")
    return [parse_route(feature) for feature in features]
