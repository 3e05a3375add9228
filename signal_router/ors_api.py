import logging
from typing import Optional

import requests

from . import config
from .models import LatLng

logger = logging.getLogger(__name__)


class ORSError(Exception):
    """Raised when openrouteservice can't produce a usable answer."""
    pass


def get_api_headers() -> dict:
    """Get request headers including the API key if available."""
    headers = {"Accept": "application/json, application/geo+json"}
    if config.ORS_API_KEY:
        headers["Authorization"] = config.ORS_API_KEY
    return headers


def _read_json(response: requests.Response) -> dict:
    """Decode an ORS response, raising ORSError for error payloads and bad status codes."""
    try:
        data = response.json()
    except ValueError as e:
        raise ORSError(f"Invalid JSON from openrouteservice (HTTP {response.status_code})") from e

    if isinstance(data, dict) and "error" in data:
        error = data["error"]
        message = error.get("message", "API Error") if isinstance(error, dict) else str(error)
        raise ORSError(message)

    if not response.ok:
        raise ORSError(f"openrouteservice returned HTTP {response.status_code}")

    if not isinstance(data, dict):
        raise ORSError("Unexpected response shape from openrouteservice")
    return data


def geocode(query: str) -> Optional[LatLng]:
    """
    Resolve free text to the single best matching coordinate.
    Returns None when nothing matches.
    """
    url = f"{config.ORS_BASE_URL}/geocode/search"

    try:
        response = requests.get(
            url,
            params={"text": query, "size": 1},
            headers=get_api_headers(),
            timeout=config.REQUEST_TIMEOUT_S,
        )
    except requests.RequestException as e:
        raise ORSError(f"Network error: {e}") from e

    data = _read_json(response)
    features = data.get("features") or []
    if not features:
        logger.info("No geocoding match for %r", query)
        return None

    try:
        lng, lat = features[0]["geometry"]["coordinates"][:2]
    except (KeyError, TypeError, ValueError) as e:
        raise ORSError("Malformed geocoding feature") from e
    return float(lat), float(lng)


def get_directions(start: LatLng, end: LatLng) -> dict:
    """
    Fetch driving routes (with alternatives) between two points.
    Returns the raw GeoJSON FeatureCollection.
    """
    url = f"{config.ORS_BASE_URL}/v2/directions/{config.ORS_PROFILE}/geojson"
    body = {
        # ORS wants [lng, lat]
        "coordinates": [
            [start[1], start[0]],
            [end[1], end[0]],
        ],
        "alternative_routes": dict(config.ALTERNATIVE_ROUTES),
    }

    try:
        response = requests.post(
            url,
            json=body,
            headers=get_api_headers(),
            timeout=config.REQUEST_TIMEOUT_S,
        )
    except requests.RequestException as e:
        raise ORSError(f"Network error: {e}") from e

    data = _read_json(response)
    logger.debug("Directions returned %d features", len(data.get("features") or []))
    return data
