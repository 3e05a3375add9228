import threading

# A light in downtown Raleigh
LIGHT = (35.78, -78.64)


class FixedRandom:
    """Stands in for random.Random so light states are predictable."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


RED = FixedRandom(0.9)
GREEN = FixedRandom(0.1)


def route_past_light(offset_deg: float = 0.00009, points: int = 11):
    """East-west line of points ~9 m apart whose middle point sits offset_deg north of LIGHT."""
    lat, lng = LIGHT
    start = lng - (points // 2) * 0.0001
    return [(lat + offset_deg, start + i * 0.0001) for i in range(points)]


def far_route(points: int = 11):
    """Same shape, ~5 km north of LIGHT."""
    lat, lng = LIGHT
    return [(lat + 0.05, lng + i * 0.0001) for i in range(points)]


def make_feature(geometry, duration: float, steps=None, distance: float = 1000.0) -> dict:
    """ORS GeoJSON route feature from (lat, lng) points."""
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": [[lng, lat] for lat, lng in geometry]},
        "properties": {
            "summary": {"duration": duration, "distance": distance},
            "segments": [{"steps": steps or []}],
        },
    }


def make_directions(*features) -> dict:
    return {"type": "FeatureCollection", "features": list(features)}


class FakeClient:
    """Replaces the ors_api module in controller tests."""

    def __init__(self, places=None, directions=None, error=None):
        self.places = places or {}
        self.directions = list(directions or [])
        self.error = error
        self.geocode_calls = []
        self.directions_calls = []
        self.hold = None
        self.entered = threading.Event()

    def geocode(self, query):
        self.geocode_calls.append(query)
        return self.places.get(query)

    def get_directions(self, start, end):
        self.directions_calls.append((start, end))
        if self.error:
            raise self.error
        data = self.directions.pop(0)
        hold, self.hold = self.hold, None
        if hold is not None:
            self.entered.set()
            hold.wait(5)
        return data
