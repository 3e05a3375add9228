from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from . import config
from .models import LatLng, ScoredRoute


@dataclass(frozen=True)
class RouteOverlay:
    """A route polyline as it should appear on the map."""
    slot: int
    coords: Tuple[LatLng, ...]
    color: str
    weight: int
    opacity: float
    dash_array: Optional[str] = None
    highlighted: bool = False


@dataclass(frozen=True)
class PointMarker:
    lat: float
    lng: float
    label: str


class MapSurface:
    """
    What is currently drawn on the map, independent of the map library.
    The UI turns this into an actual map on every rerun.
    """

    def __init__(self):
        self.routes: Dict[int, RouteOverlay] = {}
        self.markers: List[PointMarker] = []
        self.bounds: Optional[Tuple[LatLng, LatLng]] = None

    @property
    def route_count(self) -> int:
        return len(self.routes)

    def add_route(self, overlay: RouteOverlay) -> None:
        self.routes[overlay.slot] = overlay
        if overlay.highlighted:
            lats = [lat for lat, _ in overlay.coords]
            lngs = [lng for _, lng in overlay.coords]
            self.bounds = ((min(lats), min(lngs)), (max(lats), max(lngs)))

    def clear_routes(self) -> None:
        self.routes = {}
        self.bounds = None

    def add_marker(self, lat: float, lng: float, label: str) -> None:
        self.markers.append(PointMarker(lat=lat, lng=lng, label=label))

    def clear_markers(self) -> None:
        self.markers = []


class DisplaySurface:
    """Named text slots: "eta" plus "route_1", "route_2", ..."""

    def __init__(self, route_slots: int = config.ROUTE_SLOTS):
        self.route_slots = route_slots
        self.slots: Dict[str, str] = {}
        self.clear()

    def set(self, slot: str, text: str) -> None:
        self.slots[slot] = text

    def get(self, slot: str) -> str:
        return self.slots.get(slot, "")

    def clear(self) -> None:
        self.slots = {"eta": "--"}
        for n in range(1, self.route_slots + 1):
            self.slots[f"route_{n}"] = f"Route {n}: --"


def format_minutes(seconds: float) -> str:
    """Seconds as minutes with one decimal, e.g. 630 -> "10.5"."""
    return f"{seconds / 60:.1f}"


class RoutePresenter:
    """Draws scored routes and writes their ETAs to the display surface."""

    def __init__(self, map_surface: MapSurface, display: DisplaySurface):
        self.map = map_surface
        self.display = display

    def render(self, scored: Sequence[ScoredRoute], active_index: Optional[int]) -> None:
        # Never stack a new set of routes on top of the old one
        self.map.clear_routes()

        # Alternates first so the highlighted route is drawn on top
        ordered = sorted(scored, key=lambda r: r.index == active_index)
        for route in ordered:
            highlighted = route.index == active_index
            style = config.HIGHLIGHT_STYLE if highlighted else config.ALTERNATE_STYLE
            self.map.add_route(RouteOverlay(
                slot=route.index,
                coords=route.candidate.geometry,
                color=style["color"],
                weight=style["weight"],
                opacity=style["opacity"],
                dash_array=style["dash_array"],
                highlighted=highlighted,
            ))

        self.refresh_etas(scored, active_index)

    def refresh_etas(self, scored: Sequence[ScoredRoute], active_index: Optional[int]) -> None:
        for route in scored:
            self.display.set(f"route_{route.index + 1}", f"Route {route.index + 1}: {format_minutes(route.total_seconds)} min")
            if route.index == active_index:
                self.display.set("eta", f"{format_minutes(route.total_seconds)} min")

    def show_endpoint(self, point: LatLng, label: str) -> None:
        self.map.add_marker(point[0], point[1], label)

    def clear(self) -> None:
        self.map.clear_routes()
        self.map.clear_markers()
        self.display.clear()
