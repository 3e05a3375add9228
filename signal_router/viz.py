from typing import Sequence

import folium
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from . import config
from .models import ScoredRoute, TrafficLight
from .presenter import MapSurface


def build_route_map(surface: MapSurface, lights: Sequence[TrafficLight]) -> folium.Map:
    """Turn the map surface and light states into a folium map."""
    m = folium.Map(location=list(config.MAP_CENTER), zoom_start=config.MAP_ZOOM, max_zoom=19)

    for light in lights:
        color = light.state.value
        folium.CircleMarker(
            [light.latitude, light.longitude],
            radius=config.LIGHT_MARKER_RADIUS,
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=1,
        ).add_to(m)

    # Overlays are already ordered with the highlighted route last
    for overlay in surface.routes.values():
        kwargs = dict(
            color=overlay.color,
            weight=overlay.weight,
            opacity=overlay.opacity,
            tooltip=f"Route {overlay.slot + 1}",
        )
        if overlay.dash_array:
            kwargs["dash_array"] = overlay.dash_array
        folium.PolyLine([list(c) for c in overlay.coords], **kwargs).add_to(m)

    for marker in surface.markers:
        folium.Marker(
            [marker.lat, marker.lng],
            popup=marker.label,
            tooltip=marker.label,
            icon=folium.Icon(color="green" if marker.label == "Start" else "red"),
        ).add_to(m)

    if surface.bounds:
        (south, west), (north, east) = surface.bounds
        m.fit_bounds([[south, west], [north, east]])

    return m


def create_eta_chart(scored: Sequence[ScoredRoute]) -> go.Figure | None:
    """Stacked bar of drive time vs red-light delay for each route."""
    if not scored:
        return None

    rows = []
    for route in scored:
        label = f"Route {route.index + 1}"
        rows.append({"Route": label, "Part": "Driving", "Minutes": route.base_seconds / 60})
        rows.append({"Route": label, "Part": "Red lights", "Minutes": route.penalty_seconds / 60})
    df = pd.DataFrame(rows)

    fig = px.bar(
        df,
        x="Route",
        y="Minutes",
        color="Part",
        color_discrete_map={"Driving": "rgb(100, 149, 237)", "Red lights": "red"},
        title="ETA Breakdown",
    )

    fig.update_layout(
        barmode="stack",
        height=300,
        legend_title_text="",
    )

    return fig
