import asyncio

import streamlit as st
from streamlit_folium import st_folium

from . import config
from .lights import LightTicker, TrafficLightRegistry, load_light_specs
from .models import SessionPhase
from .presenter import DisplaySurface, MapSurface, RoutePresenter
from .scoring import RouteScorer, describe_ranking, rank_routes
from .session import RequestStatus, SessionController
from .viz import build_route_map, create_eta_chart


@st.cache_data
def cached_light_specs(path: str):
    return load_light_specs(path)


def get_controller() -> SessionController:
    """One controller (and light registry) per browser session."""
    if "controller" not in st.session_state:
        registry = TrafficLightRegistry()
        registry.load(cached_light_specs(config.TRAFFIC_LIGHTS_PATH))
        presenter = RoutePresenter(MapSurface(), DisplaySurface())
        st.session_state["controller"] = SessionController(
            registry=registry,
            scorer=RouteScorer(),
            presenter=presenter,
            ticker=LightTicker(registry),
        )
        st.session_state["last_click"] = None
    return st.session_state["controller"]


def show_notice(status: RequestStatus, controller: SessionController) -> None:
    if status in (RequestStatus.MISSING_INPUT, RequestStatus.NO_MATCH):
        st.warning(controller.notice)
    elif status is RequestStatus.FAILED:
        st.error(controller.notice)


@st.fragment(run_every=config.LIGHT_TOGGLE_SECONDS)
def live_panel(controller: SessionController) -> None:
    """ETA readout and map. Reruns on the light timer and on map clicks."""
    controller.ticker.poll()
    session = controller.session
    display = controller.presenter.display

    col1, *route_cols = st.columns(1 + display.route_slots)
    with col1:
        st.metric("ETA", display.get("eta"))
    for n, col in enumerate(route_cols, start=1):
        with col:
            st.markdown(display.get(f"route_{n}"))

    if session.scored:
        recommendation = describe_ranking(rank_routes(session.scored))
        if recommendation:
            st.info(recommendation)

        labels = [f"Route {route.index + 1}" for route in session.scored]
        choice = st.radio("Show route:", labels, index=session.active_index, horizontal=True)
        chosen = labels.index(choice)
        if chosen != session.active_index:
            controller.select_route(chosen)
            st.rerun(scope="fragment")

    if session.phase is SessionPhase.AWAITING_END:
        st.caption("Click the map to set the destination.")
    else:
        st.caption("Click the map to set a start point.")

    folium_map = build_route_map(controller.presenter.map, controller.registry.snapshot())
    result = st_folium(folium_map, height=600, use_container_width=True, key="route_map",
                       returned_objects=["last_clicked"])

    clicked = (result or {}).get("last_clicked")
    if clicked and clicked != st.session_state.get("last_click"):
        st.session_state["last_click"] = clicked
        with st.spinner("Routing..."):
            status = asyncio.run(controller.click(clicked["lat"], clicked["lng"]))
        show_notice(status, controller)
        if status in (RequestStatus.AWAITING_END, RequestStatus.RENDERED):
            st.rerun(scope="fragment")

    if session.scored:
        chart = create_eta_chart(session.scored)
        if chart:
            st.plotly_chart(chart, use_container_width=True)


def main():
    st.set_page_config(
        page_title="🚦 Red-Light Router",
        page_icon="🚦",
        layout="wide"
    )

    st.title("🚦 Red-Light Router")
    st.markdown("""
    **Driving routes scored against simulated traffic lights.**
    Lights flip every 30 seconds; ETAs update as they do.
    """)

    controller = get_controller()

    if len(controller.registry) == 0:
        st.warning("Traffic light data unavailable. ETAs include no red-light delay.")

    with st.sidebar:
        st.header("🗺️ Plan Your Drive")
        start_text = st.text_input("Start", placeholder="e.g., NC State Capitol")
        end_text = st.text_input("Destination", placeholder="e.g., PNC Arena")

        search_clicked = st.button("🔍 Find Route", type="primary", use_container_width=True)
        reset_clicked = st.button("Reset", use_container_width=True)

        st.divider()
        st.caption(f"Scoring: {controller.scorer.strategy} · base time: {controller.scorer.base_mode}")
        st.caption(f"Traffic lights: {len(controller.registry)}")

    if reset_clicked:
        controller.reset_all()

    if search_clicked:
        with st.spinner("🔄 Finding routes..."):
            status = asyncio.run(controller.search(start_text, end_text))
        show_notice(status, controller)

    live_panel(controller)
