"""
Session controller: input -> geocoding -> directions -> scoring -> presenter.

Runs on a single event loop. Blocking HTTP calls are pushed to a worker
thread and awaited one at a time, so a light tick can only land between
steps. Every reset bumps the session generation; a response that comes back
after a newer request has started is dropped.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional

from . import ors_api
from .lights import LightTicker, TrafficLightRegistry
from .models import LatLng, Session, SessionPhase
from .ors_api import ORSError
from .parser import parse_directions
from .presenter import RoutePresenter
from .scoring import RouteScorer, rank_routes

logger = logging.getLogger(__name__)


class RequestStatus(Enum):
    RENDERED = "rendered"
    AWAITING_END = "awaiting_end"
    MISSING_INPUT = "missing_input"
    NO_MATCH = "no_match"
    FAILED = "failed"
    STALE = "stale"


class SessionController:

    def __init__(
        self,
        registry: TrafficLightRegistry,
        scorer: RouteScorer,
        presenter: RoutePresenter,
        client=ors_api,
        ticker: Optional[LightTicker] = None,
    ):
        self.registry = registry
        self.scorer = scorer
        self.presenter = presenter
        self.client = client
        self.session = Session()
        self.notice = ""
        self._latest_request = 0
        self.ticker = ticker
        if ticker is not None:
            ticker.on_tick(self.handle_tick)

    # ----------------
    # Input handlers
    # ----------------
    async def search(self, start_text: str, end_text: str) -> RequestStatus:
        """Geocode both texts and route between them."""
        if not start_text or not end_text:
            self.notice = "Enter start and destination"
            return RequestStatus.MISSING_INPUT

        request = self._next_request()

        try:
            start = await asyncio.to_thread(self.client.geocode, start_text)
            end = await asyncio.to_thread(self.client.geocode, end_text)
        except ORSError as e:
            if request != self._latest_request:
                return RequestStatus.STALE
            logger.warning("Geocoding failed: %s", e)
            self.notice = f"Geocoding failed: {e}"
            return RequestStatus.FAILED

        if request != self._latest_request:
            return RequestStatus.STALE

        if start is None or end is None:
            self.notice = "Location not found"
            return RequestStatus.NO_MATCH

        self.reset_all()
        self._set_start(start)
        self._set_end(end)
        return await self._build_routes()

    async def click(self, lat: float, lng: float) -> RequestStatus:
        """First click sets the start, second click sets the end and routes."""
        self._next_request()
        if self.session.phase is SessionPhase.IDLE:
            self.reset_all()
            self._set_start((lat, lng))
            self.session.phase = SessionPhase.AWAITING_END
            return RequestStatus.AWAITING_END

        self._set_end((lat, lng))
        self.session.phase = SessionPhase.IDLE
        return await self._build_routes()

    def select_route(self, index: int) -> None:
        """Highlight a specific route instead of the best one."""
        if not 0 <= index < len(self.session.scored):
            raise IndexError(f"No route {index + 1} in the current session")
        self.session.selected_index = index
        self.presenter.render(self.session.scored, self.session.active_index)

    def reset_all(self) -> None:
        """Drop the current session and everything drawn for it."""
        self._latest_request += 1
        self.session.clear()
        self.presenter.clear()

    # ----------------
    # Light timer
    # ----------------
    def handle_tick(self) -> None:
        """Rescore held routes after the lights flipped. Never refetches."""
        if not self.session.candidates or self.session.best_index is None:
            return
        self._score_and_render()

    def start_ticker(self) -> None:
        if self.ticker is not None:
            self.ticker.start()

    def close(self) -> None:
        if self.ticker is not None:
            self.ticker.stop()

    # ----------------
    # Internals
    # ----------------
    def _next_request(self) -> int:
        self.notice = ""
        self._latest_request += 1
        return self._latest_request

    def _set_start(self, point: LatLng) -> None:
        self.session.start = point
        self.presenter.show_endpoint(point, "Start")

    def _set_end(self, point: LatLng) -> None:
        self.session.end = point
        self.presenter.show_endpoint(point, "Destination")

    async def _build_routes(self) -> RequestStatus:
        generation = self.session.generation
        start, end = self.session.start, self.session.end

        try:
            data = await asyncio.to_thread(self.client.get_directions, start, end)
            if generation != self.session.generation:
                logger.info("Discarding directions for superseded request %d", generation)
                return RequestStatus.STALE
            candidates = parse_directions(data)
        except ORSError as e:
            if generation != self.session.generation:
                return RequestStatus.STALE
            logger.warning("Route request failed: %s", e)
            self.notice = f"Route request failed: {e}"
            return RequestStatus.FAILED

        self.session.candidates = candidates
        self._score_and_render()
        return RequestStatus.RENDERED

    def _score_and_render(self) -> None:
        scored = self.scorer.score_all(self.session.candidates, self.registry.snapshot())
        self.session.scored = scored
        self.session.best_index = rank_routes(scored)[0].index
        self.presenter.render(scored, self.session.active_index)
