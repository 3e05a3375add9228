import pytest

from signal_router.lights import TrafficLightRegistry
from signal_router.presenter import DisplaySurface, MapSurface, RoutePresenter
from signal_router.scoring import RouteScorer
from signal_router.session import SessionController


@pytest.fixture
def registry():
    return TrafficLightRegistry()


@pytest.fixture
def presenter():
    return RoutePresenter(MapSurface(), DisplaySurface())


@pytest.fixture
def make_controller(registry, presenter):
    def _make(client, strategy="proximity", base_mode="reported", ticker=None):
        return SessionController(
            registry=registry,
            scorer=RouteScorer(strategy=strategy, base_mode=base_mode),
            presenter=presenter,
            client=client,
            ticker=ticker,
        )
    return _make
