from signal_router import config
from signal_router.models import RouteCandidate, ScoredRoute
from signal_router.presenter import DisplaySurface, MapSurface, RoutePresenter, format_minutes


def make_scored(index, base, penalty=0.0, geometry=((35.78, -78.64), (35.79, -78.65))):
    candidate = RouteCandidate(geometry=geometry, base_duration_s=base)
    return ScoredRoute(candidate=candidate, index=index, base_seconds=base, penalty_seconds=penalty)


def test_render_styles_highlighted_and_alternate(presenter):
    routes = [make_scored(0, 600, 30), make_scored(1, 615)]

    presenter.render(routes, active_index=1)

    overlays = presenter.map.routes
    assert presenter.map.route_count == 2
    assert overlays[1].highlighted
    assert overlays[1].color == config.HIGHLIGHT_STYLE["color"]
    assert overlays[1].weight > overlays[0].weight
    assert overlays[1].dash_array is None
    assert not overlays[0].highlighted
    assert overlays[0].dash_array
    assert overlays[0].opacity < overlays[1].opacity
    # highlighted route drawn last
    assert list(overlays) == [0, 1]


def test_render_writes_eta_slots(presenter):
    presenter.render([make_scored(0, 600, 30), make_scored(1, 618)], active_index=1)

    assert presenter.display.get("eta") == "10.3 min"
    assert presenter.display.get("route_1") == "Route 1: 10.5 min"
    assert presenter.display.get("route_2") == "Route 2: 10.3 min"


def test_render_replaces_previous_routes(presenter):
    presenter.render([make_scored(0, 600), make_scored(1, 700)], active_index=0)
    presenter.render([make_scored(0, 500)], active_index=0)

    assert presenter.map.route_count == 1


def test_bounds_follow_highlighted_route(presenter):
    geometry = ((35.70, -78.70), (35.80, -78.60), (35.75, -78.65))
    presenter.render([make_scored(0, 600, geometry=geometry), make_scored(1, 700)], active_index=0)

    assert presenter.map.bounds == ((35.70, -78.70), (35.80, -78.60))


def test_clear_removes_everything(presenter):
    presenter.show_endpoint((35.78, -78.64), "Start")
    presenter.render([make_scored(0, 600), make_scored(1, 700)], active_index=0)

    presenter.clear()

    assert presenter.map.route_count == 0
    assert presenter.map.markers == []
    assert presenter.map.bounds is None
    assert presenter.display.get("eta") == "--"
    assert presenter.display.get("route_1") == "Route 1: --"
    assert presenter.display.get("route_2") == "Route 2: --"


def test_display_surface_slot_count():
    display = DisplaySurface(route_slots=3)
    assert display.get("route_3") == "Route 3: --"
    assert display.get("route_4") == ""


def test_markers_keep_labels():
    surface = MapSurface()
    presenter = RoutePresenter(surface, DisplaySurface())
    presenter.show_endpoint((35.78, -78.64), "Start")
    presenter.show_endpoint((35.80, -78.60), "Destination")

    assert [m.label for m in surface.markers] == ["Start", "Destination"]
    assert (surface.markers[1].lat, surface.markers[1].lng) == (35.80, -78.60)


def test_format_minutes_one_decimal():
    assert format_minutes(630) == "10.5"
    assert format_minutes(601) == "10.0"
    assert format_minutes(0) == "0.0"
