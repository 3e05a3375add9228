from unittest.mock import MagicMock, patch

import pytest
import requests

from signal_router import config, ors_api
from signal_router.ors_api import ORSError


def fake_response(data, status=200):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    if isinstance(data, Exception):
        response.json.side_effect = data
    else:
        response.json.return_value = data
    return response


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    monkeypatch.setattr(config, "ORS_API_KEY", "test-key")


def test_geocode_returns_first_match_as_lat_lng():
    data = {"features": [
        {"geometry": {"coordinates": [-78.6382, 35.7796]}},
        {"geometry": {"coordinates": [-80.0, 36.0]}},
    ]}
    with patch("signal_router.ors_api.requests.get", return_value=fake_response(data)) as get:
        assert ors_api.geocode("Raleigh") == (35.7796, -78.6382)

    kwargs = get.call_args.kwargs
    assert kwargs["params"]["text"] == "Raleigh"
    assert kwargs["headers"]["Authorization"] == "test-key"
    assert get.call_args.args[0].endswith("/geocode/search")


def test_geocode_no_match_returns_none():
    with patch("signal_router.ors_api.requests.get", return_value=fake_response({"features": []})):
        assert ors_api.geocode("nowhere at all") is None


def test_geocode_network_error_raises():
    with patch("signal_router.ors_api.requests.get", side_effect=requests.ConnectionError("down")):
        with pytest.raises(ORSError, match="Network error"):
            ors_api.geocode("Raleigh")


def test_directions_request_body():
    data = {"type": "FeatureCollection", "features": [{"geometry": {"coordinates": []}}]}
    with patch("signal_router.ors_api.requests.post", return_value=fake_response(data)) as post:
        assert ors_api.get_directions((35.78, -78.64), (35.85, -78.70)) == data

    url = post.call_args.args[0]
    body = post.call_args.kwargs["json"]
    assert url.endswith("/v2/directions/driving-car/geojson")
    assert body["coordinates"] == [[-78.64, 35.78], [-78.70, 35.85]]
    assert body["alternative_routes"] == {"share_factor": 0.6, "target_count": 2}


def test_error_payload_raises_with_message():
    data = {"error": {"code": 2010, "message": "Could not find routable point"}}
    with patch("signal_router.ors_api.requests.post", return_value=fake_response(data, status=404)):
        with pytest.raises(ORSError, match="routable point"):
            ors_api.get_directions((0.0, 0.0), (1.0, 1.0))


def test_http_error_without_payload_raises():
    with patch("signal_router.ors_api.requests.post", return_value=fake_response({}, status=503)):
        with pytest.raises(ORSError, match="503"):
            ors_api.get_directions((0.0, 0.0), (1.0, 1.0))


def test_invalid_json_raises():
    with patch("signal_router.ors_api.requests.post", return_value=fake_response(ValueError("bad"))):
        with pytest.raises(ORSError, match="Invalid JSON"):
            ors_api.get_directions((0.0, 0.0), (1.0, 1.0))


def test_no_key_sends_no_authorization(monkeypatch):
    monkeypatch.setattr(config, "ORS_API_KEY", "")
    assert "Authorization" not in ors_api.get_api_headers()
