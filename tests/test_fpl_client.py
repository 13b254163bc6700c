from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import pytest
import requests
from requests import Response

from fplspace.clients.fpl import FPLClient
from fplspace.config import FPLSettings
from fplspace.exceptions import APINotFoundError, NetworkError, ParseError
from fplspace.models import BootstrapPayload, Fixture

BOOTSTRAP = {
    "events": [{"id": 1, "name": "Gameweek 1", "is_current": True}],
    "teams": [{"id": 1, "name": "Arsenal", "short_name": "ARS", "strength": 5, "code": 3}],
    "elements": [
        {
            "id": 10,
            "web_name": "Saka",
            "team": 1,
            "element_type": 3,
            "now_cost": 95,
            "ict_index": "120.4",
        }
    ],
}


def _settings(**overrides) -> FPLSettings:
    values = dict(
        base_url="https://fpl.test/api",
        proxy_url=None,
        public_proxies=("https://proxy.test/?u={encoded_url}",),
    )
    values.update(overrides)
    return FPLSettings(**values)


def _response(
    status_code: int,
    payload: Any,
    *,
    content_type: str = "application/json",
) -> Response:
    response = Response()
    response.status_code = status_code
    body = payload if isinstance(payload, str) else json.dumps(payload)
    response._content = body.encode("utf-8")
    response.headers["Content-Type"] = content_type
    return response


def test_candidate_urls_order():
    client = FPLClient(
        settings=_settings(proxy_url="https://edge.test/"),
    )
    assert client.candidate_urls("bootstrap-static/") == [
        "https://edge.test/api/bootstrap-static/",
        "https://fpl.test/api/bootstrap-static/",
        "https://proxy.test/?u=https%3A%2F%2Ffpl.test%2Fapi%2Fbootstrap-static%2F",
    ]


def test_load_bootstrap_parses_payload():
    client = FPLClient(settings=_settings())

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.return_value = _response(200, BOOTSTRAP)
        payload = client.load_bootstrap()

    assert isinstance(payload, BootstrapPayload)
    assert payload.teams[0].short_name == "ARS"
    assert payload.elements[0].extra == {"ict_index": "120.4"}
    mock_request.assert_called_once()
    _, kwargs = mock_request.call_args
    assert kwargs["method"] == "GET"
    assert kwargs["url"] == "https://fpl.test/api/bootstrap-static/"


def test_falls_through_to_next_candidate():
    client = FPLClient(settings=_settings())
    fixtures = [
        {
            "id": 1,
            "event": 3,
            "team_h": 1,
            "team_a": 2,
            "team_h_difficulty": 2,
            "team_a_difficulty": 4,
        }
    ]

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.side_effect = [
            requests.ConnectionError("blocked"),
            _response(200, fixtures, content_type="text/plain"),
        ]
        result = client.load_fixtures()

    assert result == [Fixture.from_api(fixtures[0])]
    assert mock_request.call_count == 2
    assert mock_request.call_args_list[1].kwargs["url"].startswith("https://proxy.test/")


def test_all_candidates_fail_raises_last_error():
    client = FPLClient(settings=_settings())

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.side_effect = [
            _response(500, {"detail": "oops"}),
            _response(404, {"detail": "missing"}),
        ]
        with pytest.raises(APINotFoundError) as excinfo:
            client.load_fixtures()

    assert excinfo.value.status_code == 404


def test_network_failure_maps_to_network_error():
    client = FPLClient(settings=_settings(public_proxies=()))

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.side_effect = requests.Timeout("slow")
        with pytest.raises(NetworkError):
            client.load_bootstrap()


def test_wrong_shape_raises_parse_error():
    client = FPLClient(settings=_settings(public_proxies=()))

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.return_value = _response(200, {"teams": []})
        with pytest.raises(ParseError):
            client.load_bootstrap()

        mock_request.return_value = _response(200, {"not": "a list"})
        with pytest.raises(ParseError):
            client.load_fixtures()


def test_html_and_invalid_json_raise_parse_error():
    client = FPLClient(settings=_settings(public_proxies=()))

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.return_value = _response(
            200, "<html>blocked</html>", content_type="text/html"
        )
        with pytest.raises(ParseError):
            client.load_bootstrap()

        mock_request.return_value = _response(200, "{not json")
        with pytest.raises(ParseError):
            client.load_bootstrap()


def test_live_gameweek_hits_expected_path():
    client = FPLClient(settings=_settings(public_proxies=()))
    payload = {"elements": [{"id": 1, "stats": {"minutes": 90}}]}

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.return_value = _response(200, payload)
        result = client.load_live_gameweek(29)

    assert result == payload
    _, kwargs = mock_request.call_args
    assert kwargs["url"] == "https://fpl.test/api/event/29/live/"


def test_manager_endpoints_require_objects():
    client = FPLClient(settings=_settings(public_proxies=()))

    with patch.object(client.http.session, "request") as mock_request:
        mock_request.return_value = _response(200, {"id": 77})
        assert client.load_manager(77) == {"id": 77}
        assert mock_request.call_args.kwargs["url"].endswith("/entry/77/")

        client.load_manager_picks(77, 5)
        assert mock_request.call_args.kwargs["url"].endswith("/entry/77/event/5/picks/")

        client.load_league_standings(314)
        assert mock_request.call_args.kwargs["url"].endswith(
            "/leagues-classic/314/standings/"
        )

        mock_request.return_value = _response(200, [1, 2])
        with pytest.raises(ParseError):
            client.load_player_summary(1)
