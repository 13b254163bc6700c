"""
Fantasy Premier League API client implementation.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..config import FPLSettings
from ..exceptions import APIClientError, NetworkError, ParseError
from ..http import HTTPClient
from ..models import BootstrapPayload, Fixture, parse_fixtures

LOGGER = logging.getLogger(__name__)


class FPLClient:
    """
    Provide typed wrappers around the FPL endpoints.

    Every request walks a chain of candidate URLs (edge proxy, direct
    upstream, public proxies) and returns the first decodable response.
    """

    def __init__(
        self,
        settings: Optional[FPLSettings] = None,
        *,
        http: Optional[HTTPClient] = None,
    ):
        self.settings = settings or FPLSettings.from_env()
        self.http = http or HTTPClient(
            timeout=self.settings.http_timeout,
            max_retries=self.settings.http_max_retries,
        )

    def candidate_urls(self, path: str) -> List[str]:
        """
        Return the URLs to try for an API path, in priority order.
        """
        path = path.lstrip("/")
        upstream = f"{self.settings.base_url.rstrip('/')}/{path}"
        urls: List[str] = []
        if self.settings.proxy_url:
            urls.append(f"{self.settings.proxy_url.rstrip('/')}/api/{path}")
        urls.append(upstream)
        encoded = quote(upstream, safe="")
        for template in self.settings.public_proxies:
            urls.append(template.format(url=upstream, encoded_url=encoded))
        return urls

    def _fetch(self, path: str) -> Any:
        last_error: Optional[APIClientError] = None
        for url in self.candidate_urls(path):
            try:
                return self.http.get(url)
            except APIClientError as exc:
                LOGGER.debug("Candidate %s failed for %s: %s", url, path, exc)
                last_error = exc
        if last_error is None:
            raise NetworkError(f"No candidate URLs configured for '{path}'")
        raise last_error

    def _fetch_object(self, path: str) -> Dict[str, Any]:
        payload = self._fetch(path)
        if not isinstance(payload, dict):
            raise ParseError(f"Expected a JSON object from '{path}'")
        return payload

    def load_bootstrap(self) -> BootstrapPayload:
        """
        Fetch the season's teams, players and gameweeks.
        """
        return BootstrapPayload.from_api(self._fetch("bootstrap-static/"))

    def load_fixtures(self) -> List[Fixture]:
        """
        Fetch every fixture of the season.
        """
        return list(parse_fixtures(self._fetch("fixtures/")))

    def load_live_gameweek(self, gameweek: int) -> Dict[str, Any]:
        """
        Fetch per-player live statistics for a gameweek.
        """
        return self._fetch_object(f"event/{int(gameweek)}/live/")

    def load_manager(self, manager_id: int) -> Dict[str, Any]:
        return self._fetch_object(f"entry/{int(manager_id)}/")

    def load_manager_picks(self, manager_id: int, gameweek: int) -> Dict[str, Any]:
        return self._fetch_object(f"entry/{int(manager_id)}/event/{int(gameweek)}/picks/")

    def load_manager_history(self, manager_id: int) -> Dict[str, Any]:
        return self._fetch_object(f"entry/{int(manager_id)}/history/")

    def load_player_summary(self, player_id: int) -> Dict[str, Any]:
        """
        Fetch fixtures and match history for a single player.
        """
        return self._fetch_object(f"element-summary/{int(player_id)}/")

    def load_league_standings(self, league_id: int) -> Dict[str, Any]:
        return self._fetch_object(f"leagues-classic/{int(league_id)}/standings/")
