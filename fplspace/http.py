"""
HTTP utilities shared by API clients.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import (
    APINotFoundError,
    APIRateLimitError,
    NetworkError,
    ParseError,
)


class HTTPClient:
    """
    Thin wrapper around requests.Session with optional retries and error mapping.
    """

    def __init__(
        self,
        *,
        timeout: int = 10,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        user_agent: str = "fplspace/0.1",
    ):
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            read=max_retries,
            connect=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update(
            {"Accept": "application/json", "User-Agent": user_agent}
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform an HTTP request against an absolute URL and return decoded JSON.
        """
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(str(exc)) from exc

        self._raise_for_status(response)
        if not response.content:
            raise ParseError(f"Empty response body from {url}")
        content_type = response.headers.get("Content-Type", "").lower()
        # Public proxies often relabel JSON as text/plain; HTML means an error page.
        if "html" in content_type:
            raise ParseError(f"Unexpected content type '{content_type}' from {url}")
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"Failed to parse JSON response from {url}") from exc

    def get(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", url, params=params)

    def _raise_for_status(self, response: Response) -> None:
        """
        Map HTTP errors to custom exceptions.
        """
        if 200 <= response.status_code < 300:
            return
        status = response.status_code
        message = f"API request failed with status {status}"
        if status == 404:
            raise APINotFoundError(message, status_code=status)
        if status == 429:
            raise APIRateLimitError(message, status_code=status)
        raise NetworkError(message, status_code=status)
