"""
Custom exceptions for the FPL data layer.
"""
from __future__ import annotations


class APIClientError(RuntimeError):
    """
    Generic API client error.
    """

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(APIClientError):
    """
    Raised when an endpoint is unreachable or answers with a non-success status.
    """


class APIRateLimitError(NetworkError):
    """
    Raised when the API indicates that a rate limit has been hit.
    """


class APINotFoundError(NetworkError):
    """
    Raised when a requested resource is not found.
    """


class ParseError(APIClientError):
    """
    Raised when a response body is not JSON of the expected shape.
    """
