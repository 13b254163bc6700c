"""
Fantasy Premier League data layer: cached API access, fallback data and
derived fixture analytics.
"""

from .config import FPLSettings
from .cache import DataCache
from .exceptions import (
    APIClientError,
    APINotFoundError,
    APIRateLimitError,
    NetworkError,
    ParseError,
)
from .clients.fpl import FPLClient
from .models import (
    Availability,
    BootstrapPayload,
    Event,
    Fixture,
    LivePlayerUpdate,
    Player,
    PlayerFixture,
    Position,
    Team,
)
from .services.store import FPLStore, LoadStatus

__all__ = [
    "FPLSettings",
    "DataCache",
    "APIClientError",
    "APINotFoundError",
    "APIRateLimitError",
    "NetworkError",
    "ParseError",
    "FPLClient",
    "Availability",
    "BootstrapPayload",
    "Event",
    "Fixture",
    "LivePlayerUpdate",
    "Player",
    "PlayerFixture",
    "Position",
    "Team",
    "FPLStore",
    "LoadStatus",
]
