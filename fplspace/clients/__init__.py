"""
HTTP clients for the FPL API.
"""

from .fpl import FPLClient
from .images import (
    player_photo_url,
    proxied_image_url,
    team_badge_url,
    team_kit_url,
)

__all__ = [
    "FPLClient",
    "player_photo_url",
    "proxied_image_url",
    "team_badge_url",
    "team_kit_url",
]
