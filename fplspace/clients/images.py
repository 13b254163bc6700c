"""
URL builders for player and team imagery.
"""
from __future__ import annotations

from typing import Union

PHOTO_BASE = "https://resources.premierleague.com/premierleague/photos/players/110x140"
BADGE_BASE = "https://resources.premierleague.com/premierleague/badges/70"
KIT_BASE = "https://fantasy.premierleague.com/dist/img/shirts/standard"


def player_photo_url(code: Union[int, str]) -> str:
    # Bootstrap photos are named "<code>.jpg"; the image host wants "p<code>.png".
    code = str(code).split(".", 1)[0]
    return f"{PHOTO_BASE}/p{code}.png"


def team_badge_url(team_code: int) -> str:
    return f"{BADGE_BASE}/t{int(team_code)}.png"


def team_kit_url(team_code: int, shirt_type: int = 1) -> str:
    if shirt_type not in (1, 2):
        raise ValueError("shirt_type must be 1 (outfield) or 2 (goalkeeper)")
    return f"{KIT_BASE}/shirt_{int(team_code)}_{shirt_type}-220.webp"


def proxied_image_url(proxy_url: str, path: str) -> str:
    """
    Route an image path through the edge proxy's ``/img/`` passthrough.
    """
    return f"{proxy_url.rstrip('/')}/img/{path.lstrip('/')}"
