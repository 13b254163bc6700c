"""
Configuration helpers for the FPL data layer.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

_ENV_LOADED = False

DEFAULT_PUBLIC_PROXIES: Tuple[str, ...] = (
    "https://corsproxy.io/?{encoded_url}",
    "https://api.codetabs.com/v1/proxy?quest={encoded_url}",
    "https://thingproxy.freeboard.io/fetch/{url}",
    "https://api.allorigins.win/raw?url={encoded_url}",
)


def _ensure_env_loaded() -> None:
    """
    Load environment variables from a .env file if present.
    """
    global _ENV_LOADED  # noqa: PLW0603 - intentional module level state
    if _ENV_LOADED:
        return

    candidates = []
    explicit = os.getenv("FPL_ENV_FILE")
    if explicit:
        candidates.append(Path(explicit))
    cwd_env = Path.cwd() / ".env"
    candidates.append(cwd_env)
    repo_env = Path(__file__).resolve().parents[1] / ".env"
    if repo_env != cwd_env:
        candidates.append(repo_env)

    for path in candidates:
        if not path or not path.exists():
            continue
        try:
            for line in path.read_text().splitlines():
                stripped = line.strip()
                if not stripped or stripped.startswith("#") or "=" not in stripped:
                    continue
                key, value = stripped.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            continue

    _ENV_LOADED = True


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _proxy_templates(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_PUBLIC_PROXIES
    if raw.strip().lower() in {"", "none", "off"}:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class FPLSettings:
    """
    Runtime configuration for the FPL client and store.

    ``proxy_url`` points at the edge proxy that exposes ``/api/<path>`` and
    ``/img/<path>``; ``public_proxies`` are URL templates accepting ``{url}``
    or ``{encoded_url}`` placeholders, tried after the direct upstream URL.
    """

    base_url: str = "https://fantasy.premierleague.com/api"
    proxy_url: Optional[str] = None
    public_proxies: Tuple[str, ...] = DEFAULT_PUBLIC_PROXIES
    http_timeout: int = 10
    http_max_retries: int = 0
    bootstrap_ttl: int = 300
    fixtures_ttl: int = 60
    default_gameweek: int = 28
    initial_budget: int = 1000
    squad_size: int = 15

    def __post_init__(self) -> None:
        for template in self.public_proxies:
            try:
                template.format(url="", encoded_url="")
            except (KeyError, IndexError, ValueError) as exc:
                raise ValueError(
                    f"Proxy template {template!r} may only use {{url}} or {{encoded_url}}"
                ) from exc

    @classmethod
    def from_env(cls) -> "FPLSettings":
        """
        Construct settings using environment variables with sensible defaults.
        """
        _ensure_env_loaded()
        return cls(
            base_url=os.getenv("FPL_API_BASE_URL", cls.base_url),
            proxy_url=os.getenv("FPL_PROXY_URL") or None,
            public_proxies=_proxy_templates(os.getenv("FPL_PUBLIC_PROXIES")),
            http_timeout=_int_env("FPL_HTTP_TIMEOUT", cls.http_timeout),
            http_max_retries=_int_env("FPL_HTTP_MAX_RETRIES", cls.http_max_retries),
            bootstrap_ttl=_int_env("FPL_BOOTSTRAP_TTL", cls.bootstrap_ttl),
            fixtures_ttl=_int_env("FPL_FIXTURES_TTL", cls.fixtures_ttl),
            default_gameweek=_int_env("FPL_DEFAULT_GAMEWEEK", cls.default_gameweek),
            initial_budget=_int_env("FPL_INITIAL_BUDGET", cls.initial_budget),
            squad_size=_int_env("FPL_SQUAD_SIZE", cls.squad_size),
        )
