"""
Typed records for Fantasy Premier League entities.

Upstream payloads are plain JSON dictionaries; each record exposes a
``from_api`` constructor that validates the fields it relies on and raises
:class:`~fplspace.exceptions.ParseError` when the shape is wrong. Records are
frozen so consumers can hold on to them across state updates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .exceptions import ParseError


class Position(IntEnum):
    GOALKEEPER = 1
    DEFENDER = 2
    MIDFIELDER = 3
    FORWARD = 4


class Availability(str, Enum):
    AVAILABLE = "a"
    INJURED = "i"
    DOUBTFUL = "d"
    SUSPENDED = "s"
    UNAVAILABLE = "u"
    NOT_ELIGIBLE = "n"


def _require(data: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in data:
        raise ParseError(f"{kind} payload is missing '{key}'")
    return data[key]


def _as_int(value: Any, key: str, kind: str) -> int:
    if isinstance(value, bool):
        raise ParseError(f"{kind} field '{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{kind} field '{key}' must be an integer") from exc


def optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _ensure_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ParseError(f"{kind} entry must be a JSON object")
    return data


@dataclass(frozen=True)
class Team:
    id: int
    name: str
    short_name: str
    strength: int = 0
    code: Optional[int] = None

    @classmethod
    def from_api(cls, data: Any) -> "Team":
        data = _ensure_mapping(data, "Team")
        return cls(
            id=_as_int(_require(data, "id", "Team"), "id", "Team"),
            name=str(_require(data, "name", "Team")),
            short_name=str(_require(data, "short_name", "Team")),
            strength=optional_int(data.get("strength")) or 0,
            code=optional_int(data.get("code")),
        )


_PLAYER_FIELDS = (
    "id",
    "first_name",
    "second_name",
    "web_name",
    "team",
    "element_type",
    "now_cost",
    "status",
    "total_points",
    "minutes",
    "goals_scored",
    "assists",
    "clean_sheets",
    "bonus",
    "bps",
    "form",
    "selected_by_percent",
    "points_per_game",
    "news",
    "photo",
    "code",
    "team_name",
    "team_code",
)


@dataclass(frozen=True)
class Player:
    id: int
    first_name: str
    second_name: str
    web_name: str
    team: int
    element_type: int
    now_cost: int  # tenths of a million, 65 == 6.5m
    status: str = Availability.AVAILABLE.value
    total_points: int = 0
    minutes: int = 0
    goals_scored: int = 0
    assists: int = 0
    clean_sheets: int = 0
    bonus: int = 0
    bps: int = 0
    form: str = "0.0"
    selected_by_percent: str = "0.0"
    points_per_game: str = "0.0"
    news: str = ""
    photo: str = ""
    code: Optional[int] = None
    team_name: str = ""
    team_code: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict, hash=False, repr=False)

    @classmethod
    def from_api(cls, data: Any) -> "Player":
        data = _ensure_mapping(data, "Player")
        extra = {key: value for key, value in data.items() if key not in _PLAYER_FIELDS}
        return cls(
            id=_as_int(_require(data, "id", "Player"), "id", "Player"),
            first_name=str(data.get("first_name") or ""),
            second_name=str(data.get("second_name") or ""),
            web_name=str(_require(data, "web_name", "Player")),
            team=_as_int(_require(data, "team", "Player"), "team", "Player"),
            element_type=_as_int(
                _require(data, "element_type", "Player"), "element_type", "Player"
            ),
            now_cost=_as_int(_require(data, "now_cost", "Player"), "now_cost", "Player"),
            status=str(data.get("status") or Availability.AVAILABLE.value),
            total_points=optional_int(data.get("total_points")) or 0,
            minutes=optional_int(data.get("minutes")) or 0,
            goals_scored=optional_int(data.get("goals_scored")) or 0,
            assists=optional_int(data.get("assists")) or 0,
            clean_sheets=optional_int(data.get("clean_sheets")) or 0,
            bonus=optional_int(data.get("bonus")) or 0,
            bps=optional_int(data.get("bps")) or 0,
            form=str(data.get("form") or "0.0"),
            selected_by_percent=str(data.get("selected_by_percent") or "0.0"),
            points_per_game=str(data.get("points_per_game") or "0.0"),
            news=str(data.get("news") or ""),
            photo=str(data.get("photo") or ""),
            code=optional_int(data.get("code")),
            team_name=str(data.get("team_name") or ""),
            team_code=optional_int(data.get("team_code")),
            extra=extra,
        )

    @property
    def position(self) -> Optional[Position]:
        try:
            return Position(self.element_type)
        except ValueError:
            return None

    @property
    def availability(self) -> Optional[Availability]:
        try:
            return Availability(self.status)
        except ValueError:
            return None

    @property
    def price(self) -> float:
        return self.now_cost / 10


@dataclass(frozen=True)
class Fixture:
    id: int
    event: Optional[int]
    team_h: int
    team_a: int
    team_h_difficulty: int
    team_a_difficulty: int
    kickoff_time: Optional[str] = None
    finished: bool = False
    started: bool = False
    team_h_score: Optional[int] = None
    team_a_score: Optional[int] = None

    @classmethod
    def from_api(cls, data: Any) -> "Fixture":
        data = _ensure_mapping(data, "Fixture")
        return cls(
            id=_as_int(_require(data, "id", "Fixture"), "id", "Fixture"),
            # Unscheduled fixtures carry a null gameweek.
            event=optional_int(data.get("event")),
            team_h=_as_int(_require(data, "team_h", "Fixture"), "team_h", "Fixture"),
            team_a=_as_int(_require(data, "team_a", "Fixture"), "team_a", "Fixture"),
            team_h_difficulty=_as_int(
                _require(data, "team_h_difficulty", "Fixture"),
                "team_h_difficulty",
                "Fixture",
            ),
            team_a_difficulty=_as_int(
                _require(data, "team_a_difficulty", "Fixture"),
                "team_a_difficulty",
                "Fixture",
            ),
            kickoff_time=_opt_str(data.get("kickoff_time")),
            finished=bool(data.get("finished", False)),
            started=bool(data.get("started", False)),
            team_h_score=optional_int(data.get("team_h_score")),
            team_a_score=optional_int(data.get("team_a_score")),
        )


@dataclass(frozen=True)
class Event:
    id: int
    name: str
    deadline_time: Optional[str] = None
    finished: bool = False
    is_current: bool = False
    is_next: bool = False

    @classmethod
    def from_api(cls, data: Any) -> "Event":
        data = _ensure_mapping(data, "Event")
        return cls(
            id=_as_int(_require(data, "id", "Event"), "id", "Event"),
            name=str(data.get("name") or ""),
            deadline_time=_opt_str(data.get("deadline_time")),
            finished=bool(data.get("finished", False)),
            is_current=bool(data.get("is_current", False)),
            is_next=bool(data.get("is_next", False)),
        )


@dataclass(frozen=True)
class PlayerFixture:
    gameweek: int
    opponent: str
    difficulty: int
    is_home: bool


@dataclass(frozen=True)
class LivePlayerUpdate:
    id: int
    stats: Mapping[str, Any]


@dataclass(frozen=True)
class BootstrapPayload:
    events: Tuple[Event, ...]
    teams: Tuple[Team, ...]
    elements: Tuple[Player, ...]

    @classmethod
    def from_api(cls, data: Any) -> "BootstrapPayload":
        if not isinstance(data, Mapping):
            raise ParseError("Bootstrap payload must be a JSON object")
        sections = {}
        for key in ("events", "teams", "elements"):
            value = data.get(key)
            if not isinstance(value, list):
                raise ParseError(f"Bootstrap payload field '{key}' must be a list")
            sections[key] = value
        return cls(
            events=tuple(Event.from_api(item) for item in sections["events"]),
            teams=tuple(Team.from_api(item) for item in sections["teams"]),
            elements=tuple(Player.from_api(item) for item in sections["elements"]),
        )


def parse_fixtures(data: Any) -> Sequence[Fixture]:
    """
    Parse the fixture list endpoint payload.
    """
    if not isinstance(data, list):
        raise ParseError("Fixtures payload must be a list")
    return [Fixture.from_api(item) for item in data]
