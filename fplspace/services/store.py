"""
In-process store holding FPL entities, load status, live stats and the
user's selected squad.

An :class:`FPLStore` is created once at application start and handed to every
consumer. Loads are coroutines that suspend only around the blocking HTTP call;
everything else is synchronous and reads the state already in memory.
"""
from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import replace
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from ..cache import DataCache
from ..clients.fpl import FPLClient
from ..config import FPLSettings
from ..exceptions import APIClientError, ParseError
from ..models import (
    BootstrapPayload,
    Event,
    Fixture,
    LivePlayerUpdate,
    Player,
    PlayerFixture,
    Team,
    optional_int,
)
from .reference_data import reference_bootstrap, reference_fixtures

LOGGER = logging.getLogger(__name__)

BOOTSTRAP_KEY = "bootstrap"
FIXTURES_KEY = "fixtures"

T = TypeVar("T")
Listener = Callable[["FPLStore", FrozenSet[str]], None]
LiveUpdate = Union[LivePlayerUpdate, Mapping[str, Any]]


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    DEGRADED = "degraded"


def normalize_bootstrap(payload: BootstrapPayload) -> BootstrapPayload:
    """
    Attach each player's team short name and code.
    """
    teams = {team.id: team for team in payload.teams}
    players = []
    for player in payload.elements:
        team = teams.get(player.team)
        players.append(
            replace(
                player,
                team_name=team.short_name if team else "",
                team_code=team.code if team else None,
            )
        )
    return replace(payload, elements=tuple(players))


@lru_cache(maxsize=1)
def _normalized_reference() -> BootstrapPayload:
    return normalize_bootstrap(reference_bootstrap())


def _frozen_view(table: Mapping[int, Dict[str, Any]]) -> Mapping[int, Mapping[str, Any]]:
    return MappingProxyType(
        {player_id: MappingProxyType(copy.deepcopy(entry)) for player_id, entry in table.items()}
    )


def _unpack_update(update: LiveUpdate) -> Tuple[int, Mapping[str, Any]]:
    if isinstance(update, LivePlayerUpdate):
        return update.id, update.stats
    return int(update["id"]), update.get("stats") or {}


class FPLStore:
    """
    Shared state and derived queries for FPL display widgets.

    Failed loads never surface as errors: the store swaps in the built-in
    reference dataset and reports ``LoadStatus.DEGRADED`` through
    :attr:`status`, while :attr:`error` stays ``None``.
    """

    def __init__(
        self,
        settings: Optional[FPLSettings] = None,
        *,
        client: Optional[FPLClient] = None,
        cache: Optional[DataCache] = None,
    ):
        self.settings = settings or FPLSettings.from_env()
        self.client = client or FPLClient(self.settings)
        self.cache = cache if cache is not None else DataCache()

        self.players: Tuple[Player, ...] = ()
        self.teams: Tuple[Team, ...] = ()
        self.fixtures: Tuple[Fixture, ...] = ()
        self.events: Tuple[Event, ...] = ()
        self.bootstrap: Optional[BootstrapPayload] = None
        self.current_gameweek: int = self.settings.default_gameweek
        self.is_loading = False
        self.error: Optional[str] = None
        self.fallback_sources: FrozenSet[str] = frozenset()

        self.selected_players: Tuple[Player, ...] = ()
        self.budget: int = self.settings.initial_budget
        self.free_transfers = 1

        self._live_stats: Dict[int, Dict[str, Any]] = {}
        self._live_view: Mapping[int, Mapping[str, Any]] = MappingProxyType({})
        self._players_by_id: Dict[int, Player] = {}
        self._teams_by_id: Dict[int, Team] = {}
        self._loaded: set = set()
        self._pending: Dict[str, "asyncio.Future[Any]"] = {}
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener(store, changed_fields)``; returns an unsubscribe callable.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, fields: Iterable[str]) -> None:
        changed = frozenset(fields)
        for listener in list(self._listeners):
            listener(self, changed)

    def _commit(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        if "players" in changes:
            self._players_by_id = {player.id: player for player in self.players}
        if "teams" in changes:
            self._teams_by_id = {team.id: team for team in self.teams}
        self._notify(changes)

    @property
    def status(self) -> LoadStatus:
        if self.is_loading:
            return LoadStatus.LOADING
        if not self._loaded:
            return LoadStatus.IDLE
        if self.fallback_sources:
            return LoadStatus.DEGRADED
        return LoadStatus.READY

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def _single_flight(
        self, key: str, factory: Callable[[], Awaitable[T]]
    ) -> T:
        """
        Share one in-flight request between overlapping callers for ``key``.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task

            def _forget(done: "asyncio.Future[Any]", key: str = key) -> None:
                if self._pending.get(key) is done:
                    del self._pending[key]

            task.add_done_callback(_forget)
        else:
            LOGGER.debug("Joining in-flight %s request", key)
        return await task

    async def _load_bootstrap(self) -> BootstrapPayload:
        payload = await asyncio.to_thread(self.client.load_bootstrap)
        normalized = normalize_bootstrap(payload)
        self.cache.set(BOOTSTRAP_KEY, normalized, ttl=self.settings.bootstrap_ttl)
        return normalized

    async def _load_fixtures(self) -> Tuple[Fixture, ...]:
        fixtures = tuple(await asyncio.to_thread(self.client.load_fixtures))
        self.cache.set(FIXTURES_KEY, fixtures, ttl=self.settings.fixtures_ttl)
        return fixtures

    def _with_source(self, key: str, *, degraded: bool) -> FrozenSet[str]:
        if degraded:
            return self.fallback_sources | {key}
        return self.fallback_sources - {key}

    def _apply_bootstrap(self, payload: BootstrapPayload, *, degraded: bool) -> None:
        current = next(
            (event.id for event in payload.events if event.is_current),
            self.settings.default_gameweek,
        )
        self._loaded.add(BOOTSTRAP_KEY)
        self._commit(
            players=payload.elements,
            teams=payload.teams,
            events=payload.events,
            current_gameweek=current,
            bootstrap=None if degraded else payload,
            is_loading=False,
            error=None,
            fallback_sources=self._with_source(BOOTSTRAP_KEY, degraded=degraded),
        )

    async def fetch_bootstrap_data(self) -> None:
        """
        Load teams, players and gameweeks from cache, the API, or reference data.
        """
        self._commit(is_loading=True, error=None)

        cached = self.cache.get(BOOTSTRAP_KEY)
        if cached is not None:
            LOGGER.debug("Serving bootstrap data from cache")
            self._apply_bootstrap(cached, degraded=False)
            return

        try:
            payload = await self._single_flight(BOOTSTRAP_KEY, self._load_bootstrap)
        except APIClientError as exc:
            LOGGER.warning("Bootstrap load failed, using reference data: %s", exc)
            self._apply_bootstrap(_normalized_reference(), degraded=True)
            return
        except Exception:
            LOGGER.exception("Unexpected bootstrap load failure, using reference data")
            self._apply_bootstrap(_normalized_reference(), degraded=True)
            return
        self._apply_bootstrap(payload, degraded=False)

    async def fetch_fixtures(self) -> None:
        """
        Load the fixture list from cache, the API, or reference data.
        """
        cached = self.cache.get(FIXTURES_KEY)
        if cached is not None:
            LOGGER.debug("Serving fixtures from cache")
            fixtures, degraded = cached, False
        else:
            try:
                fixtures = await self._single_flight(FIXTURES_KEY, self._load_fixtures)
                degraded = False
            except APIClientError as exc:
                LOGGER.warning("Fixture load failed, using reference data: %s", exc)
                fixtures, degraded = reference_fixtures(), True
            except Exception:
                LOGGER.exception("Unexpected fixture load failure, using reference data")
                fixtures, degraded = reference_fixtures(), True
        self._loaded.add(FIXTURES_KEY)
        self._commit(
            fixtures=fixtures,
            fallback_sources=self._with_source(FIXTURES_KEY, degraded=degraded),
        )

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------

    def get_player(self, player_id: int) -> Optional[Player]:
        return self._players_by_id.get(player_id)

    def get_team(self, team_id: int) -> Optional[Team]:
        return self._teams_by_id.get(team_id)

    def get_team_name(self, team_id: int) -> str:
        team = self._teams_by_id.get(team_id)
        return team.short_name if team else ""

    def get_player_fixtures(self, player_id: int, count: int = 5) -> List[PlayerFixture]:
        """
        Return the player's next ``count`` unfinished fixtures from the current gameweek.
        """
        player = self._players_by_id.get(player_id)
        if player is None or count <= 0:
            return []

        upcoming = sorted(
            (
                fixture
                for fixture in self.fixtures
                if player.team in (fixture.team_h, fixture.team_a)
                and fixture.event is not None
                and fixture.event >= self.current_gameweek
                and not fixture.finished
            ),
            key=lambda fixture: (fixture.event, str(fixture.kickoff_time or ""), fixture.id),
        )

        result: List[PlayerFixture] = []
        for fixture in upcoming[:count]:
            is_home = fixture.team_h == player.team
            opponent = self._teams_by_id.get(fixture.team_a if is_home else fixture.team_h)
            result.append(
                PlayerFixture(
                    gameweek=fixture.event,
                    opponent=opponent.short_name if opponent else "TBD",
                    difficulty=(
                        fixture.team_h_difficulty if is_home else fixture.team_a_difficulty
                    ),
                    is_home=is_home,
                )
            )
        return result

    def get_average_fdr(self, player_id: int) -> float:
        fixtures = self.get_player_fixtures(player_id, 5)
        if not fixtures:
            return 0
        return sum(fixture.difficulty for fixture in fixtures) / len(fixtures)

    # ------------------------------------------------------------------
    # Live stats
    # ------------------------------------------------------------------

    @property
    def live_stats(self) -> Mapping[int, Mapping[str, Any]]:
        """
        Read-only view of the live side-table.

        Entries are frozen copies; writes through the view never reach the store.
        """
        return self._live_view

    def get_live_stats(self, player_id: int) -> Dict[str, Any]:
        return copy.deepcopy(self._live_stats.get(player_id, {}))

    def update_live_player_stats(self, updates: Iterable[LiveUpdate]) -> bool:
        """
        Merge partial per-player stats into the live side-table.

        Incoming fields overwrite, omitted fields persist. The table is
        replaced copy-on-write and listeners hear about it at most once, and
        only when some merged entry differs by value from what was there.
        """
        table = dict(self._live_stats)
        changed = False
        for update in updates:
            player_id, stats = _unpack_update(update)
            existing = table.get(player_id)
            merged = {**(existing or {}), **copy.deepcopy(dict(stats))}
            if existing is None or merged != existing:
                table[player_id] = merged
                changed = True

        if changed:
            self._live_stats = table
            self._live_view = _frozen_view(table)
            self._notify(("live_stats",))
        return changed

    async def refresh_live_gameweek(self, gameweek: int) -> bool:
        """
        Pull live stats for ``gameweek`` and merge those of players who have played.
        """
        payload = await asyncio.to_thread(self.client.load_live_gameweek, gameweek)
        elements = payload.get("elements")
        if not isinstance(elements, list):
            raise ParseError("Live gameweek payload field 'elements' must be a list")
        updates = []
        for element in elements:
            if not isinstance(element, Mapping) or "id" not in element:
                continue
            stats = element.get("stats") or {}
            if not isinstance(stats, Mapping):
                continue
            if (optional_int(stats.get("minutes")) or 0) > 0:
                updates.append(LivePlayerUpdate(int(element["id"]), stats))
        return self.update_live_player_stats(updates)

    # ------------------------------------------------------------------
    # Squad selection
    # ------------------------------------------------------------------

    def add_player_to_team(self, player: Player) -> bool:
        if len(self.selected_players) >= self.settings.squad_size:
            LOGGER.debug("Squad full, not adding player %s", player.id)
            return False
        if any(selected.id == player.id for selected in self.selected_players):
            return False
        if self.budget < player.now_cost:
            LOGGER.debug("Insufficient budget for player %s", player.id)
            return False
        self._commit(
            selected_players=self.selected_players + (player,),
            budget=self.budget - player.now_cost,
        )
        return True

    def remove_player_from_team(self, player_id: int) -> bool:
        player = next((p for p in self.selected_players if p.id == player_id), None)
        if player is None:
            return False
        self._commit(
            selected_players=tuple(p for p in self.selected_players if p.id != player_id),
            budget=self.budget + player.now_cost,
        )
        return True

    def set_current_gameweek(self, gameweek: int) -> None:
        self._commit(current_gameweek=int(gameweek))
