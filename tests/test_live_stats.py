from __future__ import annotations

import asyncio

import pytest

from fplspace.exceptions import ParseError
from fplspace.models import LivePlayerUpdate

from tests.test_store import FakeClient, _loaded_store


def _counting(store):
    notifications = []
    store.subscribe(
        lambda _store, fields: notifications.append(fields) if "live_stats" in fields else None
    )
    return notifications


def test_identical_payload_notifies_once():
    store = _loaded_store()
    notifications = _counting(store)

    assert store.update_live_player_stats([{"id": 5, "stats": {"form": "8.0"}}]) is True
    assert store.update_live_player_stats([{"id": 5, "stats": {"form": "8.0"}}]) is False

    assert len(notifications) == 1
    assert store.get_live_stats(5) == {"form": "8.0"}


def test_merge_is_additive():
    store = _loaded_store()
    store.update_live_player_stats([{"id": 5, "stats": {"a": 1}}])
    store.update_live_player_stats([LivePlayerUpdate(5, {"b": 2})])
    assert store.get_live_stats(5) == {"a": 1, "b": 2}

    store.update_live_player_stats([{"id": 5, "stats": {"a": 3}}])
    assert store.get_live_stats(5) == {"a": 3, "b": 2}


def test_comparison_is_by_value_not_identity_or_order():
    store = _loaded_store()
    notifications = _counting(store)
    store.update_live_player_stats([{"id": 5, "stats": {"x": 1, "nested": {"k": [1, 2]}}}])
    store.update_live_player_stats([{"id": 5, "stats": {"nested": {"k": [1, 2]}, "x": 1}}])
    assert len(notifications) == 1


def test_batch_produces_single_notification():
    store = _loaded_store()
    notifications = _counting(store)
    changed = store.update_live_player_stats(
        [
            {"id": 5, "stats": {"bps": 20}},
            {"id": 6, "stats": {"bps": 11}},
            {"id": 7, "stats": {"bps": 3}},
        ]
    )
    assert changed is True
    assert len(notifications) == 1
    assert set(store.live_stats) == {5, 6, 7}


def test_canonical_players_and_snapshots_are_untouched():
    store = _loaded_store()
    player = store.get_player(5)
    players = store.players
    store.update_live_player_stats([{"id": 5, "stats": {"total_points": 999}}])
    snapshot = store.live_stats
    snapshot_entry = snapshot[5]

    store.update_live_player_stats([{"id": 5, "stats": {"total_points": 1000}}])

    assert store.players is players
    assert store.get_player(5) is player
    assert player.total_points == 0
    assert snapshot_entry == {"total_points": 999}
    assert store.get_live_stats(5) == {"total_points": 1000}


def test_incoming_stats_are_copied():
    store = _loaded_store()
    stats = {"explain": [1]}
    store.update_live_player_stats([{"id": 5, "stats": stats}])
    stats["explain"].append(2)
    assert store.get_live_stats(5) == {"explain": [1]}
    with pytest.raises(TypeError):
        store.live_stats[5] = {}


def test_refresh_live_gameweek_merges_players_who_played():
    client = FakeClient()
    client.live_payload = {
        "elements": [
            {"id": 5, "stats": {"minutes": 90, "bps": 30}},
            {"id": 6, "stats": {"minutes": 0, "bps": 0}},
        ]
    }
    store = _loaded_store(client)

    assert asyncio.run(store.refresh_live_gameweek(10)) is True
    assert asyncio.run(store.refresh_live_gameweek(10)) is False
    assert store.get_live_stats(5) == {"minutes": 90, "bps": 30}
    assert store.get_live_stats(6) == {}
    assert client.calls["live"] == 2


def test_refresh_live_gameweek_rejects_bad_payload():
    client = FakeClient()
    client.live_payload = {"elements": None}
    store = _loaded_store(client)
    with pytest.raises(ParseError):
        asyncio.run(store.refresh_live_gameweek(10))


def test_live_stats_view_rejects_outside_writes():
    store = _loaded_store()
    notifications = _counting(store)
    store.update_live_player_stats([{"id": 5, "stats": {"form": "8.0", "explain": [1]}}])

    with pytest.raises(TypeError):
        store.live_stats[5]["form"] = "1.0"
    store.live_stats[5]["explain"].append(2)
    store.get_live_stats(5)["explain"].append(3)

    assert store.get_live_stats(5) == {"form": "8.0", "explain": [1]}
    assert store.update_live_player_stats(
        [{"id": 5, "stats": {"form": "8.0", "explain": [1]}}]
    ) is False
    assert len(notifications) == 1


def test_refresh_live_gameweek_coerces_minutes():
    client = FakeClient()
    client.live_payload = {
        "elements": [
            {"id": 5, "stats": {"minutes": "45"}},
            {"id": 6, "stats": {"minutes": "n/a"}},
            {"id": 7, "stats": None},
        ]
    }
    store = _loaded_store(client)

    assert asyncio.run(store.refresh_live_gameweek(10)) is True
    assert store.get_live_stats(5) == {"minutes": "45"}
    assert set(store.live_stats) == {5}
