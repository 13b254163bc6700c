"""
Built-in reference dataset served when the FPL API cannot be reached.

The rows are stored in the upstream JSON shape so they go through the same
parsing and normalisation as live payloads.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Tuple

from ..models import BootstrapPayload, Fixture, parse_fixtures

_TEAMS: Tuple[Tuple[int, str, str, int], ...] = (
    (1, "Arsenal", "ARS", 5),
    (2, "Aston Villa", "AVL", 4),
    (3, "Bournemouth", "BOU", 2),
    (4, "Brentford", "BRE", 3),
    (5, "Brighton", "BHA", 3),
    (6, "Burnley", "BUR", 2),
    (7, "Chelsea", "CHE", 4),
    (8, "Crystal Palace", "CRY", 2),
    (9, "Everton", "EVE", 2),
    (10, "Fulham", "FUL", 3),
    (11, "Liverpool", "LIV", 5),
    (12, "Luton", "LUT", 1),
    (13, "Man City", "MCI", 5),
    (14, "Man Utd", "MUN", 4),
    (15, "Newcastle", "NEW", 4),
    (16, "Nottm Forest", "NFO", 2),
    (17, "Sheffield Utd", "SHU", 1),
    (18, "Spurs", "TOT", 4),
    (19, "West Ham", "WHU", 3),
    (20, "Wolves", "WOL", 3),
)

# id, first, second, web, team, type, cost, owned%, form, ppg, pts, g, a, cs, bonus, bps, status, news
_PLAYERS: Tuple[tuple, ...] = (
    (1, "Cole", "Palmer", "Palmer", 7, 3, 112, "58.2", "9.2", "8.5", 245, 15, 12, 8, 28, 845, "a", ""),
    (2, "Erling", "Haaland", "Haaland", 13, 4, 150, "78.4", "8.8", "7.2", 198, 22, 5, 0, 18, 756, "a", ""),
    (3, "Mohamed", "Salah", "Salah", 11, 3, 128, "65.8", "8.5", "7.8", 215, 18, 10, 10, 25, 812, "a", ""),
    (4, "Bukayo", "Saka", "Saka", 1, 3, 95, "42.3", "7.8", "6.9", 189, 12, 14, 12, 22, 745, "a", ""),
    (5, "Phil", "Foden", "Foden", 13, 3, 89, "28.6", "6.2", "6.1", 165, 11, 8, 11, 18, 668, "a", ""),
    (6, "Son", "Heung-Min", "Son", 18, 3, 98, "31.4", "7.1", "6.5", 178, 13, 9, 7, 20, 712, "a", ""),
    (7, "Ollie", "Watkins", "Watkins", 2, 4, 91, "38.7", "8.4", "7.1", 192, 16, 11, 0, 24, 789, "a", ""),
    (8, "Alexander", "Isak", "Isak", 15, 4, 87, "22.9", "7.6", "6.8", 182, 17, 4, 0, 19, 698, "a", ""),
    (9, "Bruno", "Fernandes", "B.Fernandes", 14, 3, 85, "19.4", "5.8", "5.9", 159, 8, 9, 6, 14, 612, "s",
     "Suspended for one match after red card"),
    (10, "Kevin", "De Bruyne", "De Bruyne", 13, 3, 94, "12.3", "4.2", "4.8", 96, 4, 8, 5, 8, 423, "i",
     "Hamstring injury - return unknown"),
    (11, "Dominic", "Solanke", "Solanke", 3, 4, 72, "8.7", "8.9", "6.4", 174, 15, 6, 0, 21, 732, "a", ""),
    (12, "Jarrod", "Bowen", "Bowen", 19, 3, 76, "14.2", "6.4", "5.7", 154, 10, 7, 5, 15, 645, "a", ""),
    (13, "William", "Saliba", "Saliba", 1, 2, 60, "48.9", "6.8", "5.9", 161, 2, 1, 16, 18, 698, "a", ""),
    (14, "Virgil", "van Dijk", "Van Dijk", 11, 2, 64, "35.6", "6.4", "5.6", 152, 3, 2, 14, 16, 654, "a", ""),
    (15, "Kyle", "Walker", "Walker", 13, 2, 53, "11.8", "5.2", "4.8", 130, 0, 3, 13, 10, 512, "a", ""),
    (16, "David", "Raya", "Raya", 1, 1, 55, "42.3", "6.2", "5.4", 146, 0, 0, 16, 14, 612, "a", ""),
    (17, "Alisson", "Becker", "Alisson", 11, 1, 54, "28.7", "5.8", "5.1", 138, 0, 1, 14, 12, 578, "d",
     "Minor knock - 75% chance of playing"),
    (18, "Pedro", "Porro", "Porro", 18, 2, 54, "18.9", "5.9", "5.1", 138, 2, 7, 8, 11, 534, "a", ""),
    (19, "Morgan", "Gibbs-White", "Gibbs-White", 16, 3, 62, "6.2", "7.8", "5.6", 152, 8, 9, 6, 14, 612, "a", ""),
    (20, "Chris", "Wood", "Wood", 16, 4, 62, "4.8", "8.2", "5.9", 160, 14, 2, 0, 17, 689, "a", ""),
)

# id, gameweek, home, away, home difficulty, away difficulty, kickoff
_FIXTURES: Tuple[Tuple[int, int, int, int, int, int, str], ...] = (
    (1, 28, 1, 3, 2, 4, "2024-03-09T15:00:00Z"),
    (2, 28, 7, 15, 3, 3, "2024-03-09T15:00:00Z"),
    (3, 28, 11, 13, 5, 5, "2024-03-09T17:30:00Z"),
    (4, 28, 18, 2, 3, 3, "2024-03-10T14:00:00Z"),
    (5, 29, 3, 11, 5, 2, "2024-03-16T15:00:00Z"),
    (6, 29, 13, 1, 4, 4, "2024-03-16T15:00:00Z"),
    (7, 29, 15, 7, 3, 3, "2024-03-16T17:30:00Z"),
    (8, 29, 2, 18, 3, 3, "2024-03-17T14:00:00Z"),
    (9, 30, 1, 18, 3, 4, "2024-03-23T15:00:00Z"),
    (10, 30, 11, 7, 3, 4, "2024-03-23T15:00:00Z"),
    (11, 30, 13, 2, 3, 5, "2024-03-23T17:30:00Z"),
    (12, 30, 3, 15, 4, 2, "2024-03-24T14:00:00Z"),
    (13, 31, 7, 1, 4, 3, "2024-03-30T15:00:00Z"),
    (14, 31, 18, 11, 5, 2, "2024-03-30T15:00:00Z"),
    (15, 31, 2, 13, 5, 2, "2024-03-30T17:30:00Z"),
    (16, 31, 15, 3, 2, 4, "2024-03-31T14:00:00Z"),
    (17, 32, 1, 11, 5, 5, "2024-04-06T15:00:00Z"),
    (18, 32, 13, 7, 3, 4, "2024-04-06T15:00:00Z"),
    (19, 32, 3, 2, 3, 2, "2024-04-06T17:30:00Z"),
    (20, 32, 18, 15, 3, 3, "2024-04-07T14:00:00Z"),
    (21, 33, 11, 3, 2, 5, "2024-04-13T15:00:00Z"),
    (22, 33, 7, 13, 4, 3, "2024-04-13T15:00:00Z"),
    (23, 33, 2, 1, 4, 3, "2024-04-13T17:30:00Z"),
    (24, 33, 15, 18, 3, 3, "2024-04-14T14:00:00Z"),
)

REFERENCE_GAMEWEEK = 28


def _events() -> List[Dict[str, Any]]:
    rows = []
    for gw, deadline in zip(
        range(27, 34),
        ("03-02", "03-09", "03-16", "03-23", "03-30", "04-06", "04-13"),
    ):
        rows.append(
            {
                "id": gw,
                "name": f"Gameweek {gw}",
                "deadline_time": f"2024-{deadline}T11:00:00Z",
                "finished": gw < REFERENCE_GAMEWEEK,
                "is_current": gw == REFERENCE_GAMEWEEK,
                "is_next": gw == REFERENCE_GAMEWEEK + 1,
            }
        )
    return rows


def bootstrap_json() -> Dict[str, Any]:
    """
    Return the reference dataset in the ``bootstrap-static`` JSON shape.
    """
    teams = [
        {"id": tid, "name": name, "short_name": short, "strength": strength}
        for tid, name, short, strength in _TEAMS
    ]
    elements = []
    for row in _PLAYERS:
        (pid, first, second, web, team, etype, cost, owned, form, ppg,
         points, goals, assists, clean_sheets, bonus, bps, status, news) = row
        elements.append(
            {
                "id": pid,
                "first_name": first,
                "second_name": second,
                "web_name": web,
                "team": team,
                "element_type": etype,
                "now_cost": cost,
                "selected_by_percent": owned,
                "form": form,
                "points_per_game": ppg,
                "total_points": points,
                "goals_scored": goals,
                "assists": assists,
                "clean_sheets": clean_sheets,
                "bonus": bonus,
                "bps": bps,
                "status": status,
                "news": news,
                "photo": f"{second.lower().replace(' ', '').replace('-', '')}.jpg",
            }
        )
    return {"events": _events(), "teams": teams, "elements": elements}


def fixtures_json() -> List[Dict[str, Any]]:
    return [
        {
            "id": fid,
            "event": gw,
            "team_h": home,
            "team_a": away,
            "team_h_difficulty": home_fdr,
            "team_a_difficulty": away_fdr,
            "kickoff_time": kickoff,
            "finished": False,
        }
        for fid, gw, home, away, home_fdr, away_fdr, kickoff in _FIXTURES
    ]


@lru_cache(maxsize=1)
def reference_bootstrap() -> BootstrapPayload:
    return BootstrapPayload.from_api(bootstrap_json())


@lru_cache(maxsize=1)
def reference_fixtures() -> Tuple[Fixture, ...]:
    return tuple(parse_fixtures(fixtures_json()))
