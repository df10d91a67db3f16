"""
Builders for small synthetic leagues used across the test modules.

Player ids encode their position before the underscore ("qb_1", "rb_1b"),
so a directory can be derived straight from the entries that use them.
"""

from typing import Dict, Iterable, List, Optional

from statdrop.data.models import (
    League, Season, FranchiseSnapshot, MatchupEntry, Player, PlayerDirectory,
)


SIMPLE_CONFIG = {"QB": 1, "RB": 1}


def make_entry(roster_id: int, matchup_id: Optional[int], starters: Dict[str, float],
               bench: Optional[Dict[str, float]] = None) -> MatchupEntry:
    bench = bench or {}
    points = dict(starters)
    points.update(bench)
    return MatchupEntry(
        roster_id=roster_id,
        matchup_id=matchup_id,
        points=sum(starters.values()),
        starters=tuple(starters),
        players=tuple(starters) + tuple(bench),
        players_points=points,
    )


def simple_entry(roster_id: int, matchup_id: Optional[int], qb: float, rb: float,
                 bench_rb: float = 0.0) -> MatchupEntry:
    """A QB/RB starter pair plus one bench RB."""
    return make_entry(
        roster_id, matchup_id,
        {f"qb_{roster_id}": qb, f"rb_{roster_id}": rb},
        {f"rb_{roster_id}b": bench_rb},
    )


def make_team(owner_id: str, roster_id: int, standing: Optional[int] = None,
              lineup_config: Optional[Dict[str, int]] = None, **counters) -> FranchiseSnapshot:
    return FranchiseSnapshot(
        owner_id=owner_id,
        roster_id=roster_id,
        name=f"Team {owner_id}",
        lineup_config=dict(lineup_config or SIMPLE_CONFIG),
        league_standing=standing,
        **counters,
    )


def make_season(season_id: str, teams: List[FranchiseSnapshot],
                weeks: Dict[int, List[MatchupEntry]], playoff_start_week: int = 14,
                playoff_teams_count: int = 4) -> Season:
    return Season(
        season_id=season_id,
        teams=teams,
        matchups_by_week=weeks,
        playoff_start_week=playoff_start_week,
        playoff_teams_count=playoff_teams_count,
    )


def make_league(seasons: List[Season]) -> League:
    return League(league_id="L1", name="Test Dynasty", seasons=seasons)


def directory_for(leagues_or_entries: Iterable) -> PlayerDirectory:
    """Directory covering every player id found in the given leagues or entries."""
    ids = set()
    for item in leagues_or_entries:
        if isinstance(item, League):
            for season in item.seasons:
                for entries in season.matchups_by_week.values():
                    for entry in entries:
                        ids.update(entry.players)
        else:
            ids.update(item.players)
    players = []
    for player_id in sorted(ids):
        position = player_id.split("_")[0].upper()
        players.append(Player(player_id=player_id, position=position,
                              fantasy_positions=(position,)))
    return PlayerDirectory.from_players(players)
