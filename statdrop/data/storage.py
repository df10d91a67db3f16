"""
League snapshot import for the Dynasty Stat Drop engine.
Turns Sleeper-shaped league history (league settings, users, rosters, weekly
matchups, transactions) into the engine's data model. Reads only; nothing is
written back.
"""

import json
import logging
from typing import List, Dict, Optional, Any
from pathlib import Path

from .models import League, Season, FranchiseSnapshot, MatchupEntry, Player, PlayerDirectory
from ..analysis.positions import lineup_config_from_slots, is_starting_slot
from ..analysis.lineup_optimizer import count_starter_usage
from ..config.settings import AggregationConfig


logger = logging.getLogger(__name__)


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def matchup_entry_from_dict(data: Dict[str, Any]) -> MatchupEntry:
    """Build a MatchupEntry from a Sleeper matchup row."""
    players_points = {
        str(pid): _as_float(pts)
        for pid, pts in (data.get('players_points') or {}).items()
    }
    return MatchupEntry(
        roster_id=_as_int(data.get('roster_id'), -1),
        matchup_id=_as_int(data.get('matchup_id')),
        points=_as_float(data.get('points')),
        starters=tuple(str(p) for p in (data.get('starters') or [])),
        players=tuple(str(p) for p in (data.get('players') or [])),
        players_points=players_points,
    )


def count_transactions(transactions: List[Dict[str, Any]], roster_id: int) -> Dict[str, Any]:
    """Waiver moves, FAAB spent and completed trades for one roster."""
    waiver_moves = 0
    faab_spent = 0.0
    trades = 0
    for tx in transactions:
        if (tx.get('status') or '').lower() != 'complete':
            continue
        if roster_id not in (tx.get('roster_ids') or []):
            continue
        tx_type = (tx.get('type') or '').lower()
        if tx_type in ('waiver', 'free_agent'):
            waiver_moves += 1
        if tx_type == 'waiver':
            bid = tx.get('waiver_bid')
            if bid is None:
                bid = (tx.get('settings') or {}).get('waiver_bid')
            faab_spent += _as_float(bid)
        elif tx_type == 'trade':
            trades += 1
    return {'waiver_moves': waiver_moves, 'faab_spent': faab_spent, 'trades_completed': trades}


def championships_from_settings(settings: Dict[str, Any]) -> int:
    if settings.get('champion') is True:
        return 1
    count = _as_int(settings.get('championships'))
    if count is not None:
        return count
    return len(settings.get('championship_seasons') or [])


def franchise_from_roster(roster: Dict[str, Any], users: Dict[str, str],
                          lineup_config: Dict[str, int],
                          transactions: List[Dict[str, Any]],
                          starter_usage: Optional[tuple] = None) -> FranchiseSnapshot:
    """Build a season snapshot from a Sleeper roster row.

    starter_usage is the (position counts, weeks) pair from count_starter_usage.
    """
    position_counts, starter_weeks = starter_usage or ({}, 0)
    roster_id = _as_int(roster.get('roster_id'), -1)
    owner_id = str(roster.get('owner_id') or '')
    settings = roster.get('settings') or {}

    wins = _as_int(settings.get('wins'), 0)
    losses = _as_int(settings.get('losses'), 0)
    ties = _as_int(settings.get('ties'), 0)
    points_against = None
    if 'fpts_against' in settings:
        points_against = (_as_float(settings.get('fpts_against'))
                          + _as_float(settings.get('fpts_against_decimal')) / 100)

    return FranchiseSnapshot(
        owner_id=owner_id,
        roster_id=roster_id,
        name=users.get(owner_id) or f"Owner {owner_id}",
        lineup_config=dict(lineup_config),
        league_standing=_as_int(settings.get('rank')),
        championships=championships_from_settings(settings),
        win_loss_record=f"{wins}-{losses}-{ties}",
        points_scored_against=points_against,
        actual_starter_position_counts=dict(position_counts),
        actual_starter_weeks=starter_weeks,
        **count_transactions(transactions, roster_id),
    )


def season_from_dict(data: Dict[str, Any], config: Optional[AggregationConfig] = None,
                     directory: Optional[PlayerDirectory] = None) -> Season:
    """Build a Season from one season block of a snapshot.

    The player directory resolves which position each starter is credited
    with; without one only fixed slots credit a position.
    """
    config = config or AggregationConfig()
    directory = directory if directory is not None else PlayerDirectory()
    league_data = data.get('league') or {}
    settings = league_data.get('settings') or {}

    start_week = _as_int(settings.get('playoff_week_start', settings.get('playoff_start_week')))
    playoff_teams = _as_int(settings.get('playoff_teams')) or config.default_playoff_teams
    roster_positions = league_data.get('roster_positions') or []
    lineup_config = lineup_config_from_slots(roster_positions)
    # starters are listed in roster_positions order
    starting_slots = [slot for slot in roster_positions if slot and is_starting_slot(slot)]

    users = {}
    for user in data.get('users') or []:
        display = (user.get('display_name') or user.get('username') or '').strip()
        user_id = str(user.get('user_id') or '')
        users[user_id] = display or f"Owner {user_id}"

    matchups_by_week: Dict[int, List[MatchupEntry]] = {}
    for week_key, rows in (data.get('matchups') or {}).items():
        week = _as_int(week_key)
        if week is None:
            logger.warning(f"Ignoring matchups under non-numeric week key {week_key!r}")
            continue
        matchups_by_week[week] = [matchup_entry_from_dict(row) for row in rows or []]

    transactions = data.get('transactions') or []
    teams = []
    for roster in data.get('rosters') or []:
        roster_id = _as_int(roster.get('roster_id'), -1)
        entries = [entry for week in sorted(matchups_by_week)
                   for entry in matchups_by_week[week] if entry.roster_id == roster_id]
        usage = count_starter_usage(entries, starting_slots, directory)
        teams.append(franchise_from_roster(roster, users, lineup_config, transactions, usage))

    return Season(
        season_id=str(data.get('season') or league_data.get('season') or ''),
        teams=teams,
        matchups_by_week=matchups_by_week,
        playoff_start_week=config.clamp_playoff_start_week(start_week),
        playoff_teams_count=playoff_teams,
    )


def league_from_dict(data: Dict[str, Any], config: Optional[AggregationConfig] = None,
                     directory: Optional[PlayerDirectory] = None) -> League:
    """Build a League from a full snapshot."""
    seasons_data = data.get('seasons') or []
    if not seasons_data:
        raise ValueError("League snapshot contains no seasons")
    seasons = [season_from_dict(s, config, directory) for s in seasons_data]
    return League(
        league_id=str(data.get('league_id') or ''),
        name=data.get('name') or '',
        seasons=seasons,
    )


def players_from_dict(data: Dict[str, Any]) -> PlayerDirectory:
    """Build a PlayerDirectory from a Sleeper players map (id -> player row)."""
    players = {}
    for key, row in data.items():
        row = row or {}
        player_id = str(row.get('player_id') or key)
        players[player_id] = Player(
            player_id=player_id,
            position=row.get('position'),
            fantasy_positions=tuple(row.get('fantasy_positions') or ()),
            full_name=row.get('full_name'),
        )
    return PlayerDirectory(players)


class LeagueSnapshotStore:
    """Loads league snapshots and player tables from JSON files."""

    def __init__(self, config: Optional[AggregationConfig] = None):
        self.config = config or AggregationConfig()

    def _read_json(self, path: str) -> Dict[str, Any]:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {file_path}")
        with open(file_path, 'r', encoding='utf-8') as fh:
            return json.load(fh)

    def load_league(self, path: str, directory: Optional[PlayerDirectory] = None) -> League:
        """Load a league snapshot from a JSON file."""
        league = league_from_dict(self._read_json(path), self.config, directory)
        logger.info(f"Loaded league {league.league_id} with {len(league.seasons)} seasons from {path}")
        return league

    def load_players(self, path: str) -> PlayerDirectory:
        """Load the player reference table from a JSON file."""
        directory = players_from_dict(self._read_json(path))
        logger.info(f"Loaded {len(directory)} players from {path}")
        return directory
