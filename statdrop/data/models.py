"""
Data models for the Dynasty Stat Drop engine.
Defines the league history input graph (leagues, seasons, franchise snapshots,
matchup entries, players) and the aggregated output structures.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Iterator
from enum import Enum


class Position(Enum):
    """Canonical fantasy football positions."""
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    K = "K"
    DL = "DL"
    LB = "LB"
    DB = "DB"


OFFENSIVE_POSITIONS = frozenset({"QB", "RB", "WR", "TE", "K"})
DEFENSIVE_POSITIONS = frozenset({"DL", "LB", "DB"})
ALL_STAT_POSITIONS = [p.value for p in Position]


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def record_string(wins: int, losses: int, ties: int = 0) -> str:
    """Format a W-L record, appending ties only when there are any."""
    if ties > 0:
        return f"{wins}-{losses}-{ties}"
    return f"{wins}-{losses}"


def tally_result(record, points: float, opp_points: float):
    """Add one played game to a record carrying points_against and W/L/T."""
    record.points_against += opp_points
    if points > opp_points:
        record.wins += 1
    elif points < opp_points:
        record.losses += 1
    else:
        record.ties += 1


@dataclass(frozen=True)
class Player:
    """Player reference data used to resolve lineup candidates."""
    player_id: str
    position: Optional[str] = None
    fantasy_positions: Tuple[str, ...] = ()
    full_name: Optional[str] = None


class PlayerDirectory:
    """Read-only player reference table (player id -> Player).

    Passed explicitly to every component that resolves positions so the
    aggregation stays a pure function of its inputs.
    """

    def __init__(self, players: Optional[Dict[str, Player]] = None):
        self._players: Dict[str, Player] = dict(players or {})

    @classmethod
    def from_players(cls, players: List[Player]) -> "PlayerDirectory":
        return cls({p.player_id: p for p in players})

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players.values())


@dataclass(frozen=True)
class MatchupEntry:
    """One team's participation in one week's game.

    The week is not stored here; entries live in Season.matchups_by_week.
    A matchup_id of None marks an unpaired (bye) entry.
    """
    roster_id: int
    matchup_id: Optional[int] = None
    points: float = 0.0
    starters: Tuple[str, ...] = ()
    players: Tuple[str, ...] = ()
    players_points: Dict[str, float] = field(default_factory=dict)

    def points_for_player(self, player_id: str) -> float:
        """Points scored by a player this week; absent players score 0."""
        return self.players_points.get(player_id, 0.0)


@dataclass
class FranchiseSnapshot:
    """A franchise's state for one season."""
    owner_id: str
    roster_id: int
    name: str = ""
    lineup_config: Dict[str, int] = field(default_factory=dict)
    league_standing: Optional[int] = None
    # Season-level counters carried forward, never re-derived
    championships: int = 0
    waiver_moves: int = 0
    faab_spent: float = 0.0
    trades_completed: int = 0
    actual_starter_position_counts: Dict[str, int] = field(default_factory=dict)
    actual_starter_weeks: int = 0
    # Cached season metrics, presentation fallback when no aggregate exists
    points_for: Optional[float] = None
    max_points_for: Optional[float] = None
    management_percent: Optional[float] = None
    team_points_per_week: Optional[float] = None
    offensive_points_for: Optional[float] = None
    max_offensive_points_for: Optional[float] = None
    offensive_management_percent: Optional[float] = None
    average_offensive_ppw: Optional[float] = None
    defensive_points_for: Optional[float] = None
    max_defensive_points_for: Optional[float] = None
    defensive_management_percent: Optional[float] = None
    average_defensive_ppw: Optional[float] = None
    position_averages: Dict[str, float] = field(default_factory=dict)
    individual_position_averages: Dict[str, float] = field(default_factory=dict)
    win_loss_record: Optional[str] = None
    points_scored_against: Optional[float] = None


@dataclass
class Season:
    """One season of league history."""
    season_id: str
    teams: List[FranchiseSnapshot] = field(default_factory=list)
    matchups_by_week: Dict[int, List[MatchupEntry]] = field(default_factory=dict)
    playoff_start_week: Optional[int] = None
    playoff_teams_count: Optional[int] = None

    def team_for_owner(self, owner_id: str) -> Optional[FranchiseSnapshot]:
        for team in self.teams:
            if team.owner_id == owner_id:
                return team
        return None

    def team_for_roster(self, roster_id: int) -> Optional[FranchiseSnapshot]:
        for team in self.teams:
            if team.roster_id == roster_id:
                return team
        return None

    def entry_for(self, week: int, roster_id: int) -> Optional[MatchupEntry]:
        for entry in self.matchups_by_week.get(week, []):
            if entry.roster_id == roster_id:
                return entry
        return None

    def opponent_entry(self, week: int, entry: MatchupEntry) -> Optional[MatchupEntry]:
        """Return the counterpart of a paired entry, or None.

        An entry is paired only when exactly two entries that week share
        its matchup_id.
        """
        if entry.matchup_id is None:
            return None
        shared = [e for e in self.matchups_by_week.get(week, [])
                  if e.matchup_id == entry.matchup_id]
        if len(shared) != 2:
            return None
        for other in shared:
            if other is not entry and other.roster_id != entry.roster_id:
                return other
        return None

    def sorted_weeks(self) -> List[int]:
        return sorted(self.matchups_by_week)


@dataclass
class League:
    """A league's multi-season history plus the derived all-time mapping."""
    league_id: str
    name: str = ""
    seasons: List[Season] = field(default_factory=list)
    all_time_stats: Dict[str, "AggregatedFranchiseStats"] = field(default_factory=dict)

    def sorted_seasons(self) -> List[Season]:
        return sorted(self.seasons, key=lambda s: s.season_id)

    @property
    def current_season(self) -> Optional[Season]:
        seasons = self.sorted_seasons()
        return seasons[-1] if seasons else None

    @property
    def current_owner_ids(self) -> List[str]:
        """Owners fielding a team in the latest season."""
        season = self.current_season
        if season is None:
            return []
        return [t.owner_id for t in season.teams if t.owner_id]


@dataclass
class HeadToHeadRecord:
    """Pairwise ledger against one opposing franchise."""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    games: int = 0
    sum_management_for: float = 0.0
    sum_management_against: float = 0.0

    @property
    def avg_management_for(self) -> float:
        return safe_ratio(self.sum_management_for, self.games)

    @property
    def avg_management_against(self) -> float:
        return safe_ratio(self.sum_management_against, self.games)

    @property
    def avg_points_for(self) -> float:
        return safe_ratio(self.points_for, self.games)

    @property
    def avg_points_against(self) -> float:
        return safe_ratio(self.points_against, self.games)

    @property
    def record_string(self) -> str:
        return record_string(self.wins, self.losses, self.ties)


@dataclass
class PointTotals:
    """Accumulated actual and optimal points with offense/defense splits.

    Ratios are derived at read time and are 0 when the denominator is 0.
    """
    weeks: int = 0
    points_for: float = 0.0
    max_points_for: float = 0.0
    offensive_points_for: float = 0.0
    max_offensive_points_for: float = 0.0
    defensive_points_for: float = 0.0
    max_defensive_points_for: float = 0.0
    points_against: float = 0.0
    wins: int = 0
    losses: int = 0
    ties: int = 0

    def add_points(self, actual, optimal):
        """Add one week of starter totals and its optimal lineup."""
        self.points_for += actual.total
        self.offensive_points_for += actual.offensive
        self.defensive_points_for += actual.defensive
        self.max_points_for += optimal.total
        self.max_offensive_points_for += optimal.offensive
        self.max_defensive_points_for += optimal.defensive

    @property
    def management_percent(self) -> float:
        return safe_ratio(self.points_for, self.max_points_for) * 100

    @property
    def offensive_management_percent(self) -> float:
        return safe_ratio(self.offensive_points_for, self.max_offensive_points_for) * 100

    @property
    def defensive_management_percent(self) -> float:
        return safe_ratio(self.defensive_points_for, self.max_defensive_points_for) * 100

    @property
    def ppw(self) -> float:
        return safe_ratio(self.points_for, self.weeks)

    @property
    def offensive_ppw(self) -> float:
        return safe_ratio(self.offensive_points_for, self.weeks)

    @property
    def defensive_ppw(self) -> float:
        return safe_ratio(self.defensive_points_for, self.weeks)

    @property
    def record_string(self) -> str:
        return record_string(self.wins, self.losses, self.ties)


@dataclass
class SeasonTotals(PointTotals):
    """Regular-season totals for one franchise in one season."""
    season_id: str = ""
    position_totals: Dict[str, float] = field(default_factory=dict)
    position_start_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def position_avg_ppw(self) -> Dict[str, float]:
        return {pos: safe_ratio(self.position_totals.get(pos, 0.0), self.weeks)
                for pos in ALL_STAT_POSITIONS}

    @property
    def individual_position_ppw(self) -> Dict[str, float]:
        return {pos: safe_ratio(self.position_totals.get(pos, 0.0),
                                self.position_start_counts.get(pos, 0))
                for pos in ALL_STAT_POSITIONS}


@dataclass
class PlayoffRun:
    """Bracket games collected for one franchise in one season."""
    season_id: str
    games: List[Tuple[int, MatchupEntry, MatchupEntry]] = field(default_factory=list)
    eliminated_week: Optional[int] = None

    @property
    def weeks(self) -> List[int]:
        return [week for week, _, _ in self.games]


@dataclass
class PlayoffStats(PointTotals):
    """Playoff-only equivalents of the regular-season totals."""
    berths: int = 0
    championship_seasons: List[str] = field(default_factory=list)

    @property
    def is_champion(self) -> bool:
        return bool(self.championship_seasons)


@dataclass
class AggregatedFranchiseStats(PointTotals):
    """All-time regular-season aggregate for one franchise (owner)."""
    owner_id: str = ""
    latest_display_name: str = ""
    seasons_included: List[str] = field(default_factory=list)
    position_totals: Dict[str, float] = field(default_factory=dict)
    position_start_counts: Dict[str, int] = field(default_factory=dict)
    championships: int = 0
    total_waiver_moves: int = 0
    total_faab_spent: float = 0.0
    total_trades_completed: int = 0
    actual_starter_position_counts: Dict[str, int] = field(default_factory=dict)
    actual_starter_weeks: int = 0
    highest_points_in_game: float = 0.0
    most_points_against_in_game: float = 0.0
    head_to_head: Dict[str, HeadToHeadRecord] = field(default_factory=dict)
    playoff_stats: PlayoffStats = field(default_factory=PlayoffStats)
    season_totals: Dict[str, SeasonTotals] = field(default_factory=dict)

    @property
    def weeks_played(self) -> int:
        return self.weeks

    @property
    def position_avg_ppw(self) -> Dict[str, float]:
        """Per-position points per week played."""
        return {pos: safe_ratio(self.position_totals.get(pos, 0.0), self.weeks)
                for pos in ALL_STAT_POSITIONS}

    @property
    def individual_position_ppw(self) -> Dict[str, float]:
        """Per-position points per start."""
        return {pos: safe_ratio(self.position_totals.get(pos, 0.0),
                                self.position_start_counts.get(pos, 0))
                for pos in ALL_STAT_POSITIONS}

    @property
    def faab_per_move(self) -> float:
        return safe_ratio(self.total_faab_spent, self.total_waiver_moves)

    @property
    def trades_per_season(self) -> float:
        return safe_ratio(self.total_trades_completed, len(self.seasons_included))

    def avg_starters_per_week(self, position: str) -> float:
        return safe_ratio(self.actual_starter_position_counts.get(position, 0),
                          self.actual_starter_weeks)
