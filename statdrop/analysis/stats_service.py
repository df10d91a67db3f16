"""
Read-only stat access over season teams and all-time aggregates.

Presentation code asks for a StatKind against either a FranchiseSnapshot
(one season) or an AggregatedFranchiseStats (all time). Combinations that
cannot be answered return UNAVAILABLE instead of raising.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..data.models import (
    League, Season, FranchiseSnapshot, AggregatedFranchiseStats, SeasonTotals,
    OFFENSIVE_POSITIONS, DEFENSIVE_POSITIONS, safe_ratio,
)


logger = logging.getLogger(__name__)


class _Unavailable:
    """Marker for a stat that cannot be resolved for the given target."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNAVAILABLE"


UNAVAILABLE = _Unavailable()


class StatKind(Enum):
    """Stats exposed to presentation and query layers."""
    POINTS_FOR = "points_for"
    MAX_POINTS_FOR = "max_points_for"
    MANAGEMENT_PERCENT = "management_percent"
    TEAM_AVERAGE_PPW = "team_average_ppw"
    POINTS_AGAINST = "points_against"
    WIN_LOSS_RECORD = "win_loss_record"
    CHAMPIONSHIPS = "championships"

    OFFENSIVE_POINTS_FOR = "offensive_points_for"
    MAX_OFFENSIVE_POINTS_FOR = "max_offensive_points_for"
    OFFENSIVE_MANAGEMENT_PERCENT = "offensive_management_percent"
    AVERAGE_OFFENSIVE_PPW = "average_offensive_ppw"
    BEST_OFFENSIVE_POSITION_PPW = "best_offensive_position_ppw"
    WORST_OFFENSIVE_POSITION_PPW = "worst_offensive_position_ppw"

    DEFENSIVE_POINTS_FOR = "defensive_points_for"
    MAX_DEFENSIVE_POINTS_FOR = "max_defensive_points_for"
    DEFENSIVE_MANAGEMENT_PERCENT = "defensive_management_percent"
    AVERAGE_DEFENSIVE_PPW = "average_defensive_ppw"
    BEST_DEFENSIVE_POSITION_PPW = "best_defensive_position_ppw"
    WORST_DEFENSIVE_POSITION_PPW = "worst_defensive_position_ppw"

    QB_POSITION_PPW = "qb_position_ppw"
    RB_POSITION_PPW = "rb_position_ppw"
    WR_POSITION_PPW = "wr_position_ppw"
    TE_POSITION_PPW = "te_position_ppw"
    K_POSITION_PPW = "k_position_ppw"
    DL_POSITION_PPW = "dl_position_ppw"
    LB_POSITION_PPW = "lb_position_ppw"
    DB_POSITION_PPW = "db_position_ppw"

    INDIVIDUAL_QB_PPW = "individual_qb_ppw"
    INDIVIDUAL_RB_PPW = "individual_rb_ppw"
    INDIVIDUAL_WR_PPW = "individual_wr_ppw"
    INDIVIDUAL_TE_PPW = "individual_te_ppw"
    INDIVIDUAL_K_PPW = "individual_k_ppw"
    INDIVIDUAL_DL_PPW = "individual_dl_ppw"
    INDIVIDUAL_LB_PPW = "individual_lb_ppw"
    INDIVIDUAL_DB_PPW = "individual_db_ppw"

    AVG_QB_STARTERS_PER_WEEK = "avg_qb_starters_per_week"
    AVG_RB_STARTERS_PER_WEEK = "avg_rb_starters_per_week"
    AVG_WR_STARTERS_PER_WEEK = "avg_wr_starters_per_week"
    AVG_TE_STARTERS_PER_WEEK = "avg_te_starters_per_week"
    AVG_K_STARTERS_PER_WEEK = "avg_k_starters_per_week"
    AVG_DL_STARTERS_PER_WEEK = "avg_dl_starters_per_week"
    AVG_LB_STARTERS_PER_WEEK = "avg_lb_starters_per_week"
    AVG_DB_STARTERS_PER_WEEK = "avg_db_starters_per_week"

    HIGHEST_POINTS_IN_GAME = "highest_points_in_game"
    MOST_POINTS_AGAINST_IN_GAME = "most_points_against_in_game"
    HEAD_TO_HEAD_RECORD = "head_to_head_record"

    WAIVER_MOVES_SEASON = "waiver_moves_season"
    WAIVER_MOVES_ALL_TIME = "waiver_moves_all_time"
    FAAB_SPENT_SEASON = "faab_spent_season"
    FAAB_SPENT_ALL_TIME = "faab_spent_all_time"
    FAAB_AVG_PER_MOVE_ALL_TIME = "faab_avg_per_move_all_time"
    TRADES_COMPLETED_SEASON = "trades_completed_season"
    TRADES_COMPLETED_ALL_TIME = "trades_completed_all_time"
    TRADES_PER_SEASON_AVERAGE = "trades_per_season_average"

    PLAYOFF_RECORD = "playoff_record"
    PLAYOFF_BERTHS = "playoff_berths"
    PLAYOFF_POINTS_FOR = "playoff_points_for"
    PLAYOFF_PPW = "playoff_ppw"
    PLAYOFF_MANAGEMENT_PERCENT = "playoff_management_percent"
    PLAYOFF_OFFENSIVE_POINTS_FOR = "playoff_offensive_points_for"
    PLAYOFF_OFFENSIVE_PPW = "playoff_offensive_ppw"
    PLAYOFF_OFFENSIVE_MANAGEMENT_PERCENT = "playoff_offensive_management_percent"
    PLAYOFF_DEFENSIVE_POINTS_FOR = "playoff_defensive_points_for"
    PLAYOFF_DEFENSIVE_PPW = "playoff_defensive_ppw"
    PLAYOFF_DEFENSIVE_MANAGEMENT_PERCENT = "playoff_defensive_management_percent"


_POSITION_PPW = {
    StatKind.QB_POSITION_PPW: "QB", StatKind.RB_POSITION_PPW: "RB",
    StatKind.WR_POSITION_PPW: "WR", StatKind.TE_POSITION_PPW: "TE",
    StatKind.K_POSITION_PPW: "K", StatKind.DL_POSITION_PPW: "DL",
    StatKind.LB_POSITION_PPW: "LB", StatKind.DB_POSITION_PPW: "DB",
}
_INDIVIDUAL_PPW = {
    StatKind.INDIVIDUAL_QB_PPW: "QB", StatKind.INDIVIDUAL_RB_PPW: "RB",
    StatKind.INDIVIDUAL_WR_PPW: "WR", StatKind.INDIVIDUAL_TE_PPW: "TE",
    StatKind.INDIVIDUAL_K_PPW: "K", StatKind.INDIVIDUAL_DL_PPW: "DL",
    StatKind.INDIVIDUAL_LB_PPW: "LB", StatKind.INDIVIDUAL_DB_PPW: "DB",
}
_STARTERS_PER_WEEK = {
    StatKind.AVG_QB_STARTERS_PER_WEEK: "QB", StatKind.AVG_RB_STARTERS_PER_WEEK: "RB",
    StatKind.AVG_WR_STARTERS_PER_WEEK: "WR", StatKind.AVG_TE_STARTERS_PER_WEEK: "TE",
    StatKind.AVG_K_STARTERS_PER_WEEK: "K", StatKind.AVG_DL_STARTERS_PER_WEEK: "DL",
    StatKind.AVG_LB_STARTERS_PER_WEEK: "LB", StatKind.AVG_DB_STARTERS_PER_WEEK: "DB",
}

# Kinds a season team answers by deferring to its owner's all-time aggregate
_ALL_TIME_KINDS = frozenset({
    StatKind.WAIVER_MOVES_ALL_TIME, StatKind.FAAB_SPENT_ALL_TIME,
    StatKind.FAAB_AVG_PER_MOVE_ALL_TIME, StatKind.TRADES_COMPLETED_ALL_TIME,
    StatKind.TRADES_PER_SEASON_AVERAGE, StatKind.HIGHEST_POINTS_IN_GAME,
    StatKind.MOST_POINTS_AGAINST_IN_GAME, StatKind.HEAD_TO_HEAD_RECORD,
    StatKind.PLAYOFF_RECORD, StatKind.PLAYOFF_BERTHS, StatKind.PLAYOFF_POINTS_FOR,
    StatKind.PLAYOFF_PPW, StatKind.PLAYOFF_MANAGEMENT_PERCENT,
    StatKind.PLAYOFF_OFFENSIVE_POINTS_FOR, StatKind.PLAYOFF_OFFENSIVE_PPW,
    StatKind.PLAYOFF_OFFENSIVE_MANAGEMENT_PERCENT, StatKind.PLAYOFF_DEFENSIVE_POINTS_FOR,
    StatKind.PLAYOFF_DEFENSIVE_PPW, StatKind.PLAYOFF_DEFENSIVE_MANAGEMENT_PERCENT,
})

_AGGREGATE_GETTERS: Dict[StatKind, Callable[[AggregatedFranchiseStats], Any]] = {
    StatKind.POINTS_FOR: lambda a: a.points_for,
    StatKind.MAX_POINTS_FOR: lambda a: a.max_points_for,
    StatKind.MANAGEMENT_PERCENT: lambda a: a.management_percent,
    StatKind.TEAM_AVERAGE_PPW: lambda a: a.ppw,
    StatKind.POINTS_AGAINST: lambda a: a.points_against,
    StatKind.WIN_LOSS_RECORD: lambda a: a.record_string,
    StatKind.CHAMPIONSHIPS: lambda a: a.championships,
    StatKind.OFFENSIVE_POINTS_FOR: lambda a: a.offensive_points_for,
    StatKind.MAX_OFFENSIVE_POINTS_FOR: lambda a: a.max_offensive_points_for,
    StatKind.OFFENSIVE_MANAGEMENT_PERCENT: lambda a: a.offensive_management_percent,
    StatKind.AVERAGE_OFFENSIVE_PPW: lambda a: a.offensive_ppw,
    StatKind.DEFENSIVE_POINTS_FOR: lambda a: a.defensive_points_for,
    StatKind.MAX_DEFENSIVE_POINTS_FOR: lambda a: a.max_defensive_points_for,
    StatKind.DEFENSIVE_MANAGEMENT_PERCENT: lambda a: a.defensive_management_percent,
    StatKind.AVERAGE_DEFENSIVE_PPW: lambda a: a.defensive_ppw,
    StatKind.HIGHEST_POINTS_IN_GAME: lambda a: a.highest_points_in_game,
    StatKind.MOST_POINTS_AGAINST_IN_GAME: lambda a: a.most_points_against_in_game,
    StatKind.WAIVER_MOVES_ALL_TIME: lambda a: a.total_waiver_moves,
    StatKind.FAAB_SPENT_ALL_TIME: lambda a: a.total_faab_spent,
    StatKind.FAAB_AVG_PER_MOVE_ALL_TIME: lambda a: a.faab_per_move,
    StatKind.TRADES_COMPLETED_ALL_TIME: lambda a: a.total_trades_completed,
    StatKind.TRADES_PER_SEASON_AVERAGE: lambda a: a.trades_per_season,
    StatKind.PLAYOFF_RECORD: lambda a: a.playoff_stats.record_string,
    StatKind.PLAYOFF_BERTHS: lambda a: a.playoff_stats.berths,
    StatKind.PLAYOFF_POINTS_FOR: lambda a: a.playoff_stats.points_for,
    StatKind.PLAYOFF_PPW: lambda a: a.playoff_stats.ppw,
    StatKind.PLAYOFF_MANAGEMENT_PERCENT: lambda a: a.playoff_stats.management_percent,
    StatKind.PLAYOFF_OFFENSIVE_POINTS_FOR: lambda a: a.playoff_stats.offensive_points_for,
    StatKind.PLAYOFF_OFFENSIVE_PPW: lambda a: a.playoff_stats.offensive_ppw,
    StatKind.PLAYOFF_OFFENSIVE_MANAGEMENT_PERCENT: lambda a: a.playoff_stats.offensive_management_percent,
    StatKind.PLAYOFF_DEFENSIVE_POINTS_FOR: lambda a: a.playoff_stats.defensive_points_for,
    StatKind.PLAYOFF_DEFENSIVE_PPW: lambda a: a.playoff_stats.defensive_ppw,
    StatKind.PLAYOFF_DEFENSIVE_MANAGEMENT_PERCENT: lambda a: a.playoff_stats.defensive_management_percent,
}

_SEASON_TOTAL_GETTERS: Dict[StatKind, Callable[[SeasonTotals], Any]] = {
    StatKind.POINTS_FOR: lambda t: t.points_for,
    StatKind.MAX_POINTS_FOR: lambda t: t.max_points_for,
    StatKind.MANAGEMENT_PERCENT: lambda t: t.management_percent,
    StatKind.TEAM_AVERAGE_PPW: lambda t: t.ppw,
    StatKind.POINTS_AGAINST: lambda t: t.points_against,
    StatKind.WIN_LOSS_RECORD: lambda t: t.record_string,
    StatKind.OFFENSIVE_POINTS_FOR: lambda t: t.offensive_points_for,
    StatKind.MAX_OFFENSIVE_POINTS_FOR: lambda t: t.max_offensive_points_for,
    StatKind.OFFENSIVE_MANAGEMENT_PERCENT: lambda t: t.offensive_management_percent,
    StatKind.AVERAGE_OFFENSIVE_PPW: lambda t: t.offensive_ppw,
    StatKind.DEFENSIVE_POINTS_FOR: lambda t: t.defensive_points_for,
    StatKind.MAX_DEFENSIVE_POINTS_FOR: lambda t: t.max_defensive_points_for,
    StatKind.DEFENSIVE_MANAGEMENT_PERCENT: lambda t: t.defensive_management_percent,
    StatKind.AVERAGE_DEFENSIVE_PPW: lambda t: t.defensive_ppw,
}

_SNAPSHOT_GETTERS: Dict[StatKind, Callable[[FranchiseSnapshot], Any]] = {
    StatKind.POINTS_FOR: lambda s: s.points_for,
    StatKind.MAX_POINTS_FOR: lambda s: s.max_points_for,
    StatKind.MANAGEMENT_PERCENT: lambda s: s.management_percent,
    StatKind.TEAM_AVERAGE_PPW: lambda s: s.team_points_per_week,
    StatKind.POINTS_AGAINST: lambda s: s.points_scored_against,
    StatKind.WIN_LOSS_RECORD: lambda s: s.win_loss_record,
    StatKind.CHAMPIONSHIPS: lambda s: s.championships,
    StatKind.OFFENSIVE_POINTS_FOR: lambda s: s.offensive_points_for,
    StatKind.MAX_OFFENSIVE_POINTS_FOR: lambda s: s.max_offensive_points_for,
    StatKind.OFFENSIVE_MANAGEMENT_PERCENT: lambda s: s.offensive_management_percent,
    StatKind.AVERAGE_OFFENSIVE_PPW: lambda s: s.average_offensive_ppw,
    StatKind.DEFENSIVE_POINTS_FOR: lambda s: s.defensive_points_for,
    StatKind.MAX_DEFENSIVE_POINTS_FOR: lambda s: s.max_defensive_points_for,
    StatKind.DEFENSIVE_MANAGEMENT_PERCENT: lambda s: s.defensive_management_percent,
    StatKind.AVERAGE_DEFENSIVE_PPW: lambda s: s.average_defensive_ppw,
    StatKind.WAIVER_MOVES_SEASON: lambda s: s.waiver_moves,
    StatKind.FAAB_SPENT_SEASON: lambda s: s.faab_spent,
    StatKind.TRADES_COMPLETED_SEASON: lambda s: s.trades_completed,
}


def _best_position(averages: Dict[str, float], positions: frozenset,
                   worst: bool = False) -> Optional[Tuple[str, float]]:
    candidates = [(pos, value) for pos, value in averages.items() if pos in positions]
    if not candidates:
        return None
    pick = min if worst else max
    return pick(candidates, key=lambda item: item[1])


def _position_extremes(kind: StatKind, averages: Dict[str, float]):
    if kind == StatKind.BEST_OFFENSIVE_POSITION_PPW:
        return _best_position(averages, OFFENSIVE_POSITIONS)
    if kind == StatKind.WORST_OFFENSIVE_POSITION_PPW:
        return _best_position(averages, OFFENSIVE_POSITIONS, worst=True)
    if kind == StatKind.BEST_DEFENSIVE_POSITION_PPW:
        return _best_position(averages, DEFENSIVE_POSITIONS)
    return _best_position(averages, DEFENSIVE_POSITIONS, worst=True)


_EXTREME_KINDS = frozenset({
    StatKind.BEST_OFFENSIVE_POSITION_PPW, StatKind.WORST_OFFENSIVE_POSITION_PPW,
    StatKind.BEST_DEFENSIVE_POSITION_PPW, StatKind.WORST_DEFENSIVE_POSITION_PPW,
})


def _or_unavailable(value: Any) -> Any:
    return UNAVAILABLE if value is None else value


class StatsService:
    """Season and all-time stat access for one league."""

    def __init__(self, league: League):
        self.league = league

    def statistic(self, target: Union[FranchiseSnapshot, AggregatedFranchiseStats],
                  kind: StatKind, opponent_id: Optional[str] = None) -> Any:
        """Resolve a stat for a season team or an all-time aggregate."""
        if isinstance(target, AggregatedFranchiseStats):
            return self._aggregate_stat(target, kind, opponent_id)
        if isinstance(target, FranchiseSnapshot):
            return self._season_stat(target, kind, opponent_id)
        logger.debug(f"Unsupported stat target {type(target).__name__}")
        return UNAVAILABLE

    def aggregate_for(self, owner_id: str) -> Optional[AggregatedFranchiseStats]:
        return self.league.all_time_stats.get(owner_id)

    def _aggregate_stat(self, agg: AggregatedFranchiseStats, kind: StatKind,
                        opponent_id: Optional[str]) -> Any:
        if kind in _AGGREGATE_GETTERS:
            return _AGGREGATE_GETTERS[kind](agg)
        if kind in _POSITION_PPW:
            return agg.position_avg_ppw[_POSITION_PPW[kind]]
        if kind in _INDIVIDUAL_PPW:
            return agg.individual_position_ppw[_INDIVIDUAL_PPW[kind]]
        if kind in _STARTERS_PER_WEEK:
            return agg.avg_starters_per_week(_STARTERS_PER_WEEK[kind])
        if kind in _EXTREME_KINDS:
            if agg.weeks == 0:
                return UNAVAILABLE
            return _or_unavailable(_position_extremes(kind, agg.position_avg_ppw))
        if kind == StatKind.HEAD_TO_HEAD_RECORD:
            record = agg.head_to_head.get(opponent_id) if opponent_id else None
            return record.record_string if record else UNAVAILABLE
        return UNAVAILABLE

    def _season_stat(self, team: FranchiseSnapshot, kind: StatKind,
                     opponent_id: Optional[str]) -> Any:
        agg = self.aggregate_for(team.owner_id)
        if kind in _ALL_TIME_KINDS:
            if agg is None:
                return UNAVAILABLE
            return self._aggregate_stat(agg, kind, opponent_id)

        totals = self._season_totals(team, agg)
        if totals is not None:
            if kind in _SEASON_TOTAL_GETTERS:
                return _SEASON_TOTAL_GETTERS[kind](totals)
            if kind in _POSITION_PPW:
                return totals.position_avg_ppw[_POSITION_PPW[kind]]
            if kind in _INDIVIDUAL_PPW:
                return totals.individual_position_ppw[_INDIVIDUAL_PPW[kind]]
            if kind in _EXTREME_KINDS:
                if totals.weeks == 0:
                    return UNAVAILABLE
                return _or_unavailable(_position_extremes(kind, totals.position_avg_ppw))

        if kind in _SNAPSHOT_GETTERS:
            return _or_unavailable(_SNAPSHOT_GETTERS[kind](team))
        if kind in _POSITION_PPW:
            return _or_unavailable(team.position_averages.get(_POSITION_PPW[kind]))
        if kind in _INDIVIDUAL_PPW:
            return _or_unavailable(team.individual_position_averages.get(_INDIVIDUAL_PPW[kind]))
        if kind in _STARTERS_PER_WEEK:
            count = team.actual_starter_position_counts.get(_STARTERS_PER_WEEK[kind], 0)
            return safe_ratio(count, team.actual_starter_weeks)
        if kind in _EXTREME_KINDS:
            return _or_unavailable(_position_extremes(kind, team.position_averages))
        return UNAVAILABLE

    def _season_totals(self, team: FranchiseSnapshot,
                       agg: Optional[AggregatedFranchiseStats]) -> Optional[SeasonTotals]:
        if agg is None:
            return None
        season = self._season_of(team)
        if season is None:
            return None
        return agg.season_totals.get(season.season_id)

    def _season_of(self, team: FranchiseSnapshot) -> Optional[Season]:
        for season in self.league.seasons:
            if any(t is team for t in season.teams):
                return season
        return None
