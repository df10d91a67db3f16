"""
All-time aggregation for the Dynasty Stat Drop engine.
Walks every season an owner fielded a team and folds regular-season weeks into
season and all-time totals, then attaches the head-to-head ledger and playoff
stats.
"""

import dataclasses
import logging
from typing import Dict, Iterable, Optional

from ..config.settings import AggregationConfig
from ..data.models import (
    League, Season, FranchiseSnapshot, MatchupEntry, PlayerDirectory,
    SeasonTotals, AggregatedFranchiseStats, tally_result,
)
from .lineup_optimizer import LineupOptimizer, StarterTotals
from .head_to_head import head_to_head_for
from .playoff_bracket import aggregate_playoffs


logger = logging.getLogger(__name__)


def _add_positions(target: Dict[str, float], starts: Dict[str, int], actual: StarterTotals):
    for pos, points in actual.by_position.items():
        target[pos] = target.get(pos, 0.0) + points
    for pos, count in actual.starts_by_position.items():
        starts[pos] = starts.get(pos, 0) + count


class AllTimeAggregator:
    """Aggregates multi-season stats per current franchise (owner)."""

    def __init__(self, directory: PlayerDirectory, config: Optional[AggregationConfig] = None):
        self.directory = directory
        self.config = config or AggregationConfig()
        self.optimizer = LineupOptimizer(directory)

    def build_all_time(self, league: League) -> League:
        """Return a copy of the league with a freshly built all-time mapping.

        The mapping is built completely before it is attached; the input
        league is left untouched.
        """
        current_ids = league.current_owner_ids
        result: Dict[str, AggregatedFranchiseStats] = {}
        for owner_id in current_ids:
            agg = self.aggregate(league, owner_id, current_ids)
            if agg is not None:
                result[owner_id] = agg
        logger.info(f"Built all-time stats for {len(result)} franchises "
                    f"across {len(league.seasons)} seasons in league {league.league_id}")
        return dataclasses.replace(league, all_time_stats=result)

    def aggregate(self, league: League, owner_id: str,
                  current_ids: Optional[Iterable[str]] = None) -> Optional[AggregatedFranchiseStats]:
        """Aggregate all-time regular-season stats for one owner.

        Returns None when the owner never fielded a team.
        """
        teams = [(season, season.team_for_owner(owner_id)) for season in league.sorted_seasons()]
        teams = [(season, team) for season, team in teams if team is not None]
        if not teams:
            logger.debug(f"No seasons found for owner {owner_id}")
            return None

        agg = AggregatedFranchiseStats(
            owner_id=owner_id,
            latest_display_name=teams[-1][1].name or "Team",
            seasons_included=[season.season_id for season, _ in teams],
        )
        distinct_weeks = set()

        for season, team in teams:
            self._carry_counters(agg, team)
            agg.season_totals[season.season_id] = self._fold_season(agg, season, team, distinct_weeks)

        agg.weeks = len(distinct_weeks)
        if current_ids is None:
            current_ids = league.current_owner_ids
        agg.head_to_head = head_to_head_for(league, owner_id, self.optimizer, current_ids, self.config)
        agg.playoff_stats = aggregate_playoffs(league, owner_id, self.optimizer, self.config)
        return agg

    def _carry_counters(self, agg: AggregatedFranchiseStats, team: FranchiseSnapshot):
        agg.championships += team.championships
        agg.total_waiver_moves += team.waiver_moves
        agg.total_faab_spent += team.faab_spent
        agg.total_trades_completed += team.trades_completed
        for pos, count in team.actual_starter_position_counts.items():
            agg.actual_starter_position_counts[pos] = agg.actual_starter_position_counts.get(pos, 0) + count
        agg.actual_starter_weeks += team.actual_starter_weeks

    def _fold_season(self, agg: AggregatedFranchiseStats, season: Season,
                     team: FranchiseSnapshot, distinct_weeks: set) -> SeasonTotals:
        playoff_start = season.playoff_start_week or self.config.default_playoff_start_week
        totals = SeasonTotals(season_id=season.season_id)
        season_weeks = set()

        for week in season.sorted_weeks():
            if week >= playoff_start:
                continue
            entry = season.entry_for(week, team.roster_id)
            if entry is None:
                continue
            distinct_weeks.add((season.season_id, week))
            season_weeks.add(week)
            self._fold_week(agg, totals, season, week, entry, team)

        totals.weeks = len(season_weeks)
        return totals

    def _fold_week(self, agg: AggregatedFranchiseStats, totals: SeasonTotals, season: Season,
                   week: int, entry: MatchupEntry, team: FranchiseSnapshot):
        actual = self.optimizer.actual_entry(entry)
        optimal = self.optimizer.optimize_entry(entry, team.lineup_config)
        for target in (agg, totals):
            target.add_points(actual, optimal)
        _add_positions(agg.position_totals, agg.position_start_counts, actual)
        _add_positions(totals.position_totals, totals.position_start_counts, actual)

        opp_entry = season.opponent_entry(week, entry)
        if opp_entry is None:
            logger.debug(f"Roster {team.roster_id} unpaired in {season.season_id} week {week}")
            return
        if entry.points == 0 and opp_entry.points == 0:
            logger.debug(f"Skipping unplayed {season.season_id} week {week} for roster {team.roster_id}")
            return
        for target in (agg, totals):
            tally_result(target, entry.points, opp_entry.points)
        agg.highest_points_in_game = max(agg.highest_points_in_game, entry.points)
        agg.most_points_against_in_game = max(agg.most_points_against_in_game, opp_entry.points)


def build_all_time(league: League, directory: PlayerDirectory,
                   config: Optional[AggregationConfig] = None) -> League:
    """Convenience wrapper around AllTimeAggregator.build_all_time."""
    return AllTimeAggregator(directory, config).build_all_time(league)


def aggregate_franchise(league: League, owner_id: str, directory: PlayerDirectory,
                        config: Optional[AggregationConfig] = None) -> Optional[AggregatedFranchiseStats]:
    return AllTimeAggregator(directory, config).aggregate(league, owner_id)
