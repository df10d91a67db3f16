"""
Playoff bracket walker for the Dynasty Stat Drop engine.
Finds which playoff games count as bracket games for a franchise and where it
was eliminated, then folds those games into playoff totals.

Championship is inferred rather than read from a bracket: a franchise that
played at least one bracket game and lost none is treated as that season's
champion. An undefeated run cut short by missing data looks the same.
"""

import logging
import math
from typing import List, Optional

from ..config.settings import AggregationConfig
from ..data.models import League, Season, FranchiseSnapshot, PlayoffRun, PlayoffStats, tally_result
from .lineup_optimizer import LineupOptimizer


logger = logging.getLogger(__name__)


def bracket_depth(playoff_teams_count: int) -> int:
    """Number of single-elimination rounds for a field size."""
    if playoff_teams_count <= 1:
        return 1
    return math.ceil(math.log2(playoff_teams_count))


def playoff_field(season: Season, config: Optional[AggregationConfig] = None) -> List[FranchiseSnapshot]:
    """Top playoff_teams_count franchises by final standing; unknown standings rank last."""
    config = config or AggregationConfig()
    count = season.playoff_teams_count or config.default_playoff_teams
    ranked = sorted(
        season.teams,
        key=lambda t: (t.league_standing is None or t.league_standing <= 0,
                       t.league_standing or 0),
    )
    return ranked[:count]


def bracket_weeks(season: Season, config: Optional[AggregationConfig] = None) -> List[int]:
    config = config or AggregationConfig()
    start = season.playoff_start_week or config.default_playoff_start_week
    count = season.playoff_teams_count or config.default_playoff_teams
    return list(range(start, start + bracket_depth(count)))


def walk_bracket(season: Season, owner_id: str,
                 config: Optional[AggregationConfig] = None) -> Optional[PlayoffRun]:
    """Collect an owner's bracket games for one season.

    Returns None when the owner missed the playoff field. Games are taken in
    week order until the first loss; byes and unplayed weeks are skipped.
    """
    seeded = playoff_field(season, config)
    team = next((t for t in seeded if t.owner_id == owner_id), None)
    if team is None:
        return None

    run = PlayoffRun(season_id=season.season_id)
    for week in bracket_weeks(season, config):
        entry = season.entry_for(week, team.roster_id)
        if entry is None:
            continue
        opp_entry = season.opponent_entry(week, entry)
        if opp_entry is None:
            logger.debug(f"{owner_id} has a bye in {season.season_id} week {week}")
            continue
        if entry.points == 0 and opp_entry.points == 0:
            continue
        run.games.append((week, entry, opp_entry))
        if entry.points < opp_entry.points:
            run.eliminated_week = week
            break
    return run


def aggregate_playoffs(league: League, owner_id: str, optimizer: LineupOptimizer,
                       config: Optional[AggregationConfig] = None) -> PlayoffStats:
    """Fold every bracket game an owner played into playoff totals."""
    config = config or AggregationConfig()
    stats = PlayoffStats()

    for season in league.sorted_seasons():
        run = walk_bracket(season, owner_id, config)
        if run is None:
            continue
        stats.berths += 1
        team = season.team_for_owner(owner_id)
        season_losses = 0

        for week, entry, opp_entry in run.games:
            actual = optimizer.actual_entry(entry)
            optimal = optimizer.optimize_entry(entry, team.lineup_config)
            stats.weeks += 1
            stats.add_points(actual, optimal)
            tally_result(stats, entry.points, opp_entry.points)
            if entry.points < opp_entry.points:
                season_losses += 1

        if run.games and season_losses == 0:
            stats.championship_seasons.append(season.season_id)

    return stats
