"""
Head-to-head ledger between franchises.
"""

import logging
from typing import Dict, Iterable, Optional

from ..config.settings import AggregationConfig
from ..data.models import League, HeadToHeadRecord, tally_result
from .lineup_optimizer import LineupOptimizer


logger = logging.getLogger(__name__)


def head_to_head_for(league: League, owner_id: str, optimizer: LineupOptimizer,
                     current_ids: Optional[Iterable[str]] = None,
                     config: Optional[AggregationConfig] = None) -> Dict[str, HeadToHeadRecord]:
    """Build one franchise's ledger against every current opponent.

    Only opponents still in the current league membership get an entry.
    Games where both sides scored 0 are treated as unplayed.
    """
    config = config or AggregationConfig()
    members = set(current_ids if current_ids is not None else league.current_owner_ids)
    ledger: Dict[str, HeadToHeadRecord] = {}

    for season in league.sorted_seasons():
        team = season.team_for_owner(owner_id)
        if team is None:
            continue
        playoff_start = season.playoff_start_week or config.default_playoff_start_week

        for week in season.sorted_weeks():
            if not config.include_playoffs_in_head_to_head and week >= playoff_start:
                continue
            entry = season.entry_for(week, team.roster_id)
            if entry is None:
                continue
            opp_entry = season.opponent_entry(week, entry)
            if opp_entry is None:
                continue
            opp_team = season.team_for_roster(opp_entry.roster_id)
            if opp_team is None or opp_team.owner_id == owner_id:
                continue
            if opp_team.owner_id not in members:
                continue
            if entry.points == 0 and opp_entry.points == 0:
                logger.debug(f"Skipping unplayed {season.season_id} week {week} "
                             f"{owner_id} vs {opp_team.owner_id}")
                continue

            record = ledger.setdefault(opp_team.owner_id, HeadToHeadRecord())
            record.games += 1
            record.points_for += entry.points
            record.sum_management_for += optimizer.management_percent(entry, team.lineup_config)
            record.sum_management_against += optimizer.management_percent(
                opp_entry, opp_team.lineup_config)
            tally_result(record, entry.points, opp_entry.points)

    return ledger
