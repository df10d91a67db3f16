"""
Optimal lineup engine for the Dynasty Stat Drop engine.
Computes the best score a team could have posted in a week from the players
it actually rostered that week, under its lineup slot rules.
"""

import logging
from typing import List, Dict, Optional, Set, Tuple, Iterable
from dataclasses import dataclass, field

from ..data.models import (
    MatchupEntry, PlayerDirectory, OFFENSIVE_POSITIONS, DEFENSIVE_POSITIONS,
)
from .positions import (
    normalize_position, normalize_positions, allowed_positions, is_eligible,
    ordered_slots, credited_position,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineupCandidate:
    """A player available to fill a slot in one week."""
    player_id: str
    base_position: str
    fantasy_positions: Tuple[str, ...] = ()
    points: float = 0.0

    @property
    def candidate_positions(self) -> List[str]:
        positions = [self.base_position]
        positions.extend(p for p in self.fantasy_positions if p != self.base_position)
        return positions


@dataclass
class OptimalLineup:
    """Result of an optimal lineup computation."""
    total: float = 0.0
    offensive: float = 0.0
    defensive: float = 0.0
    assignments: List[Tuple[str, LineupCandidate]] = field(default_factory=list)


def resolve_candidate(player_id: str, points: float,
                      directory: PlayerDirectory) -> Optional[LineupCandidate]:
    """Build a candidate from the player directory, or None if the player has no position."""
    player = directory.get(player_id)
    if player is None:
        return None
    base = normalize_position(player.position)
    if not base:
        return None
    fantasy = normalize_positions(player.fantasy_positions or (player.position,))
    return LineupCandidate(
        player_id=player_id,
        base_position=base,
        fantasy_positions=tuple(fantasy),
        points=points,
    )


def build_candidates(entry: MatchupEntry, directory: PlayerDirectory) -> List[LineupCandidate]:
    """Candidates from the full weekly pool of a matchup entry."""
    candidates = []
    for player_id in entry.players:
        candidate = resolve_candidate(player_id, entry.points_for_player(player_id), directory)
        if candidate is None:
            logger.debug(f"Skipping player {player_id}: no resolvable position")
            continue
        candidates.append(candidate)
    return candidates


def _find_best_candidate_for_slot(slot: str, pool: Iterable[LineupCandidate],
                                  used_ids: Set[str]) -> Optional[LineupCandidate]:
    """Highest-scoring unused eligible candidate; the first one wins ties."""
    allowed = allowed_positions(slot)
    best = None
    for candidate in pool:
        if candidate.player_id in used_ids:
            continue
        if not is_eligible(candidate.base_position, candidate.fantasy_positions, allowed):
            continue
        if best is None or candidate.points > best.points:
            best = candidate
    return best


def compute_optimal_lineup(pool: List[LineupCandidate],
                           lineup_config: Dict[str, int]) -> OptimalLineup:
    """Greedy slot-by-slot assignment of the pool to the lineup config.

    Fixed slots are filled before flex slots, and flex before superflex, so
    specialists are not taken by a wider slot first.
    """
    result = OptimalLineup()
    used_ids: Set[str] = set()

    for slot in ordered_slots(lineup_config):
        best = _find_best_candidate_for_slot(slot, pool, used_ids)
        if best is None:
            continue
        used_ids.add(best.player_id)
        result.assignments.append((slot, best))
        result.total += best.points
        if best.base_position in OFFENSIVE_POSITIONS:
            result.offensive += best.points
        elif best.base_position in DEFENSIVE_POSITIONS:
            result.defensive += best.points

    return result


@dataclass
class StarterTotals:
    """Actual points scored by a week's starters."""
    total: float = 0.0
    offensive: float = 0.0
    defensive: float = 0.0
    by_position: Dict[str, float] = field(default_factory=dict)
    starts_by_position: Dict[str, int] = field(default_factory=dict)


def compute_starter_totals(entry: MatchupEntry, directory: PlayerDirectory) -> StarterTotals:
    """Sum starters' points by base position.

    Empty slot placeholders ("0") and players without a resolvable position
    are skipped. A starter missing from players_points scores 0.
    """
    totals = StarterTotals()
    for player_id in entry.starters:
        if not player_id or player_id == "0":
            continue
        candidate = resolve_candidate(player_id, entry.points_for_player(player_id), directory)
        if candidate is None:
            logger.debug(f"Skipping starter {player_id}: no resolvable position")
            continue
        pos = candidate.base_position
        totals.total += candidate.points
        if pos in OFFENSIVE_POSITIONS:
            totals.offensive += candidate.points
        elif pos in DEFENSIVE_POSITIONS:
            totals.defensive += candidate.points
        totals.by_position[pos] = totals.by_position.get(pos, 0.0) + candidate.points
        totals.starts_by_position[pos] = totals.starts_by_position.get(pos, 0) + 1
    return totals


def credited_starters(entry: MatchupEntry, slots: List[str],
                      directory: PlayerDirectory) -> List[Tuple[str, str, float]]:
    """Pair starters with the roster slots they filled, in order.

    Returns (player_id, credited position, points) per filled slot. A slot
    credits the player's position it accepts; players the directory cannot
    place still credit a fixed slot's own position.
    """
    credited = []
    for slot, player_id in zip(slots, entry.starters):
        if not player_id or player_id == "0":
            continue
        points = entry.points_for_player(player_id)
        candidate = resolve_candidate(player_id, points, directory)
        if candidate is None:
            pos = credited_position(slot, [], "")
        else:
            pos = credited_position(slot, candidate.candidate_positions, candidate.base_position)
        if pos:
            credited.append((player_id, pos, points))
    return credited


def count_starter_usage(entries: Iterable[MatchupEntry], slots: List[str],
                        directory: PlayerDirectory) -> Tuple[Dict[str, int], int]:
    """Starts per credited position and the number of weeks with a nonzero score."""
    counts: Dict[str, int] = {}
    weeks = 0
    for entry in entries:
        credited = credited_starters(entry, slots, directory)
        if not any(points != 0 for _, _, points in credited):
            continue
        weeks += 1
        for _, pos, _ in credited:
            counts[pos] = counts.get(pos, 0) + 1
    return counts, weeks


class LineupOptimizer:
    """Computes optimal lineups for matchup entries against a player directory."""

    def __init__(self, directory: PlayerDirectory):
        self.directory = directory

    def optimize_entry(self, entry: MatchupEntry, lineup_config: Dict[str, int]) -> OptimalLineup:
        """Optimal lineup from an entry's weekly player pool."""
        pool = build_candidates(entry, self.directory)
        return compute_optimal_lineup(pool, lineup_config)

    def actual_entry(self, entry: MatchupEntry) -> StarterTotals:
        return compute_starter_totals(entry, self.directory)

    def management_percent(self, entry: MatchupEntry, lineup_config: Dict[str, int]) -> float:
        """Entry points as a percentage of its optimal total; 0 when optimal is 0."""
        optimal = self.optimize_entry(entry, lineup_config).total
        if optimal <= 0:
            return 0.0
        return entry.points / optimal * 100
