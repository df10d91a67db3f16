"""
Tests for stat access over season teams and all-time aggregates.
"""

import pytest

from statdrop.analysis.aggregator import build_all_time
from statdrop.analysis.stats_service import StatsService, StatKind, UNAVAILABLE
from statdrop.data.models import AggregatedFranchiseStats, FranchiseSnapshot

from league_factory import simple_entry, make_team, make_season, make_league, directory_for


class TestUnavailable:
    """Test cases for the UNAVAILABLE marker."""

    def test_falsy_singleton(self):
        assert not UNAVAILABLE
        assert type(UNAVAILABLE)() is UNAVAILABLE
        assert repr(UNAVAILABLE) == "UNAVAILABLE"


class TestStatsService:
    """Test cases for StatsService."""

    def setup_method(self):
        """Set up test fixtures."""
        teams = [
            make_team("a", 1, standing=1, waiver_moves=3, faab_spent=12.0, trades_completed=2),
            make_team("b", 2, standing=2),
        ]
        weeks = {
            1: [simple_entry(1, 1, 50, 30, bench_rb=50), simple_entry(2, 1, 40, 30)],
            2: [simple_entry(1, 1, 50, 40, bench_rb=50), simple_entry(2, 1, 50, 50)],
        }
        league = make_league([make_season("2023", teams, weeks)])
        self.league = build_all_time(league, directory_for([league]))
        self.service = StatsService(self.league)
        self.agg = self.service.aggregate_for("a")
        self.team = self.league.seasons[0].teams[0]

    def test_aggregate_stats(self):
        assert self.service.statistic(self.agg, StatKind.POINTS_FOR) == pytest.approx(170.0)
        assert self.service.statistic(self.agg, StatKind.MANAGEMENT_PERCENT) == pytest.approx(85.0)
        assert self.service.statistic(self.agg, StatKind.WIN_LOSS_RECORD) == "1-1"
        assert self.service.statistic(self.agg, StatKind.QB_POSITION_PPW) == pytest.approx(50.0)
        assert self.service.statistic(self.agg, StatKind.INDIVIDUAL_RB_PPW) == pytest.approx(35.0)
        assert self.service.statistic(self.agg, StatKind.FAAB_AVG_PER_MOVE_ALL_TIME) == pytest.approx(4.0)

    def test_best_and_worst_positions(self):
        assert self.service.statistic(self.agg, StatKind.BEST_OFFENSIVE_POSITION_PPW) == ("QB", 50.0)
        worst = self.service.statistic(self.agg, StatKind.WORST_OFFENSIVE_POSITION_PPW)
        assert worst[1] == 0.0

    def test_head_to_head_needs_opponent(self):
        assert self.service.statistic(self.agg, StatKind.HEAD_TO_HEAD_RECORD) is UNAVAILABLE
        assert self.service.statistic(self.agg, StatKind.HEAD_TO_HEAD_RECORD, "b") == "1-1"
        assert self.service.statistic(self.agg, StatKind.HEAD_TO_HEAD_RECORD, "zz") is UNAVAILABLE

    def test_season_only_kind_on_aggregate_is_unavailable(self):
        assert self.service.statistic(self.agg, StatKind.WAIVER_MOVES_SEASON) is UNAVAILABLE

    def test_season_team_uses_season_totals(self):
        assert self.service.statistic(self.team, StatKind.TEAM_AVERAGE_PPW) == pytest.approx(85.0)
        assert self.service.statistic(self.team, StatKind.WAIVER_MOVES_SEASON) == 3
        assert self.service.statistic(self.team, StatKind.TRADES_COMPLETED_ALL_TIME) == 2

    def test_season_team_without_aggregate_falls_back_to_snapshot(self):
        stranger = FranchiseSnapshot(owner_id="x", roster_id=9, points_for=123.0)
        assert self.service.statistic(stranger, StatKind.POINTS_FOR) == 123.0
        assert self.service.statistic(stranger, StatKind.MANAGEMENT_PERCENT) is UNAVAILABLE
        assert self.service.statistic(stranger, StatKind.PLAYOFF_BERTHS) is UNAVAILABLE
        assert self.service.statistic(stranger, StatKind.QB_POSITION_PPW) is UNAVAILABLE
        assert self.service.statistic(stranger, StatKind.AVG_QB_STARTERS_PER_WEEK) == 0.0

    def test_empty_aggregate_divides_to_zero(self):
        empty = AggregatedFranchiseStats(owner_id="z")
        for kind in (StatKind.MANAGEMENT_PERCENT, StatKind.TEAM_AVERAGE_PPW,
                     StatKind.AVERAGE_DEFENSIVE_PPW, StatKind.INDIVIDUAL_LB_PPW,
                     StatKind.FAAB_AVG_PER_MOVE_ALL_TIME, StatKind.TRADES_PER_SEASON_AVERAGE,
                     StatKind.PLAYOFF_PPW, StatKind.AVG_WR_STARTERS_PER_WEEK):
            assert self.service.statistic(empty, kind) == 0.0
        assert self.service.statistic(empty, StatKind.BEST_DEFENSIVE_POSITION_PPW) is UNAVAILABLE

    def test_unsupported_target(self):
        assert self.service.statistic("not a team", StatKind.POINTS_FOR) is UNAVAILABLE
