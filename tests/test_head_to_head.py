"""
Tests for the head-to-head ledger.
"""

import pytest

from statdrop.analysis.head_to_head import head_to_head_for
from statdrop.analysis.lineup_optimizer import LineupOptimizer
from statdrop.config.settings import AggregationConfig

from league_factory import simple_entry, make_team, make_season, make_league, directory_for


class TestHeadToHead:
    """Test cases for head_to_head_for."""

    def setup_method(self):
        """Set up test fixtures."""
        old = make_season(
            "2022",
            [make_team("a", 1), make_team("b", 2), make_team("gone", 3), make_team("c", 4)],
            {
                1: [simple_entry(1, 1, 50, 50), simple_entry(2, 1, 40, 40),
                    simple_entry(3, 2, 30, 30), simple_entry(4, 2, 20, 20)],
                2: [simple_entry(1, 1, 40, 40), simple_entry(3, 1, 50, 50),
                    simple_entry(2, 2, 30, 30), simple_entry(4, 2, 30, 30)],
            },
        )
        new = make_season(
            "2023",
            [make_team("a", 1), make_team("b", 2), make_team("c", 3)],
            {
                1: [simple_entry(1, 1, 30, 30, bench_rb=60), simple_entry(2, 1, 45, 45),
                    simple_entry(3, None, 10, 10)],
                14: [simple_entry(1, 1, 60, 60), simple_entry(2, 1, 20, 20)],
            },
        )
        self.league = make_league([old, new])
        self.optimizer = LineupOptimizer(directory_for([self.league]))

    def test_ledger_is_symmetric(self):
        a = head_to_head_for(self.league, "a", self.optimizer)
        b = head_to_head_for(self.league, "b", self.optimizer)

        assert a["b"].games == b["a"].games == 3
        assert (a["b"].wins, a["b"].losses) == (b["a"].losses, b["a"].wins)
        assert a["b"].points_for == b["a"].points_against
        assert a["b"].points_against == b["a"].points_for
        assert a["b"].sum_management_for == pytest.approx(b["a"].sum_management_against)

    def test_record_against_opponent(self):
        record = head_to_head_for(self.league, "a", self.optimizer)["b"]

        # 100 v 80 win, 60 v 90 loss, 120 v 40 win
        assert record.record_string == "2-1"
        assert record.points_for == pytest.approx(280.0)
        assert record.avg_points_against == pytest.approx(70.0)

    def test_stale_owners_excluded(self):
        ledger = head_to_head_for(self.league, "a", self.optimizer)
        assert "gone" not in ledger
        assert set(ledger) == {"b"}

    def test_management_sums(self):
        record = head_to_head_for(self.league, "a", self.optimizer)["b"]
        # 2023 week 1: 60 of a possible 90; every other game is optimal
        assert record.sum_management_for == pytest.approx(100 + 60 / 90 * 100 + 100)
        assert record.avg_management_against == pytest.approx(100.0)

    def test_playoff_games_can_be_excluded(self):
        config = AggregationConfig(include_playoffs_in_head_to_head=False)
        record = head_to_head_for(self.league, "a", self.optimizer, config=config)["b"]
        assert record.games == 2
        assert record.record_string == "1-1"

    def test_zero_zero_games_skipped(self):
        self.league.seasons[1].matchups_by_week[2] = [simple_entry(1, 1, 0, 0), simple_entry(2, 1, 0, 0)]
        record = head_to_head_for(self.league, "a", self.optimizer)["b"]
        assert record.games == 3
        assert record.ties == 0

    def test_unknown_owner_has_empty_ledger(self):
        assert head_to_head_for(self.league, "nobody", self.optimizer) == {}
