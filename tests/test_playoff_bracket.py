"""
Tests for the playoff bracket walker.
"""

import pytest

from statdrop.analysis.playoff_bracket import (
    bracket_depth, bracket_weeks, playoff_field, walk_bracket, aggregate_playoffs,
)
from statdrop.analysis.lineup_optimizer import LineupOptimizer

from league_factory import simple_entry, make_team, make_season, make_league, directory_for


def playoff_season(season_id="2023", weeks=None, playoff_teams_count=4):
    teams = [
        make_team("a", 1, standing=1), make_team("b", 2, standing=2),
        make_team("c", 3, standing=3), make_team("d", 4, standing=4),
        make_team("e", 5, standing=5), make_team("f", 6, standing=None),
    ]
    return make_season(season_id, teams, weeks or {}, playoff_start_week=14,
                       playoff_teams_count=playoff_teams_count)


class TestBracketShape:
    """Test cases for bracket depth and field selection."""

    @pytest.mark.parametrize("teams,depth", [(0, 1), (1, 1), (2, 1), (4, 2), (6, 3), (8, 3), (12, 4)])
    def test_bracket_depth(self, teams, depth):
        assert bracket_depth(teams) == depth

    def test_bracket_weeks(self):
        assert bracket_weeks(playoff_season()) == [14, 15]
        assert bracket_weeks(playoff_season(playoff_teams_count=6)) == [14, 15, 16]

    def test_field_is_top_standings(self):
        seeded = playoff_field(playoff_season())
        assert [t.owner_id for t in seeded] == ["a", "b", "c", "d"]

    def test_unknown_standing_ranks_last(self):
        season = playoff_season(playoff_teams_count=6)
        assert playoff_field(season)[-1].owner_id == "f"


class TestWalkBracket:
    """Test cases for walk_bracket and aggregate_playoffs."""

    def setup_method(self):
        """Set up test fixtures."""
        weeks = {
            13: [simple_entry(1, 1, 10, 10), simple_entry(2, 1, 90, 90)],
            14: [simple_entry(1, 1, 60, 60, bench_rb=80), simple_entry(4, 1, 40, 40),
                 simple_entry(2, 2, 30, 30), simple_entry(3, 2, 50, 50),
                 simple_entry(5, 3, 70, 70), simple_entry(6, 3, 10, 10)],
            15: [simple_entry(1, 1, 55, 55), simple_entry(3, 1, 50, 50),
                 simple_entry(2, 2, 90, 90), simple_entry(4, 2, 10, 10)],
            16: [simple_entry(1, 1, 10, 10), simple_entry(3, 1, 90, 90)],
        }
        self.league = make_league([playoff_season(weeks=weeks)])
        self.season = self.league.seasons[0]
        self.optimizer = LineupOptimizer(directory_for([self.league]))

    def test_champion_run(self):
        run = walk_bracket(self.season, "a")
        assert run.weeks == [14, 15]
        assert run.eliminated_week is None

    def test_stops_after_first_loss(self):
        run = walk_bracket(self.season, "b")
        # week 15 is a consolation game and must not be counted
        assert run.weeks == [14]
        assert run.eliminated_week == 14

    def test_outside_field(self):
        assert walk_bracket(self.season, "e") is None
        stats = aggregate_playoffs(self.league, "e", self.optimizer)
        assert stats.berths == 0
        assert stats.weeks == 0
        assert stats.management_percent == 0.0

    def test_depth_caps_games(self):
        run = walk_bracket(self.season, "c")
        assert 16 not in run.weeks
        assert len(run.games) <= bracket_depth(4)

    def test_bye_week_skipped(self):
        del self.season.matchups_by_week[14][0:2]
        self.season.matchups_by_week[14].append(simple_entry(1, None, 0, 0))
        run = walk_bracket(self.season, "a")
        assert run.weeks == [15]

    def test_aggregate_champion(self):
        stats = aggregate_playoffs(self.league, "a", self.optimizer)

        assert stats.berths == 1
        assert stats.record_string == "2-0"
        assert stats.is_champion
        assert stats.championship_seasons == ["2023"]
        assert stats.points_for == pytest.approx(230.0)
        assert stats.max_points_for == pytest.approx(250.0)
        assert stats.points_against == pytest.approx(180.0)
        assert stats.ppw == pytest.approx(115.0)

    def test_aggregate_eliminated(self):
        stats = aggregate_playoffs(self.league, "b", self.optimizer)
        assert stats.record_string == "0-1"
        assert not stats.is_champion
