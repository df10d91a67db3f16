"""
Tests for configuration loading and validation.
"""

import logging

import pytest

from statdrop.config.settings import ConfigManager, AggregationConfig, log_level


class TestConfigManager:
    """Test cases for ConfigManager."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "league_snapshot: snap.json\n"
            "players_file: players.json\n"
            "aggregation:\n"
            "  default_playoff_start_week: 15\n"
            "  include_playoffs_in_head_to_head: false\n"
            "logging:\n"
            "  level: debug\n"
        )
        config = ConfigManager(str(path)).load_config()

        assert config.league_snapshot == "snap.json"
        assert config.players_file == "players.json"
        assert config.aggregation.default_playoff_start_week == 15
        assert config.aggregation.default_playoff_teams == 4
        assert config.aggregation.include_playoffs_in_head_to_head is False
        assert config.logging.level == "DEBUG"
        assert log_level(config) == logging.DEBUG

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = ConfigManager(str(path)).get_config()
        assert config == ConfigManager.defaults()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(str(tmp_path / "nope.yaml")).load_config()

    def test_reload_picks_up_changes(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("aggregation:\n  default_playoff_teams: 6\n")
        manager = ConfigManager(str(path))
        assert manager.get_config().aggregation.default_playoff_teams == 6

        path.write_text("aggregation:\n  default_playoff_teams: 8\n")
        assert manager.get_config().aggregation.default_playoff_teams == 6
        assert manager.reload_config().aggregation.default_playoff_teams == 8

    @pytest.mark.parametrize("data", [
        {"aggregation": {"min_playoff_start_week": 17, "max_playoff_start_week": 14}},
        {"aggregation": {"default_playoff_start_week": 20}},
        {"aggregation": {"default_playoff_teams": 0}},
        {"logging": {"level": "LOUD"}},
    ])
    def test_invalid_settings(self, data):
        with pytest.raises(ValueError):
            ConfigManager.from_dict(data)


class TestAggregationConfig:
    """Test cases for AggregationConfig."""

    def test_clamp_playoff_start_week(self):
        config = AggregationConfig()
        assert config.clamp_playoff_start_week(None) == 14
        assert config.clamp_playoff_start_week(10) == 13
        assert config.clamp_playoff_start_week(15) == 15
        assert config.clamp_playoff_start_week(22) == 18
