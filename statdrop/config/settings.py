"""
Configuration management for the Dynasty Stat Drop engine.
Handles loading, validation, and access to application settings.
"""

import logging
import yaml
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AggregationConfig:
    """Defaults applied when season settings are missing."""
    default_playoff_start_week: int = 14
    default_playoff_teams: int = 4
    min_playoff_start_week: int = 13
    max_playoff_start_week: int = 18
    include_playoffs_in_head_to_head: bool = True

    def clamp_playoff_start_week(self, week: Optional[int]) -> int:
        """Clamp an imported playoff start week into the supported window."""
        if week is None:
            return self.default_playoff_start_week
        return min(max(self.min_playoff_start_week, week), self.max_playoff_start_week)


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    file: str = "statdrop.log"
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class StatDropConfig:
    """Main application configuration settings."""
    league_snapshot: Optional[str] = None
    players_file: Optional[str] = None
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages application configuration loading and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self._config: Optional[StatDropConfig] = None

    def load_config(self) -> StatDropConfig:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_data = yaml.safe_load(file) or {}

        self._config = self.from_dict(config_data)
        return self._config

    @staticmethod
    def from_dict(config_data: Dict[str, Any]) -> StatDropConfig:
        """Build and validate a configuration from parsed YAML."""
        aggregation_data = config_data.get('aggregation') or {}
        logging_data = config_data.get('logging') or {}

        defaults = AggregationConfig()
        aggregation_config = AggregationConfig(
            default_playoff_start_week=aggregation_data.get(
                'default_playoff_start_week', defaults.default_playoff_start_week),
            default_playoff_teams=aggregation_data.get(
                'default_playoff_teams', defaults.default_playoff_teams),
            min_playoff_start_week=aggregation_data.get(
                'min_playoff_start_week', defaults.min_playoff_start_week),
            max_playoff_start_week=aggregation_data.get(
                'max_playoff_start_week', defaults.max_playoff_start_week),
            include_playoffs_in_head_to_head=aggregation_data.get(
                'include_playoffs_in_head_to_head', defaults.include_playoffs_in_head_to_head),
        )

        log_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=str(logging_data.get('level', log_defaults.level)).upper(),
            file=logging_data.get('file', log_defaults.file),
            max_size_mb=logging_data.get('max_size_mb', log_defaults.max_size_mb),
            backup_count=logging_data.get('backup_count', log_defaults.backup_count),
        )

        config = StatDropConfig(
            league_snapshot=config_data.get('league_snapshot'),
            players_file=config_data.get('players_file'),
            aggregation=aggregation_config,
            logging=logging_config,
        )
        ConfigManager.validate(config)
        return config

    @staticmethod
    def validate(config: StatDropConfig):
        """Reject settings the engine cannot work with."""
        agg = config.aggregation
        if agg.min_playoff_start_week > agg.max_playoff_start_week:
            raise ValueError("min_playoff_start_week must not exceed max_playoff_start_week")
        if not agg.min_playoff_start_week <= agg.default_playoff_start_week <= agg.max_playoff_start_week:
            raise ValueError("default_playoff_start_week must fall inside the playoff start window")
        if agg.default_playoff_teams < 1:
            raise ValueError("default_playoff_teams must be at least 1")
        if config.logging.level not in VALID_LOG_LEVELS:
            raise ValueError(f"Unknown logging level: {config.logging.level}")

    @staticmethod
    def defaults() -> StatDropConfig:
        return StatDropConfig()

    def get_config(self) -> StatDropConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def reload_config(self) -> StatDropConfig:
        """Reload configuration from file."""
        self._config = None
        return self.get_config()


def log_level(config: StatDropConfig) -> int:
    return getattr(logging, config.logging.level)
