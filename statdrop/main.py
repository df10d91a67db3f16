"""
Main application entry point for the Dynasty Stat Drop engine.
Loads a league snapshot and player table, builds all-time franchise stats,
and reports them as a text summary or JSON.
"""

import json
import logging
import logging.handlers
from typing import Optional, List, Dict, Any
import sys
import argparse

from .config.settings import ConfigManager, StatDropConfig, log_level
from .analysis.aggregator import AllTimeAggregator
from .analysis.stats_service import StatsService, StatKind, UNAVAILABLE
from .data.storage import LeagueSnapshotStore
from .data.models import League


SUMMARY_KINDS = [
    StatKind.WIN_LOSS_RECORD,
    StatKind.POINTS_FOR,
    StatKind.MAX_POINTS_FOR,
    StatKind.MANAGEMENT_PERCENT,
    StatKind.TEAM_AVERAGE_PPW,
    StatKind.OFFENSIVE_MANAGEMENT_PERCENT,
    StatKind.DEFENSIVE_MANAGEMENT_PERCENT,
    StatKind.CHAMPIONSHIPS,
    StatKind.PLAYOFF_BERTHS,
    StatKind.PLAYOFF_RECORD,
    StatKind.HIGHEST_POINTS_IN_GAME,
    StatKind.WAIVER_MOVES_ALL_TIME,
    StatKind.FAAB_SPENT_ALL_TIME,
    StatKind.TRADES_COMPLETED_ALL_TIME,
]


def _json_value(value: Any) -> Any:
    if value is UNAVAILABLE:
        return None
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, float):
        return round(value, 2)
    return value


class StatDropApp:
    """Runs one stat-drop build over a league snapshot."""

    def __init__(self, config: StatDropConfig):
        self.config = config
        self.store = LeagueSnapshotStore(config.aggregation)
        self.logger = logging.getLogger(__name__)

    def setup_logging(self):
        """Setup logging configuration."""
        log_config = self.config.logging

        logger = logging.getLogger()
        logger.setLevel(log_level(self.config))

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        file_handler = logging.handlers.RotatingFileHandler(
            log_config.file,
            maxBytes=log_config.max_size_mb * 1024 * 1024,
            backupCount=log_config.backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # stderr keeps stdout clean for --json output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    def build(self, snapshot_path: str, players_path: str) -> League:
        """Load inputs and return the league with all-time stats attached."""
        directory = self.store.load_players(players_path)
        league = self.store.load_league(snapshot_path, directory)
        aggregator = AllTimeAggregator(directory, self.config.aggregation)
        return aggregator.build_all_time(league)

    def report(self, league: League, owner_id: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        """Summary stats per franchise, keyed by owner id."""
        service = StatsService(league)
        owners = [owner_id] if owner_id else list(league.all_time_stats)
        report = {}
        for oid in owners:
            agg = service.aggregate_for(oid)
            if agg is None:
                self.logger.warning(f"No all-time stats for owner {oid}")
                continue
            row = {'name': agg.latest_display_name, 'seasons': list(agg.seasons_included)}
            for kind in SUMMARY_KINDS:
                row[kind.value] = _json_value(service.statistic(agg, kind))
            row['head_to_head'] = {
                opp: record.record_string for opp, record in agg.head_to_head.items()
            }
            report[oid] = row
        return report

    def format_summary(self, league: League, report: Dict[str, Dict[str, Any]]) -> str:
        lines = [f"{league.name or league.league_id}: {len(report)} franchises"]
        for oid, row in report.items():
            lines.append(
                f"  {row['name']} ({oid}): {row['win_loss_record']}, "
                f"PF {row['points_for']:.2f}, "
                f"mgmt {row['management_percent']:.1f}%, "
                f"PPW {row['team_average_ppw']:.2f}, "
                f"titles {row['championships']}, "
                f"playoffs {row['playoff_record']}"
            )
        return "\n".join(lines)

    def run(self, snapshot_path: str, players_path: str, owner_id: Optional[str] = None,
            as_json: bool = False) -> bool:
        try:
            self.logger.info(f"Building stat drop from {snapshot_path}")
            league = self.build(snapshot_path, players_path)
            report = self.report(league, owner_id)
            if as_json:
                print(json.dumps(report, indent=2, sort_keys=True))
            else:
                print(self.format_summary(league, report))
            return True
        except (OSError, ValueError) as e:
            self.logger.error(f"Error building stat drop: {e}")
            return False


def load_app_config(path: Optional[str]) -> StatDropConfig:
    if path is None:
        return ConfigManager.defaults()
    return ConfigManager(path).load_config()


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Dynasty Stat Drop all-time franchise stats")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--snapshot", help="League snapshot JSON")
    parser.add_argument("--players", help="Player reference JSON")
    parser.add_argument("--owner", help="Only report this owner id")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a summary")

    args = parser.parse_args(argv)

    try:
        config = load_app_config(args.config)
        snapshot = args.snapshot or config.league_snapshot
        players = args.players or config.players_file
        if not snapshot or not players:
            parser.error("a league snapshot and a players file are required")

        app = StatDropApp(config)
        app.setup_logging()
        success = app.run(snapshot, players, args.owner, args.json)
        sys.exit(0 if success else 1)

    except KeyboardInterrupt:
        print("\nStopped by user")
        sys.exit(0)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
