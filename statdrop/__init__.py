"""
Dynasty Stat Drop

All-time franchise statistics for long-running dynasty fantasy football leagues.
Folds every season's weekly matchups into management percentages, optimal
lineup totals, head-to-head ledgers, and playoff records for the league's
current owners.
"""

__version__ = "1.0.0"
__author__ = "Dynasty Stat Drop Team"
__description__ = "All-time franchise statistics for dynasty fantasy football leagues"
