"""Lineup optimization, aggregation, and stat access."""
