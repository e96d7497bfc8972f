"""CLI commands for PnL Tracker.

This package provides the command-line interface for PnL Tracker,
including text ingestion, journal maintenance, reports, and backups.
"""

from pnltracker.cli.main import cli, main

__all__ = ["cli", "main"]
