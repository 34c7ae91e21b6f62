"""Command-line interface for ats-gate."""
