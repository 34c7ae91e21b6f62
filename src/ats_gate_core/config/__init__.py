"""Configuration for ats-gate."""
