"""Core domain models, configuration and interfaces for ats-gate."""
