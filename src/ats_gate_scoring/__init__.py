"""Scoring engine, policy gate and LLM-backed agents for ats-gate."""
