"""Prompt templates for the LLM-backed helpers."""
