"""Recommendation engine: signal extraction and ranking."""
