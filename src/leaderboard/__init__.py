"""Comparative quality leaderboard: scoring, normalization and card arrangement."""
