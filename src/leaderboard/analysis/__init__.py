"""Scoring and distribution statistics over the value matrix."""
