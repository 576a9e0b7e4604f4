"""
Scoring analytics.

Responsibilities:
- Keep an in-memory log of scoring runs.
- Aggregate run counts, timings and tier distribution for the admin view.
"""
