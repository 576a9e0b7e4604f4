"""
Dinner match scoring.

Responsibilities:
- Fold a user's participation history into cuisine and locality frequencies.
- Score each open dinner against the user's profile and history (0..99).
- Explain each score with up to three match reasons.
- Orchestrate profile, history and listing lookups for the HTTP layer.
"""
