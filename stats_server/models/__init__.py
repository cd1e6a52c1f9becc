"""Data models for the stats response."""

from .stats import ActionTally, CountSample, StatsPayload, normalize_action

__all__ = [
    "ActionTally",
    "CountSample",
    "StatsPayload",
    "normalize_action",
]
