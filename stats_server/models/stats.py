"""Data models for the stats response.

Field names are the readable ones; the JSON wire format uses the short
aliases so the payload stays small for clients that poll it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ACTION_PREFIX = "command_"
ACTION_SUFFIX = "_cmd"


def normalize_action(action: str) -> str:
    """Turn a raw metric action like ``command_next_launch_cmd`` into ``nextlaunch``."""
    return action.removeprefix(ACTION_PREFIX).removesuffix(ACTION_SUFFIX).replace("_", "")


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CountSample(_WireModel):
    """Highest guild and subscribed counts seen on one day."""

    guild_count: int = Field(serialization_alias="g")
    subscribed_count: int = Field(serialization_alias="s")
    date: str = Field(serialization_alias="d")


class ActionTally(_WireModel):
    """How many times one (normalized) command was used."""

    action: str = Field(serialization_alias="a")
    count: int = Field(serialization_alias="c")


class StatsPayload(_WireModel):
    counts: list[CountSample] = Field(default_factory=list)
    action_counts: list[ActionTally] = Field(default_factory=list)

    def to_json(self) -> bytes:
        """Serialize with the compact wire keys."""
        return self.model_dump_json(by_alias=True).encode()
