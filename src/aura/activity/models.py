"""Data models for the activity log.

These models define the persisted shape of activity records,
independent of the storage backend used.
"""

import time
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ActivityType(str, Enum):
    """Kinds of user-visible events recorded in the log."""

    CHAT = "chat"
    RESEARCH = "research"
    VOICE = "voice"
    VIDEO = "video"
    TASK = "task"


def _now_ms() -> int:
    return int(time.time() * 1000)


class Activity(BaseModel):
    """Record of a single user-triggered event.

    Activities are immutable once created; the log only ever appends them.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Opaque unique identifier")
    timestamp: int = Field(default_factory=_now_ms, description="Creation time in ms since epoch")
    type: ActivityType = Field(description="Activity category")
    description: str = Field(description="Human-readable summary")
    metadata: Any | None = Field(default=None, description="Opaque auxiliary JSON payload")


ActivityList = TypeAdapter(list[Activity])
