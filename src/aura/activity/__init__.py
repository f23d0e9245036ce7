"""Activity log module for aura.

Provides the append-only activity history and the storage backends it
persists through.
"""

from .base import KeyValueStorage
from .factory import create_storage
from .log import STORAGE_KEY, ActivityLog
from .models import Activity, ActivityType

__all__ = [
    "STORAGE_KEY",
    "Activity",
    "ActivityLog",
    "ActivityType",
    "KeyValueStorage",
    "create_storage",
]
