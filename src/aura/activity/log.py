"""Append-only activity log with full-snapshot persistence.

The log is the only persisted state in Aura. It is constructed once at
startup, loaded from storage, and passed to every consumer that records or
displays activities.
"""

import asyncio
from collections import Counter
from collections.abc import Callable
from typing import Any

from .base import KeyValueStorage
from .models import Activity, ActivityList, ActivityType

STORAGE_KEY = "aura_activities"

ActivityListener = Callable[[Activity], None]


class ActivityLog:
    """Append-only list of activities mirrored to a storage slot.

    Hidden design decisions:
    - Serialization format of the stored slot (JSON array)
    - Recovery from missing or malformed stored data
    - Ordering of concurrent appends

    Every append rewrites the whole stored copy. A failed write leaves the
    in-memory list authoritative for the rest of the session.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._activities: list[Activity] = []
        self._listeners: list[ActivityListener] = []
        self._lock = asyncio.Lock()
        self._unreadable = False
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Activity", message)

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    @property
    def activities(self) -> list[Activity]:
        """Snapshot of the log in insertion order."""
        return list(self._activities)

    def __len__(self) -> int:
        return len(self._activities)

    async def load(self) -> list[Activity]:
        """Restore the log from storage.

        Missing or malformed data yields an empty log. Failures are reported
        through the debug callback, never raised.

        Returns:
            The restored activities in insertion order
        """
        try:
            raw = await self._storage.get_item(self._key)
        except Exception as e:
            self._debug("warning", f"Failed to read activity history: {e}")
            raw = None
            self._unreadable = True

        activities: list[Activity] = []
        if raw:
            try:
                activities = ActivityList.validate_json(raw)
            except ValueError as e:
                self._debug("warning", f"Failed to parse activity history: {e}")
                activities = []
                self._unreadable = True

        self._activities = activities
        self._debug("info", f"Loaded {len(activities)} activities from {self._storage.backend_type}")
        return list(activities)

    async def append(
        self,
        type: ActivityType | str,
        description: str,
        metadata: Any | None = None,
    ) -> Activity:
        """Record a new activity and persist the full log.

        Args:
            type: Activity category
            description: Human-readable summary
            metadata: Optional opaque JSON payload

        Returns:
            The created activity with its generated id and timestamp
        """
        activity = Activity(type=type, description=description, metadata=metadata)
        async with self._lock:
            self._activities.append(activity)
            await self.persist(self._activities)

        for listener in list(self._listeners):
            listener(activity)
        return activity

    async def persist(self, activities: list[Activity]) -> None:
        """Serialize the whole sequence and overwrite the stored copy.

        Storage failures are reported and otherwise ignored.
        """
        try:
            payload = ActivityList.dump_json(list(activities)).decode("utf-8")
            await self._storage.set_item(self._key, payload)
        except Exception as e:
            self._debug("error", f"Failed to persist activity history: {e}")
            return
        if self._unreadable:
            self._unreadable = False
            self._debug("warning", "Replaced unreadable activity history")

    async def clear(self) -> None:
        """Drop every activity, in memory and in storage."""
        async with self._lock:
            self._activities = []
            await self._storage.remove_item(self._key)
        self._debug("info", "Activity history cleared")

    def subscribe(self, listener: ActivityListener) -> Callable[[], None]:
        """Register a listener called with each newly appended activity.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def recent(self, limit: int = 3) -> list[Activity]:
        """Most recent activities, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._activities[-limit:]))

    def count_by_type(self) -> dict[ActivityType, int]:
        """Number of activities per type, including types never recorded."""
        counts = Counter(activity.type for activity in self._activities)
        return {activity_type: counts.get(activity_type, 0) for activity_type in ActivityType}
