"""Pytest configuration and shared fixtures."""
import os

import pytest

from aura.activity import ActivityLog, create_storage


@pytest.fixture(scope="session")
def api_key():
    """Return the Gemini API key from environment (integration tests only)."""
    return os.getenv("API_KEY")


@pytest.fixture
def memory_storage():
    """Return a fresh in-memory key/value storage."""
    return create_storage("memory")


@pytest.fixture
def activity_log(memory_storage):
    """Return an empty activity log over in-memory storage."""
    return ActivityLog(memory_storage)


@pytest.fixture
def debug_messages():
    """Collect (level, component, message) tuples from debug callbacks."""
    messages: list[tuple[str, str, str]] = []

    def callback(level: str, component: str, message: str) -> None:
        messages.append((level, component, message))

    callback.messages = messages
    return callback
