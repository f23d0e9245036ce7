"""Provider factory functions for CLI.

Centralizes creation of the storage backend, activity log and capability
client from environment variables. Hides configuration details from
command implementations.
"""

import os
from pathlib import Path
from typing import Any

from rich.console import Console

from ..activity import ActivityLog, KeyValueStorage, create_storage
from ..capabilities import CapabilityClient, create_capability_client

_console = Console()

DEFAULT_DATA_DIR = Path("~/.aura")


def _float_env(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def get_storage() -> KeyValueStorage:
    """Create the key/value storage backend from environment variables.

    Environment variables:
        AURA_STORAGE_BACKEND: json, sqlite or memory (default: json)
        AURA_STORAGE_PATH: File location (default: ~/.aura/storage.json or storage.db)
    """
    backend = os.getenv("AURA_STORAGE_BACKEND", "json").lower()
    if backend == "memory":
        return create_storage("memory")

    default_name = "storage.db" if backend == "sqlite" else "storage.json"
    path = os.getenv("AURA_STORAGE_PATH") or str(DEFAULT_DATA_DIR / default_name)
    return create_storage(backend, path=path)


async def open_activity_log(debug_callback: Any | None = None) -> ActivityLog:
    """Connect storage and restore the activity log.

    Args:
        debug_callback: Optional Callable(level, component, message)

    Returns:
        A loaded ActivityLog; disconnect its storage when done
    """
    storage = get_storage()
    await storage.connect()
    log = ActivityLog(storage)
    if debug_callback is not None:
        log.set_debug_callback(debug_callback)
    await log.load()
    return log


def get_client(console: Console | None = None) -> CapabilityClient | None:
    """Create the capability client from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Capability client instance, or None if API_KEY is not set

    Environment variables:
        API_KEY: Gemini API key (required)
        AURA_VIDEO_DIR: Where generated videos are saved (default: ~/.aura/videos)
        AURA_POLL_INTERVAL: Seconds between video status polls (default: 5)
        AURA_VIDEO_TIMEOUT: Seconds before a video job is abandoned (default: unbounded)
    """
    con = console or _console
    api_key = os.getenv("API_KEY")
    if not api_key:
        con.print("[yellow]Warning: API_KEY not set, capabilities disabled[/yellow]")
        return None

    return create_capability_client(
        "gemini",
        api_key=api_key,
        video_dir=os.getenv("AURA_VIDEO_DIR") or str(DEFAULT_DATA_DIR / "videos"),
        poll_interval=_float_env("AURA_POLL_INTERVAL", 5.0),
        video_timeout=_float_env("AURA_VIDEO_TIMEOUT", None),
    )


def require_client(console: Console | None = None) -> CapabilityClient:
    """Get the capability client, raising error if not configured.

    Raises:
        SystemExit: If API_KEY is not set
    """
    import typer

    con = console or _console
    client = get_client(con)
    if not client:
        con.print("[red]Error: API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return client
