"""Factory for creating capability clients."""

from typing import Any

from .base import CapabilityClient


def create_capability_client(provider: str = "gemini", **config: Any) -> CapabilityClient:
    """Build the capability client for ``provider``.

    Args:
        provider: Only 'gemini' is available
        **config: Keyword arguments for the client class. Gemini accepts:
            - api_key: str (required)
            - models: dict[str, str] | None (model overrides)
            - video_dir: str | Path (default: '~/.aura/videos')
            - poll_interval: float (default: 5.0)
            - video_timeout: float | None (default: None, unbounded)

    Returns:
        Initialized capability client

    Raises:
        ValueError: For an unknown provider
        TypeError: When api_key is missing

    Examples:
        >>> client = create_capability_client(
        ...     "gemini",
        ...     api_key="...",
        ...     video_timeout=600,
        ... )
    """
    if provider.lower() != "gemini":
        raise ValueError(f"Unknown capability provider '{provider}'; expected 'gemini'")
    if "api_key" not in config:
        raise TypeError("The gemini client needs an 'api_key'")

    from .gemini import GeminiCapabilityClient
    return GeminiCapabilityClient(**config)
