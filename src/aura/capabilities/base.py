"""Abstract base class for remote capability clients.

Views, the CLI and the Assistant facade reach the generative service only
through this interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import AspectRatio, GeneratedVideo, GeoLocation, Message, ResearchResult


class CapabilityClient(ABC):
    """One remote generative service behind every Aura capability.

    Implementations turn each call into a single request, pull the useful
    fields out of the response and raise CapabilityError subclasses for
    transport or payload problems. No call keeps state between requests.

    Usable as an async context manager; leaving the block closes the client.
    """

    def __init__(self) -> None:
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Route trace messages to ``callback(level, component, message)``."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Client", message)

    @abstractmethod
    async def chat(
        self,
        message: str,
        history: list[Message],
        use_thinking: bool = False,
    ) -> str:
        """Continue a conversation.

        Args:
            message: New user message
            history: Prior turns, oldest first (not modified)
            use_thinking: Request an extended reasoning budget

        Returns:
            Assistant reply text (may be empty if the model produced no text)

        Raises:
            CapabilityError: On transport or response failures
        """

    @abstractmethod
    async def research_with_search(self, query: str) -> ResearchResult:
        """Answer a query grounded on web search results."""

    @abstractmethod
    async def research_with_places(
        self,
        query: str,
        location: GeoLocation | None = None,
    ) -> ResearchResult:
        """Answer a query grounded on map/place data, optionally near a location."""

    @abstractmethod
    async def synthesize_speech(self, text: str) -> bytes | None:
        """Synthesize speech; returns raw audio bytes or None when no audio came back."""

    @abstractmethod
    async def analyze_image(self, image: bytes, mime_type: str, prompt: str) -> str:
        """Answer a prompt about an image."""

    @abstractmethod
    async def generate_video(
        self,
        image: bytes,
        mime_type: str,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE,
    ) -> GeneratedVideo:
        """Animate an image into a video and download the result locally."""

    @abstractmethod
    async def quick_response(self, query: str) -> str:
        """Low-latency single-turn answer."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP sessions."""

    async def __aenter__(self) -> "CapabilityClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx/anyio raise "Event loop is closed" when cleanup outlives the loop.
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
