"""Assistant facade used by the TUI and CLI.

Pairs the capability client with the activity log: each action calls one
capability and records an activity only once the call has succeeded.
Capability failures propagate unchanged so callers can render them.
"""

from collections.abc import Callable
from enum import Enum

from .activity import Activity, ActivityLog, ActivityType
from .capabilities import (
    AspectRatio,
    Attachment,
    CapabilityClient,
    GeneratedVideo,
    GeoLocation,
    Message,
    ResearchResult,
)
from .conversation import DEFAULT_IMAGE_PROMPT, ChatSession

VIDEO_ERROR_MESSAGE = "Failed to generate video. Ensure your API key is configured with billing."


class ResearchMode(str, Enum):
    """Grounding source for research queries."""

    SEARCH = "search"
    PLACES = "places"


def _preview(text: str, limit: int = 30) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


class Assistant:
    """Entry point for every user-facing capability.

    Example:
        assistant = Assistant(client, activity_log)
        result = await assistant.research("espresso bars", ResearchMode.PLACES)
    """

    def __init__(self, client: CapabilityClient, activity_log: ActivityLog):
        self._client = client
        self._activity_log = activity_log

    @property
    def client(self) -> CapabilityClient:
        return self._client

    @property
    def activity_log(self) -> ActivityLog:
        return self._activity_log

    def new_chat_session(
        self, on_message: Callable[[Message], None] | None = None
    ) -> ChatSession:
        """Start a conversation that records chat activities in this log."""
        return ChatSession(self._client, self._activity_log, on_message=on_message)

    async def research(
        self,
        query: str,
        mode: ResearchMode = ResearchMode.SEARCH,
        location: GeoLocation | None = None,
    ) -> ResearchResult:
        """Run a grounded research query."""
        if not query.strip():
            raise ValueError("Research query must not be empty")

        if ResearchMode(mode) is ResearchMode.PLACES:
            result = await self._client.research_with_places(query, location)
        else:
            result = await self._client.research_with_search(query)

        await self._activity_log.append(
            ActivityType.RESEARCH,
            f"Researched: {_preview(query)}",
            metadata={"mode": ResearchMode(mode).value, "sources": len(result.references)},
        )
        return result

    async def speak(self, text: str) -> bytes | None:
        """Synthesize speech; records a voice activity when audio came back."""
        if not text.strip():
            raise ValueError("Text to speak must not be empty")

        audio = await self._client.synthesize_speech(text)
        if audio:
            await self._activity_log.append(
                ActivityType.VOICE,
                f"Synthesized speech: {_preview(text)}",
                metadata={"bytes": len(audio)},
            )
        return audio

    async def start_voice_session(self) -> Activity:
        """Record the start of a voice session."""
        return await self._activity_log.append(
            ActivityType.VOICE, "Initialized voice link session"
        )

    async def describe_image(self, image: Attachment, prompt: str = "") -> str:
        """Answer a prompt about an image outside of a conversation."""
        answer = await self._client.analyze_image(
            image.data, image.mime_type, prompt or DEFAULT_IMAGE_PROMPT
        )
        await self._activity_log.append(
            ActivityType.CHAT,
            f"Analyzed image: {_preview(prompt or DEFAULT_IMAGE_PROMPT)}",
        )
        return answer

    async def animate(
        self,
        image: Attachment,
        prompt: str = "",
        aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE,
    ) -> GeneratedVideo:
        """Turn an image into a short video saved on disk."""
        video = await self._client.generate_video(
            image.data, image.mime_type, prompt, aspect_ratio
        )
        await self._activity_log.append(
            ActivityType.VIDEO,
            f"Generated video: {_preview(prompt) if prompt.strip() else 'default motion'}",
            metadata={"path": str(video.path), "aspect_ratio": AspectRatio(aspect_ratio).value},
        )
        return video

    async def ask(self, query: str) -> str:
        """Quick single-turn answer on the low-latency model."""
        if not query.strip():
            raise ValueError("Query must not be empty")

        answer = await self._client.quick_response(query)
        await self._activity_log.append(ActivityType.TASK, f"Quick answer: {_preview(query)}")
        return answer
