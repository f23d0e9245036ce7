"""Google Gemini capability client.

Uses the official Google GenAI SDK for every capability and httpx for
downloading generated videos.
Reference: https://github.com/googleapis/python-genai
"""

import asyncio
import base64
import contextlib
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from uuid import uuid4

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..prompts import get_persona_prompt
from .base import CapabilityClient
from .errors import MalformedResponseError, ServiceError
from .models import (
    AspectRatio,
    GeneratedVideo,
    GeoLocation,
    Message,
    PlaceSource,
    ResearchResult,
    WebSource,
)
from .poller import DEFAULT_POLL_INTERVAL, OperationPoller

MODELS = {
    "pro": "gemini-3-pro-preview",
    "flash": "gemini-3-flash-preview",
    "flash_lite": "gemini-2.5-flash-lite-latest",
    "tts": "gemini-2.5-flash-preview-tts",
    "maps": "gemini-2.5-flash",
    "video": "veo-3.1-fast-generate-preview",
}

THINKING_BUDGET = 32768
TTS_VOICE = "Kore"
DEFAULT_VIDEO_PROMPT = "Animate this image subtly and professionally."
VIDEO_RESOLUTION = "720p"


class GeminiCapabilityClient(CapabilityClient):
    """Capability client backed by the Gemini API.

    Hidden design decisions:
    - Google GenAI client initialization
    - Conversation format conversion (assistant -> "model" role)
    - Grounding metadata parsing into tagged source references
    - Video job polling and authenticated download
    """

    def __init__(
        self,
        api_key: str,
        models: dict[str, str] | None = None,
        video_dir: str | Path = "~/.aura/videos",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        video_timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        **client_kwargs: Any
    ):
        """Initialize the Gemini client.

        Args:
            api_key: Google AI API key
            models: Overrides for entries of MODELS
            video_dir: Directory generated videos are written to
            poll_interval: Seconds between video status polls
            video_timeout: Optional deadline for video jobs (None = unbounded)
            http_client: httpx client used for video downloads
            **client_kwargs: Additional kwargs for genai.Client
        """
        super().__init__()
        if not api_key:
            raise TypeError("Gemini client requires a non-empty 'api_key'")
        self._api_key = api_key
        self._models = {**MODELS, **(models or {})}
        self._video_dir = Path(video_dir).expanduser()
        self._client = genai.Client(api_key=api_key, **client_kwargs)
        self._http = http_client or httpx.AsyncClient(follow_redirects=True, timeout=120.0)
        self._poller = OperationPoller(interval=poll_interval, timeout=video_timeout)

    def set_debug_callback(self, callback: Any) -> None:
        super().set_debug_callback(callback)
        self._poller.set_debug_callback(callback)

    @property
    def models(self) -> dict[str, str]:
        return dict(self._models)

    @property
    def poller(self) -> OperationPoller:
        return self._poller

    @contextlib.contextmanager
    def _translate_errors(self, capability: str) -> Iterator[None]:
        """Re-raise SDK and transport failures as ServiceError."""
        try:
            yield
        except genai_errors.APIError as e:
            self._debug("error", f"{capability} failed: {e}")
            raise ServiceError(f"{capability}: {e.message or e}", status_code=e.code) from e
        except httpx.HTTPStatusError as e:
            self._debug("error", f"{capability} failed: {e}")
            raise ServiceError(f"{capability}: {e}", status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            self._debug("error", f"{capability} failed: {e}")
            raise ServiceError(f"{capability}: {e}") from e
        except (OSError, asyncio.TimeoutError) as e:
            # Socket and timeout errors from whichever transport the SDK runs on.
            self._debug("error", f"{capability} failed: {e!r}")
            raise ServiceError(f"{capability}: {str(e) or type(e).__name__}") from e

    def _convert_history(self, history: list[Message]) -> list[types.Content]:
        """Convert prior turns to Gemini contents.

        Leading assistant turns (such as a greeting) are dropped so the
        conversation sent to the model opens with the user. A user turn
        without text is dropped together with the reply that follows it.
        """
        contents: list[types.Content] = []
        skip_reply = False
        for msg in history:
            if msg.role == "user":
                skip_reply = not msg.content
                if skip_reply:
                    continue
            elif skip_reply or not msg.content or not contents:
                continue
            role = "model" if msg.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))
        return contents

    def _first_candidate(self, response: Any, capability: str) -> Any:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            feedback = getattr(response, "prompt_feedback", None)
            reason = getattr(feedback, "block_reason", None) if feedback else None
            detail = f"blocked ({reason})" if reason else "no candidates returned"
            raise MalformedResponseError(f"{capability}: {detail}")
        return candidates[0]

    def _extract_text(self, response: Any, capability: str) -> str:
        """Join the text parts of the first candidate, skipping thought parts."""
        candidate = self._first_candidate(response, capability)
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [
            part.text for part in parts
            if getattr(part, "text", None) and not getattr(part, "thought", False)
        ]
        return "".join(texts)

    def _extract_references(self, candidate: Any) -> list[WebSource | PlaceSource]:
        metadata = getattr(candidate, "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []
        references: list[WebSource | PlaceSource] = []
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            place = getattr(chunk, "maps", None)
            if web is not None and getattr(web, "uri", None):
                references.append(WebSource(title=web.title or "", uri=web.uri))
            elif place is not None and getattr(place, "uri", None):
                references.append(PlaceSource(title=place.title or "", uri=place.uri))
        return references

    def _research_result(self, response: Any, capability: str) -> ResearchResult:
        text = self._extract_text(response, capability)
        candidate = self._first_candidate(response, capability)
        return ResearchResult(text=text, references=self._extract_references(candidate))

    async def chat(
        self,
        message: str,
        history: list[Message],
        use_thinking: bool = False,
    ) -> str:
        contents = self._convert_history(history)
        contents.append(types.Content(role="user", parts=[types.Part(text=message)]))

        config = types.GenerateContentConfig(system_instruction=get_persona_prompt())
        if use_thinking:
            config.thinking_config = types.ThinkingConfig(thinking_budget=THINKING_BUDGET)

        self._debug("info", f"chat: {len(contents)} turn(s), thinking={'on' if use_thinking else 'off'}")
        with self._translate_errors("chat"):
            response = await self._client.aio.models.generate_content(
                model=self._models["pro"],
                contents=contents,
                config=config,
            )
        return self._extract_text(response, "chat")

    async def research_with_search(self, query: str) -> ResearchResult:
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())]
        )
        self._debug("info", f"search: '{query[:50]}'")
        with self._translate_errors("search"):
            response = await self._client.aio.models.generate_content(
                model=self._models["flash"],
                contents=query,
                config=config,
            )
        return self._research_result(response, "search")

    async def research_with_places(
        self,
        query: str,
        location: GeoLocation | None = None,
    ) -> ResearchResult:
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_maps=types.GoogleMaps())]
        )
        if location is not None:
            config.tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=location.latitude,
                        longitude=location.longitude,
                    )
                )
            )

        self._debug("info", f"places: '{query[:50]}' near {location or 'anywhere'}")
        with self._translate_errors("places"):
            response = await self._client.aio.models.generate_content(
                model=self._models["maps"],
                contents=query,
                config=config,
            )
        return self._research_result(response, "places")

    async def synthesize_speech(self, text: str) -> bytes | None:
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=TTS_VOICE)
                )
            ),
        )
        self._debug("info", f"speech: {len(text)} chars")
        with self._translate_errors("speech"):
            response = await self._client.aio.models.generate_content(
                model=self._models["tts"],
                contents=[types.Content(role="user", parts=[types.Part(text=text)])],
                config=config,
            )

        candidate = self._first_candidate(response, "speech")
        parts = getattr(getattr(candidate, "content", None), "parts", None) or []
        for part in parts:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None)
            if data:
                # The SDK decodes inline data; raw REST payloads stay base64 text.
                if isinstance(data, str):
                    return base64.b64decode(data)
                return data
        return None

    async def analyze_image(self, image: bytes, mime_type: str, prompt: str) -> str:
        contents = [
            types.Part.from_bytes(data=image, mime_type=mime_type),
            prompt,
        ]
        self._debug("info", f"analyze image: {len(image)} bytes ({mime_type})")
        with self._translate_errors("analyze image"):
            response = await self._client.aio.models.generate_content(
                model=self._models["pro"],
                contents=contents,
            )
        return self._extract_text(response, "analyze image")

    async def quick_response(self, query: str) -> str:
        with self._translate_errors("quick response"):
            response = await self._client.aio.models.generate_content(
                model=self._models["flash_lite"],
                contents=query,
            )
        return self._extract_text(response, "quick response")

    async def generate_video(
        self,
        image: bytes,
        mime_type: str,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE,
    ) -> GeneratedVideo:
        ratio = AspectRatio(aspect_ratio)
        config = types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=VIDEO_RESOLUTION,
            aspect_ratio=ratio.value,
        )

        with self._translate_errors("video submit"):
            operation = await self._client.aio.models.generate_videos(
                model=self._models["video"],
                prompt=prompt.strip() or DEFAULT_VIDEO_PROMPT,
                image=types.Image(image_bytes=image, mime_type=mime_type),
                config=config,
            )
        self._debug("info", f"video job submitted: {getattr(operation, 'name', '?')}")

        with self._translate_errors("video poll"):
            operation = await self._poller.wait(operation, self._client.aio.operations.get)

        error = getattr(operation, "error", None)
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise ServiceError(f"video generation failed: {message}")

        video_uri = self._extract_video_uri(operation)
        return await self._download_video(video_uri)

    def _extract_video_uri(self, operation: Any) -> str:
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if not videos:
            raise MalformedResponseError("video: completed operation has no generated videos")
        video = getattr(videos[0], "video", None)
        uri = getattr(video, "uri", None)
        if not uri:
            raise MalformedResponseError("video: generated video has no download URI")
        return uri

    async def _download_video(self, uri: str) -> GeneratedVideo:
        """Fetch the video once, with the API key as query parameter, and save it."""
        with self._translate_errors("video download"):
            response = await self._http.get(uri, params={"key": self._api_key})
            response.raise_for_status()

        self._video_dir.mkdir(parents=True, exist_ok=True)
        path = self._video_dir / f"aura-video-{uuid4().hex[:12]}.mp4"
        await asyncio.to_thread(path.write_bytes, response.content)
        self._debug("info", f"video saved: {path} ({len(response.content)} bytes)")
        return GeneratedVideo(source_uri=uri, path=path)

    async def close(self) -> None:
        """Close the download client.

        The Google GenAI client does not require explicit closing.
        """
        await self._http.aclose()
