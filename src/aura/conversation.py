"""Chat session state for one conversation.

Hides how a visible conversation grows: the greeting, the user turn added
before the request, and the single assistant turn (reply or fallback)
added after it.
"""

from collections.abc import Callable
from typing import Any

from .activity import ActivityLog, ActivityType
from .capabilities import Attachment, CapabilityClient, CapabilityError, Message

GREETING = "Hello! I am Aura. How can I assist you today?"
CHAT_ERROR_MESSAGE = "Error connecting to Gemini. Please check your network."
EMPTY_REPLY_MESSAGE = "I'm sorry, I couldn't generate a response."
DEFAULT_IMAGE_PROMPT = "Analyze this image."


class ChatSession:
    """An in-memory conversation with the assistant.

    Messages are kept in insertion order and never persisted. A chat
    activity is recorded only after a reply arrives.
    """

    def __init__(
        self,
        client: CapabilityClient,
        activity_log: ActivityLog | None = None,
        greeting: str | None = GREETING,
        on_message: Callable[[Message], None] | None = None,
    ):
        self._client = client
        self._on_message = on_message
        self._activity_log = activity_log
        self._greeting = greeting
        self._messages: list[Message] = []
        self._context: list[Message] = []
        self._busy = False
        self._debug_callback: Any | None = None
        self.last_error: CapabilityError | None = None
        self.clear()

    def set_debug_callback(self, callback: Any) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Chat", message)

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def _add(self, message: Message) -> Message:
        self._messages.append(message)
        if self._on_message is not None:
            self._on_message(message)
        return message

    def clear(self) -> None:
        """Reset the conversation to its greeting."""
        self._messages = []
        self._context = []
        if self._greeting:
            self._context.append(self._add(Message(role="assistant", content=self._greeting)))

    async def send(
        self,
        text: str,
        image: Attachment | None = None,
        use_thinking: bool = False,
    ) -> Message:
        """Send a user turn and append the assistant's answer.

        With an image attached the turn is answered by image analysis;
        otherwise the prior conversation is sent as chat history. Only
        text exchanges that got a real reply count as history: fallback
        and placeholder turns stay on screen but are never sent back.

        Args:
            text: User message (may be empty when an image is attached)
            image: Optional image to analyze
            use_thinking: Request extended reasoning for plain chat

        Returns:
            The appended assistant message; on failure, the fallback message

        Raises:
            ValueError: If there is neither text nor an image
            RuntimeError: If another send is still in progress
        """
        if not text.strip() and image is None:
            raise ValueError("Nothing to send: provide text or an image")
        if self._busy:
            raise RuntimeError("A message is already being sent")

        history = list(self._context)
        turn = self._add(Message(
            role="user",
            content=text,
            media_url=image.to_data_url() if image is not None else None,
        ))
        self._busy = True
        self.last_error = None

        try:
            if image is not None:
                reply = await self._client.analyze_image(
                    image.data, image.mime_type, text or DEFAULT_IMAGE_PROMPT
                )
            else:
                reply = await self._client.chat(text, history, use_thinking)
        except CapabilityError as e:
            self.last_error = e
            self._debug("error", f"Chat failed: {e}")
            return self._add(Message(role="assistant", content=CHAT_ERROR_MESSAGE))
        finally:
            self._busy = False

        answer = self._add(Message(role="assistant", content=reply or EMPTY_REPLY_MESSAGE))
        if reply and image is None:
            self._context.extend([turn, answer])

        if self._activity_log is not None:
            await self._activity_log.append(
                ActivityType.CHAT,
                f"Chatted with Aura: {text[:30]}...",
            )
        return answer
