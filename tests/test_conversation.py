"""Unit tests for chat sessions and the Assistant facade."""
import asyncio
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from aura.activity import ActivityLog, ActivityType
from aura.activity.in_memory import InMemoryStorage
from aura.assistant import Assistant, ResearchMode
from aura.capabilities import (
    AspectRatio,
    Attachment,
    CapabilityClient,
    GeneratedVideo,
    GeoLocation,
    Message,
    ResearchResult,
    ServiceError,
    WebSource,
)
from aura.conversation import (
    CHAT_ERROR_MESSAGE,
    DEFAULT_IMAGE_PROMPT,
    EMPTY_REPLY_MESSAGE,
    GREETING,
    ChatSession,
)


class FakeClient(CapabilityClient):
    """Scripted capability client recording every call."""

    def __init__(self, reply: str = "ok", error: Exception | None = None):
        super().__init__()
        self.reply = reply
        self.error = error
        self.calls: list[tuple] = []

    async def _answer(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def chat(self, message, history, use_thinking=False):
        await self._answer("chat", message, list(history), use_thinking)
        return self.reply

    async def research_with_search(self, query):
        await self._answer("search", query)
        return ResearchResult(text=self.reply, references=[WebSource(title="t", uri="https://a")])

    async def research_with_places(self, query, location=None):
        await self._answer("places", query, location)
        return ResearchResult(text=self.reply, references=[])

    async def synthesize_speech(self, text):
        await self._answer("speech", text)
        return self.reply.encode() or None

    async def analyze_image(self, image, mime_type, prompt):
        await self._answer("image", image, mime_type, prompt)
        return self.reply

    async def generate_video(self, image, mime_type, prompt, aspect_ratio=AspectRatio.LANDSCAPE):
        await self._answer("video", image, mime_type, prompt, aspect_ratio)
        return GeneratedVideo(source_uri="https://v", path=Path("/tmp/aura-video.mp4"))

    async def quick_response(self, query):
        await self._answer("quick", query)
        return self.reply

    async def close(self):
        pass


IMAGE = Attachment(data=b"\x89PNG", mime_type="image/png")


class TestChatSession:
    """Tests for ChatSession."""

    def test_starts_with_greeting(self):
        """Test that a new session shows the greeting."""
        session = ChatSession(FakeClient())

        assert [(m.role, m.content) for m in session.messages] == [("assistant", GREETING)]

    @settings(max_examples=30, deadline=None)
    @given(
        st.lists(st.text(min_size=1, max_size=20).filter(str.strip), max_size=5),
        st.text(min_size=1, max_size=20).filter(str.strip),
    )
    def test_send_appends_one_user_and_one_assistant_turn(self, prior, new_message):
        """Property test: each send adds exactly one user and one assistant turn."""
        async def scenario():
            session = ChatSession(FakeClient(reply="answer"))
            for text in prior:
                await session.send(text)
            before = session.messages
            await session.send(new_message)
            return before, session.messages

        before, after = asyncio.run(scenario())

        assert after[:len(before)] == before
        added = after[len(before):]
        assert [m.role for m in added] == ["user", "assistant"]
        assert added[0].content == new_message
        assert added[1].content == "answer"

    @pytest.mark.asyncio
    async def test_history_excludes_new_turn(self):
        """Test that the client receives the prior conversation, not the new message."""
        client = FakeClient()
        session = ChatSession(client)

        await session.send("first")
        await session.send("second", use_thinking=True)

        _, message, history, use_thinking = client.calls[-1]
        assert message == "second"
        assert [m.content for m in history] == [GREETING, "first", "ok"]
        assert use_thinking is True

    @pytest.mark.asyncio
    async def test_failure_appends_fallback(self):
        """Test that a failed call shows the fixed fallback and keeps the error."""
        session = ChatSession(FakeClient(error=ServiceError("offline")))

        reply = await session.send("hello?")

        assert reply.content == CHAT_ERROR_MESSAGE
        assert [m.role for m in session.messages] == ["assistant", "user", "assistant"]
        assert isinstance(session.last_error, ServiceError)
        assert session.is_busy is False

    @pytest.mark.asyncio
    async def test_failed_exchange_not_sent_as_history(self):
        """Test that a failed turn and its fallback stay out of later requests."""
        client = FakeClient(error=ServiceError("offline"))
        session = ChatSession(client)
        await session.send("first")

        client.error = None
        await session.send("second")

        _, message, history, _ = client.calls[-1]
        assert message == "second"
        assert [m.content for m in history] == [GREETING]
        assert CHAT_ERROR_MESSAGE in [m.content for m in session.messages]

    @pytest.mark.asyncio
    async def test_placeholder_and_image_turns_not_sent_as_history(self):
        """Test that only text exchanges with a real reply become history."""
        client = FakeClient(reply="")
        session = ChatSession(client)
        await session.send("say nothing")
        client.reply = "a cat"
        await session.send("", image=IMAGE)
        client.reply = "ok"
        await session.send("hello")

        await session.send("again")

        _, _, history, _ = client.calls[-1]
        assert [m.content for m in history] == [GREETING, "hello", "ok"]

    @pytest.mark.asyncio
    async def test_empty_reply_uses_placeholder(self):
        """Test that an empty model reply shows the placeholder text."""
        session = ChatSession(FakeClient(reply=""))

        reply = await session.send("hello")

        assert reply.content == EMPTY_REPLY_MESSAGE

    @pytest.mark.asyncio
    async def test_image_turn_uses_image_analysis(self):
        """Test that an attached image is answered by image analysis."""
        client = FakeClient(reply="a cat")
        session = ChatSession(client)

        await session.send("", image=IMAGE)

        assert client.calls == [("image", IMAGE.data, "image/png", DEFAULT_IMAGE_PROMPT)]
        user_turn = session.messages[1]
        assert user_turn.media_url == IMAGE.to_data_url()

    @pytest.mark.asyncio
    async def test_nothing_to_send_rejected(self):
        """Test that blank input without an image is rejected before any call."""
        client = FakeClient()
        session = ChatSession(client)

        with pytest.raises(ValueError):
            await session.send("   ")

        assert client.calls == []
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_on_message_sees_every_turn(self):
        """Test that the message callback receives each appended turn."""
        seen: list[Message] = []
        session = ChatSession(FakeClient(), on_message=seen.append)

        await session.send("hi")

        assert [m.role for m in seen] == ["assistant", "user", "assistant"]
        assert seen == session.messages

    @pytest.mark.asyncio
    async def test_records_chat_activity_on_success(self, activity_log):
        """Test that a successful reply records one chat activity."""
        session = ChatSession(FakeClient(), activity_log)

        await session.send("Tell me about the weather tomorrow please")

        assert len(activity_log) == 1
        activity = activity_log.activities[0]
        assert activity.type is ActivityType.CHAT
        assert activity.description == "Chatted with Aura: Tell me about the weather tomo..."

    @pytest.mark.asyncio
    async def test_clear_resets_to_greeting(self):
        """Test that clear drops the conversation back to the greeting."""
        session = ChatSession(FakeClient())
        await session.send("hi")

        session.clear()

        assert [m.content for m in session.messages] == [GREETING]


class TestFailedCallsLeaveLogUnchanged:
    """A failed capability call never appends an activity."""

    @pytest.fixture
    def failing(self, activity_log):
        return Assistant(FakeClient(error=ServiceError("connection reset")), activity_log)

    @pytest.mark.asyncio
    async def test_chat(self, failing):
        await failing.new_chat_session().send("hello")
        assert failing.activity_log.activities == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", list(ResearchMode))
    async def test_research(self, failing, mode):
        with pytest.raises(ServiceError):
            await failing.research("coffee", mode)
        assert failing.activity_log.activities == []

    @pytest.mark.asyncio
    async def test_speak(self, failing):
        with pytest.raises(ServiceError):
            await failing.speak("hello")
        assert failing.activity_log.activities == []

    @pytest.mark.asyncio
    async def test_describe_and_animate(self, failing):
        with pytest.raises(ServiceError):
            await failing.describe_image(IMAGE)
        with pytest.raises(ServiceError):
            await failing.animate(IMAGE, "spin")
        assert failing.activity_log.activities == []

    @pytest.mark.asyncio
    async def test_stored_copy_unchanged(self, memory_storage):
        """Test that the persisted log is untouched by a failed call."""
        log = ActivityLog(memory_storage)
        await log.append(ActivityType.TASK, "existing")
        snapshot = await memory_storage.get_item("aura_activities")

        assistant = Assistant(FakeClient(error=ServiceError("boom")), log)
        with pytest.raises(ServiceError):
            await assistant.ask("anything")

        assert await memory_storage.get_item("aura_activities") == snapshot


class TestAssistant:
    """Tests for successful Assistant actions."""

    @pytest.fixture
    def assistant(self):
        return Assistant(FakeClient(reply="done"), ActivityLog(InMemoryStorage()))

    @pytest.mark.asyncio
    async def test_research_records_activity(self, assistant):
        """Test research routing and the recorded activity."""
        result = await assistant.research("best espresso", ResearchMode.SEARCH)

        assert result.references[0].kind == "web"
        activity = assistant.activity_log.activities[-1]
        assert activity.type is ActivityType.RESEARCH
        assert activity.metadata == {"mode": "search", "sources": 1}

    @pytest.mark.asyncio
    async def test_places_forwards_location(self, assistant):
        """Test that place research passes the location to the client."""
        location = GeoLocation(latitude=1.5, longitude=2.5)

        await assistant.research("parks", "places", location)

        assert assistant.client.calls[-1] == ("places", "parks", location)

    @pytest.mark.asyncio
    async def test_speak_records_voice(self, assistant):
        """Test that synthesized speech records a voice activity."""
        audio = await assistant.speak("good morning")

        assert audio == b"done"
        assert assistant.activity_log.activities[-1].type is ActivityType.VOICE

    @pytest.mark.asyncio
    async def test_speak_without_audio_records_nothing(self):
        """Test that no activity is recorded when no audio came back."""
        assistant = Assistant(FakeClient(reply=""), ActivityLog(InMemoryStorage()))

        assert await assistant.speak("hello") is None
        assert len(assistant.activity_log) == 0

    @pytest.mark.asyncio
    async def test_voice_session_recorded(self, assistant):
        """Test that starting a voice session is recorded."""
        activity = await assistant.start_voice_session()

        assert activity.description == "Initialized voice link session"

    @pytest.mark.asyncio
    async def test_animate_records_video(self, assistant):
        """Test that a generated video is recorded with its path."""
        video = await assistant.animate(IMAGE, "", AspectRatio.PORTRAIT)

        activity = assistant.activity_log.activities[-1]
        assert activity.type is ActivityType.VIDEO
        assert activity.metadata == {"path": str(video.path), "aspect_ratio": "9:16"}
        assert assistant.client.calls[-1][3] == ""

    @pytest.mark.asyncio
    async def test_ask_records_task(self, assistant):
        """Test that quick answers are recorded as tasks."""
        assert await assistant.ask("2+2?") == "done"
        assert assistant.activity_log.activities[-1].type is ActivityType.TASK

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", ["research", "speak", "ask"])
    async def test_blank_input_rejected(self, assistant, call):
        """Test that blank input is rejected before any call."""
        with pytest.raises(ValueError):
            await getattr(assistant, call)("  ")

        assert assistant.client.calls == []

    @pytest.mark.asyncio
    async def test_chat_session_shares_log(self, assistant):
        """Test that chat sessions record into the assistant's log."""
        await assistant.new_chat_session().send("hello")

        assert assistant.activity_log.activities[-1].type is ActivityType.CHAT
