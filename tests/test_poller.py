"""Unit tests for the long-running operation poller."""
import asyncio
from dataclasses import dataclass

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from aura.capabilities import OperationPoller, OperationTimeoutError


@dataclass
class FakeOperation:
    """Operation handle snapshot."""

    done: bool
    name: str = "operations/fake"
    poll: int = 0


class FakeRemote:
    """Serves a scripted sequence of done flags, one per refresh."""

    def __init__(self, statuses: list[bool]):
        self._statuses = list(statuses)
        self.refreshes = 0

    async def refresh(self, operation: FakeOperation) -> FakeOperation:
        if self.refreshes >= len(self._statuses):
            raise AssertionError("polled after completion was observed")
        done = self._statuses[self.refreshes]
        self.refreshes += 1
        return FakeOperation(done=done, poll=self.refreshes)


class RecordingSleep:
    """Records requested sleeps without waiting."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class TestOperationPoller:
    """Tests for OperationPoller."""

    @settings(max_examples=50, deadline=None)
    @given(st.integers(min_value=0, max_value=20))
    def test_stops_exactly_when_done_first_observed(self, pending_polls: int):
        """Property test: polling ends on the first done status and never before."""
        statuses = [False] * pending_polls + [True]
        remote = FakeRemote(statuses)
        sleep = RecordingSleep()
        poller = OperationPoller(interval=5.0, sleep=sleep)

        result = asyncio.run(poller.wait(FakeOperation(done=False), remote.refresh))

        assert result.done is True
        assert result.poll == pending_polls + 1
        assert remote.refreshes == pending_polls + 1
        assert sleep.calls == [5.0] * (pending_polls + 1)

    @pytest.mark.asyncio
    async def test_done_handle_is_not_polled(self):
        """Test that an already completed handle returns without any fetch."""
        remote = FakeRemote([])
        sleep = RecordingSleep()
        poller = OperationPoller(sleep=sleep)
        operation = FakeOperation(done=True)

        result = await poller.wait(operation, remote.refresh)

        assert result is operation
        assert remote.refreshes == 0
        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_none_done_treated_as_pending(self):
        """Test that a missing done flag is not treated as completion."""
        remote = FakeRemote([True])
        poller = OperationPoller(sleep=RecordingSleep())

        result = await poller.wait(FakeOperation(done=None), remote.refresh)  # type: ignore[arg-type]

        assert result.done is True
        assert remote.refreshes == 1

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        """Test that a configured deadline ends an endless job."""
        now = [0.0]

        async def sleep(seconds: float) -> None:
            now[0] += seconds

        async def never_done(operation: FakeOperation) -> FakeOperation:
            return FakeOperation(done=False)

        poller = OperationPoller(interval=5.0, timeout=12.0, sleep=sleep, clock=lambda: now[0])

        with pytest.raises(OperationTimeoutError) as exc_info:
            await poller.wait(FakeOperation(done=False), never_done)

        assert exc_info.value.timeout == 12.0
        assert exc_info.value.operation_name == "operations/fake"
        assert now[0] == 15.0

    @pytest.mark.asyncio
    async def test_debug_messages_reported(self, debug_messages):
        """Test that polls are reported through the debug callback."""
        poller = OperationPoller(sleep=RecordingSleep())
        poller.set_debug_callback(debug_messages)

        await poller.wait(FakeOperation(done=False), FakeRemote([False, True]).refresh)

        components = {component for _, component, _ in debug_messages.messages}
        assert components == {"Poller"}
        assert any("after 2 poll(s)" in message for _, _, message in debug_messages.messages)

    def test_invalid_interval_fails(self):
        """Test that negative intervals are rejected."""
        with pytest.raises(ValueError):
            OperationPoller(interval=-1)

    @pytest.mark.parametrize("timeout", [0, -3.5])
    def test_invalid_timeout_fails(self, timeout):
        """Test that non-positive timeouts are rejected."""
        with pytest.raises(ValueError):
            OperationPoller(timeout=timeout)

    def test_defaults(self):
        """Test the default interval and unbounded deadline."""
        poller = OperationPoller()

        assert poller.interval == 5.0
        assert poller.timeout is None
