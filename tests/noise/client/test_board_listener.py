"""Tests for the WebSocket board listener."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import websockets

from noise.client.listener import BoardListener
from noise.client.state import BoardState


def _frame(event_type, data):
    return json.dumps({"type": event_type, "data": data})


def _text(owner="owner-them"):
    return {"id": "t1", "ownerId": owner, "text": "hi", "x": 0, "y": 0, "scale": 100}


class TestHandleMessage:
    """Test decoding and applying frames."""

    async def test_applies_event_and_notifies(self):
        """Should apply the frame to state and call the callback with the change flag."""
        state = BoardState("owner-me")
        callback = AsyncMock()
        listener = BoardListener("ws://noise.test/ws/board", state, on_event=callback)

        event = await listener.handle_message(_frame("textItemCreated", _text()))

        assert "t1" in state
        callback.assert_awaited_once_with(event, True)

    async def test_sync_callback(self):
        """Should accept plain function callbacks."""
        state = BoardState("owner-me")
        callback = MagicMock(return_value=None)
        listener = BoardListener("ws://noise.test/ws/board", state, on_event=callback)

        await listener.handle_message(_frame("textItemCreated", _text(owner="owner-me")))

        event, changed = callback.call_args.args
        assert event.type == "textItemCreated"
        assert changed is False

    async def test_malformed_frame_ignored(self):
        """Should discard frames that are not board events."""
        listener = BoardListener("ws://noise.test/ws/board", BoardState(None))

        assert await listener.handle_message("not json") is None
        assert await listener.handle_message(json.dumps({"data": {}})) is None

    async def test_incomplete_item_frame_ignored(self):
        """Should discard known events whose item data is incomplete."""
        state = BoardState("owner-me")
        callback = AsyncMock()
        listener = BoardListener("ws://noise.test/ws/board", state, on_event=callback)

        result = await listener.handle_message(_frame("textItemCreated", {"id": "a"}))

        assert result is None
        assert "a" not in state
        callback.assert_not_awaited()

    async def test_keeps_running_after_incomplete_frame(self):
        """Should keep consuming frames after one it cannot apply."""
        state = BoardState("owner-me")
        listener = BoardListener("ws://noise.test/ws/board", state, reconnect_delay=0)
        connection = FakeConnection(
            [_frame("textItemCreated", {"id": "a"}), _frame("textItemCreated", _text())],
            listener,
        )

        with patch.object(websockets, "connect", return_value=connection):
            await listener.run()

        assert "t1" in state
        assert "a" not in state


class FakeConnection:
    """Async iterable connection yielding queued frames."""

    def __init__(self, frames, listener):
        self.frames = frames
        self.listener = listener
        self.close = AsyncMock()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame
        await self.listener.stop()


class TestRun:
    """Test the connect loop."""

    async def test_run_until_stopped(self):
        """Should consume frames and exit once stopped."""
        state = BoardState("owner-me")
        listener = BoardListener("ws://noise.test/ws/board", state, reconnect_delay=0)
        connection = FakeConnection([_frame("textItemCreated", _text())], listener)

        with patch.object(websockets, "connect", return_value=connection) as connect:
            await listener.run()

        connect.assert_called_once_with("ws://noise.test/ws/board")
        assert "t1" in state
        assert listener.stopped

    async def test_reconnects_after_failure(self):
        """Should retry after a failed connection attempt."""
        state = BoardState("owner-me")
        listener = BoardListener("ws://noise.test/ws/board", state, reconnect_delay=0)
        connection = FakeConnection([], listener)

        with patch.object(
            websockets, "connect", side_effect=[OSError("refused"), connection]
        ) as connect:
            await listener.run()

        assert connect.call_count == 2
