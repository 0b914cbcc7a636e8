"""Tests for MethodChannel."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from deeplink_bridge.channel import (
    GET_INITIAL_LINK,
    ON_DEEP_LINK,
    MethodCall,
    MethodChannel,
    QueueMessenger,
    dispatch_call,
)
from deeplink_bridge.errors import invalid_message_error


class TestInvokeMethod:
    """Tests for host-to-application pushes."""

    def test_invoke_sends_push_envelope(self, messenger: Any) -> None:
        channel = MethodChannel("deep_link_channel", messenger)

        channel.invoke_method(ON_DEEP_LINK, "myapp://x")

        assert messenger.sent == [
            {"channel": "deep_link_channel", "method": "onDeepLink", "arguments": "myapp://x"}
        ]


class TestHandleCall:
    """Tests for incoming call dispatch."""

    def test_handler_result_is_wrapped(self, messenger: Any) -> None:
        channel = MethodChannel("deep_link_channel", messenger)
        channel.set_method_call_handler(lambda call: f"echo:{call.method}")

        response = channel.handle_call(MethodCall(GET_INITIAL_LINK))

        assert response == {
            "channel": "deep_link_channel",
            "status": "done",
            "result": "echo:getInitialLink",
        }

    def test_no_handler_is_not_implemented(self, messenger: Any) -> None:
        channel = MethodChannel("deep_link_channel", messenger)

        response = channel.handle_call(MethodCall(GET_INITIAL_LINK))

        assert response["status"] == "error"
        assert response["error"]["code"] == "ERR_NOT_IMPLEMENTED"

    def test_handler_bridge_error_becomes_error_envelope(self) -> None:
        def handler(_call: MethodCall) -> None:
            raise invalid_message_error("bad arguments")

        response = dispatch_call(handler, MethodCall("x"), "chan")

        assert response["channel"] == "chan"
        assert response["error"]["code"] == "ERR_INVALID_MESSAGE"

    def test_handler_none_result_is_valid(self, messenger: Any) -> None:
        """A null result is a valid answer, not an error."""
        channel = MethodChannel("deep_link_channel", messenger)
        channel.set_method_call_handler(lambda _call: None)

        response = channel.handle_call(MethodCall(GET_INITIAL_LINK))

        assert response["status"] == "done"
        assert response["result"] is None


class TestHandleMessage:
    """Tests for raw message handling."""

    def test_echoes_request_id(self, messenger: Any) -> None:
        channel = MethodChannel("deep_link_channel", messenger)
        channel.set_method_call_handler(lambda call: call.arguments)

        response = channel.handle_message({"id": 7, "method": "anything", "arguments": [1, 2]})

        assert response["id"] == 7
        assert response["result"] == [1, 2]

    @pytest.mark.parametrize("message", ["not json", ["list"], {"id": 3}, {"method": ""}])
    def test_invalid_messages(self, messenger: Any, message: Any) -> None:
        channel = MethodChannel("deep_link_channel", messenger)

        response = channel.handle_message(message)

        assert response["status"] == "error"
        assert response["error"]["code"] == "ERR_INVALID_MESSAGE"
        assert messenger.sent == []


class TestQueueMessenger:
    """Tests for QueueMessenger."""

    @pytest.mark.asyncio
    async def test_messages_keep_order(self) -> None:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        channel = MethodChannel("deep_link_channel", QueueMessenger(queue))

        channel.invoke_method(ON_DEEP_LINK, "myapp://1")
        channel.invoke_method(ON_DEEP_LINK, "myapp://2")

        first = await queue.get()
        second = await queue.get()
        assert [first["arguments"], second["arguments"]] == ["myapp://1", "myapp://2"]


def test_binary_message_reports_text_frame_expected(messenger: Any) -> None:
    channel = MethodChannel("deep_link_channel", messenger)

    response = channel.handle_message(b'{"method": "getInitialLink"}')

    assert response["error"]["code"] == "ERR_INVALID_MESSAGE"
    assert response["error"]["context"]["reason"] == "expected a text frame"
    assert response["id"] is None
