"""Method channel - named call channel between the host shell and the application layer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from deeplink_bridge.errors import BridgeError, invalid_message_error, not_implemented_error

logger = structlog.get_logger()

DEFAULT_CHANNEL_NAME = "deep_link_channel"

# application -> host
GET_INITIAL_LINK = "getInitialLink"
# host -> application
ON_DEEP_LINK = "onDeepLink"


@dataclass(frozen=True)
class MethodCall:
    """A method invocation arriving on a channel."""

    method: str
    arguments: Any = None


MethodCallHandler = Callable[[MethodCall], Any]


class Messenger(Protocol):
    """Outbound half of a channel transport."""

    def send(self, message: dict[str, Any]) -> None: ...


class QueueMessenger:
    """Messenger that hands messages to a single writer through an asyncio queue."""

    def __init__(self, queue: asyncio.Queue[dict[str, Any]] | None = None) -> None:
        self.queue: asyncio.Queue[dict[str, Any]] = queue if queue is not None else asyncio.Queue()

    def send(self, message: dict[str, Any]) -> None:
        self.queue.put_nowait(message)


def dispatch_call(
    handler: MethodCallHandler | None, call: MethodCall, channel: str = DEFAULT_CHANNEL_NAME
) -> dict[str, Any]:
    """Run ``handler`` for ``call`` and wrap the outcome in a response envelope."""
    try:
        if handler is None:
            raise not_implemented_error(call.method, channel)
        result = handler(call)
    except BridgeError as e:
        logger.info("channel_call_failed", channel=channel, method=call.method, code=e.code)
        return {"channel": channel, "status": "error", "error": e.to_dict()}
    return {"channel": channel, "status": "done", "result": result}


class MethodChannel:
    """Dispatches incoming method calls and sends fire-and-forget pushes."""

    def __init__(self, name: str, messenger: Messenger) -> None:
        self.name = name
        self._messenger = messenger
        self._handler: MethodCallHandler | None = None

    def set_method_call_handler(self, handler: MethodCallHandler | None) -> None:
        """Install the handler for incoming calls; None makes every call not implemented."""
        self._handler = handler

    def invoke_method(self, method: str, arguments: Any = None) -> None:
        """Push a method call to the other side without waiting for a reply."""
        self._messenger.send({"channel": self.name, "method": method, "arguments": arguments})
        logger.debug("channel_invoke", channel=self.name, method=method)

    def handle_call(self, call: MethodCall) -> dict[str, Any]:
        """Handle a decoded call and return its response envelope."""
        return dispatch_call(self._handler, call, self.name)

    def handle_message(self, message: Any) -> dict[str, Any]:
        """Handle a raw decoded request, echoing its ``id`` in the response."""
        if not isinstance(message, dict):
            reason = "expected a JSON object"
            if isinstance(message, bytes):
                reason = "expected a text frame"
            response = self._error(invalid_message_error(reason))
            response["id"] = None
            return response

        method = message.get("method")
        if not isinstance(method, str) or not method:
            response = self._error(invalid_message_error("missing 'method'"))
        else:
            response = self.handle_call(MethodCall(method, message.get("arguments")))
        response["id"] = message.get("id")
        return response

    def _error(self, error: BridgeError) -> dict[str, Any]:
        logger.warning(
            "channel_message_invalid", channel=self.name, reason=error.context.get("reason")
        )
        return {"channel": self.name, "status": "error", "error": error.to_dict()}
