"""FastAPI server running over Unix Domain Socket."""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, WebSocket
from fastapi.responses import JSONResponse, Response

from deeplink_bridge import __version__
from deeplink_bridge.activation import ActivationEvent
from deeplink_bridge.channel import MethodCall, MethodChannel, QueueMessenger
from deeplink_bridge.daemon.core import DaemonCore
from deeplink_bridge.daemon.models import ActivationRequest, MethodCallRequest

logger = structlog.get_logger()

ResponsePayload = dict[str, Any]
EndpointResponse = Response | ResponsePayload


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage daemon lifecycle."""
    logger.info("daemon_starting")
    app.state.core = DaemonCore()
    await app.state.core.start()
    yield
    logger.info("daemon_stopping")
    await app.state.core.stop()


app = FastAPI(
    title="Deep Link Bridge Daemon",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint with bridge status."""
    core: DaemonCore = app.state.core
    return {
        "status": "ok",
        "running": core.is_running,
        "channel": core.settings.channel_name,
        "listener_attached": core.bridge.listener_attached,
        "has_pending_link": core.bridge.pending_link is not None,
    }


@app.post("/activation")
async def activation(req: ActivationRequest) -> dict[str, Any]:
    """Deliver a platform activation record to the bridge."""
    core: DaemonCore = app.state.core
    captured = core.handle_activation(ActivationEvent(action=req.action, uri=req.uri))
    return {
        "status": "done" if captured else "ignored",
        "uri": req.uri,
        "listener_attached": core.bridge.listener_attached,
    }


@app.post("/channel/invoke", response_model=None)
async def channel_invoke(req: MethodCallRequest) -> EndpointResponse:
    """Request/response method call without a channel connection."""
    core: DaemonCore = app.state.core
    response = core.call(MethodCall(req.method, req.arguments))
    if response["status"] == "error":
        status_code = 501 if response["error"]["code"] == "ERR_NOT_IMPLEMENTED" else 400
        return JSONResponse(status_code=status_code, content=response)
    return response


async def _write_loop(websocket: WebSocket, queue: asyncio.Queue[dict[str, Any]]) -> None:
    """Send queued responses and pushes in order."""
    try:
        while True:
            message = await queue.get()
            await websocket.send_json(message)
    except Exception:
        logger.exception("channel_write_loop_error")


def _decode_frame(frame: dict[str, Any]) -> Any:
    """Decode a text frame as JSON; undecodable text and binary frames come back as-is."""
    text = frame.get("text")
    if text is None:
        return frame.get("bytes") or b""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


@app.websocket("/channel")
async def channel_socket(websocket: WebSocket) -> None:
    """Bidirectional method channel; the connection is the bridge's push target while open."""
    core: DaemonCore = app.state.core
    messenger = QueueMessenger()
    channel = MethodChannel(core.settings.channel_name, messenger)
    listener = core.attach_channel(channel)
    writer: asyncio.Task[None] | None = None

    try:
        await websocket.accept()
        writer = asyncio.create_task(_write_loop(websocket, messenger.queue))
        logger.info("channel_connected", channel=channel.name)
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info("channel_disconnected", channel=channel.name, code=frame.get("code"))
                break
            messenger.send(channel.handle_message(_decode_frame(frame)))
    finally:
        core.detach_channel(listener)
        if writer is not None:
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
