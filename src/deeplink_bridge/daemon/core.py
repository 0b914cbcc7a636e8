"""Daemon core - lifecycle and wiring between the link bridge and channels."""

from __future__ import annotations

from typing import Any

import structlog

from deeplink_bridge.activation import ActivationEvent, dispatch_activation
from deeplink_bridge.bridge import LinkBridge, LinkListener
from deeplink_bridge.channel import (
    GET_INITIAL_LINK,
    ON_DEEP_LINK,
    MethodCall,
    MethodChannel,
    dispatch_call,
)
from deeplink_bridge.config import BridgeSettings
from deeplink_bridge.errors import not_implemented_error

logger = structlog.get_logger()


class DaemonCore:
    """Host shell state: one link bridge shared by every channel connection."""

    def __init__(self, settings: BridgeSettings | None = None) -> None:
        self.settings = settings or BridgeSettings.from_env()
        self.bridge = LinkBridge()
        self._running = False

    async def start(self) -> None:
        logger.info(
            "daemon_core_starting",
            channel=self.settings.channel_name,
            allowed_schemes=sorted(self.settings.allowed_schemes),
        )
        self._running = True
        logger.info("daemon_core_started")

    async def stop(self) -> None:
        logger.info("daemon_core_stopping")
        self._running = False
        logger.info("daemon_core_stopped")

    @property
    def is_running(self) -> bool:
        """Check if daemon is running."""
        return self._running

    def handle_activation(self, event: ActivationEvent) -> bool:
        """Feed a platform activation into the bridge."""
        return dispatch_activation(self.bridge, event, self.settings.allowed_schemes)

    def handle_method_call(self, call: MethodCall) -> Any:
        """Answer an application-side method call."""
        if call.method == GET_INITIAL_LINK:
            return self.bridge.query()
        raise not_implemented_error(call.method, self.settings.channel_name)

    def call(self, call: MethodCall) -> dict[str, Any]:
        """Handle a request/response call that arrives without a channel connection."""
        return dispatch_call(self.handle_method_call, call, self.settings.channel_name)

    def attach_channel(self, channel: MethodChannel) -> LinkListener:
        """Serve ``channel`` and make it the bridge's push target.

        Returns:
            The attached listener, needed to detach the channel later
        """
        channel.set_method_call_handler(self.handle_method_call)

        def push(uri: str) -> None:
            channel.invoke_method(ON_DEEP_LINK, uri)

        self.bridge.attach_listener(push)
        return push

    def detach_channel(self, listener: LinkListener) -> None:
        """Stop pushing to a closed channel unless another one has replaced it."""
        if not self.bridge.detach_listener(listener):
            logger.debug("channel_detach_skipped")
