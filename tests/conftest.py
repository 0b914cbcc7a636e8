"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest

from deeplink_bridge.bridge import LinkBridge
from deeplink_bridge.config import BridgeSettings
from deeplink_bridge.daemon.core import DaemonCore


class RecordingListener:
    """Listener that records every pushed URI."""

    def __init__(self) -> None:
        self.received: list[str] = []

    def __call__(self, uri: str) -> None:
        self.received.append(uri)


class RecordingMessenger:
    """Messenger that keeps sent messages in memory."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    def send(self, message: dict[str, Any]) -> None:
        self.sent.append(message)


@pytest.fixture
def bridge() -> LinkBridge:
    """Fresh bridge with no link and no listener."""
    return LinkBridge()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def messenger() -> RecordingMessenger:
    return RecordingMessenger()


@pytest.fixture
def core() -> DaemonCore:
    """Daemon core with default settings (any scheme accepted)."""
    return DaemonCore(BridgeSettings())


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch, None, None]:
    """Remove bridge environment overrides for the duration of a test."""
    for name in ("DEEPLINK_BRIDGE_CHANNEL", "DEEPLINK_BRIDGE_SCHEMES"):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
