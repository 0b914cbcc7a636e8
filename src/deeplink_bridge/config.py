"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from deeplink_bridge.channel import DEFAULT_CHANNEL_NAME

STATE_DIR = Path(os.environ.get("DEEPLINK_BRIDGE_STATE_DIR", Path.home() / ".deeplink-bridge"))
SOCKET_PATH = Path(os.environ.get("DEEPLINK_BRIDGE_SOCKET", "/tmp/deeplink-bridge.sock"))


def parse_schemes(raw: str | None) -> frozenset[str]:
    """Parse a comma-separated scheme list ('myapp, https') into lower-case names."""
    if not raw:
        return frozenset()
    return frozenset(part.strip().lower().rstrip(":/") for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class BridgeSettings:
    """Settings for the daemon's link bridge."""

    channel_name: str = DEFAULT_CHANNEL_NAME
    allowed_schemes: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls) -> BridgeSettings:
        return cls(
            channel_name=os.environ.get("DEEPLINK_BRIDGE_CHANNEL") or DEFAULT_CHANNEL_NAME,
            allowed_schemes=parse_schemes(os.environ.get("DEEPLINK_BRIDGE_SCHEMES")),
        )
