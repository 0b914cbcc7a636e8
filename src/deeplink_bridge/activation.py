"""Activation dispatch - decide which host activations carry a deep link."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Collection

    from deeplink_bridge.bridge import LinkBridge

logger = structlog.get_logger()

ACTION_VIEW = "android.intent.action.VIEW"


@dataclass(frozen=True)
class ActivationEvent:
    """An activation record delivered by the platform: action tag plus data URI."""

    action: str | None
    uri: str | None

    @property
    def is_view(self) -> bool:
        return self.action == ACTION_VIEW

    @property
    def scheme(self) -> str | None:
        """Lower-cased text before the first ':' of the URI, if any."""
        if not self.uri or ":" not in self.uri:
            return None
        return self.uri.partition(":")[0].lower()


def should_capture(event: ActivationEvent, allowed_schemes: Collection[str] = ()) -> bool:
    """Check whether an activation is a link-opening activation worth capturing.

    Args:
        event: Activation record from the host
        allowed_schemes: Accepted URI schemes; empty accepts any scheme

    Returns:
        True if the bridge should capture ``event.uri``
    """
    if not event.is_view or not event.uri:
        return False
    if allowed_schemes:
        return event.scheme in {scheme.lower() for scheme in allowed_schemes}
    return True


def dispatch_activation(
    bridge: LinkBridge,
    event: ActivationEvent,
    allowed_schemes: Collection[str] = (),
) -> bool:
    """Capture the activation URI on ``bridge`` when the activation opens a link.

    Returns:
        True if the URI was captured, False if the activation was ignored
    """
    if not should_capture(event, allowed_schemes):
        logger.debug("activation_ignored", action=event.action, uri=event.uri)
        return False

    assert event.uri is not None
    bridge.capture(event.uri)
    return True
