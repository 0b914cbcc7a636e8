"""Error model - Actionable errors with remediation hints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class BridgeError(Exception):
    """
    Base error with context and remediation guidance.

    Errors travel back to the caller of a channel method, so each one
    should say what went wrong and what the caller can do about it.
    """

    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    remediation: str = ""

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "remediation": self.remediation,
        }


# Specific error constructors for common cases


def not_implemented_error(method: str, channel: str | None = None) -> BridgeError:
    """Create error for a method the host does not handle."""
    return BridgeError(
        code="ERR_NOT_IMPLEMENTED",
        message=f"Method not implemented: {method}",
        context={"method": method, "channel": channel},
        remediation="Supported methods: 'getInitialLink'. Deep links are pushed as 'onDeepLink'.",
    )


def invalid_message_error(reason: str) -> BridgeError:
    """Create error for a malformed channel message."""
    return BridgeError(
        code="ERR_INVALID_MESSAGE",
        message=f"Invalid channel message: {reason}",
        context={"reason": reason},
        remediation='Send a JSON object like {"id": 1, "method": "getInitialLink"}.',
    )
