"""Link bridge - the pending deep link slot and its single listener."""

from __future__ import annotations

from collections.abc import Callable

import structlog

logger = structlog.get_logger()

LinkListener = Callable[[str], None]


class LinkBridge:
    """Holds the most recent activation URI and forwards new ones to the application layer.

    The application layer pulls a link that arrived before it was listening
    with ``query()``; links captured while a listener is attached are pushed
    to it immediately. Only the latest link is kept: capturing overwrites,
    it never queues.
    """

    def __init__(self) -> None:
        self._pending_link: str | None = None
        self._listener: LinkListener | None = None

    @property
    def pending_link(self) -> str | None:
        """The most recently captured URI, if any."""
        return self._pending_link

    @property
    def listener_attached(self) -> bool:
        """Check if a listener will receive pushes."""
        return self._listener is not None

    def capture(self, uri: str) -> None:
        """Record an activation URI and push it to the attached listener.

        The pending link stays set after a push so a later ``query()`` still
        returns it.
        """
        self._pending_link = uri
        logger.info("deep_link_captured", uri=uri, listener_attached=self.listener_attached)

        listener = self._listener
        if listener is None:
            return
        try:
            listener(uri)
        except Exception:
            # Not re-delivered; the application can still pull it.
            logger.exception("deep_link_push_failed", uri=uri)

    def query(self) -> str | None:
        """Return the pending link without clearing it."""
        return self._pending_link

    def attach_listener(self, listener: LinkListener) -> None:
        """Attach the listener for pushes, replacing any previous one.

        The already-captured link is not delivered here; the application
        layer fetches it with ``query()``.
        """
        replaced = self._listener is not None
        self._listener = listener
        logger.info("deep_link_listener_attached", replaced=replaced)

    def detach_listener(self, listener: LinkListener) -> bool:
        """Detach ``listener`` if it is still the attached one."""
        if self._listener is not listener:
            return False
        self._listener = None
        logger.info("deep_link_listener_detached")
        return True
