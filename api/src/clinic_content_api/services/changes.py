"""In-process change notifications for the content table."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional

if TYPE_CHECKING:
    from clinic_content_api.services.store import ContentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentChange:
    event: str  # upsert | poll | local_save
    locale: Optional[str] = None
    section: Optional[str] = None


ChangeCallback = Callable[[ContentChange], None]


class Subscription:
    """Handle for one registered listener.

    Use it as a context manager; leaving the block releases the listener.
    """

    def __init__(self, feed: "ContentChangeFeed", callback: ChangeCallback) -> None:
        self._feed = feed
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._feed._remove(self._callback)
            self._active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class ContentChangeFeed:
    def __init__(self) -> None:
        self._listeners: List[ChangeCallback] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self, callback)

    def _remove(self, callback: ChangeCallback) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    def publish(self, change: ContentChange) -> None:
        for callback in list(self._listeners):
            try:
                callback(change)
            except Exception:
                # A broken listener must not fail the write that triggered it
                logger.exception("Content change listener failed", extra={"event": change.event})


async def poll_for_changes(store: "ContentStore", feed: ContentChangeFeed, interval_seconds: float) -> None:
    """Publish a change whenever the newest ``updated_at`` in the store moves,
    or when the store answers again after failing.

    Picks up writes made by other processes against a shared store. Runs until cancelled.
    """
    last_seen: Optional[datetime] = None
    polled = False
    failing = False
    logger.info("Content change poller started", extra={"interval_seconds": interval_seconds})
    while True:
        try:
            latest = await store.latest_change()
            if failing or (polled and latest != last_seen):
                feed.publish(ContentChange(event="poll"))
            last_seen = latest
            polled = True
            failing = False
        except Exception:
            failing = True
            logger.warning("Content change poll failed", exc_info=True)
        await asyncio.sleep(interval_seconds)
