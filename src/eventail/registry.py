"""Listener registry and emission engine.

Each channel owns a bucket: a list of listeners kept sorted by ascending
priority, a ``locked`` flag and a :class:`ListenerIndex`. While an emission
iterates a bucket's list, the list is locked; any registration, removal or
nested emission on that channel swaps in a copy instead of touching the list
being iterated (copy-on-write). Listeners added during an emission are
therefore only seen by later emissions, and listeners removed during an
emission are still delivered to if that emission has not reached them yet.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any

from loguru import logger

from eventail.config import cfg
from eventail.core.constants import DEFAULT_PRIORITY, Callback, ChannelKey, Priority
from eventail.core.errors import DuplicateListenerError
from eventail.index import ListenerIndex

_priority_of = attrgetter("priority")


@dataclass(eq=False)
class Listener:
    """One registration on a channel."""

    callback: Callback
    context: Any = None
    priority: Priority = DEFAULT_PRIORITY
    once: bool = False
    fired: bool = False  # once-listener whose call returned; compaction drops it
    running: bool = False  # once-listener whose call is in progress; nested emits skip it

    def matches(self, callback: Callback, context: Any) -> bool:
        return self.context is context and self.callback == callback

    def invoke(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """Call the callback, passing the context as first argument when bound."""
        if self.context is None:
            return self.callback(*args, **kwargs)
        return self.callback(self.context, *args, **kwargs)


@dataclass(eq=False)
class ChannelBucket:
    """Per-channel storage: ordered listeners, lock flag and duplicate index."""

    listeners: list[Listener]
    locked: bool = False
    index: ListenerIndex = field(default_factory=ListenerIndex)


class ListenerRegistry:
    """Priority-ordered, reentrancy-safe listener storage keyed by channel.

    Equal priorities are delivered in registration order, but callers must
    not rely on it; only ascending priority order is guaranteed.
    """

    def __init__(
        self,
        *,
        default_priority: Priority | None = None,
        linear_scan_threshold: int | None = None,
    ) -> None:
        self._buckets: dict[ChannelKey, ChannelBucket] = {}
        self.default_priority: Priority = (
            cfg.default_priority if default_priority is None else default_priority
        )
        self.linear_scan_threshold: int = (
            cfg.linear_scan_threshold if linear_scan_threshold is None else linear_scan_threshold
        )

    # ── Mutation ────────────────────────────────────────────────────────────

    @staticmethod
    def _writable(bucket: ChannelBucket) -> list[Listener]:
        """Return the bucket's list, detaching it first from a running emission."""
        if bucket.locked:
            bucket.listeners = bucket.listeners.copy()
            bucket.locked = False
        return bucket.listeners

    def _drop(self, channel: ChannelKey) -> None:
        del self._buckets[channel]
        logger.debug("Channel {!r} has no listeners left; dropped", channel)

    def register(
        self,
        channel: ChannelKey,
        callback: Callback,
        context: Any = None,
        priority: Priority | None = None,
        once: bool = False,
    ) -> None:
        """Add a listener; raise DuplicateListenerError if (callback, context) is taken."""
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")
        if priority is None:
            priority = self.default_priority

        listener = Listener(callback, context, priority, once)
        bucket = self._buckets.get(channel)
        if bucket is None:
            self._buckets[channel] = ChannelBucket([listener], index=ListenerIndex(callback, context, priority))
            logger.debug("Channel {!r} created", channel)
            return

        index = bucket.index
        if index.has(callback, context):
            logger.debug("Duplicate listener {!r} rejected on channel {!r}", callback, channel)
            raise DuplicateListenerError(
                "Event listener already exists",
                code="duplicate_listener",
                details={"channel": channel, "priority": index.get_priority(callback, context)},
            )
        index.insert(callback, context, priority)

        listeners = self._writable(bucket)
        if not listeners or listeners[-1].priority <= priority:
            listeners.append(listener)
        elif priority < listeners[0].priority:
            listeners.insert(0, listener)
        else:
            listeners.insert(bisect_right(listeners, priority, key=_priority_of), listener)

    def _locate(self, listeners: list[Listener], callback: Callback, context: Any, priority: Priority) -> int | None:
        """Position of the (callback, context) record, or None."""
        if not listeners:
            return None
        last = len(listeners) - 1
        if listeners[0].matches(callback, context):
            return 0
        if listeners[last].matches(callback, context):
            return last

        if len(listeners) < self.linear_scan_threshold or listeners[0].priority == listeners[last].priority:
            start, stop = 1, last
        else:
            start = bisect_left(listeners, priority, key=_priority_of)
            stop = bisect_right(listeners, priority, key=_priority_of, lo=start)

        for position in range(start, stop):
            if listeners[position].matches(callback, context):
                return position
        return None

    def remove(self, channel: ChannelKey, callback: Callback | None = None, context: Any = None) -> None:
        """Remove one listener, or the whole channel when callback is None.

        A missing context means "registered without context"; it is not a
        wildcard. Removing something that is not registered is a no-op.
        """
        bucket = self._buckets.get(channel)
        if bucket is None:
            return

        if callback is None:
            self._drop(channel)
            bucket.index.clear()
            return

        priority = bucket.index.get_priority(callback, context)
        if priority is None:
            return

        listeners = self._writable(bucket)
        position = self._locate(listeners, callback, context, priority)
        bucket.index.remove(callback, context)
        if position is not None:
            del listeners[position]
        if not listeners:
            self._drop(channel)

    def clear(self) -> None:
        """Remove every channel."""
        for channel in list(self._buckets):
            self.remove(channel)

    # ── Emission ────────────────────────────────────────────────────────────

    def emit(self, channel: ChannelKey, *args: Any, **kwargs: Any) -> bool:
        """Deliver args to the channel's listeners in priority order.

        Returns True if at least one listener was called; False when the
        channel has no listeners, or when every remaining one is a once-listener
        already consumed or still running further up the stack. An exception
        raised by a callback propagates immediately; later listeners are skipped.
        """
        bucket = self._buckets.get(channel)
        if bucket is None or not bucket.listeners:
            return False

        if bucket.locked:
            # Nested emission on this channel: leave the outer snapshot alone.
            bucket.listeners = bucket.listeners.copy()
        else:
            bucket.locked = True
        snapshot = bucket.listeners

        delivered = False
        consumed = False
        try:
            for listener in snapshot:
                if listener.fired or listener.running:
                    continue
                delivered = True
                if not listener.once:
                    listener.invoke(args, kwargs)
                    continue
                listener.running = True
                try:
                    listener.invoke(args, kwargs)
                finally:
                    listener.running = False
                listener.fired = True
                consumed = True
        finally:
            self._reconcile(channel, snapshot, consumed)
        return delivered

    def _reconcile(self, channel: ChannelKey, snapshot: list[Listener], consumed: bool) -> None:
        """Release the lock held on snapshot and drop once-listeners that fired."""
        bucket = self._buckets.get(channel)
        if bucket is None:
            return
        if bucket.listeners is snapshot:
            bucket.locked = False
        if not consumed:
            return

        listeners = bucket.listeners
        kept: list[Listener] = []
        for listener in listeners:
            if listener.fired:
                bucket.index.remove(listener.callback, listener.context)
            else:
                kept.append(listener)

        if not kept:
            self._drop(channel)
        elif len(kept) != len(listeners):
            listeners[:] = kept

    # ── Introspection ───────────────────────────────────────────────────────

    def has(self, channel: ChannelKey, callback: Callback, context: Any = None) -> bool:
        bucket = self._buckets.get(channel)
        return bucket is not None and bucket.index.has(callback, context)

    def listener_count(self, channel: ChannelKey) -> int:
        bucket = self._buckets.get(channel)
        return 0 if bucket is None else len(bucket.listeners)

    def listeners(self, channel: ChannelKey) -> tuple[Listener, ...]:
        """Current listeners of channel in delivery order."""
        bucket = self._buckets.get(channel)
        return () if bucket is None else tuple(bucket.listeners)

    def channels(self) -> list[ChannelKey]:
        return list(self._buckets)

    def __contains__(self, channel: object) -> bool:
        return channel in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
