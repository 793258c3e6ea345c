"""Eventail: base class for objects that emit their own events."""

from __future__ import annotations

from typing import Any

from eventail.core.constants import Callback, ChannelKey, Priority
from eventail.registry import ListenerRegistry


class Eventail:
    """Priority-ordered event emitter meant to be subclassed.

    Subscribers use :meth:`on`, :meth:`once` and :meth:`off`; the subclass
    itself raises events through :meth:`_emit` when its state changes.
    Listeners run in ascending priority order (lower first). The relative
    order of listeners sharing a priority is unspecified.

    Usage::

        class Player(Eventail):
            def hit(self, damage):
                self.health -= damage
                self._emit("health_changed", self.health)

        player = Player()
        player.on("health_changed", hud.update_health, priority=10)
    """

    def __init__(self, *, registry: ListenerRegistry | None = None) -> None:
        self._registry = registry if registry is not None else ListenerRegistry()

    def on(
        self,
        channel: ChannelKey,
        callback: Callback,
        context: Any = None,
        priority: Priority | None = None,
    ) -> Eventail:
        """Subscribe callback to channel.

        With a context, the callback is called as ``callback(context, *args)``.
        Raises DuplicateListenerError if (callback, context) is already subscribed.
        """
        self._registry.register(channel, callback, context, priority, once=False)
        return self

    def once(
        self,
        channel: ChannelKey,
        callback: Callback,
        context: Any = None,
        priority: Priority | None = None,
    ) -> Eventail:
        """Subscribe callback for the next successful delivery only."""
        self._registry.register(channel, callback, context, priority, once=True)
        return self

    def off(self, channel: ChannelKey, callback: Callback | None = None, context: Any = None) -> Eventail:
        """Unsubscribe (callback, context), or every listener of channel when callback is None."""
        self._registry.remove(channel, callback, context)
        return self

    def has_listener(self, channel: ChannelKey, callback: Callback, context: Any = None) -> bool:
        return self._registry.has(channel, callback, context)

    def listener_count(self, channel: ChannelKey) -> int:
        return self._registry.listener_count(channel)

    def _emit(self, channel: ChannelKey, *args: Any, **kwargs: Any) -> bool:
        """Deliver an event to subscribers; True if channel had any listeners."""
        return self._registry.emit(channel, *args, **kwargs)
