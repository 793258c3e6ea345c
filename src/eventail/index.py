"""Duplicate/priority index for one channel's listeners.

Maps each registered ``(callback, context)`` pair to its priority so the
registry can reject duplicates and locate a listener's priority band without
scanning the ordered sequence. Contexts are keyed by identity, callbacks by
equality (two bound methods of the same object and function are one callback).
A context that supports weak references is not kept alive by the index.
"""

from __future__ import annotations

import weakref
from typing import Any, Callable

from eventail.core.constants import DEFAULT_PRIORITY, Callback, Priority


class _ContextEntry:
    """Callbacks registered under one context object."""

    __slots__ = ("ref", "callbacks")

    def __init__(self, ref: Callable[[], Any], callbacks: dict[Callback, Priority]) -> None:
        self.ref = ref
        self.callbacks = callbacks


class ListenerIndex:
    """Per-channel membership and priority lookup for (callback, context) pairs."""

    def __init__(
        self,
        callback: Callback | None = None,
        context: Any = None,
        priority: Priority = DEFAULT_PRIORITY,
    ) -> None:
        self._contexts: dict[int, _ContextEntry] = {}
        self._no_context: dict[Callback, Priority] = {}
        if callback is not None:
            self.insert(callback, context, priority)

    def _entry(self, context: Any) -> _ContextEntry | None:
        entry = self._contexts.get(id(context))
        if entry is None or entry.ref() is not context:
            return None
        return entry

    def _reference(self, context: Any) -> Callable[[], Any]:
        """Weak reference to context; strong holder when it cannot be weakly referenced."""
        key = id(context)
        contexts = self._contexts

        def _forget(ref: weakref.ref) -> None:
            entry = contexts.get(key)
            if entry is not None and entry.ref is ref:
                del contexts[key]

        try:
            return weakref.ref(context, _forget)
        except TypeError:
            return lambda: context

    def insert(self, callback: Callback, context: Any = None, priority: Priority = DEFAULT_PRIORITY) -> None:
        """Record the pair; an already present pair keeps its original priority."""
        if context is None:
            self._no_context.setdefault(callback, priority)
            return

        entry = self._entry(context)
        if entry is None:
            self._contexts[id(context)] = _ContextEntry(self._reference(context), {callback: priority})
        else:
            entry.callbacks.setdefault(callback, priority)

    def remove(self, callback: Callback, context: Any = None) -> None:
        """Forget the pair; drop the context entry once its last callback is gone."""
        if context is None:
            self._no_context.pop(callback, None)
            return

        entry = self._entry(context)
        if entry is None:
            return
        entry.callbacks.pop(callback, None)
        if not entry.callbacks:
            del self._contexts[id(context)]

    def has(self, callback: Callback, context: Any = None) -> bool:
        if context is None:
            return callback in self._no_context
        entry = self._entry(context)
        return entry is not None and callback in entry.callbacks

    def get_priority(self, callback: Callback, context: Any = None) -> Priority | None:
        """Registered priority of the pair, or None when it is absent."""
        if context is None:
            return self._no_context.get(callback)
        entry = self._entry(context)
        if entry is None:
            return None
        return entry.callbacks.get(callback)

    def clear(self) -> None:
        self._contexts.clear()
        self._no_context.clear()

    def __len__(self) -> int:
        return len(self._no_context) + sum(len(entry.callbacks) for entry in self._contexts.values())
