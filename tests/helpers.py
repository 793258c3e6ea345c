"""Shared test doubles for emitter and registry tests."""

from __future__ import annotations

from typing import Any, Callable

from eventail.emitter import Eventail


class PublicEmitter(Eventail):
    """Eventail subclass that exposes emission to tests."""

    def emit(self, channel: str | int, *args: Any, **kwargs: Any) -> bool:
        return self._emit(channel, *args, **kwargs)


class CallLog:
    """Records listener invocations by name."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.payloads: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def listener(self, name: str) -> Callable[..., None]:
        """Build a distinct callback that logs name when invoked."""

        def _callback(*args: Any, **kwargs: Any) -> None:
            self.calls.append(name)
            self.payloads.append((name, args, kwargs))

        _callback.__name__ = f"listener_{name}"
        return _callback

    def clear(self) -> None:
        self.calls.clear()
        self.payloads.clear()


class Context:
    """Plain weak-referenceable context object."""

    def __init__(self, name: str = "ctx") -> None:
        self.name = name
        self.seen: list[tuple[Any, ...]] = []

    def handle(self, *args: Any) -> None:
        self.seen.append(args)

    def __repr__(self) -> str:
        return f"Context({self.name!r})"
