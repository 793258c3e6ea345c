"""Registry constants and shared type aliases."""

from __future__ import annotations

from typing import Any, Callable, Union

ChannelKey = Union[str, int]
Callback = Callable[..., Any]
Priority = Union[int, float]

DEFAULT_PRIORITY: Priority = 0

# Below this many listeners, removal scans linearly instead of bisecting.
LINEAR_SCAN_THRESHOLD = 10
