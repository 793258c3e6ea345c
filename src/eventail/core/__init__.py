"""Core types shared by the index, registry and emitter."""

from eventail.core.constants import (
    DEFAULT_PRIORITY,
    LINEAR_SCAN_THRESHOLD,
    Callback,
    ChannelKey,
    Priority,
)
from eventail.core.errors import (
    DuplicateListenerError,
    EventailConfigurationError,
    EventailError,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "LINEAR_SCAN_THRESHOLD",
    "Callback",
    "ChannelKey",
    "DuplicateListenerError",
    "EventailConfigurationError",
    "EventailError",
    "Priority",
]
