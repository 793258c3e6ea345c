"""Eventail: in-process, priority-ordered publish/subscribe."""

from loguru import logger

from eventail.core.errors import DuplicateListenerError, EventailConfigurationError, EventailError
from eventail.emitter import Eventail
from eventail.index import ListenerIndex
from eventail.registry import ChannelBucket, Listener, ListenerRegistry

__version__ = "0.2.9"

# Library logging is opt-in: logger.enable("eventail")
logger.disable("eventail")

__all__ = [
    "ChannelBucket",
    "DuplicateListenerError",
    "Eventail",
    "EventailConfigurationError",
    "EventailError",
    "Listener",
    "ListenerIndex",
    "ListenerRegistry",
    "__version__",
]
