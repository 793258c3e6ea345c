"""Eventail exceptions."""

from __future__ import annotations


class EventailError(Exception):
    """Base for eventail errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class DuplicateListenerError(EventailError):
    """The (callback, context) pair is already registered on the channel."""


class EventailConfigurationError(EventailError):
    """Config validation or load failure."""
