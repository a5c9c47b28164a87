"""Exception types raised by the table engine."""

from __future__ import annotations


class BlackjackError(Exception):
    pass


class IllegalActionError(BlackjackError, ValueError):
    """An action was requested whose legality check fails.

    Raised before anything is mutated, so the table is unchanged.
    """


class ShoeExhaustedError(BlackjackError, RuntimeError):
    """A card was drawn from an empty shoe."""


class InvalidConfigurationError(BlackjackError, ValueError):
    """Settings, seats or bet amounts that can never be valid."""
