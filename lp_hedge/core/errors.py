"""
Typed errors raised by the hedge monitor.

Every failure aborts the current cycle; the scheduler loop decides whether
to keep polling or halt.
"""

from typing import Any


class LPHedgeError(Exception):
    """Base class for all hedge monitor errors."""


class NotFoundError(LPHedgeError):
    """No AMM or CEX position matches the configured identifiers."""


class AmbiguousMatchError(NotFoundError):
    """More than one position matches; the builder refuses to pick one."""


class MalformedDataError(LPHedgeError):
    """A venue-provided numeric field could not be parsed."""

    def __init__(self, field_name: str, raw: Any, reason: str = ""):
        self.field_name = field_name
        self.raw = raw
        msg = f"Failed to parse {field_name}={raw!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class CollaboratorFailure(LPHedgeError):
    """Network/RPC error from an external venue or notifier."""


class ConfigurationError(LPHedgeError, ValueError):
    """Invalid configuration detected at construction time."""
