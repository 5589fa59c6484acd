from __future__ import annotations


class CollectorError(Exception):
    """Base class for every error raised by the measurement core."""


class PreconditionViolation(CollectorError):
    """
    Raised on an integration error: wraparound subtraction before the counter
    width is known, or diffing readings of two different devices.
    """


class NotBaselined(CollectorError):
    """Raised when a sampling operation runs before baseline() succeeded."""

    def __init__(self, reason: str = "baseline has not been called") -> None:
        super().__init__(reason)
        self.reason = reason


class Unavailable(CollectorError):
    """
    A metric could not be produced on this call.

    Recovered at the call boundary: the caller reports the reason and keeps
    going. Stored baselines are never touched when this is raised.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
