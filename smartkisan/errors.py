"""
Failure taxonomy shared by the gateways and the HTTP layer.

Only InvalidInput ever reaches the caller as an error status; everything
else is recovered by substituting mock weather or fallback advice.
"""


class AdvisoryError(Exception):
    """Base class for all advisory pipeline failures."""


class InvalidInput(AdvisoryError):
    """The request itself is malformed (bad coordinates, missing fields)."""


class UpstreamUnavailable(AdvisoryError):
    """A provider was unreachable, returned non-2xx, or sent an unusable body."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class MissingConfiguration(AdvisoryError):
    """No completion credential is configured; the call is skipped entirely."""


class ParseFailure(UpstreamUnavailable):
    """The completion text could not be parsed into the expected shape."""
