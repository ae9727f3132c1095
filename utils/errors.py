"""
Error taxonomy for the gateway.

Every failure that reaches a caller is one of four kinds, each carrying the
HTTP-style status used by the error envelope:

- InputValidationError (400): malformed or oversized name.
- NotFoundError (404): upstream confirms the record does not exist.
- UpstreamError (502): upstream reachable but erroring, timing out, or
  returning a malformed/non-2xx response.
- InternalError (500): unexpected failure during normalization or merge.
"""

from typing import Dict


class PokedexError(Exception):
    """Base class for errors surfaced to callers through the error envelope."""

    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_envelope(self) -> Dict[str, dict]:
        """
        Render the error as the public envelope.

        Returns:
            Dictionary of the form {"error": {"message": ..., "status": ...}}.
        """
        return {"error": {"message": self.message, "status": self.status}}


class InputValidationError(PokedexError):
    """Raised when a caller supplies a name that fails validation."""

    status = 400


class NotFoundError(PokedexError):
    """Raised when the upstream answers 404 for a record."""

    status = 404


class UpstreamError(PokedexError):
    """Raised on transport or protocol failures talking to the upstream."""

    status = 502


class InternalError(PokedexError):
    """Raised when merging upstream payloads fails unexpectedly."""

    status = 500
