"""Fault taxonomy surfaced at the HTTP boundary.

``ClientFault`` subclasses carry a message that is safe to return to the
caller. ``InternalFault`` always renders a generic message; the underlying
cause travels on ``__cause__`` for server-side logging only.
"""

from __future__ import annotations

INTERNAL_ERROR_MESSAGE = "Internal error occurred."


class AccountsError(Exception):
    """Base class for faults the API layer knows how to render."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientFault(AccountsError):
    """The caller's input was wrong."""

    status_code = 400


class BadRequestError(ClientFault):
    """The request payload could not be decoded or is unusable."""


class ValidationError(ClientFault):
    """An entity violates a structural invariant."""


class InvalidNameError(ValidationError):
    pass


class InvalidParentTypeError(ValidationError):
    pass


class NotFoundError(ClientFault):
    status_code = 404


class InternalFault(AccountsError):
    """The system misbehaved; details are never exposed to the caller."""

    status_code = 500

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE) -> None:
        super().__init__(message)
