"""Exceptions for identity app."""

from cloudstack.results import ActionError, ErrorKind


class IdentityError(ActionError):
    """Raised when the identity provider rejects an operation."""


class InvalidTokenError(IdentityError):
    """Raised when a one-time code is unknown, wrong, or expired."""

    kind = ErrorKind.NOT_AUTHENTICATED


class SessionNotFoundError(IdentityError):
    """Raised when a session secret does not match an active session."""

    kind = ErrorKind.NOT_AUTHENTICATED
