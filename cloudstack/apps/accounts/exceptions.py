"""Exceptions for accounts app."""

from cloudstack.results import ActionError, ErrorKind


class NotAuthenticatedError(ActionError):
    """Raised when no current user can be resolved for a request."""

    kind = ErrorKind.NOT_AUTHENTICATED
