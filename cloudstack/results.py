"""Uniform success-or-error results for server actions.

Every action invoked by the UI tier returns an :class:`ActionResult`.
Domain exceptions raised below the action layer are translated into an
:class:`ErrorKind` by the :func:`server_action` decorator, so callers never
have to tell "no result" apart from "failed".
"""

import enum
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, ParamSpec, TypeVar, final

from botocore.exceptions import BotoCoreError, ClientError
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError

logger = logging.getLogger(__name__)

_ValueT = TypeVar('_ValueT')
_ParamsT = ParamSpec('_ParamsT')


class ErrorKind(enum.StrEnum):
    """Failure categories reported to the UI tier."""

    NOT_AUTHENTICATED = 'not_authenticated'
    NOT_FOUND = 'not_found'
    PERMISSION_DENIED = 'permission_denied'
    QUOTA_EXCEEDED = 'quota_exceeded'
    PROVIDER_FAILURE = 'provider_failure'


class ActionError(Exception):
    """Base class for errors that map onto an :class:`ErrorKind`."""

    kind: ClassVar[ErrorKind] = ErrorKind.PROVIDER_FAILURE


@final
@dataclass(frozen=True, slots=True)
class ActionResult(Generic[_ValueT]):
    """Outcome of a server action.

    A failed result may still carry a value, e.g. a zeroed usage summary
    or a sign-in challenge without identifiers.
    """

    value: _ValueT | None = None
    error: ErrorKind | None = None
    message: str = ''

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: _ValueT | None = None) -> 'ActionResult[_ValueT]':
        """Build a successful result."""
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        error: ErrorKind,
        message: str,
        value: _ValueT | None = None,
    ) -> 'ActionResult[_ValueT]':
        """Build a failed result.

        Args:
            error: Failure category.
            message: Human-readable message, shown to the user verbatim.
            value: Optional fallback value for the caller.

        Returns:
            Failed ActionResult.
        """
        return cls(value=value, error=error, message=message)


def classify_error(error: Exception) -> ErrorKind:
    """Map an exception onto its failure category.

    Args:
        error: Exception raised by the action body.

    Returns:
        Matching ErrorKind.
    """
    if isinstance(error, ActionError):
        return error.kind
    if isinstance(error, ObjectDoesNotExist):
        return ErrorKind.NOT_FOUND
    return ErrorKind.PROVIDER_FAILURE


_PROVIDER_ERRORS: tuple[type[Exception], ...] = (
    ActionError,
    ObjectDoesNotExist,
    DatabaseError,
    BotoCoreError,
    ClientError,
    OSError,
)


def server_action(
    func: Callable[_ParamsT, 'ActionResult[Any]'],
) -> Callable[_ParamsT, 'ActionResult[Any]']:
    """Translate domain and backend exceptions into failed results.

    Args:
        func: Action returning an ActionResult on success.

    Returns:
        Wrapped action that never raises the handled exceptions.
    """
    @functools.wraps(func)
    def wrapper(
        *args: _ParamsT.args,
        **kwargs: _ParamsT.kwargs,
    ) -> 'ActionResult[Any]':
        try:
            return func(*args, **kwargs)
        except _PROVIDER_ERRORS as error:
            kind = classify_error(error)
            if kind is ErrorKind.PROVIDER_FAILURE:
                logger.exception('Action %s failed', func.__name__)
            else:
                logger.warning(
                    'Action %s rejected (%s): %s',
                    func.__name__,
                    kind,
                    error,
                )
            return ActionResult.failure(kind, str(error))

    return wrapper
