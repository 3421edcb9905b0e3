"""User records and current-user resolution."""

import logging
from typing import Final

from django.conf import settings
from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse

from cloudstack.apps.accounts.exceptions import NotAuthenticatedError
from cloudstack.apps.accounts.models import User
from cloudstack.apps.identity.exceptions import IdentityError
from cloudstack.apps.identity.logic import identity_operations

logger = logging.getLogger(__name__)

# Request attribute caching the resolved user for the request lifetime
_CURRENT_USER_ATTR: Final = '_cloudstack_current_user'


def get_session_cookie_name() -> str:
    """Get the name of the cookie carrying the session secret.

    Returns:
        Cookie name from settings or default of ``appwrite-session``.
    """
    return getattr(settings, 'SESSION_TOKEN_COOKIE_NAME', 'appwrite-session')


def get_avatar_placeholder_url() -> str:
    """Get the avatar assigned to newly created users.

    Returns:
        Avatar URL from settings.
    """
    return settings.AVATAR_PLACEHOLDER_URL


def read_session_secret(request: HttpRequest) -> str | None:
    """Read the session secret from the request cookies.

    Args:
        request: Incoming request.

    Returns:
        Session secret, or None if the cookie is absent or empty.
    """
    return request.COOKIES.get(get_session_cookie_name()) or None


def set_session_cookie(response: HttpResponse, secret: str) -> None:
    """Store the session secret on the response.

    The cookie is site-wide, HTTP-only, strict same-site, and secure.

    Args:
        response: Outgoing response.
        secret: Session secret issued by the identity provider.
    """
    response.set_cookie(
        get_session_cookie_name(),
        secret,
        path='/',
        httponly=True,
        samesite='Strict',
        secure=getattr(settings, 'SESSION_TOKEN_COOKIE_SECURE', True),
    )


def delete_session_cookie(response: HttpResponse) -> None:
    """Expire the session cookie on the response.

    Args:
        response: Outgoing response.
    """
    response.delete_cookie(
        get_session_cookie_name(),
        path='/',
        samesite='Strict',
    )


def get_user_by_email(email: str) -> User | None:
    """Look up a user record by email.

    Args:
        email: Email address.

    Returns:
        Matching User, or None.
    """
    return User.objects.filter(email=email).first()


def _resolve_current_user(request: HttpRequest) -> User | None:
    secret = read_session_secret(request)
    if secret is None:
        logger.debug('No session cookie on request')
        return None

    try:
        account = identity_operations.get_account(secret)
    except IdentityError:
        logger.info('Session cookie does not match an active session')
        return None
    except DatabaseError:
        logger.exception('Failed to resolve session account')
        return None

    user = User.objects.filter(account_id=account.account_id).first()
    if user is None:
        logger.warning(
            'No user record for account %s',
            account.account_id[:8],
        )
    return user


def get_current_user(request: HttpRequest) -> User | None:
    """Resolve the user signed in on this request.

    A missing cookie, an unknown or expired session, and a missing user
    record all resolve to None. The result is cached on the request.

    Args:
        request: Incoming request.

    Returns:
        Current User, or None.
    """
    if not hasattr(request, _CURRENT_USER_ATTR):
        setattr(request, _CURRENT_USER_ATTR, _resolve_current_user(request))
    return getattr(request, _CURRENT_USER_ATTR)


def forget_current_user(request: HttpRequest) -> None:
    """Drop the cached current user, e.g. after signing out.

    Args:
        request: Incoming request.
    """
    if hasattr(request, _CURRENT_USER_ATTR):
        delattr(request, _CURRENT_USER_ATTR)


def require_current_user(request: HttpRequest) -> User:
    """Resolve the current user or fail.

    Args:
        request: Incoming request.

    Returns:
        Current User.

    Raises:
        NotAuthenticatedError: If no user is signed in.
    """
    user = get_current_user(request)
    if user is None:
        raise NotAuthenticatedError('User not found')
    return user
