"""Server actions for signing up, signing in, and signing out.

Views call these functions and render their :class:`ActionResult`.
"""

import logging
from dataclasses import dataclass
from typing import final

from django.db import DatabaseError
from django.http import HttpRequest, HttpResponseRedirect
from django.shortcuts import redirect

from cloudstack.apps.accounts.logic.user_operations import (
    delete_session_cookie,
    forget_current_user,
    get_avatar_placeholder_url,
    get_user_by_email,
    read_session_secret,
)
from cloudstack.apps.accounts.models import User
from cloudstack.apps.identity.exceptions import IdentityError, InvalidTokenError
from cloudstack.apps.identity.logic import identity_operations
from cloudstack.results import ActionResult, ErrorKind, server_action

logger = logging.getLogger(__name__)

USER_NOT_FOUND = 'User not found'


@final
@dataclass(frozen=True, slots=True)
class OtpChallenge:
    """Identifiers needed to exchange an emailed code for a session."""

    account_id: str | None
    user_id: str | None
    error: str | None = None


@final
@dataclass(frozen=True, slots=True)
class VerifiedSession:
    """Session issued after a successful code exchange."""

    session_id: str
    secret: str


@server_action
def send_email_otp(*, email: str) -> ActionResult[str]:
    """Email a fresh one-time code, discarding any previous one.

    Args:
        email: Address to send the code to.

    Returns:
        Result carrying the provider account id.
    """
    token = identity_operations.create_email_token(email)
    return ActionResult.success(token.account.account_id)


def create_account(*, full_name: str, email: str) -> ActionResult[OtpChallenge]:
    """Send a sign-up code and create the user record if missing.

    A code is sent whether or not the email is already registered.

    Args:
        full_name: Name for a new user record.
        email: Email address to register.

    Returns:
        Result carrying the challenge; failures are prefixed with
        ``Failed to create account``.
    """
    try:
        existing_user = get_user_by_email(email)
        token = identity_operations.create_email_token(email)
        account_id = token.account.account_id

        if existing_user is None:
            user = User.objects.create(
                full_name=full_name,
                email=email,
                avatar=get_avatar_placeholder_url(),
                account_id=account_id,
            )
            logger.info('Created user record %d', user.pk)
    except (IdentityError, DatabaseError, OSError) as error:
        logger.exception('Create account failed')
        return ActionResult.failure(
            ErrorKind.PROVIDER_FAILURE,
            f'Failed to create account: {error}',
        )

    return ActionResult.success(
        OtpChallenge(account_id=account_id, user_id=account_id),
    )


@server_action
def sign_in_user(*, email: str) -> ActionResult[OtpChallenge]:
    """Send a sign-in code to a registered email.

    An unknown email is reported as a ``NOT_FOUND`` result whose value is
    a challenge without identifiers; nothing is raised.

    Args:
        email: Email address to sign in with.

    Returns:
        Result carrying the challenge.
    """
    if get_user_by_email(email) is None:
        logger.info('Sign-in requested for an unregistered email')
        return ActionResult.failure(
            ErrorKind.NOT_FOUND,
            USER_NOT_FOUND,
            value=OtpChallenge(
                account_id=None,
                user_id=None,
                error=USER_NOT_FOUND,
            ),
        )

    token = identity_operations.create_email_token(email)
    account_id = token.account.account_id
    return ActionResult.success(
        OtpChallenge(account_id=account_id, user_id=account_id),
    )


@server_action
def verify_secret(
    *,
    account_id: str,
    user_id: str,
    password: str,
) -> ActionResult[VerifiedSession]:
    """Exchange a one-time code for a provider session.

    The caller stores ``secret`` in the session cookie.

    Args:
        account_id: Provider account id from the challenge.
        user_id: Provider user id from the challenge.
        password: The emailed one-time code.

    Returns:
        Result carrying the new session.
    """
    if account_id != user_id:
        raise InvalidTokenError('Verification identifiers do not match')

    session = identity_operations.create_session(user_id, password)
    return ActionResult.success(
        VerifiedSession(session_id=session.session_id, secret=session.secret),
    )


def sign_out_user(request: HttpRequest) -> HttpResponseRedirect:
    """Delete the provider session and cookie, then go to sign-in.

    The redirect happens even when the provider session could not be
    deleted.

    Args:
        request: Incoming request carrying the session cookie.

    Returns:
        Redirect to the sign-in page with the cookie expired.
    """
    response = redirect('accounts:sign_in')
    secret = read_session_secret(request)

    if secret is not None:
        try:
            identity_operations.delete_session(secret)
        except (IdentityError, DatabaseError):
            logger.exception('Failed to sign out user')

    delete_session_cookie(response)
    forget_current_user(request)
    return response
