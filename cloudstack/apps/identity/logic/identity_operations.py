"""Identity provider operations.

One-time email codes are the only credential: a code is issued to an
email address, then exchanged for a provider session whose secret the
application keeps in a cookie.
"""

import logging
import secrets
from datetime import timedelta
from typing import Final

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from cloudstack.apps.identity.exceptions import (
    InvalidTokenError,
    SessionNotFoundError,
)
from cloudstack.apps.identity.models import (
    EmailToken,
    IdentityAccount,
    IdentitySession,
)

logger = logging.getLogger(__name__)

# Identifier length in bytes (generates 20 hex chars)
_ID_BYTES: Final = 10
# Session secret length in bytes (generates 64 hex chars)
_SECRET_BYTES: Final = 32
OTP_LENGTH: Final = 6

_OTP_SUBJECT: Final = 'Your CloudStack verification code'


def get_otp_ttl() -> int:
    """Get one-time code lifetime in seconds.

    Returns:
        Lifetime from settings or default of 900 (15 min).
    """
    return getattr(settings, 'IDENTITY_OTP_TTL', 900)


def get_otp_max_attempts() -> int:
    """Get number of wrong codes after which a token is revoked.

    Returns:
        Limit from settings or default of 5.
    """
    return getattr(settings, 'IDENTITY_OTP_MAX_ATTEMPTS', 5)


def get_session_ttl() -> int:
    """Get provider session lifetime in seconds.

    Returns:
        Lifetime from settings or default of one year.
    """
    return getattr(settings, 'IDENTITY_SESSION_TTL', 365 * 24 * 60 * 60)


def _generate_code() -> str:
    return f'{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}'


def _record_failed_attempt(token: EmailToken) -> None:
    EmailToken.objects.filter(pk=token.pk).update(
        failed_attempts=F('failed_attempts') + 1,
    )
    revoked, _ = EmailToken.objects.filter(
        pk=token.pk,
        failed_attempts__gte=get_otp_max_attempts(),
    ).delete()
    if revoked:
        logger.warning(
            'Email token revoked after %d failed attempts for account %s',
            get_otp_max_attempts(),
            token.account.account_id[:8],
        )


def get_or_create_account(email: str) -> IdentityAccount:
    """Get the provider account for an email, creating it on first use.

    Args:
        email: Account email address.

    Returns:
        IdentityAccount for the address.
    """
    account, created = IdentityAccount.objects.get_or_create(
        email=email,
        defaults={'account_id': secrets.token_hex(_ID_BYTES)},
    )
    if created:
        logger.info('Created identity account %s', account.account_id[:8])
    return account


def create_email_token(email: str) -> EmailToken:
    """Issue a one-time code and email it to the address.

    Previous codes for the same account are discarded, so only the most
    recently sent code can be exchanged.

    Args:
        email: Address to send the code to.

    Returns:
        The new EmailToken; ``token.account.account_id`` identifies the
        account the code must be exchanged for.

    Raises:
        OSError: If the email cannot be delivered.
    """
    code = _generate_code()

    with transaction.atomic():
        account = get_or_create_account(email)
        replaced, _ = EmailToken.objects.filter(account=account).delete()
        token = EmailToken.objects.create(
            account=account,
            secret_hash=make_password(code),
            expires_at=timezone.now() + timedelta(seconds=get_otp_ttl()),
        )

        send_mail(
            subject=_OTP_SUBJECT,
            message=(
                f'Your verification code is {code}.\n\n'
                f'It expires in {get_otp_ttl() // 60} minutes.'
            ),
            from_email=None,
            recipient_list=[email],
        )

    logger.info(
        'Email token issued for account %s (replaced %d)',
        account.account_id[:8],
        replaced,
    )
    return token


def create_session(account_id: str, secret: str) -> IdentitySession:
    """Exchange a one-time code for a provider session.

    The code is consumed on success. A wrong code counts against the
    token, which is deleted once the attempt limit is reached.

    Args:
        account_id: Provider account identifier the code was issued for.
        secret: The one-time code.

    Returns:
        Created IdentitySession.

    Raises:
        InvalidTokenError: If the account has no matching, unexpired code.
    """
    token = (
        EmailToken.objects.select_related('account')
        .filter(
            account__account_id=account_id,
            expires_at__gt=timezone.now(),
        )
        .first()
    )
    if token is not None and not check_password(secret, token.secret_hash):
        _record_failed_attempt(token)
        token = None
    if token is None:
        logger.warning(
            'Invalid or expired code for account %s',
            account_id[:8],
        )
        raise InvalidTokenError('Invalid or expired verification code')

    with transaction.atomic():
        token.delete()
        session = IdentitySession.objects.create(
            account=token.account,
            session_id=secrets.token_hex(_ID_BYTES),
            secret=secrets.token_hex(_SECRET_BYTES),
            expires_at=timezone.now() + timedelta(seconds=get_session_ttl()),
        )

    logger.info(
        'Identity session created for account %s: %s',
        account_id[:8],
        session.session_id[:8],
    )
    return session


def _get_active_session(secret: str) -> IdentitySession:
    try:
        return IdentitySession.objects.select_related('account').get(
            secret=secret,
            expires_at__gt=timezone.now(),
        )
    except IdentitySession.DoesNotExist as error:
        raise SessionNotFoundError('Session not found or expired') from error


def get_account(secret: str) -> IdentityAccount:
    """Resolve the account behind a session secret.

    Args:
        secret: Session secret from the cookie.

    Returns:
        IdentityAccount owning the session.

    Raises:
        SessionNotFoundError: If the session is unknown or expired.
    """
    session = _get_active_session(secret)
    IdentitySession.objects.filter(pk=session.pk).update(
        last_activity=timezone.now(),
    )
    return session.account


def delete_session(secret: str) -> None:
    """Delete the session behind a secret.

    Args:
        secret: Session secret from the cookie.

    Raises:
        SessionNotFoundError: If the session is unknown or expired.
    """
    session = _get_active_session(secret)
    session.delete()
    logger.info('Identity session deleted: %s', session.session_id[:8])


def cleanup_expired() -> tuple[int, int]:
    """Remove expired one-time codes and sessions.

    Returns:
        Number of deleted tokens and sessions.
    """
    now = timezone.now()
    tokens, _ = EmailToken.objects.filter(expires_at__lte=now).delete()
    sessions, _ = IdentitySession.objects.filter(expires_at__lte=now).delete()

    if tokens or sessions:
        logger.info(
            'Cleaned up %d expired tokens and %d expired sessions',
            tokens,
            sessions,
        )

    return tokens, sessions
