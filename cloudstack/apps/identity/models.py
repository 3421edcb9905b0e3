"""Database models for identity app."""

from typing import ClassVar, Final, final

from typing_extensions import override

from django.db import models

# Constants for field max lengths
_ACCOUNT_ID_MAX_LENGTH: Final = 36
_SECRET_HASH_MAX_LENGTH: Final = 128
_SESSION_SECRET_MAX_LENGTH: Final = 128


@final
class IdentityAccount(models.Model):
    """Account known to the identity provider.

    The ``account_id`` is the public provider identifier handed to the
    application tier; the application's own user record stores it to
    correlate the two.
    """

    account_id = models.CharField(
        max_length=_ACCOUNT_ID_MAX_LENGTH,
        unique=True,
        help_text='Provider account identifier',
    )

    email = models.EmailField(
        unique=True,
        help_text='Address one-time codes are sent to',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Identity Account'  # type: ignore[mutable-override]
        verbose_name_plural = 'Identity Accounts'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.email} ({self.account_id[:8]})'


@final
class EmailToken(models.Model):
    """One-time code issued to an account by email.

    Only the hash of the code is stored. Issuing a new code deletes the
    previous ones, so at most one code per account is active.
    Too many wrong guesses delete the token.
    """

    account = models.ForeignKey(
        IdentityAccount,
        on_delete=models.CASCADE,
        related_name='email_tokens',
    )

    secret_hash = models.CharField(
        max_length=_SECRET_HASH_MAX_LENGTH,
        help_text='Hashed one-time code',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    failed_attempts = models.PositiveSmallIntegerField(
        default=0,
        help_text='Wrong codes submitted against this token',
    )

    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Email Token'  # type: ignore[mutable-override]
        verbose_name_plural = 'Email Tokens'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.account.email} (expires {self.expires_at:%Y-%m-%d %H:%M})'


@final
class IdentitySession(models.Model):
    """Provider session created by exchanging a one-time code."""

    account = models.ForeignKey(
        IdentityAccount,
        on_delete=models.CASCADE,
        related_name='sessions',
        db_index=True,
    )

    session_id = models.CharField(
        max_length=_ACCOUNT_ID_MAX_LENGTH,
        unique=True,
        help_text='Public session identifier',
    )

    secret = models.CharField(
        max_length=_SESSION_SECRET_MAX_LENGTH,
        unique=True,
        help_text='Opaque secret stored in the session cookie',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    last_activity = models.DateTimeField(
        auto_now=True,
        db_index=True,
    )

    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Identity Session'  # type: ignore[mutable-override]
        verbose_name_plural = 'Identity Sessions'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-last_activity']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.account.email} ({self.session_id[:8]})'
