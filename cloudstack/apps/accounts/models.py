"""Database models for accounts app."""

from typing import ClassVar, Final, final

from typing_extensions import override

from django.db import models

# Constants for field max lengths
_FULL_NAME_MAX_LENGTH: Final = 100
_AVATAR_MAX_LENGTH: Final = 500
_ACCOUNT_ID_MAX_LENGTH: Final = 36


@final
class User(models.Model):
    """Application user record.

    Created on first sign-up and linked to the identity provider through
    ``account_id``. Records are never updated or deleted by the
    application.
    """

    full_name = models.CharField(max_length=_FULL_NAME_MAX_LENGTH)

    email = models.EmailField(unique=True)

    avatar = models.URLField(
        max_length=_AVATAR_MAX_LENGTH,
        help_text='Avatar image URL',
    )

    account_id = models.CharField(
        max_length=_ACCOUNT_ID_MAX_LENGTH,
        unique=True,
        help_text='Identity provider account identifier',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.full_name} <{self.email}>'
