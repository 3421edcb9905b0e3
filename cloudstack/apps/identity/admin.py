"""Django admin configuration for identity app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from cloudstack.apps.identity.models import (
    EmailToken,
    IdentityAccount,
    IdentitySession,
)


@admin.register(IdentityAccount)
class IdentityAccountAdmin(admin.ModelAdmin[IdentityAccount]):
    """Admin interface for IdentityAccount model."""

    list_display = [
        'email',
        'account_id',
        'created_at',
    ]

    search_fields = [
        'email',
        'account_id',
    ]

    readonly_fields = [
        'account_id',
        'created_at',
    ]


@admin.register(EmailToken)
class EmailTokenAdmin(admin.ModelAdmin[EmailToken]):
    """Admin interface for EmailToken model.

    The code itself is never shown, only its lifetime.
    """

    list_display = [
        'account',
        'created_at',
        'expires_at',
        'failed_attempts',
    ]

    exclude = ['secret_hash']

    readonly_fields = [
        'account',
        'created_at',
        'expires_at',
    ]

    def get_queryset(self, request: HttpRequest) -> QuerySet[EmailToken]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('account')


@admin.register(IdentitySession)
class IdentitySessionAdmin(admin.ModelAdmin[IdentitySession]):
    """Admin interface for IdentitySession model."""

    list_display = [
        'session_id_short',
        'account',
        'created_at',
        'last_activity',
        'expires_at',
    ]

    list_filter = [
        'created_at',
        'last_activity',
    ]

    search_fields = [
        'session_id',
        'account__email',
    ]

    exclude = ['secret']

    readonly_fields = [
        'session_id',
        'account',
        'created_at',
        'last_activity',
        'expires_at',
    ]

    def session_id_short(self, obj: IdentitySession) -> str:
        """Display truncated session ID.

        Args:
            obj: IdentitySession instance.

        Returns:
            First 8 characters of session ID.
        """
        return f'{obj.session_id[:8]}...'
    session_id_short.short_description = 'Session'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[IdentitySession]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('account')
