"""Django admin configuration for accounts app."""

from django.contrib import admin
from django.utils.html import format_html

from cloudstack.apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin[User]):
    """Admin interface for application User model."""

    list_display = [
        'full_name',
        'email',
        'avatar_display',
        'account_id',
        'created_at',
    ]

    search_fields = [
        'full_name',
        'email',
        'account_id',
    ]

    readonly_fields = [
        'account_id',
        'created_at',
        'updated_at',
    ]

    def avatar_display(self, obj: User) -> str:
        """Display avatar thumbnail.

        Args:
            obj: User instance.

        Returns:
            HTML image tag.
        """
        return format_html(
            '<img src="{url}" alt="" width="24" height="24">',
            url=obj.avatar,
        )
    avatar_display.short_description = 'Avatar'  # type: ignore[attr-defined]
