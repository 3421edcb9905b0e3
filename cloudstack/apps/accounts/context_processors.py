"""Template context processors for accounts app."""

from typing import Any

from django.http import HttpRequest

from cloudstack.apps.accounts.logic.user_operations import get_current_user


def current_user(request: HttpRequest) -> dict[str, Any]:
    """Expose the signed-in user to templates as ``current_user``."""
    return {'current_user': get_current_user(request)}
