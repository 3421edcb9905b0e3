"""View decorators for session-protected pages."""

import functools
from collections.abc import Callable
from typing import Any

from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect

from cloudstack.apps.accounts.logic.user_operations import get_current_user


def session_required(
    view: Callable[..., HttpResponse],
) -> Callable[..., HttpResponse]:
    """Redirect to sign-in unless the request has a current user.

    The resolved user is available to the view as ``request.current_user``.
    """
    @functools.wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        user = get_current_user(request)
        if user is None:
            return redirect('accounts:sign_in')
        request.current_user = user  # type: ignore[attr-defined]
        return view(request, *args, **kwargs)

    return wrapper
