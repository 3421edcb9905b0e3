"""Views for the auth form and the one-time code dialog."""

import logging
from typing import Any, Final

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from cloudstack.apps.accounts.actions import (
    create_account,
    send_email_otp,
    sign_in_user,
    sign_out_user,
    verify_secret,
)
from cloudstack.apps.accounts.forms import AuthForm, FormType, OtpForm
from cloudstack.apps.accounts.logic.user_operations import (
    get_current_user,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

# Django session key holding the pending code challenge
_CHALLENGE_SESSION_KEY: Final = 'otp_challenge'


def _form_url_name(form_type: str) -> str:
    if form_type == FormType.SIGN_UP:
        return 'accounts:sign_up'
    return 'accounts:sign_in'


def _render_auth(
    request: HttpRequest,
    form: AuthForm,
    *,
    otp_form: OtpForm | None = None,
    error_message: str = '',
) -> HttpResponse:
    context: dict[str, Any] = {
        'form': form,
        'form_type': form.form_type,
        'otp_form': otp_form,
        'challenge': request.session.get(_CHALLENGE_SESSION_KEY),
        'error_message': error_message,
    }
    return render(request, 'accounts/auth.html', context)


def _auth_view(request: HttpRequest, form_type: FormType) -> HttpResponse:
    if get_current_user(request) is not None:
        return redirect('files:dashboard')

    if request.method != 'POST':
        otp_form = None
        if _CHALLENGE_SESSION_KEY in request.session:
            otp_form = OtpForm()
        return _render_auth(
            request,
            AuthForm(form_type=form_type),
            otp_form=otp_form,
        )

    form = AuthForm(request.POST, form_type=form_type)
    if not form.is_valid():
        return _render_auth(request, form)

    email = form.cleaned_data['email']
    if form_type == FormType.SIGN_UP:
        result = create_account(
            full_name=form.cleaned_data['full_name'],
            email=email,
        )
    else:
        result = sign_in_user(email=email)

    if not result.ok:
        return _render_auth(request, form, error_message=result.message)

    challenge = result.value
    request.session[_CHALLENGE_SESSION_KEY] = {
        'email': email,
        'account_id': challenge.account_id,
        'user_id': challenge.user_id,
        'form_type': str(form_type),
    }
    return _render_auth(request, form, otp_form=OtpForm())


@require_http_methods(['GET', 'POST'])
def sign_in(request: HttpRequest) -> HttpResponse:
    """Render and submit the sign-in form."""
    return _auth_view(request, FormType.SIGN_IN)


@require_http_methods(['GET', 'POST'])
def sign_up(request: HttpRequest) -> HttpResponse:
    """Render and submit the sign-up form."""
    return _auth_view(request, FormType.SIGN_UP)


@require_POST
def verify(request: HttpRequest) -> HttpResponse:
    """Exchange the submitted code for a session cookie."""
    challenge = request.session.get(_CHALLENGE_SESSION_KEY)
    if challenge is None:
        return redirect('accounts:sign_in')

    auth_form = AuthForm(
        initial={'email': challenge['email']},
        form_type=FormType(challenge['form_type']),
    )
    otp_form = OtpForm(request.POST)
    if not otp_form.is_valid():
        return _render_auth(request, auth_form, otp_form=otp_form)

    result = verify_secret(
        account_id=challenge['account_id'],
        user_id=challenge['user_id'],
        password=otp_form.cleaned_data['password'],
    )
    if not result.ok:
        return _render_auth(
            request,
            auth_form,
            otp_form=otp_form,
            error_message=result.message,
        )

    del request.session[_CHALLENGE_SESSION_KEY]
    response = redirect('files:dashboard')
    set_session_cookie(response, result.value.secret)
    logger.info('Verified session %s', result.value.session_id[:8])
    return response


@require_POST
def resend(request: HttpRequest) -> HttpResponse:
    """Send a new code for the pending challenge."""
    challenge = request.session.get(_CHALLENGE_SESSION_KEY)
    if challenge is None:
        return redirect('accounts:sign_in')

    result = send_email_otp(email=challenge['email'])
    if result.ok:
        messages.success(
            request,
            f'A new code has been sent to {challenge["email"]}',
        )
    else:
        messages.error(request, result.message)
    return redirect(_form_url_name(challenge['form_type']))


@require_POST
def cancel_verification(request: HttpRequest) -> HttpResponse:
    """Close the code dialog and forget the pending challenge."""
    challenge = request.session.pop(_CHALLENGE_SESSION_KEY, None)
    if challenge is None:
        return redirect('accounts:sign_in')
    return redirect(_form_url_name(challenge['form_type']))


@require_POST
def sign_out(request: HttpRequest) -> HttpResponse:
    """Sign the current user out."""
    return sign_out_user(request)
