"""Forms for signing in and verifying one-time codes."""

import enum
from typing import Any

from django import forms

from cloudstack.apps.identity.logic.identity_operations import OTP_LENGTH


class FormType(enum.StrEnum):
    """Mode of the auth form."""

    SIGN_IN = 'sign-in'
    SIGN_UP = 'sign-up'


class AuthForm(forms.Form):
    """Sign-in / sign-up form.

    The full name field only exists in sign-up mode.
    """

    full_name = forms.CharField(
        label='Full Name',
        min_length=2,
        max_length=50,
        widget=forms.TextInput(attrs={'placeholder': 'Enter your full name'}),
        error_messages={
            'required': 'Full name is required',
            'min_length': 'Full name is required',
        },
    )
    email = forms.EmailField(
        label='Email',
        widget=forms.EmailInput(attrs={'placeholder': 'Enter your email'}),
    )

    def __init__(
        self,
        *args: Any,
        form_type: FormType = FormType.SIGN_IN,
        **kwargs: Any,
    ) -> None:
        """Drop the full name field outside sign-up mode."""
        super().__init__(*args, **kwargs)
        self.form_type = form_type
        if form_type != FormType.SIGN_UP:
            del self.fields['full_name']


class OtpForm(forms.Form):
    """One-time code entry."""

    password = forms.CharField(
        label='Code',
        min_length=OTP_LENGTH,
        max_length=OTP_LENGTH,
        widget=forms.TextInput(attrs={
            'autocomplete': 'one-time-code',
            'inputmode': 'numeric',
        }),
    )
