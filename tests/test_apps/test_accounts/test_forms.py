"""Tests for auth and code forms."""

from cloudstack.apps.accounts.forms import AuthForm, FormType, OtpForm


def test_sign_in_form_has_no_full_name():
    """Test sign-in mode only asks for the email."""
    form = AuthForm({'email': 'ada@example.com'})

    assert 'full_name' not in form.fields
    assert form.is_valid()


def test_sign_up_form_requires_full_name():
    """Test sign-up mode validates the full name length."""
    form = AuthForm(
        {'email': 'ada@example.com', 'full_name': 'A'},
        form_type=FormType.SIGN_UP,
    )

    assert not form.is_valid()
    assert 'full_name' in form.errors


def test_sign_up_form_rejects_long_name():
    """Test the full name is at most 50 characters."""
    form = AuthForm(
        {'email': 'ada@example.com', 'full_name': 'A' * 51},
        form_type=FormType.SIGN_UP,
    )

    assert not form.is_valid()


def test_invalid_email():
    """Test a malformed email is rejected."""
    assert not AuthForm({'email': 'not-an-email'}).is_valid()


def test_otp_form_requires_six_characters():
    """Test the code must be exactly six characters."""
    assert OtpForm({'password': '123456'}).is_valid()
    assert not OtpForm({'password': '12345'}).is_valid()
    assert not OtpForm({'password': '1234567'}).is_valid()
