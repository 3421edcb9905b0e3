"""Shared fixtures for cloudstack tests."""

import re
import secrets
from datetime import timedelta

import boto3
import pytest
from django.conf import settings
from django.core import mail
from django.core.cache import cache
from django.core.files.base import ContentFile
from django.test import Client
from django.utils import timezone
from moto import mock_aws

from cloudstack.apps.accounts.models import User
from cloudstack.apps.identity.models import IdentityAccount, IdentitySession

_CODE_PATTERN = re.compile(r'\b(\d{6})\b')


@pytest.fixture(autouse=True)
def _clear_cache():
    """Start every test with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _fast_password_hasher(settings):
    """Hash one-time codes quickly in tests."""
    settings.PASSWORD_HASHERS = [
        'django.contrib.auth.hashers.MD5PasswordHasher',
    ]


def _create_user(email: str, full_name: str) -> User:
    account_id = secrets.token_hex(10)
    IdentityAccount.objects.create(account_id=account_id, email=email)
    return User.objects.create(
        full_name=full_name,
        email=email,
        avatar=settings.AVATAR_PLACEHOLDER_URL,
        account_id=account_id,
    )


@pytest.fixture
def user(db):
    """Create test user with a matching identity account.

    Returns:
        User instance for testing.
    """
    return _create_user('test@example.com', 'Test User')


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return _create_user('other@example.com', 'Other User')


@pytest.fixture
def mock_s3():
    """Mock S3 service with cloudstack bucket.

    Yields:
        boto3 S3 resource with cloudstack bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket='cloudstack')
        yield conn


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='report.pdf')


def _create_session_secret(user: User) -> str:
    session = IdentitySession.objects.create(
        account=IdentityAccount.objects.get(account_id=user.account_id),
        session_id=secrets.token_hex(10),
        secret=secrets.token_hex(32),
        expires_at=timezone.now() + timedelta(days=1),
    )
    return session.secret


@pytest.fixture
def client_for():
    """Build separate test clients signed in as a given user.

    Returns:
        Callable taking a user and returning a Client.
    """
    def build(user: User) -> Client:
        signed_in = Client()
        signed_in.cookies[settings.SESSION_TOKEN_COOKIE_NAME] = (
            _create_session_secret(user)
        )
        return signed_in

    return build


@pytest.fixture
def signed_in_client(client, user):
    """Django test client carrying a valid session cookie for ``user``."""
    client.cookies[settings.SESSION_TOKEN_COOKIE_NAME] = (
        _create_session_secret(user)
    )
    return client


@pytest.fixture
def request_for(rf):
    """Build requests carrying a valid session cookie for a user.

    Returns:
        Callable taking a user (or None for an anonymous request).
    """
    def build(user: User | None):
        request = rf.get('/')
        if user is not None:
            request.COOKIES[settings.SESSION_TOKEN_COOKIE_NAME] = (
                _create_session_secret(user)
            )
        return request

    return build


@pytest.fixture
def signed_in_request(request_for, user):
    """Request carrying a valid session cookie for ``user``."""
    return request_for(user)


@pytest.fixture
def emailed_code():
    """Extract the one-time code from the most recent email.

    Returns:
        Callable returning the six digit code.
    """
    def extract() -> str:
        match = _CODE_PATTERN.search(mail.outbox[-1].body)
        assert match is not None
        return match.group(1)

    return extract
