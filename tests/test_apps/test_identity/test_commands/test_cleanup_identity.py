"""Tests for cleanup_identity management command."""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from cloudstack.apps.identity.logic.identity_operations import (
    get_or_create_account,
)
from cloudstack.apps.identity.models import EmailToken, IdentitySession


@pytest.fixture
def expired_records(db):
    """One expired token and one expired session."""
    account = get_or_create_account('old@example.com')
    past = timezone.now() - timedelta(hours=1)
    EmailToken.objects.create(account=account, secret_hash='x', expires_at=past)
    IdentitySession.objects.create(
        account=account,
        session_id='old',
        secret='old-secret',
        expires_at=past,
    )


@pytest.mark.django_db
class TestCleanupIdentityCommand:
    """Tests for cleanup_identity management command."""

    def test_purges_expired(self, expired_records):
        """Test expired records are deleted."""
        out = StringIO()
        call_command('cleanup_identity', stdout=out)

        assert not EmailToken.objects.exists()
        assert not IdentitySession.objects.exists()
        assert 'Purged 1 tokens and 1 sessions' in out.getvalue()

    def test_dry_run_keeps_records(self, expired_records):
        """Test dry run only reports."""
        out = StringIO()
        call_command('cleanup_identity', '--dry-run', stdout=out)

        assert EmailToken.objects.count() == 1
        assert IdentitySession.objects.count() == 1
        assert 'Would purge 1 tokens and 1 sessions' in out.getvalue()
