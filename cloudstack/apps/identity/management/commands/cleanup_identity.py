"""Management command to purge expired one-time codes and sessions."""

import logging
from typing import Any

from django.core.management.base import BaseCommand
from django.utils import timezone

from cloudstack.apps.identity.logic.identity_operations import cleanup_expired
from cloudstack.apps.identity.models import EmailToken, IdentitySession

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete expired email tokens and identity sessions."""

    help = 'Purge expired one-time codes and identity sessions'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        if options['dry_run']:
            now = timezone.now()
            tokens = EmailToken.objects.filter(expires_at__lte=now).count()
            sessions = IdentitySession.objects.filter(
                expires_at__lte=now,
            ).count()
            self.stdout.write(
                self.style.SUCCESS(
                    f'Would purge {tokens} tokens and {sessions} sessions',
                ),
            )
            return

        tokens, sessions = cleanup_expired()
        logger.info('Identity cleanup finished')
        self.stdout.write(
            self.style.SUCCESS(
                f'Purged {tokens} tokens and {sessions} sessions',
            ),
        )
