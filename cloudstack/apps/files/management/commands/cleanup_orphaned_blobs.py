"""Management command to delete blobs no file document references."""

import logging
from datetime import timedelta
from typing import Any, Final

from django.core.files.storage import default_storage
from django.core.management.base import BaseCommand

from cloudstack.apps.files.models import File

_DEFAULT_BATCH_SIZE: Final = 1000
# Blobs younger than this may belong to an upload still writing its document
_DEFAULT_MIN_AGE_SECONDS: Final = 3600

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Remove blobs left behind by failed rollbacks or blob deletions."""

    help = 'Delete storage blobs without a matching file document'

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
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max blobs to process (default: {_DEFAULT_BATCH_SIZE})',
        )
        parser.add_argument(
            '--min-age',
            type=int,
            default=_DEFAULT_MIN_AGE_SECONDS,
            help=(
                'Skip blobs modified less than this many seconds ago '
                f'(default: {_DEFAULT_MIN_AGE_SECONDS})'
            ),
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        min_age = timedelta(seconds=options['min_age'])

        referenced = set(File.objects.values_list('bucket_file_id', flat=True))
        orphans = [
            key
            for key in default_storage.list_keys(older_than=min_age)
            if key not in referenced
        ][:batch_size]

        self.stdout.write(f'Found {len(orphans)} orphaned blobs')

        count = 0
        failed = 0

        for key in orphans:
            if dry_run:
                self.stdout.write(f'Would delete: {key}')
                count += 1
                continue

            try:
                default_storage.delete(key)
                count += 1
                logger.info('Deleted orphaned blob: %s', key)
            except Exception as exc:
                self.stderr.write(f'Failed to delete {key}: {exc}')
                logger.exception('Failed to delete orphaned blob: %s', key)
                failed += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would delete {count} orphaned blobs'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Deleted {count} orphaned blobs, {failed} failed',
                ),
            )
