"""Custom storage backend for S3-compatible blob storage."""

import logging
from datetime import timedelta
from typing import final

from django.utils import timezone
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """S3 storage backend for blob objects.

    Extends django-storages S3Storage with:
    - Compensating deletes for failed document writes
    - Age-aware listing of object keys for orphan reconciliation
    """

    def rollback_upload(self, name: str) -> None:
        """Delete an uploaded blob after its document failed to save.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised. The orphan sweep can remove it later.

        Args:
            name: Object key of the blob to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting blob: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back blob upload: %s', name)
        except Exception:
            logger.exception(
                'Failed to rollback upload, orphaned blob: %s',
                name,
            )

    def list_keys(self, older_than: timedelta | None = None) -> list[str]:
        """List object keys in the bucket.

        Args:
            older_than: Only list objects last modified at least this long
                ago. None lists every object.

        Returns:
            Object keys, in bucket order.
        """
        cutoff = None if older_than is None else timezone.now() - older_than
        return [
            stored_object.key
            for stored_object in self.bucket.objects.all()
            if cutoff is None or stored_object.last_modified <= cutoff
        ]
