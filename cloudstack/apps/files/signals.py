"""Signal handlers for files app."""

import logging

from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from cloudstack.apps.files.infrastructure.cache import invalidate_file_lists
from cloudstack.apps.files.models import File, FileCollaborator

logger = logging.getLogger(__name__)


def _delete_blob(bucket_file_id: str) -> None:
    logger.info(
        'Deleting blob from storage after DB delete: %s',
        bucket_file_id,
    )
    try:
        default_storage.delete(bucket_file_id)
    except Exception:
        # DB delete already committed
        logger.exception(
            'Failed to delete blob from storage (orphaned): %s',
            bucket_file_id,
        )


@receiver(post_delete, sender=File)
def delete_blob_from_storage(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Delete the blob once the deletion of its File document commits.

    Runs for every document deletion (actions, admin, ORM). A rolled back
    deletion leaves the blob in place. A storage failure is logged only;
    the blob is left for ``cleanup_orphaned_blobs``.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        **kwargs: Additional signal arguments.
    """
    bucket_file_id = instance.bucket_file_id
    transaction.on_commit(lambda: _delete_blob(bucket_file_id))


@receiver(post_save, sender=File)
@receiver(post_delete, sender=File)
@receiver(post_save, sender=FileCollaborator)
@receiver(post_delete, sender=FileCollaborator)
def invalidate_cached_lists(sender: type, **kwargs: object) -> None:
    """Drop cached file lists whenever a file or its sharing changes."""
    invalidate_file_lists()
