"""Business logic for file operations."""

import logging
import secrets
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import IO, TYPE_CHECKING, BinaryIO, Final

from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models import Q, QuerySet

from cloudstack.apps.accounts.models import User
from cloudstack.apps.files.exceptions import (
    FileAccessDeniedError,
    NoResultsError,
)
from cloudstack.apps.files.infrastructure.metadata import (
    construct_file_url,
    get_file_type,
)
from cloudstack.apps.files.logic.usage_operations import check_capacity
from cloudstack.apps.files.models import File, FileCollaborator

if TYPE_CHECKING:
    from cloudstack.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)

# Blob identifier length in bytes (generates 20 hex chars)
_BLOB_ID_BYTES: Final = 10

DEFAULT_SORT: Final = '$createdAt-desc'

# Sort tokens use the public field names of the file document
_SORT_FIELDS: Final = {
    '$createdAt': 'created_at',
    '$updatedAt': 'updated_at',
    'name': 'name',
    'size': 'size',
}


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def _get_file_size(file_obj: BinaryIO | DjangoFile) -> int:
    """Get file size from file object.

    Args:
        file_obj: File-like object.

    Returns:
        File size in bytes.
    """
    if hasattr(file_obj, 'size'):
        return file_obj.size
    file_size = len(file_obj.read())
    file_obj.seek(0)
    return file_size


def visibility_filter(user: User) -> Q:
    """Files a user may see: owned, same account, or shared with them.

    Args:
        user: Current user.

    Returns:
        Q object combining the three conditions with OR.
    """
    shared_with_user = FileCollaborator.objects.filter(
        email=user.email,
    ).values('file_id')
    return (
        Q(owner=user) |
        Q(account_id=user.account_id) |
        Q(pk__in=shared_with_user)
    )


def visible_files(user: User) -> QuerySet[File]:
    """All files visible to the user.

    Args:
        user: Current user.

    Returns:
        QuerySet of visible File objects.
    """
    return File.objects.filter(visibility_filter(user))


def can_access(user: User, file_instance: File) -> bool:
    """Check whether the user may see and modify a file.

    Args:
        user: Current user.
        file_instance: File to check.

    Returns:
        True for the owner, same-account users, and collaborators.
    """
    return (
        file_instance.owner_id == user.pk or
        file_instance.account_id == user.account_id or
        user.email in file_instance.users
    )


def parse_sort(sort: str) -> tuple[str, str] | None:
    """Turn a ``field-direction`` token into ORM ordering.

    ``desc`` sorts descending, any other direction ascending. A token
    without both parts applies no explicit ordering.

    Args:
        sort: Token such as '$createdAt-desc' or 'name-asc'.

    Returns:
        Ordering expressions (field, then primary key as tiebreaker),
        or None.

    Raises:
        NoResultsError: If the field is not sortable.
    """
    field, _, direction = sort.partition('-')
    if not field or not direction:
        return None

    try:
        db_field = _SORT_FIELDS[field]
    except KeyError as error:
        raise NoResultsError(f'Cannot sort files by {field}') from error

    prefix = '-' if direction == 'desc' else ''
    return f'{prefix}{db_field}', f'{prefix}pk'


def list_files(
    user: User,
    types: Sequence[str] = (),
    sort: str = DEFAULT_SORT,
    search_text: str = '',
    limit: int | None = None,
) -> list[File]:
    """List files visible to the user.

    Args:
        user: Current user.
        types: Type categories to keep; empty keeps all.
        sort: ``field-direction`` sort token.
        search_text: Case-insensitive substring of the name.
        limit: Maximum number of files to return.

    Returns:
        Matching files, possibly empty.

    Raises:
        NoResultsError: If the sort token names an unknown field.
    """
    queryset = visible_files(user)

    if types:
        queryset = queryset.filter(type__in=types)

    if search_text:
        queryset = queryset.filter(name__icontains=search_text)

    ordering = parse_sort(sort)
    if ordering is not None:
        queryset = queryset.order_by(*ordering)

    queryset = queryset.select_related('owner').prefetch_related(
        'collaborators',
    )

    if limit is not None:
        queryset = queryset[:limit]

    logger.debug(
        'Listing files for user %d: types=%s sort=%s search=%r limit=%s',
        user.pk,
        list(types),
        sort,
        search_text,
        limit,
    )
    return list(queryset)


def get_accessible_file(user: User, file_id: int) -> File:
    """Fetch a file the user may modify.

    Args:
        user: Current user.
        file_id: ID of the file.

    Returns:
        File instance.

    Raises:
        File.DoesNotExist: If the file doesn't exist.
        FileAccessDeniedError: If the user cannot see the file.
    """
    file_instance = File.objects.select_related('owner').get(pk=file_id)
    if not can_access(user, file_instance):
        logger.warning(
            'User %d denied access to file %d',
            user.pk,
            file_id,
        )
        raise FileAccessDeniedError('You do not have access to this file')
    return file_instance


def upload_file(
    owner: User,
    account_id: str,
    file_obj: BinaryIO | DjangoFile,
) -> File:
    """Upload bytes to storage and create the file document.

    Transaction safety: Upload to storage first, then create DB record.
    If the DB write fails, the uploaded blob is deleted (compensating
    action, best effort).

    Args:
        owner: Owner of the file.
        account_id: Owner's identity account.
        file_obj: File-like object with a ``name``.

    Returns:
        Created File instance.

    Raises:
        QuotaExceededError: If the upload would exceed the capacity.
        Exception: If upload or DB operation fails.
    """
    filename = Path(file_obj.name or '').name
    file_size = _get_file_size(file_obj)

    check_capacity(owner, file_size)

    storage = _get_storage()
    blob_key = secrets.token_hex(_BLOB_ID_BYTES)

    # Step 1: Upload to storage first
    try:
        logger.info('Uploading blob for file: %s', filename)
        bucket_file_id = storage.save(blob_key, file_obj)
    except Exception:
        logger.exception('Failed to upload blob for file: %s', filename)
        raise

    file_type, extension = get_file_type(filename)

    # Step 2: Create database record (in transaction)
    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                name=filename,
                type=file_type,
                extension=extension,
                size=file_size,
                url=construct_file_url(bucket_file_id),
                owner=owner,
                account_id=account_id,
                bucket_file_id=bucket_file_id,
            )
            logger.info(
                'File record created in database: %s (ID: %d)',
                filename,
                file_instance.id,
            )
            return file_instance
    except Exception:
        # Compensate: delete the blob since the document was not created
        logger.exception(
            'Database transaction failed, rolling back blob upload: %s',
            bucket_file_id,
        )
        storage.rollback_upload(bucket_file_id)
        raise


def rename_file(user: User, file_id: int, name: str, extension: str) -> File:
    """Rename a file to ``name.extension``.

    The type category is left as derived at upload, even if the new
    extension belongs to another category.

    Args:
        user: Current user.
        file_id: ID of the file.
        name: New base name.
        extension: Extension to append.

    Returns:
        Updated File instance.

    Raises:
        File.DoesNotExist: If the file doesn't exist.
        FileAccessDeniedError: If the user cannot see the file.
    """
    file_instance = get_accessible_file(user, file_id)
    new_name = f'{name}.{extension}'

    logger.info(
        'Renaming file %d: %s -> %s',
        file_id,
        file_instance.name,
        new_name,
    )
    file_instance.name = new_name
    file_instance.save(update_fields=['name', 'updated_at'])
    return file_instance


def update_file_users(
    user: User,
    file_id: int,
    emails: Iterable[str],
) -> File:
    """Replace the collaborator set of a file.

    The new set replaces the old one wholesale; pass the full remaining
    set to remove a single collaborator.

    Args:
        user: Current user.
        file_id: ID of the file.
        emails: Complete new collaborator set.

    Returns:
        Updated File instance.

    Raises:
        File.DoesNotExist: If the file doesn't exist.
        FileAccessDeniedError: If the user cannot see the file.
    """
    file_instance = get_accessible_file(user, file_id)
    new_emails = list(emails)

    with transaction.atomic():
        FileCollaborator.objects.filter(file=file_instance).delete()
        FileCollaborator.objects.bulk_create([
            FileCollaborator(file=file_instance, email=email)
            for email in new_emails
        ])
        file_instance.save(update_fields=['updated_at'])

    logger.info(
        'File %d shared with %d collaborators',
        file_id,
        len(new_emails),
    )
    return file_instance


def delete_file(user: User, file_id: int, bucket_file_id: str) -> None:
    """Delete file from database and storage.

    Transaction safety: Delete DB record first. Storage deletion is handled
    by the post_delete signal handler in signals.py.

    Args:
        user: Current user.
        file_id: ID of file to delete.
        bucket_file_id: Blob the caller expects the file to reference.

    Raises:
        File.DoesNotExist: If the file doesn't exist or references
            another blob.
        FileAccessDeniedError: If the user cannot see the file.
    """
    file_instance = get_accessible_file(user, file_id)
    if file_instance.bucket_file_id != bucket_file_id:
        logger.warning(
            'Blob mismatch on delete for file %d: %s',
            file_id,
            bucket_file_id,
        )
        raise File.DoesNotExist('File does not reference the given blob')

    logger.info(
        'Deleting file: ID=%d, blob=%s',
        file_id,
        bucket_file_id,
    )

    try:
        with transaction.atomic():
            file_instance.delete()
            logger.info('File record deleted from database: ID=%d', file_id)
    except Exception:
        logger.exception('Failed to delete file from database: ID=%d', file_id)
        raise


def open_blob(user: User, bucket_file_id: str) -> tuple[File, IO[bytes]]:
    """Open the blob of a visible file for reading.

    Args:
        user: Current user.
        bucket_file_id: Blob identifier.

    Returns:
        The file document and an open binary handle on its blob.

    Raises:
        File.DoesNotExist: If no file references the blob.
        FileAccessDeniedError: If the user cannot see the file.
    """
    file_instance = File.objects.get(bucket_file_id=bucket_file_id)
    if not can_access(user, file_instance):
        raise FileAccessDeniedError('You do not have access to this file')

    return file_instance, _get_storage().open(bucket_file_id, 'rb')
