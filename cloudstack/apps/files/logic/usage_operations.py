"""Business logic for storage usage summaries."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, final

from django.conf import settings
from django.db.models import Max, QuerySet, Sum  # noqa: WPS347

from cloudstack.apps.accounts.models import User
from cloudstack.apps.files.exceptions import QuotaExceededError
from cloudstack.apps.files.models import File, FileType

logger = logging.getLogger(__name__)

# Default capacity: 2 GiB
_DEFAULT_CAPACITY: Final = 2 * 1024 * 1024 * 1024


@final
@dataclass(slots=True)
class TypeUsage:
    """Bytes used by one type category and its latest change."""

    size: int = 0
    latest_date: datetime | None = None


def _empty_types() -> dict[FileType, TypeUsage]:
    return {file_type: TypeUsage() for file_type in FileType}


@final
@dataclass(slots=True)
class StorageUsage:
    """Usage of the visible files against the fixed capacity."""

    all: int  # noqa: WPS125
    used: int = 0
    types: dict[FileType, TypeUsage] = field(default_factory=_empty_types)

    def get(self, file_type: FileType) -> TypeUsage:
        """Usage of one category."""
        return self.types[file_type]


def get_storage_capacity() -> int:
    """Get the storage capacity in bytes.

    Returns:
        Capacity from settings or default of 2 GiB.
    """
    return getattr(settings, 'STORAGE_CAPACITY_BYTES', _DEFAULT_CAPACITY)


def empty_usage() -> StorageUsage:
    """Zeroed summary reported when usage cannot be computed."""
    return StorageUsage(all=get_storage_capacity())


def summarize_usage(files: QuerySet[File]) -> StorageUsage:
    """Sum sizes per type category and overall.

    ``latest_date`` is the most recent ``updated_at`` within a category.

    Args:
        files: Files to include, typically those visible to a user.

    Returns:
        StorageUsage with every category present.
    """
    summary = empty_usage()
    rows = files.order_by().values('type').annotate(
        total=Sum('size'),
        latest=Max('updated_at'),
    )

    for row in rows:
        if row['type'] not in FileType.values:
            logger.warning('Skipping unknown file type in usage: %s', row['type'])
            continue
        type_usage = summary.get(FileType(row['type']))
        type_usage.size = row['total'] or 0
        type_usage.latest_date = row['latest']
        summary.used += type_usage.size

    return summary


def get_owned_bytes(owner: User) -> int:
    """Total size of the files a user owns.

    Args:
        owner: User to sum sizes for.

    Returns:
        Used bytes.
    """
    return File.objects.filter(owner=owner).aggregate(
        total=Sum('size'),
    )['total'] or 0


def check_capacity(owner: User, size_bytes: int) -> None:
    """Check if the owner has room for an upload.

    Args:
        owner: User uploading the file.
        size_bytes: Size of the upload in bytes.

    Raises:
        QuotaExceededError: If the upload would exceed the capacity.
    """
    capacity = get_storage_capacity()
    used_bytes = get_owned_bytes(owner)

    if used_bytes + size_bytes > capacity:
        logger.warning(
            'Capacity exceeded for user %d: need %d, have %d available',
            owner.pk,
            size_bytes,
            max(0, capacity - used_bytes),
        )
        raise QuotaExceededError(
            quota_bytes=capacity,
            used_bytes=used_bytes,
            required_bytes=size_bytes,
        )
