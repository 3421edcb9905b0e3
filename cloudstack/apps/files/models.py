"""Database models for files app."""

from typing import ClassVar, Final, final

from typing_extensions import override

from django.db import models

from cloudstack.apps.accounts.models import User

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_EXTENSION_MAX_LENGTH: Final = 32
_URL_MAX_LENGTH: Final = 500
_ID_MAX_LENGTH: Final = 36


class FileType(models.TextChoices):
    """Type category derived from the file extension at upload."""

    IMAGE = 'image', 'Image'
    DOCUMENT = 'document', 'Document'
    VIDEO = 'video', 'Video'
    AUDIO = 'audio', 'Audio'
    OTHER = 'other', 'Other'


@final
class File(models.Model):
    """File document paired with a blob object in storage.

    ``owner`` and ``account_id`` are set once at upload. Rename changes
    ``name`` only; sharing changes the collaborator rows only.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    type = models.CharField(  # noqa: WPS125
        max_length=16,
        choices=FileType.choices,
        db_index=True,
    )

    extension = models.CharField(
        max_length=_EXTENSION_MAX_LENGTH,
        blank=True,
    )

    size = models.BigIntegerField(help_text='File size in bytes')

    url = models.CharField(
        max_length=_URL_MAX_LENGTH,
        help_text='URL serving the blob object',
    )

    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    account_id = models.CharField(
        max_length=_ID_MAX_LENGTH,
        db_index=True,
        help_text='Identity account of the owner at upload time',
    )

    bucket_file_id = models.CharField(
        max_length=_ID_MAX_LENGTH,
        unique=True,
        help_text='Blob object identifier in storage',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize recent files queries
            models.Index(
                fields=['owner', '-created_at'],
                name='files_owner_recent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner.email}:{self.name}'

    @property
    def users(self) -> list[str]:
        """Collaborator emails in the order they were added."""
        collaborators = sorted(
            self.collaborators.all(),
            key=lambda collaborator: collaborator.pk,
        )
        return [collaborator.email for collaborator in collaborators]

    def get_base_name(self) -> str:
        """Name without the stored extension.

        Example: 'report.pdf' -> 'report'

        Returns:
            Base name used to prefill the rename dialog.
        """
        suffix = f'.{self.extension}'
        if self.extension and self.name.endswith(suffix):
            return self.name[:-len(suffix)]
        return self.name


@final
class FileCollaborator(models.Model):
    """Email granted access to a file beyond its owner.

    Duplicates are kept as given.
    """

    file = models.ForeignKey(
        File,
        on_delete=models.CASCADE,
        related_name='collaborators',
    )

    email = models.EmailField(db_index=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Collaborator'  # type: ignore[mutable-override]
        verbose_name_plural = 'Collaborators'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.email} -> {self.file.name}'
