"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from cloudstack.apps.files.infrastructure.metadata import convert_file_size
from cloudstack.apps.files.models import File, FileCollaborator


class FileCollaboratorInline(admin.TabularInline[FileCollaborator, File]):
    """Collaborator emails edited alongside their file."""

    model = FileCollaborator
    extra = 0


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'name',
        'type',
        'owner',
        'size_display',
        'created_at',
        'updated_at',
    ]

    list_filter = [
        'type',
        'created_at',
    ]

    search_fields = [
        'name',
        'owner__email',
        'bucket_file_id',
    ]

    readonly_fields = [
        'type',
        'extension',
        'size',
        'url',
        'account_id',
        'bucket_file_id',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'owner', 'account_id'),
        }),
        ('Metadata', {
            'fields': ('type', 'extension', 'size'),
        }),
        ('Storage', {
            'fields': ('bucket_file_id', 'url'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    inlines = [FileCollaboratorInline]

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 B').
        """
        return convert_file_size(obj.size)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('owner')
