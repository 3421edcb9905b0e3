"""Template tags for file sizes and the storage usage chart."""

from typing import Any

from django import template

from cloudstack.apps.files.infrastructure.metadata import (
    calculate_percentage,
    convert_file_size,
    format_percentage,
)
from cloudstack.apps.files.logic.usage_operations import (
    StorageUsage,
    get_storage_capacity,
)
from cloudstack.apps.files.models import FileType

register = template.Library()


@register.filter
def file_size(size_bytes: int | None) -> str:
    """Render a byte count such as ``1.5 MB``."""
    return convert_file_size(size_bytes or 0)


@register.inclusion_tag('files/_chart.html')
def storage_chart(used: int) -> dict[str, Any]:
    """Radial usage chart of ``used`` against the storage capacity.

    Args:
        used: Bytes used by the visible files.

    Returns:
        Context for the chart template.
    """
    capacity = get_storage_capacity()
    percentage = calculate_percentage(used, capacity)
    return {
        'used': used,
        'capacity': capacity,
        'percentage': percentage,
        # Clamped for the progress bar only; the label shows the real value
        'bar_percentage': min(percentage, 100),
        'percentage_display': format_percentage(percentage),
    }


@register.simple_tag
def usage_summary(usage: StorageUsage) -> list[dict[str, Any]]:
    """Dashboard cards grouping the type categories.

    Media combines video and audio; its date is the later of the two.

    Args:
        usage: StorageUsage of the visible files.

    Returns:
        Cards with title, size, latest date and list page slug.
    """
    def card(title: str, slug: str, *file_types: FileType) -> dict[str, Any]:
        parts = [usage.get(file_type) for file_type in file_types]
        dates = [part.latest_date for part in parts if part.latest_date]
        return {
            'title': title,
            'slug': slug,
            'size': sum(part.size for part in parts),
            'latest_date': max(dates) if dates else None,
        }

    return [
        card('Documents', 'documents', FileType.DOCUMENT),
        card('Images', 'images', FileType.IMAGE),
        card('Media', 'media', FileType.VIDEO, FileType.AUDIO),
        card('Others', 'others', FileType.OTHER),
    ]
