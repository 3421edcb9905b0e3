"""Metadata derived from file names and sizes."""

import math
import mimetypes
from pathlib import Path
from typing import Final

from django.urls import reverse

from cloudstack.apps.files.models import FileType

_DOCUMENT_EXTENSIONS: Final = frozenset((
    'pdf', 'doc', 'docx', 'txt', 'xls', 'xlsx', 'csv', 'rtf', 'ods', 'ppt',
    'odp', 'md', 'html', 'htm', 'epub', 'pages', 'fig', 'psd', 'ai', 'indd',
    'xd', 'sketch', 'afdesign', 'afphoto',
))
_IMAGE_EXTENSIONS: Final = frozenset((
    'jpg', 'jpeg', 'png', 'gif', 'bmp', 'svg', 'webp',
))
_VIDEO_EXTENSIONS: Final = frozenset(('mp4', 'avi', 'mov', 'mkv', 'webm'))
_AUDIO_EXTENSIONS: Final = frozenset(('mp3', 'wav', 'ogg', 'flac'))

_KIB: Final = 1024


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()


def get_file_type(filename: str) -> tuple[FileType, str]:
    """Derive the type category and extension from a filename.

    Args:
        filename: Filename (e.g., 'holiday.JPG').

    Returns:
        Type category and lowercase extension (e.g., image, 'jpg').
        Files without an extension are ``other`` with an empty extension.
    """
    extension = get_file_extension(filename)

    if extension in _DOCUMENT_EXTENSIONS:
        return FileType.DOCUMENT, extension
    if extension in _IMAGE_EXTENSIONS:
        return FileType.IMAGE, extension
    if extension in _VIDEO_EXTENSIONS:
        return FileType.VIDEO, extension
    if extension in _AUDIO_EXTENSIONS:
        return FileType.AUDIO, extension
    return FileType.OTHER, extension


def detect_mime_type(filename: str) -> str:
    """Guess MIME type from the filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type


def construct_file_url(bucket_file_id: str) -> str:
    """URL that serves a blob inline."""
    return reverse('files:view_blob', kwargs={'bucket_file_id': bucket_file_id})


def construct_download_url(bucket_file_id: str) -> str:
    """URL that serves a blob as an attachment."""
    return reverse(
        'files:download_blob',
        kwargs={'bucket_file_id': bucket_file_id},
    )


def convert_file_size(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 B').
    """
    if size_bytes < _KIB:
        return f'{size_bytes} B'
    if size_bytes < _KIB ** 2:
        return f'{size_bytes / _KIB:.1f} KB'
    if size_bytes < _KIB ** 3:
        return f'{size_bytes / _KIB ** 2:.1f} MB'
    return f'{size_bytes / _KIB ** 3:.1f} GB'


def calculate_percentage(size_bytes: int, capacity_bytes: int) -> float:
    """Share of the capacity used, in percent with two decimals.

    Args:
        size_bytes: Used bytes.
        capacity_bytes: Capacity in bytes.

    Returns:
        Percentage rounded to two decimals; 0 for a zero capacity.
    """
    if capacity_bytes <= 0:
        return 0.0
    return round(size_bytes / capacity_bytes * 100, 2)


def format_percentage(percentage: float) -> str:
    """Render a usage percentage for display.

    Below 1 % two decimals keep the leading zero visible (``0.05%``);
    otherwise the value is floored to a whole number (``37%``).

    Args:
        percentage: Percentage from :func:`calculate_percentage`.

    Returns:
        Display string with a percent sign.
    """
    if percentage < 1:
        return f'{percentage:.2f}%'
    return f'{math.floor(percentage)}%'
