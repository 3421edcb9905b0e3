"""Invalidation for cached file list pages.

A single generation number covers every rendered file list. Rendered
grids are stored under a key containing the current generation, so
bumping it makes every cached list of every user unreachable. Any change
to a file or its collaborators can alter what other users see, hence one
generation rather than one per page.
"""

import hashlib
import logging
from typing import Final

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

_GENERATION_KEY: Final = 'files:list-generation'
_PAGE_KEY_PREFIX: Final = 'files:page:'


def get_list_cache_timeout() -> int:
    """Get lifetime of a cached file list page in seconds.

    Returns:
        Timeout from settings or default of 60.
    """
    return getattr(settings, 'FILE_LIST_CACHE_TIMEOUT', 60)


def _get_generation() -> int:
    return cache.get_or_set(_GENERATION_KEY, 1, timeout=None)


def invalidate_file_lists() -> None:
    """Make every cached file list stale."""
    try:
        cache.incr(_GENERATION_KEY)
    except ValueError:
        cache.set(_GENERATION_KEY, 2, timeout=None)


def revalidate_path(path: str) -> None:
    """Invalidate cached listings after a mutation issued from ``path``.

    Args:
        path: Request path the mutation came from, e.g. '/documents'.
    """
    invalidate_file_lists()
    logger.debug('Revalidated file lists after change on %s', path)


def page_cache_key(path: str, user_id: int, query_string: str) -> str:
    """Cache key for a page rendered for one user and query.

    Args:
        path: Request path.
        user_id: Current user's id.
        query_string: Raw query string (sort, search).

    Returns:
        Cache key bound to the current file list generation.
    """
    generation = _get_generation()
    query_digest = hashlib.sha256(query_string.encode()).hexdigest()[:16]
    return f'{_PAGE_KEY_PREFIX}{generation}:{path}:{user_id}:{query_digest}'
