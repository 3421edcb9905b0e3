"""File storage and usage settings."""

from cloudstack.settings.components import config

# Storage ceiling reported by the usage summary, 2 GiB by default
STORAGE_CAPACITY_BYTES = config(
    'STORAGE_CAPACITY_BYTES',
    cast=int,
    default=2 * 1024 * 1024 * 1024,
)

# Seconds a rendered file list stays cached unless a file change clears it
FILE_LIST_CACHE_TIMEOUT = config(
    'FILE_LIST_CACHE_TIMEOUT',
    cast=int,
    default=60,
)
