"""Business logic layer for files app.

This module contains the core business logic for file listing, upload,
rename, sharing, deletion, and storage usage.
"""
