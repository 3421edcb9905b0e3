"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Custom storage backend for blob objects (S3/MinIO)
- Metadata derived from file names (type category, extension, MIME type)
- Invalidation of cached file list pages

Keep infrastructure concerns separate from business logic.
"""
