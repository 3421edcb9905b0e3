"""Tests for the S3 blob storage backend."""

from datetime import timedelta
from unittest.mock import patch

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from storages.backends.s3 import S3Storage


def test_save_and_list_keys(mock_s3):
    """Test saved blobs are listed by key."""
    default_storage.save('blob-one', ContentFile(b'one'))
    default_storage.save('blob-two', ContentFile(b'two'))

    assert sorted(default_storage.list_keys()) == ['blob-one', 'blob-two']


def test_list_keys_older_than(mock_s3):
    """Test age filtering skips recently written blobs."""
    default_storage.save('blob-one', ContentFile(b'one'))

    assert default_storage.list_keys(older_than=timedelta(hours=1)) == []
    assert default_storage.list_keys(older_than=timedelta(0)) == ['blob-one']


def test_rollback_upload_deletes_blob(mock_s3):
    """Test rolling back removes the uploaded blob."""
    default_storage.save('blob-one', ContentFile(b'one'))

    default_storage.rollback_upload('blob-one')

    assert default_storage.list_keys() == []


def test_rollback_upload_swallows_errors(mock_s3):
    """Test a failed rollback is logged, not raised."""
    with patch.object(
        S3Storage,
        'delete',
        side_effect=OSError('unreachable'),
    ):
        default_storage.rollback_upload('blob-one')
