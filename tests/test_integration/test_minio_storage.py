"""Integration tests for blob storage against a running MinIO.

These tests need MinIO reachable at ``MINIO_ENDPOINT`` and are skipped
by the default ``-m 'not integration'`` selection.
"""

import os
import secrets
from typing import Final

import boto3
import pytest
from botocore.exceptions import ClientError
from django.core.files.base import ContentFile

from cloudstack.apps.files.infrastructure.storage import FileStorage

_TEST_BUCKET: Final = 'cloudstack-integration'
_TEST_CONTENT: Final = b'Hello from the MinIO integration test!'


@pytest.fixture
def storage() -> FileStorage:
    """FileStorage bound to a MinIO test bucket.

    Returns:
        Storage backend with the bucket created.
    """
    endpoint_url = os.getenv('MINIO_ENDPOINT', 'http://minio:9000')
    access_key = os.getenv('MINIO_ROOT_USER', 'minioadmin')
    secret_key = os.getenv('MINIO_ROOT_PASSWORD', 'minioadmin')

    client = boto3.client(
        's3',
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name='us-east-1',
    )
    try:
        client.head_bucket(Bucket=_TEST_BUCKET)
    except ClientError:
        client.create_bucket(Bucket=_TEST_BUCKET)

    return FileStorage(
        bucket_name=_TEST_BUCKET,
        endpoint_url=endpoint_url,
        access_key=access_key,
        secret_key=secret_key,
        region_name='us-east-1',
        file_overwrite=False,
    )


@pytest.mark.integration
def test_save_open_and_list(storage: FileStorage) -> None:
    """Test a saved blob can be read back and is listed."""
    key = storage.save(secrets.token_hex(10), ContentFile(_TEST_CONTENT))

    with storage.open(key, 'rb') as handle:
        assert handle.read() == _TEST_CONTENT
    assert key in storage.list_keys()

    storage.delete(key)


@pytest.mark.integration
def test_rollback_upload(storage: FileStorage) -> None:
    """Test rolling back removes the blob."""
    key = storage.save(secrets.token_hex(10), ContentFile(_TEST_CONTENT))

    storage.rollback_upload(key)

    assert not storage.exists(key)
