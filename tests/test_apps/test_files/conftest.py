"""Shared fixtures for files app tests."""

import secrets

import pytest

from cloudstack.apps.files.infrastructure.metadata import get_file_type
from cloudstack.apps.files.models import File, FileCollaborator


@pytest.fixture
def make_file(db):
    """Create File documents without touching storage.

    Returns:
        Callable creating a File for an owner.
    """
    def create(owner, name='report.pdf', size=100, *, users=()):
        file_type, extension = get_file_type(name)
        bucket_file_id = secrets.token_hex(10)
        file_instance = File.objects.create(
            name=name,
            type=file_type,
            extension=extension,
            size=size,
            url=f'/files/blob/{bucket_file_id}/view',
            owner=owner,
            account_id=owner.account_id,
            bucket_file_id=bucket_file_id,
        )
        FileCollaborator.objects.bulk_create([
            FileCollaborator(file=file_instance, email=email)
            for email in users
        ])
        return file_instance

    return create
