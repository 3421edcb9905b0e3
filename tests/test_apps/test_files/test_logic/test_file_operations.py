"""Tests for file operations business logic."""

from unittest.mock import patch

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import DatabaseError, transaction

from cloudstack.apps.files.exceptions import (
    FileAccessDeniedError,
    NoResultsError,
    QuotaExceededError,
)
from cloudstack.apps.files.infrastructure.storage import FileStorage
from cloudstack.apps.files.logic.file_operations import (
    delete_file,
    list_files,
    open_blob,
    parse_sort,
    rename_file,
    update_file_users,
    upload_file,
)
from cloudstack.apps.files.models import File, FileType


@pytest.mark.django_db
class TestUploadFile:
    """Tests for upload_file."""

    def test_upload_file_success(self, user, mock_s3, sample_file_content):
        """Test successful file upload (S3 + DB)."""
        file_instance = upload_file(user, user.account_id, sample_file_content)

        assert file_instance.name == 'report.pdf'
        assert file_instance.type == FileType.DOCUMENT
        assert file_instance.extension == 'pdf'
        assert file_instance.size == len(b'test file content')
        assert file_instance.owner == user
        assert file_instance.account_id == user.account_id
        assert file_instance.users == []
        assert file_instance.url == (
            f'/files/blob/{file_instance.bucket_file_id}/view'
        )
        assert default_storage.list_keys() == [file_instance.bucket_file_id]

    def test_upload_keeps_only_base_name(self, user, mock_s3):
        """Test directory parts of the client file name are dropped."""
        content = ContentFile(b'img', name='photos/holiday.JPG')

        file_instance = upload_file(user, user.account_id, content)

        assert file_instance.name == 'holiday.JPG'
        assert file_instance.type == FileType.IMAGE

    def test_upload_rolls_back_blob_on_db_failure(
        self,
        user,
        mock_s3,
        sample_file_content,
    ):
        """Test the blob is deleted when the document cannot be created."""
        with patch.object(
            File.objects,
            'create',
            side_effect=DatabaseError('write failed'),
        ), pytest.raises(DatabaseError):
            upload_file(user, user.account_id, sample_file_content)

        assert not File.objects.exists()
        assert default_storage.list_keys() == []

    def test_upload_storage_failure_creates_nothing(
        self,
        user,
        mock_s3,
        sample_file_content,
    ):
        """Test a failed blob upload leaves no document."""
        with patch.object(
            FileStorage,
            'save',
            side_effect=OSError('unreachable'),
        ), pytest.raises(OSError):
            upload_file(user, user.account_id, sample_file_content)

        assert not File.objects.exists()

    def test_upload_over_capacity(
        self,
        user,
        mock_s3,
        settings,
        make_file,
        sample_file_content,
    ):
        """Test uploads beyond the capacity are rejected before storage."""
        settings.STORAGE_CAPACITY_BYTES = 110
        make_file(user, size=100)

        with pytest.raises(QuotaExceededError):
            upload_file(user, user.account_id, sample_file_content)

        assert File.objects.count() == 1
        assert default_storage.list_keys() == []


@pytest.mark.django_db
class TestListFiles:
    """Tests for list_files visibility, filtering and sorting."""

    def test_visible_files(self, user, other_user, make_file):
        """Test owned, shared and same-account files are listed."""
        owned = make_file(user, 'mine.pdf')
        shared = make_file(other_user, 'shared.pdf', users=[user.email])
        make_file(other_user, 'private.pdf')

        names = {file_instance.name for file_instance in list_files(user)}

        assert names == {owned.name, shared.name}

    def test_same_account_files_visible(self, user, other_user, make_file):
        """Test files recorded under the user's account are listed."""
        file_instance = make_file(other_user, 'team.pdf')
        File.objects.filter(pk=file_instance.pk).update(
            account_id=user.account_id,
        )

        assert [found.pk for found in list_files(user)] == [file_instance.pk]

    def test_no_duplicates(self, user, make_file):
        """Test a file matching several conditions is listed once."""
        make_file(user, 'mine.pdf', users=[user.email, user.email])

        assert len(list_files(user)) == 1

    def test_type_filter(self, user, make_file):
        """Test only the requested categories are returned."""
        make_file(user, 'report.pdf')
        make_file(user, 'clip.mp4')
        make_file(user, 'song.mp3')

        media = list_files(user, types=[FileType.VIDEO, FileType.AUDIO])

        assert {found.name for found in media} == {'clip.mp4', 'song.mp3'}

    def test_search_is_case_insensitive(self, user, make_file):
        """Test search matches a substring of the name."""
        make_file(user, 'Quarterly Report.pdf')
        make_file(user, 'notes.txt')

        found = list_files(user, search_text='report')

        assert [file_instance.name for file_instance in found] == [
            'Quarterly Report.pdf',
        ]

    @pytest.mark.parametrize(('sort', 'expected'), [
        ('name-asc', ['a.pdf', 'b.pdf', 'c.pdf']),
        ('name-desc', ['c.pdf', 'b.pdf', 'a.pdf']),
        ('size-desc', ['b.pdf', 'c.pdf', 'a.pdf']),
        ('size-asc', ['a.pdf', 'c.pdf', 'b.pdf']),
        ('$createdAt-asc', ['c.pdf', 'a.pdf', 'b.pdf']),
        ('$createdAt-desc', ['b.pdf', 'a.pdf', 'c.pdf']),
    ])
    def test_sorting(self, user, make_file, sort, expected):
        """Test every sort option orders the files."""
        make_file(user, 'c.pdf', size=20)
        make_file(user, 'a.pdf', size=10)
        make_file(user, 'b.pdf', size=30)

        found = list_files(user, sort=sort)

        assert [file_instance.name for file_instance in found] == expected

    def test_unknown_sort_field(self, user, make_file):
        """Test an unknown sort field yields no results."""
        make_file(user)

        with pytest.raises(NoResultsError):
            list_files(user, sort='owner-asc')

    def test_limit(self, user, make_file):
        """Test the limit caps the number of files."""
        for index in range(3):
            make_file(user, f'file{index}.pdf')

        assert len(list_files(user, limit=2)) == 2
        assert len(list_files(user)) == 3

    def test_zero_limit(self, user, make_file):
        """Test a limit of zero returns no files."""
        make_file(user)

        assert list_files(user, limit=0) == []

    def test_empty(self, user):
        """Test listing with no files returns an empty list."""
        assert list_files(user) == []


@pytest.mark.parametrize(('sort', 'expected'), [
    ('name-asc', ('name', 'pk')),
    ('size-desc', ('-size', '-pk')),
    ('$updatedAt-desc', ('-updated_at', '-pk')),
    ('name-sideways', ('name', 'pk')),
    ('name', None),
    ('', None),
])
def test_parse_sort(sort, expected):
    """Test sort tokens translate into ORM ordering."""
    assert parse_sort(sort) == expected


@pytest.mark.django_db
class TestRenameFile:
    """Tests for rename_file."""

    def test_rename_keeps_extension_and_type(self, user, make_file):
        """Test the extension is appended and the type is unchanged."""
        file_instance = make_file(user, 'report.pdf')

        renamed = rename_file(user, file_instance.pk, 'summary', 'pdf')

        assert renamed.name == 'summary.pdf'
        file_instance.refresh_from_db()
        assert file_instance.name == 'summary.pdf'
        assert file_instance.type == FileType.DOCUMENT
        assert file_instance.updated_at >= file_instance.created_at

    def test_collaborator_can_rename(self, user, other_user, make_file):
        """Test a collaborator may rename a shared file."""
        file_instance = make_file(other_user, 'shared.pdf', users=[user.email])

        assert rename_file(user, file_instance.pk, 'mine', 'pdf').name == (
            'mine.pdf'
        )

    def test_stranger_cannot_rename(self, user, other_user, make_file):
        """Test users who cannot see a file cannot rename it."""
        file_instance = make_file(other_user, 'private.pdf')

        with pytest.raises(FileAccessDeniedError):
            rename_file(user, file_instance.pk, 'stolen', 'pdf')

        file_instance.refresh_from_db()
        assert file_instance.name == 'private.pdf'

    def test_missing_file(self, user):
        """Test renaming an unknown file raises DoesNotExist."""
        with pytest.raises(File.DoesNotExist):
            rename_file(user, 99999, 'name', 'pdf')


@pytest.mark.django_db
class TestUpdateFileUsers:
    """Tests for update_file_users."""

    def test_replaces_collaborators(self, user, make_file):
        """Test the new set replaces the old one wholesale."""
        file_instance = make_file(user, users=['a@example.com'])

        updated = update_file_users(
            user,
            file_instance.pk,
            ['b@example.com', 'c@example.com'],
        )

        assert updated.users == ['b@example.com', 'c@example.com']

    def test_duplicates_kept(self, user, make_file):
        """Test duplicate emails are stored as given."""
        file_instance = make_file(user)

        updated = update_file_users(
            user,
            file_instance.pk,
            ['a@example.com', 'a@example.com'],
        )

        assert updated.users == ['a@example.com', 'a@example.com']

    def test_empty_set_removes_all(self, user, make_file):
        """Test an empty set unshares the file."""
        file_instance = make_file(user, users=['a@example.com'])

        assert update_file_users(user, file_instance.pk, []).users == []

    def test_empty_set_revokes_access(self, user, other_user, make_file):
        """Test unsharing hides the file from the former collaborator."""
        file_instance = make_file(user, users=[other_user.email])
        assert len(list_files(other_user)) == 1

        update_file_users(user, file_instance.pk, [])

        assert list_files(other_user) == []

    def test_sharing_grants_visibility(self, user, other_user, make_file):
        """Test a new collaborator sees the file."""
        file_instance = make_file(user)

        update_file_users(user, file_instance.pk, [other_user.email])

        assert [found.pk for found in list_files(other_user)] == [
            file_instance.pk,
        ]


@pytest.mark.django_db
class TestDeleteFile:
    """Tests for delete_file."""

    def test_delete_file_success(
        self,
        user,
        mock_s3,
        sample_file_content,
        django_capture_on_commit_callbacks,
    ):
        """Test successful file deletion (DB + S3)."""
        file_instance = upload_file(user, user.account_id, sample_file_content)

        with django_capture_on_commit_callbacks(execute=True):
            delete_file(user, file_instance.pk, file_instance.bucket_file_id)

        assert not File.objects.filter(pk=file_instance.pk).exists()
        assert default_storage.list_keys() == []

    def test_blob_deleted_exactly_once(
        self,
        user,
        mock_s3,
        make_file,
        django_capture_on_commit_callbacks,
    ):
        """Test the blob delete is issued once per document."""
        file_instance = make_file(user)

        with patch.object(
            FileStorage,
            'delete',
        ) as storage_delete, django_capture_on_commit_callbacks(execute=True):
            delete_file(user, file_instance.pk, file_instance.bucket_file_id)

        storage_delete.assert_called_once_with(file_instance.bucket_file_id)

    def test_blob_failure_keeps_document_deleted(
        self,
        user,
        mock_s3,
        make_file,
        django_capture_on_commit_callbacks,
    ):
        """Test a storage failure after the document delete is swallowed."""
        file_instance = make_file(user)

        with patch.object(
            FileStorage,
            'delete',
            side_effect=OSError('unreachable'),
        ) as storage_delete, django_capture_on_commit_callbacks(execute=True):
            delete_file(user, file_instance.pk, file_instance.bucket_file_id)

        assert not File.objects.filter(pk=file_instance.pk).exists()
        storage_delete.assert_called_once_with(file_instance.bucket_file_id)

    def test_rolled_back_delete_keeps_blob(
        self,
        user,
        mock_s3,
        sample_file_content,
        django_capture_on_commit_callbacks,
    ):
        """Test the blob survives when the document deletion never commits."""
        file_instance = upload_file(user, user.account_id, sample_file_content)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(DatabaseError):
                with transaction.atomic():
                    delete_file(
                        user,
                        file_instance.pk,
                        file_instance.bucket_file_id,
                    )
                    raise DatabaseError('commit failed')

        assert callbacks == []
        assert File.objects.filter(pk=file_instance.pk).exists()
        assert default_storage.list_keys() == [file_instance.bucket_file_id]

    def test_mismatched_blob(self, user, make_file):
        """Test a wrong blob id is reported as not found."""
        file_instance = make_file(user)

        with pytest.raises(File.DoesNotExist):
            delete_file(user, file_instance.pk, 'other-blob')

        assert File.objects.filter(pk=file_instance.pk).exists()

    def test_stranger_cannot_delete(self, user, other_user, make_file):
        """Test users who cannot see a file cannot delete it."""
        file_instance = make_file(other_user)

        with pytest.raises(FileAccessDeniedError):
            delete_file(user, file_instance.pk, file_instance.bucket_file_id)

        assert File.objects.filter(pk=file_instance.pk).exists()

    def test_missing_file(self, user):
        """Test deleting non-existent file."""
        with pytest.raises(File.DoesNotExist):
            delete_file(user, 99999, 'blob')


@pytest.mark.django_db
def test_open_blob(user, other_user, mock_s3, sample_file_content):
    """Test blobs open for visible files only."""
    file_instance = upload_file(user, user.account_id, sample_file_content)

    found, handle = open_blob(user, file_instance.bucket_file_id)

    assert found == file_instance
    assert handle.read() == b'test file content'

    with pytest.raises(FileAccessDeniedError):
        open_blob(other_user, file_instance.bucket_file_id)
