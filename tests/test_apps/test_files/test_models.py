"""Tests for File model."""

import pytest

from cloudstack.apps.files.models import File, FileCollaborator


@pytest.mark.django_db
class TestFileModel:
    """Tests for File model helpers."""

    def test_users_in_insertion_order(self, user, make_file):
        """Test collaborator emails keep the order they were added."""
        file_instance = make_file(user, users=['b@example.com', 'a@example.com'])

        assert file_instance.users == ['b@example.com', 'a@example.com']

    def test_users_with_prefetch(self, user, make_file):
        """Test prefetched collaborators give the same order."""
        created = make_file(user, users=['b@example.com', 'a@example.com'])
        file_instance = File.objects.prefetch_related('collaborators').get(
            pk=created.pk,
        )

        assert file_instance.users == ['b@example.com', 'a@example.com']

    @pytest.mark.parametrize(('name', 'base'), [
        ('report.pdf', 'report'),
        ('archive.tar.gz', 'archive.tar'),
        ('Makefile', 'Makefile'),
    ])
    def test_get_base_name(self, user, make_file, name, base):
        """Test the stored extension is stripped for the rename dialog."""
        assert make_file(user, name).get_base_name() == base

    def test_str(self, user, make_file):
        """Test string representation."""
        file_instance = make_file(user, 'report.pdf', users=['a@example.com'])
        collaborator = FileCollaborator.objects.get()

        assert str(file_instance) == 'test@example.com:report.pdf'
        assert str(collaborator) == 'a@example.com -> report.pdf'
