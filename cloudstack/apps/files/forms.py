"""Forms for uploading, renaming, sharing, deleting and sorting files."""

from typing import Final

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from cloudstack.apps.files.logic.file_operations import DEFAULT_SORT

SORT_CHOICES: Final = (
    ('$createdAt-desc', 'Date created (newest)'),
    ('$createdAt-asc', 'Date created (oldest)'),
    ('name-asc', 'Name (A-Z)'),
    ('name-desc', 'Name (Z-A)'),
    ('size-desc', 'Size (Highest)'),
    ('size-asc', 'Size (Lowest)'),
)


class SortForm(forms.Form):
    """Sort and search controls of a file list page."""

    sort = forms.ChoiceField(choices=SORT_CHOICES, required=False)
    query = forms.CharField(
        required=False,
        max_length=255,
        widget=forms.TextInput(attrs={'placeholder': 'Search...'}),
    )

    def get_sort(self) -> str:
        """Selected sort token, or the default when missing or invalid."""
        self.is_valid()
        return self.cleaned_data.get('sort') or DEFAULT_SORT

    def get_query(self) -> str:
        """Search text, stripped."""
        self.is_valid()
        return self.cleaned_data.get('query', '').strip()


class UploadForm(forms.Form):
    """Single file upload."""

    file = forms.FileField()


class RenameForm(forms.Form):
    """New base name; the stored extension is kept."""

    name = forms.CharField(max_length=200)

    def clean_name(self) -> str:
        """Reject a name that is blank after trimming."""
        name = self.cleaned_data['name'].strip()
        if not name:
            raise ValidationError('Name is required')
        return name


class ShareForm(forms.Form):
    """Comma separated emails to add as collaborators."""

    emails = forms.CharField(
        widget=forms.TextInput(attrs={
            'placeholder': 'Enter email address',
        }),
    )

    def clean_emails(self) -> list[str]:
        """Split on commas and validate every address.

        Returns:
            Emails in the order given, blanks dropped.

        Raises:
            ValidationError: If any address is malformed.
        """
        emails = [
            email.strip()
            for email in self.cleaned_data['emails'].split(',')
            if email.strip()
        ]
        if not emails:
            raise ValidationError('Enter at least one email address')
        for email in emails:
            validate_email(email)
        return emails


class RemoveCollaboratorForm(forms.Form):
    """Collaborator to drop from a file."""

    email = forms.EmailField()


class DeleteForm(forms.Form):
    """Confirmation carrying the blob the file is expected to reference."""

    bucket_file_id = forms.CharField(
        max_length=36,
        widget=forms.HiddenInput,
    )
