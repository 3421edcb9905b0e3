"""Server actions for files.

Every action resolves the current user from the session cookie first and
returns an :class:`ActionResult`. Mutations invalidate the cached file
list rendered for ``path``.
"""

from collections.abc import Iterable, Sequence
from typing import IO, Any, BinaryIO

from django.core.files.base import File as DjangoFile
from django.http import HttpRequest

from cloudstack.apps.accounts.logic.user_operations import require_current_user
from cloudstack.apps.files.exceptions import FileAccessDeniedError
from cloudstack.apps.files.infrastructure.cache import revalidate_path
from cloudstack.apps.files.logic import file_operations, usage_operations
from cloudstack.apps.files.logic.usage_operations import StorageUsage
from cloudstack.apps.files.models import File
from cloudstack.results import ActionResult, server_action


@server_action
def upload_file(
    request: HttpRequest,
    *,
    file_obj: BinaryIO | DjangoFile,
    owner_id: int,
    account_id: str,
    path: str,
) -> ActionResult[File]:
    """Store a file's bytes and create its document.

    Args:
        request: Incoming request.
        file_obj: Uploaded file.
        owner_id: User record that will own the file.
        account_id: Identity account of the owner.
        path: Page to revalidate.

    Returns:
        Result carrying the created file.
    """
    user = require_current_user(request)
    if owner_id != user.pk or account_id != user.account_id:
        raise FileAccessDeniedError('Files can only be uploaded for yourself')

    file_instance = file_operations.upload_file(user, account_id, file_obj)
    revalidate_path(path)
    return ActionResult.success(file_instance)


@server_action
def get_files(
    request: HttpRequest,
    *,
    types: Sequence[str] = (),
    sort: str = file_operations.DEFAULT_SORT,
    search_text: str = '',
    limit: int | None = None,
) -> ActionResult[list[File]]:
    """List the files visible to the current user.

    Args:
        request: Incoming request.
        types: Type categories to keep; empty keeps all.
        sort: ``field-direction`` sort token.
        search_text: Substring of the file name.
        limit: Maximum number of files.

    Returns:
        Result carrying the files, possibly empty.
    """
    user = require_current_user(request)
    files = file_operations.list_files(
        user,
        types=types,
        sort=sort,
        search_text=search_text,
        limit=limit,
    )
    return ActionResult.success(files)


@server_action
def get_file(request: HttpRequest, *, file_id: int) -> ActionResult[File]:
    """Fetch one file the current user may act on."""
    user = require_current_user(request)
    return ActionResult.success(
        file_operations.get_accessible_file(user, file_id),
    )


@server_action
def rename_file(
    request: HttpRequest,
    *,
    file_id: int,
    name: str,
    extension: str,
    path: str,
) -> ActionResult[File]:
    """Rename a file to ``name.extension``.

    Args:
        request: Incoming request.
        file_id: File to rename.
        name: New base name.
        extension: Extension to keep.
        path: Page to revalidate.

    Returns:
        Result carrying the updated file.
    """
    user = require_current_user(request)
    file_instance = file_operations.rename_file(user, file_id, name, extension)
    revalidate_path(path)
    return ActionResult.success(file_instance)


@server_action
def update_file_users(
    request: HttpRequest,
    *,
    file_id: int,
    emails: Iterable[str],
    path: str,
) -> ActionResult[File]:
    """Replace the collaborator set of a file.

    Args:
        request: Incoming request.
        file_id: File to share.
        emails: Complete new collaborator set.
        path: Page to revalidate.

    Returns:
        Result carrying the updated file.
    """
    user = require_current_user(request)
    file_instance = file_operations.update_file_users(user, file_id, emails)
    revalidate_path(path)
    return ActionResult.success(file_instance)


@server_action
def delete_file(
    request: HttpRequest,
    *,
    file_id: int,
    bucket_file_id: str,
    path: str,
) -> ActionResult[dict[str, str]]:
    """Delete a file document, then its blob.

    Args:
        request: Incoming request.
        file_id: File to delete.
        bucket_file_id: Blob the file references.
        path: Page to revalidate.

    Returns:
        Result carrying ``{'status': 'success'}``.
    """
    user = require_current_user(request)
    file_operations.delete_file(user, file_id, bucket_file_id)
    revalidate_path(path)
    return ActionResult.success({'status': 'success'})


@server_action
def _summarize_space_used(request: HttpRequest) -> ActionResult[StorageUsage]:
    user = require_current_user(request)
    return ActionResult.success(
        usage_operations.summarize_usage(file_operations.visible_files(user)),
    )


def get_total_space_used(request: HttpRequest) -> ActionResult[StorageUsage]:
    """Summarize storage usage of the files visible to the current user.

    A failed result still carries a zeroed summary so the dashboard can
    render.

    Args:
        request: Incoming request.

    Returns:
        Result carrying the usage summary.
    """
    result = _summarize_space_used(request)
    if result.ok:
        return result
    return ActionResult.failure(
        result.error,  # type: ignore[arg-type]
        result.message,
        value=usage_operations.empty_usage(),
    )


@server_action
def open_blob(
    request: HttpRequest,
    *,
    bucket_file_id: str,
) -> ActionResult[tuple[File, IO[Any]]]:
    """Open a visible file's blob for streaming."""
    user = require_current_user(request)
    return ActionResult.success(
        file_operations.open_blob(user, bucket_file_id),
    )
