"""Views for the dashboard, type pages, file dialogs and blob delivery."""

import logging
from typing import Any, Final
from urllib.parse import urlencode, urlsplit

from django.contrib import messages
from django.core.cache import cache
from django.http import (
    FileResponse,
    Http404,
    HttpRequest,
    HttpResponse,
)
from django.shortcuts import redirect, render
from django.template.loader import render_to_string
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from cloudstack.apps.accounts.decorators import session_required
from cloudstack.apps.files import actions
from cloudstack.apps.files.forms import (
    DeleteForm,
    SortForm,
    RemoveCollaboratorForm,
    RenameForm,
    ShareForm,
    UploadForm,
)
from cloudstack.apps.files.infrastructure.cache import (
    get_list_cache_timeout,
    page_cache_key,
)
from cloudstack.apps.files.infrastructure.metadata import detect_mime_type
from cloudstack.apps.files.models import File, FileType
from cloudstack.results import ErrorKind

logger = logging.getLogger(__name__)

# Page slug -> (title, type categories)
TYPE_PAGES: Final = {
    'documents': ('Documents', (FileType.DOCUMENT,)),
    'images': ('Images', (FileType.IMAGE,)),
    'media': ('Media', (FileType.VIDEO, FileType.AUDIO)),
    'others': ('Others', (FileType.OTHER,)),
}

_RECENT_FILES_LIMIT: Final = 10
_NEXT_FIELD: Final = 'next'


def _get_return_url(request: HttpRequest) -> str:
    """Page to go back to after a dialog, restricted to this host."""
    next_url = request.POST.get(_NEXT_FIELD) or request.GET.get(_NEXT_FIELD)
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    return reverse('files:dashboard')


def _revalidation_path(return_url: str) -> str:
    return urlsplit(return_url).path


def _load_file(request: HttpRequest, file_id: int) -> File:
    result = actions.get_file(request, file_id=file_id)
    if not result.ok:
        raise Http404(result.message)
    return result.value


def _render_dialog(
    request: HttpRequest,
    template_name: str,
    file_instance: File,
    **context: Any,
) -> HttpResponse:
    context.update({
        'file': file_instance,
        'next': _get_return_url(request),
    })
    return render(request, template_name, context)


@require_GET
@session_required
def dashboard(request: HttpRequest) -> HttpResponse:
    """Usage chart, per-type summary, and the most recent files."""
    usage_result = actions.get_total_space_used(request)
    if not usage_result.ok:
        messages.error(request, usage_result.message)

    files_result = actions.get_files(request, limit=_RECENT_FILES_LIMIT)
    if not files_result.ok:
        messages.error(request, files_result.message)

    return render(request, 'files/dashboard.html', {
        'usage': usage_result.value,
        'recent_files': files_result.value or [],
        'upload_form': UploadForm(),
    })


@require_GET
@session_required
def file_list(request: HttpRequest, type_slug: str) -> HttpResponse:
    """Files of one type page, sorted and filtered by the query string.

    The rendered grid is cached per path, user and query until any file
    or its sharing changes.
    """
    title, types = TYPE_PAGES[type_slug]
    query_form = SortForm(request.GET)
    cache_key = page_cache_key(
        request.path,
        request.current_user.pk,  # type: ignore[attr-defined]
        request.GET.urlencode(),
    )

    grid_html = cache.get(cache_key)
    if grid_html is None:
        result = actions.get_files(
            request,
            types=types,
            sort=query_form.get_sort(),
            search_text=query_form.get_query(),
        )
        files = result.value or []
        grid_html = render_to_string('files/_file_grid.html', {
            'files': files,
            'total_size': sum(file_instance.size for file_instance in files),
            'next': request.get_full_path(),
        }, request=request)
        if result.ok:
            cache.set(cache_key, grid_html, get_list_cache_timeout())
        else:
            messages.error(request, result.message)

    return render(request, 'files/file_list.html', {
        'title': title,
        'type_slug': type_slug,
        'query_form': query_form,
        'grid_html': grid_html,
        'upload_form': UploadForm(),
    })


@require_POST
@session_required
def upload(request: HttpRequest) -> HttpResponse:
    """Upload a single file and go back to the page it was sent from."""
    return_url = _get_return_url(request)
    form = UploadForm(request.POST, request.FILES)
    if not form.is_valid():
        messages.error(request, 'Select a file to upload')
        return redirect(return_url)

    user = request.current_user  # type: ignore[attr-defined]
    uploaded = form.cleaned_data['file']
    result = actions.upload_file(
        request,
        file_obj=uploaded,
        owner_id=user.pk,
        account_id=user.account_id,
        path=_revalidation_path(return_url),
    )
    if result.ok:
        messages.success(request, f'{uploaded.name} uploaded')
    elif result.error is ErrorKind.QUOTA_EXCEEDED:
        messages.error(
            request,
            f'{uploaded.name} is too large for the remaining storage',
        )
    else:
        messages.error(request, f'Failed to upload {uploaded.name}')
    return redirect(return_url)


@require_http_methods(['GET', 'POST'])
@session_required
def rename(request: HttpRequest, file_id: int) -> HttpResponse:
    """Rename dialog, prefilled with the name minus its extension."""
    file_instance = _load_file(request, file_id)
    if request.method != 'POST':
        form = RenameForm(initial={'name': file_instance.get_base_name()})
        return _render_dialog(request, 'files/rename.html', file_instance, form=form)

    form = RenameForm(request.POST)
    if form.is_valid():
        return_url = _get_return_url(request)
        result = actions.rename_file(
            request,
            file_id=file_id,
            name=form.cleaned_data['name'],
            extension=file_instance.extension,
            path=_revalidation_path(return_url),
        )
        if result.ok:
            return redirect(return_url)
        messages.error(request, result.message)

    return _render_dialog(request, 'files/rename.html', file_instance, form=form)


@require_http_methods(['GET', 'POST'])
@session_required
def share(request: HttpRequest, file_id: int) -> HttpResponse:
    """Share dialog listing collaborators and adding new ones."""
    file_instance = _load_file(request, file_id)
    if request.method != 'POST':
        return _render_dialog(
            request,
            'files/share.html',
            file_instance,
            form=ShareForm(),
        )

    form = ShareForm(request.POST)
    if form.is_valid():
        return_url = _get_return_url(request)
        emails = file_instance.users + [
            email
            for email in form.cleaned_data['emails']
            if email not in file_instance.users
        ]
        result = actions.update_file_users(
            request,
            file_id=file_id,
            emails=emails,
            path=_revalidation_path(return_url),
        )
        if result.ok:
            return redirect(return_url)
        messages.error(request, result.message)

    return _render_dialog(request, 'files/share.html', file_instance, form=form)


@require_POST
@session_required
def remove_collaborator(request: HttpRequest, file_id: int) -> HttpResponse:
    """Drop one email and store the remaining collaborator set."""
    file_instance = _load_file(request, file_id)
    form = RemoveCollaboratorForm(request.POST)
    if form.is_valid():
        removed = form.cleaned_data['email']
        result = actions.update_file_users(
            request,
            file_id=file_id,
            emails=[email for email in file_instance.users if email != removed],
            path=_revalidation_path(_get_return_url(request)),
        )
        if not result.ok:
            messages.error(request, result.message)

    share_url = reverse('files:share', kwargs={'file_id': file_id})
    query = urlencode({_NEXT_FIELD: _get_return_url(request)})
    return redirect(f'{share_url}?{query}')


@require_http_methods(['GET', 'POST'])
@session_required
def delete(request: HttpRequest, file_id: int) -> HttpResponse:
    """Delete confirmation dialog."""
    file_instance = _load_file(request, file_id)
    if request.method != 'POST':
        form = DeleteForm(initial={'bucket_file_id': file_instance.bucket_file_id})
        return _render_dialog(request, 'files/delete.html', file_instance, form=form)

    form = DeleteForm(request.POST)
    if form.is_valid():
        return_url = _get_return_url(request)
        result = actions.delete_file(
            request,
            file_id=file_id,
            bucket_file_id=form.cleaned_data['bucket_file_id'],
            path=_revalidation_path(return_url),
        )
        if result.ok:
            messages.success(request, f'{file_instance.name} deleted')
            return redirect(return_url)
        messages.error(request, result.message)

    return _render_dialog(request, 'files/delete.html', file_instance, form=form)


@require_GET
@session_required
def details(request: HttpRequest, file_id: int) -> HttpResponse:
    """Read-only details of a file."""
    file_instance = _load_file(request, file_id)
    return _render_dialog(request, 'files/details.html', file_instance)


def _serve_blob(
    request: HttpRequest,
    bucket_file_id: str,
    *,
    as_attachment: bool,
) -> HttpResponse:
    result = actions.open_blob(request, bucket_file_id=bucket_file_id)
    if result.error in {ErrorKind.NOT_FOUND, ErrorKind.PERMISSION_DENIED}:
        raise Http404('File not found')
    if not result.ok:
        logger.warning('Blob %s unavailable: %s', bucket_file_id, result.message)
        return HttpResponse('Storage is unavailable', status=503)

    file_instance, handle = result.value
    return FileResponse(
        handle,
        as_attachment=as_attachment,
        filename=file_instance.name,
        content_type=detect_mime_type(file_instance.name),
    )


@require_GET
@session_required
def view_blob(request: HttpRequest, bucket_file_id: str) -> HttpResponse:
    """Serve a blob inline (thumbnails, open in new tab)."""
    return _serve_blob(request, bucket_file_id, as_attachment=False)


@require_GET
@session_required
def download_blob(request: HttpRequest, bucket_file_id: str) -> HttpResponse:
    """Serve a blob as a download under the file's name."""
    return _serve_blob(request, bucket_file_id, as_attachment=True)
