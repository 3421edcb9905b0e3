from django.urls import path, re_path

from cloudstack.apps.files import views

app_name = 'files'

urlpatterns = [
    path('', views.dashboard, name='dashboard'),
    re_path(
        r'^(?P<type_slug>documents|images|media|others)$',
        views.file_list,
        name='file_list',
    ),
    path('files/upload', views.upload, name='upload'),
    path('files/<int:file_id>/rename', views.rename, name='rename'),
    path('files/<int:file_id>/share', views.share, name='share'),
    path(
        'files/<int:file_id>/share/remove',
        views.remove_collaborator,
        name='remove_collaborator',
    ),
    path('files/<int:file_id>/delete', views.delete, name='delete'),
    path('files/<int:file_id>/details', views.details, name='details'),
    path(
        'files/blob/<str:bucket_file_id>/view',
        views.view_blob,
        name='view_blob',
    ),
    path(
        'files/blob/<str:bucket_file_id>/download',
        views.download_blob,
        name='download_blob',
    ),
]
