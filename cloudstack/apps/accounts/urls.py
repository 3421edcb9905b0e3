from django.urls import path

from cloudstack.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('sign-in', views.sign_in, name='sign_in'),
    path('sign-up', views.sign_up, name='sign_up'),
    path('verify', views.verify, name='verify'),
    path('verify/cancel', views.cancel_verification, name='cancel_verification'),
    path('resend', views.resend, name='resend'),
    path('sign-out', views.sign_out, name='sign_out'),
]
