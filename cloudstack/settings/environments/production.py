"""
This file contains all the settings used in production.

This file is required and if development.py is present these
values are overridden.
"""

from cloudstack.settings.components import config

DEBUG = False

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

SECURE_HSTS_SECONDS = config('DJANGO_HSTS_SECONDS', cast=int, default=31536000)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_SSL_REDIRECT = config('DJANGO_SSL_REDIRECT', cast=bool, default=True)
