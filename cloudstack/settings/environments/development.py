"""
This file contains all the settings that defines the development server.

SECURITY WARNING: don't run with debug turned on in production!
"""

from cloudstack.settings.components import config

DEBUG = config('DJANGO_DEBUG', cast=bool, default=True)
