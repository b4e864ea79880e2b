"""
WSGI config for fanspot project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fanspot.settings')
application = get_wsgi_application()
