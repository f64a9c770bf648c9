"""
WSGI config for the farmdesk project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'farmdesk.config.settings')

application = get_wsgi_application()
