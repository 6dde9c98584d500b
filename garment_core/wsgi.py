"""
WSGI config for the garment dispatch service.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'garment_core.settings')

application = get_wsgi_application()
