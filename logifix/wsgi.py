"""
WSGI config for the LogiFix project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'logifix.settings')

application = get_wsgi_application()
