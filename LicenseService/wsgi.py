"""
WSGI config for LicenseService project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseService.settings.dev")

application = get_wsgi_application()
