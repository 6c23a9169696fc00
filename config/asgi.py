"""ASGI entry point for the CebuGo API.

Served by uvicorn or daphne; the API itself is synchronous, so this only
matters for deployments standardised on ASGI servers.
"""

import os
from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
