"""
ASGI config for the samacarnet project.

Only HTTP is served; there are no websocket routes.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "samacarnet.settings")

application = get_asgi_application()
