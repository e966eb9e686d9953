import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "FitTrackApi.settings")

application = get_asgi_application()
