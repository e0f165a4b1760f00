"""WebSocket routes for registration status updates."""
from django.urls import re_path

from .consumers import RegistrationStatusConsumer


websocket_urlpatterns = [
    re_path(r"^ws/registrations/(?P<registration_id>\d+)/$", RegistrationStatusConsumer.as_asgi()),
]
