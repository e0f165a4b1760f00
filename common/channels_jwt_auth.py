"""
JWT authentication middleware for Django Channels.

Browsers cannot set an ``Authorization`` header on a WebSocket, so the
token may also be passed as ``?token=<JWT>``.  The token is validated
with SimpleJWT and ``scope['user']`` is populated with the matching
user, or ``AnonymousUser`` when validation fails.
"""

import urllib.parse
from typing import Callable

from channels.auth import AuthMiddlewareStack
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.db import close_old_connections
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken


User = get_user_model()


@database_sync_to_async
def get_user_from_token(token: str):
    try:
        access = AccessToken(token)
        return User.objects.get(pk=access[api_settings.USER_ID_CLAIM])
    except (InvalidToken, TokenError, KeyError, User.DoesNotExist):
        return None


def _token_from_scope(scope) -> str | None:
    headers = dict(scope.get("headers", []))
    auth_header = headers.get(b"authorization", b"").decode()
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    params = urllib.parse.parse_qs(scope.get("query_string", b"").decode())
    return params.get("token", [None])[0]


class _JWTMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        scope["user"] = AnonymousUser()
        token = _token_from_scope(scope)
        if token:
            user = await get_user_from_token(token)
            if user:
                scope["user"] = user

        await database_sync_to_async(close_old_connections)()
        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner: Callable):
    """Entry point for the middleware stack used by Channels routing."""
    return _JWTMiddleware(AuthMiddlewareStack(inner))
