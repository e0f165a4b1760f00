"""
Channels consumer for registration status updates.

The owner of a registration connects to
``ws/registrations/<id>/`` and receives ``registration.status``
messages whenever its status or payment status changes.  The current
state is sent right after connecting.
"""
from __future__ import annotations

from typing import Any

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .models import Registration
from .signals import status_payload


class RegistrationStatusConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self) -> None:
        self.registration_id = int(self.scope["url_route"]["kwargs"]["registration_id"])
        self.group_name = f"registration_{self.registration_id}"
        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            await self.close()
            return
        registration = await self._owned_registration(user.id)
        if registration is None:
            await self.close()
            return
        await self.accept()
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.send_json({"type": "registration.status", "registration": status_payload(registration)})

    async def disconnect(self, code: int) -> None:
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def registration_status(self, event: dict[str, Any]) -> None:
        await self.send_json({"type": "registration.status", "registration": event["payload"]})

    @database_sync_to_async
    def _owned_registration(self, user_id: int) -> Registration | None:
        return Registration.objects.filter(pk=self.registration_id, user_id=user_id).first()
