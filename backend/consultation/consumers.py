"""
consultation/consumers.py

ConsultationConsumer — one websocket per logged-in doctor or patient tab.

The socket lives for the whole session, not just one call: the patient
registers on login so a doctor can ring them, then the same socket joins
the consultation room, relays WebRTC negotiation and live captions, and
finally ends the call. Audio itself flows peer-to-peer.

Wire protocol (JSON text frames, both directions):
  { "type": "join-room", "roomId": "consultation-99", "role": "doctor", "userName": "Dr. X" }
  { "type": "offer",     "roomId": "consultation-99", "offer": {...} }
  → { "type": "offer", "offer": {...}, "from": "<connection id>" }

The connection id is the Channels channel name, so a delivery to another
participant is a plain channel_layer.send() to that name.
"""

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from . import services
from .lifecycle import get_hub
from .messages import EndedCall, Outcome

logger = logging.getLogger(__name__)


class ConsultationConsumer(AsyncWebsocketConsumer):

    # Tests swap in a private hub.
    hub = None

    def get_hub(self):
        return self.hub or get_hub()

    async def connect(self):
        self.connection_id = self.channel_name
        await self.accept()
        logger.info("[Socket] conn=%s connected", self.connection_id)
        await self._dispatch(self.get_hub().connect(self.connection_id))

    async def disconnect(self, close_code):
        logger.info("[Socket] conn=%s disconnected  code=%s", self.connection_id, close_code)
        await self._dispatch(self.get_hub().disconnect(self.connection_id))

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except ValueError:
            logger.warning("[Socket] conn=%s sent a non-JSON frame", self.connection_id)
            return
        if not isinstance(data, dict):
            return

        await self._dispatch(self.get_hub().handle(self.connection_id, data))

    # ── Fan-out ───────────────────────────────────────────────────────────────

    async def _dispatch(self, outcome: Outcome):
        # Transcript is saved before anyone is told the call ended.
        for ended in outcome.ended_calls:
            await self._persist(ended)

        for delivery in outcome.deliveries:
            frame = delivery.frame()
            for target in delivery.targets:
                if target == self.channel_name:
                    await self.send(text_data=json.dumps(frame))
                else:
                    await self.channel_layer.send(target, {"type": "signal.deliver", "frame": frame})

    async def signal_deliver(self, event):
        await self.send(text_data=json.dumps(event["frame"]))

    async def _persist(self, ended: EndedCall):
        # Terminal frames go out even when storage fails.
        try:
            await database_sync_to_async(services.record_call_ended)(
                ended.room_id, ended.transcript, ended.reason,
            )
        except Exception:
            logger.exception("[Socket] failed to persist transcript  room=%s  reason=%s", ended.room_id, ended.reason)
