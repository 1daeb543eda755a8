"""
consultation/relay.py

Signaling Relay — forwards offer / answer / ICE candidates to the *other*
occupant of a room, never to the sender and never outside the room.
Payloads are opaque; the relay only strips the routing field and stamps
"from". Nothing is queued: a message sent before the counterpart joins is
dropped.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from .exceptions import NegotiationPolicyError, NotInRoomError
from .messages import Delivery
from .rooms import Role, RoomCoordinator

logger = logging.getLogger(__name__)


class SignalKind(str, Enum):
    OFFER         = "offer"
    ANSWER        = "answer"
    ICE_CANDIDATE = "ice-candidate"


# The doctor always creates the offer once ready-to-call fires; the patient
# only answers. ICE candidates flow both ways.
NEGOTIATION_POLICY = {
    Role.DOCTOR : frozenset({SignalKind.OFFER, SignalKind.ICE_CANDIDATE}),
    Role.PATIENT: frozenset({SignalKind.ANSWER, SignalKind.ICE_CANDIDATE}),
}
OFFERER = Role.DOCTOR

_ROUTING_FIELDS = ("type", "roomId")


class SignalingRelay:

    def __init__(self, coordinator: RoomCoordinator):
        self.coordinator = coordinator

    def forward(
        self,
        kind: SignalKind,
        room_id: str,
        payload: Dict[str, Any],
        sender_connection_id: str,
    ) -> Optional[Delivery]:
        """Build the delivery for the counterpart, or None when nobody is there yet.

        Raises UnknownRoomError / NotInRoomError / NegotiationPolicyError.
        """
        room   = self.coordinator.get(room_id)
        sender = room.participant(sender_connection_id)
        if sender is None:
            raise NotInRoomError(room_id, sender_connection_id)
        if kind not in NEGOTIATION_POLICY[sender.role]:
            raise NegotiationPolicyError(kind.value, sender.role.value)

        target = room.other(sender_connection_id)
        if target is None:
            logger.debug("[Relay] %s dropped, no counterpart  room=%s", kind.value, room_id)
            return None

        body = {k: v for k, v in payload.items() if k not in _ROUTING_FIELDS}
        body["from"] = sender_connection_id

        logger.debug(
            "[Relay] %s  %s → %s  room=%s",
            kind.value, sender.role.value, target.role.value, room_id,
        )
        return Delivery.to(target.connection_id, kind, body)
