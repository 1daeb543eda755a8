"""
consultation/lifecycle.py

Call lifecycle for consultation rooms:

    EMPTY → JOINING (one occupant) → READY (both, fires ready-to-call once)
          → ACTIVE (answer relayed) → ENDED (terminal, room dropped)

ConsultationHub handles every client event of the consultation socket and
returns an Outcome: the deliveries to make and the ended calls to persist.
It never does I/O, so one bad frame can only ever affect its own room.

Teardown rules:
  * end-call          → call-ended{transcript} to every occupant
  * disconnect/leave  → user-left{role} to the survivor, room dropped
  * a superseded connection (same role re-joined on a new socket)
    disconnecting is a no-op
  * a disconnect hands off the transcript only if something was said
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from .conf import consultation_setting
from .exceptions import MalformedMessageError, NotInRoomError, SignalingError
from .messages import ClientEvent, Delivery, EndedCall, Outcome, ServerEvent
from .registry import SessionRegistry
from .relay import OFFERER, SignalKind, SignalingRelay
from .rooms import Role, RoomCoordinator, room_id_for
from .transcripts import TranscriptAggregator, join_entries

logger = logging.getLogger(__name__)


def _require(message: Dict[str, Any], name: str):
    value = message.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedMessageError(f"{name} is required", name)
    return value


class ConsultationHub:

    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        coordinator: Optional[RoomCoordinator] = None,
        persist_on_disconnect: Optional[bool] = None,
        max_fragment_length: Optional[int] = None,
    ):
        self.registry    = registry or SessionRegistry()
        self.coordinator = coordinator or RoomCoordinator()
        self.relay       = SignalingRelay(self.coordinator)
        self.transcripts = TranscriptAggregator(self.coordinator, max_fragment_length)
        self.persist_on_disconnect = (
            persist_on_disconnect if persist_on_disconnect is not None
            else consultation_setting("PERSIST_TRANSCRIPT_ON_DISCONNECT")
        )

        self._handlers: Dict[str, Callable[[str, Dict[str, Any]], Outcome]] = {
            ClientEvent.REGISTER_PATIENT.value: self.register_patient,
            ClientEvent.INITIATE_CALL.value   : self.initiate_call,
            ClientEvent.JOIN_ROOM.value       : self.join_room,
            ClientEvent.OFFER.value           : self.offer,
            ClientEvent.ANSWER.value          : self.answer,
            ClientEvent.ICE_CANDIDATE.value   : self.ice_candidate,
            ClientEvent.TRANSCRIPT.value      : self.transcript,
            ClientEvent.REQUEST_AI_HINTS.value: self.request_ai_hints,
            ClientEvent.END_CALL.value        : self.end_call,
        }

    # =========================================================================
    # Entry points used by the consumer
    # =========================================================================

    def connect(self, connection_id: str) -> Outcome:
        outcome = Outcome()
        outcome.send(Delivery.to(connection_id, ServerEvent.CONNECTED, {"connectionId": connection_id}))
        return outcome

    def handle(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        """Dispatch one decoded client frame. Never raises SignalingError."""
        event   = message.get("type")
        handler = self._handlers.get(event)
        if handler is None:
            logger.warning("[Call] unknown event %r from conn=%s", event, connection_id)
            return Outcome()

        try:
            return handler(connection_id, message)
        except MalformedMessageError as exc:
            logger.warning("[Call] malformed %s from conn=%s: %s", event, connection_id, exc.message)
            outcome = Outcome()
            outcome.send(Delivery.to(connection_id, ServerEvent.ERROR, {"event": event, "message": exc.message}))
            return outcome
        except SignalingError as exc:
            logger.warning("[Call] %s ignored  conn=%s  %s: %s", event, connection_id, exc.error_code, exc.message)
            return Outcome()

    def disconnect(self, connection_id: str) -> Outcome:
        self.registry.unregister(connection_id)
        return self._depart(connection_id)

    # =========================================================================
    # Call initiation
    # =========================================================================

    def register_patient(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        patient_id = _require(message, "patientId")
        self.registry.register(patient_id, connection_id, message.get("patientName") or "")
        return Outcome()

    def initiate_call(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        appointment_id = _require(message, "appointmentId")
        patient_id     = _require(message, "patientId")
        doctor_name    = message.get("doctorName") or "Doctor"

        outcome = Outcome()
        patient_conn = self.registry.lookup(patient_id)
        if patient_conn is None:
            logger.info("[Call] patient=%s offline  appointment=%s", patient_id, appointment_id)
            outcome.send(Delivery.to(connection_id, ServerEvent.PATIENT_OFFLINE, {"patientId": patient_id}))
            return outcome

        room_id = room_id_for(appointment_id)
        logger.info(
            "[Call] %s calling patient=%s  room=%s  conn=%s",
            doctor_name, patient_id, room_id, patient_conn,
        )
        outcome.send(Delivery.to(patient_conn, ServerEvent.INCOMING_CALL, {
            "appointmentId": appointment_id,
            "doctorName"   : doctor_name,
            "roomId"       : room_id,
        }))
        return outcome

    # =========================================================================
    # Room membership
    # =========================================================================

    def join_room(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        room_id   = str(_require(message, "roomId"))
        role      = Role.parse(_require(message, "role"))
        user_name = message.get("userName") or role.value.capitalize()

        outcome = Outcome()

        # A socket sits in one seat at a time; moving seats is a departure.
        current = self.coordinator.room_of(connection_id)
        if current is not None:
            seat = self.coordinator.get(current).participant(connection_id)
            if current != room_id or seat.role is not role:
                outcome.extend(self._depart(connection_id))

        result = self.coordinator.join(room_id, role, connection_id, user_name)
        room   = result.room

        others = [p.connection_id for p in room.occupants() if p.connection_id != connection_id]
        outcome.send(Delivery.to_all(others, ServerEvent.USER_JOINED, {
            "role"        : role.value,
            "userName"    : user_name,
            "connectionId": connection_id,
        }))

        if result.became_ready:
            logger.info("[Call] ready-to-call  room=%s", room_id)
            outcome.send(Delivery.to_all(
                (p.connection_id for p in room.occupants()),
                ServerEvent.READY_TO_CALL,
                {"roomId": room_id, "offerer": OFFERER.value},
            ))
        return outcome

    # =========================================================================
    # Negotiation relay
    # =========================================================================

    def offer(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        return self._relay(SignalKind.OFFER, connection_id, message)

    def answer(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        outcome = self._relay(SignalKind.ANSWER, connection_id, message)
        if outcome.deliveries:
            self.coordinator.mark_active(str(message["roomId"]))
        return outcome

    def ice_candidate(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        return self._relay(SignalKind.ICE_CANDIDATE, connection_id, message)

    def _relay(self, kind: SignalKind, connection_id: str, message: Dict[str, Any]) -> Outcome:
        room_id = str(_require(message, "roomId"))
        outcome = Outcome()
        outcome.send(self.relay.forward(kind, room_id, message, connection_id))
        return outcome

    # =========================================================================
    # Transcript + AI hints
    # =========================================================================

    def transcript(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        room_id = str(_require(message, "roomId"))
        sender  = self._occupant(room_id, connection_id)
        speaker = message.get("speaker") or sender.display_name

        outcome = Outcome()
        outcome.send(self.transcripts.append(room_id, speaker, message.get("text")))
        return outcome

    def request_ai_hints(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        """Hand the transcript back to the requester; the LLM call happens client-side."""
        room_id = str(_require(message, "roomId"))
        self._occupant(room_id, connection_id)

        outcome = Outcome()
        outcome.send(Delivery.to(connection_id, ServerEvent.AI_HINTS_PROCESSING, {"roomId": room_id}))
        outcome.send(Delivery.to(connection_id, ServerEvent.AI_HINTS_DATA, {
            "transcript"    : self.transcripts.snapshot(room_id),
            "medicalHistory": message.get("medicalHistory") or "",
        }))
        return outcome

    # =========================================================================
    # Teardown
    # =========================================================================

    def end_call(self, connection_id: str, message: Dict[str, Any]) -> Outcome:
        room_id = str(_require(message, "roomId"))
        outcome = Outcome()

        ended = self.coordinator.end(room_id, by=connection_id)
        if ended is None:
            logger.info("[Call] end-call on absent room=%s  (no-op)", room_id)
            return outcome

        transcript = join_entries(ended.transcript)
        outcome.send(Delivery.to_all(
            (p.connection_id for p in ended.occupants()),
            ServerEvent.CALL_ENDED,
            {"roomId": room_id, "transcript": transcript},
        ))
        outcome.ended_calls.append(EndedCall(room_id, transcript, "end-call"))
        logger.info("[Call] call ended  room=%s  entries=%d", room_id, len(ended.transcript))
        return outcome

    def _depart(self, connection_id: str) -> Outcome:
        outcome = Outcome()
        left = self.coordinator.leave(connection_id)
        if left is None:
            return outcome

        room_id = left.room.room_id
        if not left.room_deleted:
            ended = self.coordinator.end(room_id)
            if ended is not None:
                outcome.send(Delivery.to_all(
                    (p.connection_id for p in ended.occupants()),
                    ServerEvent.USER_LEFT,
                    {"role": left.departed.role.value, "userName": left.departed.display_name},
                ))

        # Whatever was said is kept, whichever state the room was in.
        if self.persist_on_disconnect and left.room.transcript:
            outcome.ended_calls.append(EndedCall(room_id, join_entries(left.room.transcript), "disconnect"))

        logger.info(
            "[Call] %s (%s) departed  room=%s  was=%s",
            left.departed.display_name, left.departed.role.value, room_id, left.prior_state.value,
        )
        return outcome

    # =========================================================================

    def _occupant(self, room_id: str, connection_id: str):
        room = self.coordinator.get(room_id)
        participant = room.participant(connection_id)
        if participant is None:
            raise NotInRoomError(room_id, connection_id)
        return participant

    def status(self) -> Dict[str, Any]:
        return {
            "registered_patients": len(self.registry),
            "rooms": [
                {
                    "room_id"   : room.room_id,
                    "state"     : room.state.value,
                    "roles"     : [p.role.value for p in room.occupants()],
                    "transcript_entries": len(room.transcript),
                }
                for room in self.coordinator.rooms()
            ],
        }


# =============================================================================
# Process-wide hub: room and registry state live as long as the server.
# =============================================================================

_hub: Optional[ConsultationHub] = None
_hub_lock = threading.Lock()


def get_hub() -> ConsultationHub:
    global _hub
    with _hub_lock:
        if _hub is None:
            _hub = ConsultationHub()
        return _hub


def reset_hub() -> ConsultationHub:
    global _hub
    with _hub_lock:
        _hub = ConsultationHub()
        return _hub
