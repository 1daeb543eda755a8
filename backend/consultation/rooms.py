"""
consultation/rooms.py

Room Coordinator — which doctor and which patient are in which call.

A room is keyed by "consultation-<appointment id>" so both sides compute the
same id without a discovery step. It holds at most one doctor and one
patient; a join in an occupied role replaces the previous occupant (the old
one is a superseded reconnect). The coordinator is the only writer of the
room table; relay and transcript code read snapshots.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .conf import consultation_setting
from .exceptions import MalformedMessageError, NotInRoomError, UnknownRoomError

logger = logging.getLogger(__name__)

# Appointment primary keys are BigAutoField (signed 64-bit).
MAX_APPOINTMENT_ID = 2 ** 63 - 1


class Role(str, Enum):
    DOCTOR  = "doctor"
    PATIENT = "patient"

    @classmethod
    def parse(cls, value) -> "Role":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise MalformedMessageError(
                f"Invalid role {value!r}. Must be one of: {[r.value for r in cls]}", "role"
            ) from None


class CallState(str, Enum):
    EMPTY   = "empty"
    JOINING = "joining"     # one occupant
    READY   = "ready"       # both occupants, no answer yet
    ACTIVE  = "active"      # answer relayed, media assumed flowing
    ENDED   = "ended"       # terminal


@dataclass(frozen=True)
class Participant:
    connection_id: str
    role         : Role
    display_name : str


@dataclass(frozen=True)
class TranscriptEntry:
    speaker  : str
    text     : str
    timestamp: datetime

    def as_line(self) -> str:
        return f"{self.speaker}: {self.text}"


@dataclass
class Room:
    room_id   : str
    doctor    : Optional[Participant] = None
    patient   : Optional[Participant] = None
    transcript: List[TranscriptEntry] = field(default_factory=list)
    state     : CallState = CallState.EMPTY

    def occupant(self, role: Role) -> Optional[Participant]:
        return self.doctor if role is Role.DOCTOR else self.patient

    def occupants(self) -> List[Participant]:
        return [p for p in (self.doctor, self.patient) if p is not None]

    def participant(self, connection_id: str) -> Optional[Participant]:
        for p in self.occupants():
            if p.connection_id == connection_id:
                return p
        return None

    def other(self, connection_id: str) -> Optional[Participant]:
        """The occupant on the far side of this connection, if any."""
        for p in self.occupants():
            if p.connection_id != connection_id:
                return p
        return None

    @property
    def is_empty(self) -> bool:
        return self.doctor is None and self.patient is None

    @property
    def is_full(self) -> bool:
        return self.doctor is not None and self.patient is not None

    def snapshot(self) -> "Room":
        return replace(self, transcript=list(self.transcript))


@dataclass(frozen=True)
class JoinResult:
    room        : Room
    became_ready: bool
    replaced    : Optional[Participant] = None


@dataclass(frozen=True)
class LeaveResult:
    room        : Room              # post-leave snapshot
    departed    : Participant
    prior_state : CallState
    room_deleted: bool


def room_id_for(appointment_id) -> str:
    return f"{consultation_setting('ROOM_PREFIX')}{appointment_id}"


def appointment_id_from(room_id: str) -> Optional[int]:
    prefix = consultation_setting("ROOM_PREFIX")
    if not isinstance(room_id, str) or not room_id.startswith(prefix):
        return None
    try:
        appointment_id = int(room_id[len(prefix):])
    except ValueError:
        return None
    if not 0 < appointment_id <= MAX_APPOINTMENT_ID:
        return None
    return appointment_id


class RoomCoordinator:

    def __init__(self):
        self._lock = threading.Lock()
        self._rooms: Dict[str, Room] = {}
        # connection_id → (room_id, role)
        self._seats: Dict[str, Tuple[str, Role]] = {}

    # ── Membership ────────────────────────────────────────────────────────────

    def join(self, room_id: str, role: Role, connection_id: str, display_name: str) -> JoinResult:
        participant = Participant(connection_id, role, display_name)

        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = self._rooms[room_id] = Room(room_id)

            replaced = room.occupant(role)
            if replaced is not None:
                self._seats.pop(replaced.connection_id, None)
            if role is Role.DOCTOR:
                room.doctor = participant
            else:
                room.patient = participant
            self._seats[connection_id] = (room_id, role)

            became_ready = False
            if room.is_full:
                if room.state in (CallState.EMPTY, CallState.JOINING):
                    room.state   = CallState.READY
                    became_ready = True
            else:
                room.state = CallState.JOINING

            result = JoinResult(room.snapshot(), became_ready, replaced)

        if replaced is not None and replaced.connection_id != connection_id:
            logger.info(
                "[Room] %s (%s) replaced conn=%s with conn=%s  room=%s",
                display_name, role.value, replaced.connection_id, connection_id, room_id,
            )
        logger.info(
            "[Room] %s (%s) joined  room=%s  state=%s",
            display_name, role.value, room_id, result.room.state.value,
        )
        return result

    def leave(self, connection_id: str) -> Optional[LeaveResult]:
        """Clear whichever slot holds this connection; delete the room once empty."""
        with self._lock:
            seat = self._seats.pop(connection_id, None)
            if seat is None:
                return None
            room_id, role = seat
            room = self._rooms[room_id]
            departed    = room.occupant(role)
            prior_state = room.state

            if role is Role.DOCTOR:
                room.doctor = None
            else:
                room.patient = None

            room_deleted = room.is_empty
            if room_deleted:
                del self._rooms[room_id]
                room.state = CallState.ENDED
            elif room.state is not CallState.ENDED:
                room.state = CallState.JOINING

            result = LeaveResult(room.snapshot(), departed, prior_state, room_deleted)

        logger.info(
            "[Room] %s (%s) left  room=%s  deleted=%s",
            departed.display_name, role.value, room_id, room_deleted,
        )
        return result

    def end(self, room_id: str, by: Optional[str] = None) -> Optional[Room]:
        """Move the room to ENDED and drop it. Returns None if it was already gone.

        With `by`, only a current occupant may end the room (NotInRoomError).
        """
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                return None
            if by is not None and room.participant(by) is None:
                raise NotInRoomError(room_id, by)
            del self._rooms[room_id]
            for p in room.occupants():
                self._seats.pop(p.connection_id, None)
            room.state = CallState.ENDED
            ended = room.snapshot()

        logger.info("[Room] room=%s ended", room_id)
        return ended

    def mark_active(self, room_id: str) -> bool:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or room.state is not CallState.READY:
                return False
            room.state = CallState.ACTIVE
        logger.info("[Room] room=%s active", room_id)
        return True

    # ── Transcript storage ────────────────────────────────────────────────────

    def add_transcript_entry(self, room_id: str, entry: TranscriptEntry) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise UnknownRoomError(room_id)
            room.transcript.append(entry)
            return room.snapshot()

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise UnknownRoomError(room_id)
            return room.snapshot()

    def find(self, room_id: str) -> Optional[Room]:
        with self._lock:
            room = self._rooms.get(room_id)
            return room.snapshot() if room else None

    def room_of(self, connection_id: str) -> Optional[str]:
        with self._lock:
            seat = self._seats.get(connection_id)
        return seat[0] if seat else None

    def rooms(self) -> List[Room]:
        with self._lock:
            return [room.snapshot() for room in self._rooms.values()]

    def __contains__(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._rooms

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
