"""
consultation/messages.py

Event names on the consultation socket and the Delivery value the signaling
core hands back to the transport. The core never sends anything itself; it
returns "send this event to these connections" and the consumer does the I/O.

Wire format (both directions):  { "type": <event>, ...fields }
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class ClientEvent(str, Enum):
    REGISTER_PATIENT = "register-patient"
    INITIATE_CALL    = "initiate-call"
    JOIN_ROOM        = "join-room"
    OFFER            = "offer"
    ANSWER           = "answer"
    ICE_CANDIDATE    = "ice-candidate"
    TRANSCRIPT       = "transcript"
    REQUEST_AI_HINTS = "request-ai-hints"
    END_CALL         = "end-call"


class ServerEvent(str, Enum):
    CONNECTED           = "connected"
    INCOMING_CALL       = "incoming-call"
    PATIENT_OFFLINE     = "patient-offline"
    USER_JOINED         = "user-joined"
    READY_TO_CALL       = "ready-to-call"
    TRANSCRIPT_UPDATE   = "transcript-update"
    AI_HINTS_PROCESSING = "ai-hints-processing"
    AI_HINTS_DATA       = "ai-hints-data"
    CALL_ENDED          = "call-ended"
    USER_LEFT           = "user-left"
    ERROR               = "error"


@dataclass(frozen=True)
class Delivery:
    targets: Tuple[str, ...]
    event  : str
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def to(cls, target: str, event, payload: Optional[Dict[str, Any]] = None) -> "Delivery":
        return cls((target,), _name(event), dict(payload or {}))

    @classmethod
    def to_all(cls, targets: Iterable[str], event, payload: Optional[Dict[str, Any]] = None) -> "Delivery":
        return cls(tuple(targets), _name(event), dict(payload or {}))

    def frame(self) -> Dict[str, Any]:
        return {"type": self.event, **self.payload}


@dataclass(frozen=True)
class EndedCall:
    """Hand-off to the persistence collaborator once a room is torn down."""
    room_id   : str
    transcript: str
    reason    : str       # "end-call" | "disconnect"


@dataclass
class Outcome:
    deliveries : List[Delivery]  = field(default_factory=list)
    ended_calls: List[EndedCall] = field(default_factory=list)

    def send(self, delivery: Optional[Delivery]) -> None:
        if delivery is not None and delivery.targets:
            self.deliveries.append(delivery)

    def extend(self, other: "Outcome") -> None:
        self.deliveries.extend(other.deliveries)
        self.ended_calls.extend(other.ended_calls)

    def for_target(self, target: str) -> List[Dict[str, Any]]:
        return [d.frame() for d in self.deliveries if target in d.targets]


def _name(event) -> str:
    return event.value if isinstance(event, Enum) else str(event)
