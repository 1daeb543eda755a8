"""
consultation/exceptions.py

Error taxonomy for the signaling core and the persistence collaborator.
Signaling errors never escape a single event handler; persistence errors
are translated to HTTP responses by the views.
"""

from typing import Any, Dict, Optional


class ConsultationError(Exception):
    """Base error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Signaling
# =============================================================================

class SignalingError(ConsultationError):
    """Base class for errors raised inside the signaling core."""


class UnknownRoomError(SignalingError):
    def __init__(self, room_id: str) -> None:
        super().__init__(f"Room '{room_id}' does not exist", "UNKNOWN_ROOM", {"room_id": room_id})


class NotInRoomError(SignalingError):
    def __init__(self, room_id: str, connection_id: str) -> None:
        super().__init__(
            f"Connection '{connection_id}' is not an occupant of room '{room_id}'",
            "NOT_IN_ROOM",
            {"room_id": room_id, "connection_id": connection_id},
        )


class NegotiationPolicyError(SignalingError):
    """A role sent a session description it is not allowed to send."""

    def __init__(self, kind: str, role: str) -> None:
        super().__init__(
            f"Role '{role}' may not send '{kind}'",
            "NEGOTIATION_POLICY",
            {"kind": kind, "role": role},
        )


class MalformedMessageError(SignalingError):
    """The frame is missing a required field or carries an invalid value.

    This is the only signaling error reported back, and only to the sender.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, "MALFORMED_MESSAGE", {"field": field} if field else {})


# =============================================================================
# Persistence
# =============================================================================

class PersistenceError(ConsultationError):
    """Base class for appointment / prescription storage errors."""


class PatientNotFoundError(PersistenceError):
    def __init__(self, patient_id: Any) -> None:
        super().__init__(f"Patient with ID {patient_id} not found", "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class DoctorNotFoundError(PersistenceError):
    def __init__(self, doctor_id: Any) -> None:
        super().__init__(f"Doctor with ID {doctor_id} not found", "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class AppointmentNotFoundError(PersistenceError):
    def __init__(self, appointment_id: Any) -> None:
        super().__init__(
            f"Appointment with ID {appointment_id} not found",
            "APPOINTMENT_NOT_FOUND",
            {"appointment_id": appointment_id},
        )


class InvalidPrescriptionError(PersistenceError):
    def __init__(self, field: str) -> None:
        super().__init__(f"{field} is required", "INVALID_PRESCRIPTION", {"field": field})
