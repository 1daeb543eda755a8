"""
consultation/services.py

Persistence collaborator for the signaling core: create/fetch appointments,
append prescriptions, and store the transcript when a call ends.
"""

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from .exceptions import (
    AppointmentNotFoundError,
    DoctorNotFoundError,
    InvalidPrescriptionError,
    PatientNotFoundError,
)
from .models import Appointment, Doctor, Patient, Prescription
from .rooms import appointment_id_from

logger = logging.getLogger(__name__)


def create_appointment(patient_id, doctor_id, appointment_time=None, chat_history="", ai_summary="") -> Appointment:
    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise PatientNotFoundError(patient_id)
    doctor = Doctor.objects.filter(pk=doctor_id).first()
    if doctor is None:
        raise DoctorNotFoundError(doctor_id)

    appointment = Appointment.objects.create(
        patient=patient,
        doctor=doctor,
        appointment_time=appointment_time or timezone.now(),
        chat_history=chat_history or "",
        ai_summary=ai_summary or "",
    )
    logger.info("[Appointment] created id=%s patient=%s doctor=%s", appointment.pk, patient.pk, doctor.pk)
    return appointment


def get_appointment(appointment_id) -> Appointment:
    appointment = (
        Appointment.objects.select_related("patient", "doctor")
        .filter(pk=appointment_id)
        .first()
    )
    if appointment is None:
        raise AppointmentNotFoundError(appointment_id)
    return appointment


def append_prescription(appointment_id, medicine, dosage, notes="") -> Prescription:
    if not (medicine or "").strip():
        raise InvalidPrescriptionError("medicine")
    if not (dosage or "").strip():
        raise InvalidPrescriptionError("dosage")

    appointment = get_appointment(appointment_id)
    prescription = Prescription.objects.create(
        patient=appointment.patient,
        doctor=appointment.doctor,
        appointment=appointment,
        medicine=medicine.strip(),
        dosage=dosage.strip(),
        notes=notes or "",
    )
    logger.info("[Prescription] id=%s appended to appointment=%s", prescription.pk, appointment.pk)
    return prescription


def record_call_ended(room_id: str, transcript: str, reason: str = "end-call") -> Optional[Appointment]:
    """
    Store the call transcript and mark the room's appointment completed.

    An explicit end-call always completes the appointment; a dropped
    connection only does when a transcript came with it. An empty transcript
    keeps whatever was stored before. Rooms that do not map to an
    appointment are logged and skipped.
    """
    appointment_id = appointment_id_from(room_id)
    if appointment_id is None:
        logger.warning("[Appointment] room=%s has no appointment id, transcript not stored", room_id)
        return None

    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().filter(pk=appointment_id).first()
        if appointment is None:
            logger.warning("[Appointment] room=%s → appointment %s not found", room_id, appointment_id)
            return None

        fields = ["updated_at"]
        if reason == "end-call" or transcript:
            appointment.status = "completed"
            fields.append("status")
        if transcript:
            appointment.transcript = transcript
            fields.append("transcript")
        appointment.save(update_fields=fields)

    logger.info(
        "[Appointment] id=%s %s  reason=%s  transcript_chars=%d",
        appointment.pk, appointment.status, reason, len(transcript or ""),
    )
    return appointment
