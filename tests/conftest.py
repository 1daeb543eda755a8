"""
Shared fixtures for the consultation tests.
"""

import pytest

from consultation.lifecycle import ConsultationHub, reset_hub
from consultation.registry import SessionRegistry
from consultation.rooms import RoomCoordinator
from consultation.transcripts import TranscriptAggregator

DOCTOR  = "conn-doctor"
PATIENT = "conn-patient"
ROOM    = "consultation-99"


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def coordinator():
    return RoomCoordinator()


@pytest.fixture
def aggregator(coordinator):
    return TranscriptAggregator(coordinator, max_fragment_length=2000)


@pytest.fixture
def hub():
    return ConsultationHub(persist_on_disconnect=True)


@pytest.fixture
def ready_hub(hub):
    """Hub with Dr. X and Sam both in consultation-99."""
    hub.handle(DOCTOR,  {"type": "join-room", "roomId": ROOM, "role": "doctor",  "userName": "Dr. X"})
    hub.handle(PATIENT, {"type": "join-room", "roomId": ROOM, "role": "patient", "userName": "Sam"})
    return hub


@pytest.fixture
def process_hub():
    """Fresh process-wide hub for tests that go through the consumer or views."""
    hub = reset_hub()
    yield hub
    reset_hub()


@pytest.fixture
def doctor(db):
    from consultation.models import Doctor
    return Doctor.objects.create(full_name="X", email="dr.x@medassist.com", specialty="General Physician")


@pytest.fixture
def patient(db):
    from consultation.models import Patient
    return Patient.objects.create(full_name="Sam", email="sam@email.com", medical_history="Seasonal allergies.")


@pytest.fixture
def appointment(doctor, patient):
    from django.utils import timezone
    from consultation.models import Appointment
    return Appointment.objects.create(patient=patient, doctor=doctor, appointment_time=timezone.now())
