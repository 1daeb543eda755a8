"""
REST surface: appointments, prescriptions, signaling status.
"""

import pytest
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture
def client():
    return APIClient()


class TestAppointmentEndpoints:

    def test_create(self, client, patient, doctor):
        response = client.post("/api/appointments/", {
            "patient_id": patient.pk, "doctor_id": doctor.pk, "ai_summary": "Headache for 3 days",
        }, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["room_id"] == f"consultation-{data['id']}"
        assert data["patient_name"] == "Sam"
        assert data["status"] == "upcoming"

    def test_create_with_unknown_patient(self, client, doctor):
        response = client.post("/api/appointments/", {"patient_id": 9999, "doctor_id": doctor.pk}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "PATIENT_NOT_FOUND"

    def test_create_requires_ids(self, client):
        response = client.post("/api/appointments/", {}, format="json")
        assert response.status_code == 400

    def test_detail(self, client, appointment):
        response = client.get(f"/api/appointments/{appointment.pk}/")
        assert response.status_code == 200
        assert response.json()["room_id"] == appointment.room_id

    def test_detail_missing(self, client):
        assert client.get("/api/appointments/9999/").status_code == 404


class TestPrescriptionEndpoint:

    def test_append(self, client, appointment):
        response = client.post(
            f"/api/appointments/{appointment.pk}/prescriptions/",
            {"medicine": "Cetirizine", "dosage": "10mg daily"},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["medicine"] == "Cetirizine"
        assert response.json()["doctor_name"] == "X"

    def test_append_invalid(self, client, appointment):
        response = client.post(
            f"/api/appointments/{appointment.pk}/prescriptions/", {"medicine": "Cetirizine"}, format="json",
        )
        assert response.status_code == 400

    def test_append_to_missing_appointment(self, client):
        response = client.post(
            "/api/appointments/9999/prescriptions/", {"medicine": "Cetirizine", "dosage": "10mg"}, format="json",
        )
        assert response.status_code == 404


class TestSignalingStatus:

    def test_status_reflects_rooms(self, client, process_hub):
        process_hub.handle("d1", {"type": "join-room", "roomId": "consultation-3", "role": "doctor", "userName": "Dr. X"})

        response = client.get("/api/signaling/status/")
        assert response.status_code == 200
        data = response.json()
        assert data["ws_endpoint"] == "/ws/consultation/"
        assert data["registered_patients"] == 0
        assert data["rooms"][0]["room_id"] == "consultation-3"
        assert data["rooms"][0]["state"] == "joining"
