# consultation/views.py

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .exceptions import AppointmentNotFoundError, PersistenceError
from .lifecycle import get_hub
from .serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
)


def _error(exc: PersistenceError, http_status):
    return Response({"error": exc.message, "code": exc.error_code}, status=http_status)


# =============================================================================
# APPOINTMENTS
# =============================================================================

class AppointmentCreateView(APIView):
    """POST /api/appointments/"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = AppointmentCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            appointment = services.create_appointment(
                data["patient_id"], data["doctor_id"],
                appointment_time=data.get("appointment_time"),
                chat_history=data.get("chat_history", ""),
                ai_summary=data.get("ai_summary", ""),
            )
        except PersistenceError as exc:
            return _error(exc, status.HTTP_400_BAD_REQUEST)

        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)


class AppointmentDetailView(APIView):
    """GET /api/appointments/<appointment_id>/"""
    permission_classes = [AllowAny]

    def get(self, request, appointment_id):
        try:
            appointment = services.get_appointment(appointment_id)
        except AppointmentNotFoundError as exc:
            return _error(exc, status.HTTP_404_NOT_FOUND)
        return Response(AppointmentSerializer(appointment).data)


class PrescriptionAppendView(APIView):
    """POST /api/appointments/<appointment_id>/prescriptions/"""
    permission_classes = [AllowAny]

    def post(self, request, appointment_id):
        serializer = PrescriptionCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            prescription = services.append_prescription(
                appointment_id, data["medicine"], data["dosage"], data.get("notes", ""),
            )
        except AppointmentNotFoundError as exc:
            return _error(exc, status.HTTP_404_NOT_FOUND)
        except PersistenceError as exc:
            return _error(exc, status.HTTP_400_BAD_REQUEST)

        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_201_CREATED)


# =============================================================================
# SIGNALING STATUS
# =============================================================================

class SignalingStatusView(APIView):
    """GET /api/signaling/status/ — read-only snapshot of rooms and registered patients."""
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            **get_hub().status(),
            "ws_endpoint": "/ws/consultation/",
        })
