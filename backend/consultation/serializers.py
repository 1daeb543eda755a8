# consultation/serializers.py

from rest_framework import serializers
from .models import Appointment, Prescription


# =============================================================================
# PRESCRIPTION
# =============================================================================

class PrescriptionSerializer(serializers.ModelSerializer):
    doctor_name = serializers.CharField(source="doctor.full_name", read_only=True)

    class Meta:
        model = Prescription
        fields = [
            "id", "patient", "doctor", "doctor_name", "appointment",
            "medicine", "dosage", "notes", "refill_status", "created_at",
        ]
        read_only_fields = fields


class PrescriptionCreateSerializer(serializers.Serializer):
    medicine = serializers.CharField(max_length=200)
    dosage   = serializers.CharField(max_length=200)
    notes    = serializers.CharField(required=False, allow_blank=True, default="")


# =============================================================================
# APPOINTMENT
# =============================================================================

class AppointmentSerializer(serializers.ModelSerializer):
    """
    Appointment card for the doctor dashboard. room_id is what both sides
    put in their join-room frame.
    """
    room_id      = serializers.CharField(read_only=True)
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)
    doctor_name  = serializers.CharField(source="doctor.full_name",  read_only=True)
    specialty    = serializers.CharField(source="doctor.specialty",  read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id", "room_id", "patient", "patient_name", "doctor", "doctor_name", "specialty",
            "appointment_time", "status", "chat_history", "ai_summary", "transcript",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.Serializer):
    patient_id       = serializers.IntegerField()
    doctor_id        = serializers.IntegerField()
    appointment_time = serializers.DateTimeField(required=False, allow_null=True, default=None)
    chat_history     = serializers.CharField(required=False, allow_blank=True, default="")
    ai_summary       = serializers.CharField(required=False, allow_blank=True, default="")
