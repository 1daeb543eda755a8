# consultation/admin.py

from django.contrib import admin
from .models import Appointment, Doctor, Patient, Prescription


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display  = ("id", "full_name", "email", "phone", "gender", "created_at")
    search_fields = ("full_name", "email", "phone")


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display  = ("id", "full_name", "email", "specialty", "rating")
    search_fields = ("full_name", "email", "specialty")
    list_filter   = ("specialty",)


class PrescriptionInline(admin.TabularInline):
    model  = Prescription
    extra  = 0
    fields = ("medicine", "dosage", "notes", "refill_status")


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display    = ("id", "patient", "doctor", "appointment_time", "status", "room_id")
    list_filter     = ("status",)
    search_fields   = ("patient__full_name", "doctor__full_name")
    readonly_fields = ("room_id", "transcript", "created_at", "updated_at")
    inlines         = [PrescriptionInline]


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display  = ("id", "medicine", "dosage", "patient", "doctor", "refill_status", "created_at")
    list_filter   = ("refill_status",)
    search_fields = ("medicine", "patient__full_name")
