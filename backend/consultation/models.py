# consultation/models.py
#
# Storage for the consultation app. The signaling core only ever needs
# "appointment exists, identified by an integer id" and hands back the
# transcript when a call ends; everything here serves that hand-off.
#
# Models in this file:
#   1. Patient       — someone who books and receives calls
#   2. Doctor        — someone who initiates calls
#   3. Appointment   — one consultation; its id names the signaling room
#   4. Prescription  — medicines prescribed during/after an appointment

from django.db import models

from .rooms import room_id_for


# =============================================================================
# 1. PATIENT
# =============================================================================

class Patient(models.Model):

    GENDER_CHOICES = [
        ("male",   "Male"),
        ("female", "Female"),
        ("other",  "Other"),
    ]

    full_name       = models.CharField(max_length=150)
    email           = models.EmailField(unique=True)
    phone           = models.CharField(max_length=20, blank=True)
    date_of_birth   = models.DateField(null=True, blank=True)
    gender          = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    medical_history = models.TextField(blank=True, default="")
    created_at      = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.full_name} (#{self.pk})"


# =============================================================================
# 2. DOCTOR
# =============================================================================

class Doctor(models.Model):
    full_name  = models.CharField(max_length=150)
    email      = models.EmailField(unique=True)
    specialty  = models.CharField(max_length=100)
    rating     = models.FloatField(default=4.5)
    experience = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Dr. {self.full_name} ({self.specialty})"


# =============================================================================
# 3. APPOINTMENT
#
# Flow:
#   Patient books after the triage chat  →  status = 'upcoming'
#   Doctor rings the patient, both join "consultation-<id>"
#   Call ends  →  status = 'completed', transcript filled in
# =============================================================================

class Appointment(models.Model):

    STATUS_CHOICES = [
        ("upcoming",  "Upcoming"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
    ]

    patient          = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="appointments")
    doctor           = models.ForeignKey(Doctor,  on_delete=models.CASCADE, related_name="appointments")
    appointment_time = models.DateTimeField()
    status           = models.CharField(max_length=20, choices=STATUS_CHOICES, default="upcoming")

    # Triage chat that led to the booking + the assistant's summary of it
    chat_history     = models.TextField(blank=True, default="")
    ai_summary       = models.TextField(blank=True, default="")

    # Call output, stored as:
    # "Dr. X: Hello, how are you feeling?\nSam: I have a headache."
    transcript       = models.TextField(blank=True, default="")

    created_at       = models.DateTimeField(auto_now_add=True)
    updated_at       = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-appointment_time"]

    @property
    def room_id(self):
        return room_id_for(self.pk)

    def __str__(self):
        return f"Appointment {self.pk}: {self.patient.full_name} with Dr. {self.doctor.full_name}"


# =============================================================================
# 4. PRESCRIPTION
# =============================================================================

class Prescription(models.Model):

    REFILL_CHOICES = [
        ("active",    "Active"),
        ("requested", "Refill requested"),
        ("expired",   "Expired"),
    ]

    patient       = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="prescriptions")
    doctor        = models.ForeignKey(Doctor,  on_delete=models.CASCADE, related_name="prescriptions")
    appointment   = models.ForeignKey(
        Appointment, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name="prescriptions",
    )
    medicine      = models.CharField(max_length=200)
    dosage        = models.CharField(max_length=200)
    notes         = models.TextField(blank=True, default="")
    refill_status = models.CharField(max_length=20, choices=REFILL_CHOICES, default="active")
    created_at    = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.medicine} {self.dosage} for {self.patient.full_name}"
