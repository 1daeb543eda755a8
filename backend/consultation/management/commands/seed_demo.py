# consultation/management/commands/seed_demo.py
#
#   python manage.py seed_demo            # add demo doctors/patients if missing
#   python manage.py seed_demo --reset    # wipe consultation data first

from django.core.management.base import BaseCommand
from django.db import transaction

from consultation.models import Appointment, Doctor, Patient, Prescription

DOCTORS = [
    # email, full name, specialty, rating, experience
    ("fatima.rizwan@medassist.com",  "Fatima Rizwan",  "General Physician", 4.8, "12 years"),
    ("usman.ali@medassist.com",      "Usman Ali",      "Cardiologist",      4.9, "20 years"),
    ("zainab.bashir@medassist.com",  "Zainab Bashir",  "Dermatologist",     4.7, "8 years"),
    ("bilal.malik@medassist.com",    "Bilal Malik",    "Pediatrician",      4.9, "15 years"),
]

PATIENTS = [
    # email, full name, phone, gender, medical history
    ("sharique.baig@email.com", "Sharique Baig", "+92-300-1234567", "male",
     "Recurring stress-induced migraines. Mild hypertension (BP 130/85)."),
    ("maira.aijaz@email.com",   "Maira Aijaz",   "+92-300-7654321", "female",
     "Seasonal allergies. Eczema on hands, improving with moisturizing regimen."),
    ("mohammad.suffiyan@email.com", "Mohammad Suffiyan", "+92-300-1122334", "male",
     "Mild chest discomfort during exercise; ECG normal. Continue monitoring."),
]


def create_doctor(email, full_name, specialty, rating, experience):
    doctor, _ = Doctor.objects.get_or_create(
        email=email,
        defaults={"full_name": full_name, "specialty": specialty, "rating": rating, "experience": experience},
    )
    return doctor


def create_patient(email, full_name, phone, gender, medical_history):
    patient, _ = Patient.objects.get_or_create(
        email=email,
        defaults={"full_name": full_name, "phone": phone, "gender": gender, "medical_history": medical_history},
    )
    return patient


class Command(BaseCommand):
    help = "Populate the database with demo doctors and patients."

    def add_arguments(self, parser):
        parser.add_argument("--reset", action="store_true", help="Delete existing consultation data first.")

    @transaction.atomic
    def handle(self, *args, **options):
        if options["reset"]:
            Prescription.objects.all().delete()
            Appointment.objects.all().delete()
            Patient.objects.all().delete()
            Doctor.objects.all().delete()

        doctors  = [create_doctor(*row) for row in DOCTORS]
        patients = [create_patient(*row) for row in PATIENTS]

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(doctors)} doctors and {len(patients)} patients"
        ))
