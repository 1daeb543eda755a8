import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Doctor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("specialty", models.CharField(max_length=100)),
                ("rating", models.FloatField(default=4.5)),
                ("experience", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("gender", models.CharField(blank=True, choices=[("male", "Male"), ("female", "Female"), ("other", "Other")], max_length=10)),
                ("medical_history", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Appointment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("appointment_time", models.DateTimeField()),
                ("status", models.CharField(choices=[("upcoming", "Upcoming"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="upcoming", max_length=20)),
                ("chat_history", models.TextField(blank=True, default="")),
                ("ai_summary", models.TextField(blank=True, default="")),
                ("transcript", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("doctor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="appointments", to="consultation.doctor")),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="appointments", to="consultation.patient")),
            ],
            options={
                "ordering": ["-appointment_time"],
            },
        ),
        migrations.CreateModel(
            name="Prescription",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("medicine", models.CharField(max_length=200)),
                ("dosage", models.CharField(max_length=200)),
                ("notes", models.TextField(blank=True, default="")),
                ("refill_status", models.CharField(choices=[("active", "Active"), ("requested", "Refill requested"), ("expired", "Expired")], default="active", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("appointment", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="prescriptions", to="consultation.appointment")),
                ("doctor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="prescriptions", to="consultation.doctor")),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="prescriptions", to="consultation.patient")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
