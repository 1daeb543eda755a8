# consultation/urls.py
#
# All URLs here are prefixed with /api/ (set in medassist/urls.py).

from django.urls import path
from . import views

urlpatterns = [

    # ── Appointments ─────────────────────────────────────────────────────────
    path("appointments/",                                  views.AppointmentCreateView.as_view()),
    path("appointments/<int:appointment_id>/",             views.AppointmentDetailView.as_view()),
    path("appointments/<int:appointment_id>/prescriptions/", views.PrescriptionAppendView.as_view()),

    # ── Signaling ────────────────────────────────────────────────────────────
    path("signaling/status/",                              views.SignalingStatusView.as_view()),
]
