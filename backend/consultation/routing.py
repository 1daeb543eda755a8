# consultation/routing.py

from django.urls import re_path
from . import consumers

websocket_urlpatterns = [

    # ── Consultation signalling ────────────────────────────────────────────────
    re_path(r"ws/consultation/$", consumers.ConsultationConsumer.as_asgi()),
]
