# consultation/conf.py
#
# Reads the CONSULTATION settings dict with built-in fallbacks, so the
# signaling core also works under a bare settings module.

from django.conf import settings

DEFAULTS = {
    "ROOM_PREFIX"                     : "consultation-",
    "PERSIST_TRANSCRIPT_ON_DISCONNECT": True,
    "MAX_FRAGMENT_LENGTH"             : 2000,
}


def consultation_setting(name):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown consultation setting: {name}")
    overrides = getattr(settings, "CONSULTATION", None) or {}
    return overrides.get(name, DEFAULTS[name])
