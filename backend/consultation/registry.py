"""
consultation/registry.py

Session Registry — which live connection currently belongs to which patient.

A doctor calls a patient who did not start the interaction, so the patient's
socket registers itself under its durable patient id right after login.
Last registration wins: a reconnecting patient silently replaces the old
mapping, and the stale socket's disconnect can no longer remove it.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatientSession:
    external_id  : str
    connection_id: str
    display_name : str
    registered_at: datetime


def _key(external_id) -> str:
    # JSON clients send the database id as either 7 or "7".
    return str(external_id).strip()


class SessionRegistry:

    def __init__(self):
        self._lock     = threading.Lock()
        self._sessions: Dict[str, PatientSession] = {}

    def register(self, external_id, connection_id: str, display_name: str = "") -> PatientSession:
        """Record (or overwrite) the connection for a patient. Idempotent."""
        session = PatientSession(
            external_id=_key(external_id),
            connection_id=connection_id,
            display_name=display_name or "",
            registered_at=datetime.now(timezone.utc),
        )
        with self._lock:
            previous = self._sessions.get(session.external_id)
            self._sessions[session.external_id] = session

        if previous and previous.connection_id != connection_id:
            logger.info(
                "[Registry] patient=%s re-registered  conn=%s  replaces=%s",
                session.external_id, connection_id, previous.connection_id,
            )
        else:
            logger.info("[Registry] patient=%s registered  conn=%s", session.external_id, connection_id)
        return session

    def lookup(self, external_id) -> Optional[str]:
        with self._lock:
            session = self._sessions.get(_key(external_id))
        return session.connection_id if session else None

    def get(self, external_id) -> Optional[PatientSession]:
        with self._lock:
            return self._sessions.get(_key(external_id))

    def unregister(self, connection_id: str) -> List[str]:
        """Drop every mapping that points at this connection; returns the patient ids removed."""
        with self._lock:
            removed = [
                pid for pid, session in self._sessions.items()
                if session.connection_id == connection_id
            ]
            for pid in removed:
                del self._sessions[pid]

        for pid in removed:
            logger.info("[Registry] patient=%s unregistered  conn=%s", pid, connection_id)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, external_id) -> bool:
        with self._lock:
            return _key(external_id) in self._sessions
