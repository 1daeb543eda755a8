"""
consultation/transcripts.py

Transcript Aggregator — ordered, speaker-tagged caption fragments for the
lifetime of a room.

Entries keep append order exactly; the final transcript is

    "Doctor: Hello, how are you feeling?\nPatient: I have a headache."

Duplicate suppression (interim vs. final speech results) belongs to the
speech-recognition caller, so nothing here deduplicates.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from .conf import consultation_setting
from .messages import Delivery, ServerEvent
from .rooms import RoomCoordinator, TranscriptEntry

logger = logging.getLogger(__name__)


def join_entries(entries: Iterable[TranscriptEntry]) -> str:
    return "\n".join(entry.as_line() for entry in entries)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TranscriptAggregator:

    def __init__(
        self,
        coordinator: RoomCoordinator,
        max_fragment_length: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.coordinator = coordinator
        self.max_fragment_length = (
            max_fragment_length if max_fragment_length is not None
            else consultation_setting("MAX_FRAGMENT_LENGTH")
        )
        self.clock = clock

    def append(self, room_id: str, speaker: str, text) -> Optional[Delivery]:
        """Store one fragment and return the transcript-update broadcast.

        Text is stored exactly as sent. Empty, whitespace-only or non-string
        text is a no-op (returns None), and so is a fragment longer than
        max_fragment_length. Raises UnknownRoomError.
        """
        if not isinstance(text, str) or not text.strip():
            logger.debug("[Transcript] empty fragment dropped  room=%s", room_id)
            return None

        if self.max_fragment_length and len(text) > self.max_fragment_length:
            logger.warning(
                "[Transcript] fragment dropped  room=%s  chars=%d  limit=%d",
                room_id, len(text), self.max_fragment_length,
            )
            return None

        entry = TranscriptEntry(speaker=str(speaker), text=text, timestamp=self.clock())
        room  = self.coordinator.add_transcript_entry(room_id, entry)

        logger.info(
            "[Transcript] room=%s  speaker=%s  chars=%d  entries=%d",
            room_id, entry.speaker, len(text), len(room.transcript),
        )
        return Delivery.to_all(
            (p.connection_id for p in room.occupants()),
            ServerEvent.TRANSCRIPT_UPDATE,
            {
                "speaker"  : entry.speaker,
                "text"     : entry.text,
                "timestamp": entry.timestamp.isoformat(),
            },
        )

    def entries(self, room_id: str) -> List[TranscriptEntry]:
        return self.coordinator.get(room_id).transcript

    def snapshot(self, room_id: str) -> str:
        """Raises UnknownRoomError."""
        return join_entries(self.entries(room_id))
