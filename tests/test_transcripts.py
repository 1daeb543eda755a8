"""
Transcript Aggregator: ordered, speaker-tagged caption fragments.
"""

from datetime import datetime, timezone

import pytest

from consultation.exceptions import UnknownRoomError
from consultation.rooms import Role
from consultation.transcripts import TranscriptAggregator

ROOM = "consultation-99"


@pytest.fixture
def room(coordinator):
    coordinator.join(ROOM, Role.DOCTOR, "d1", "Dr. X")
    coordinator.join(ROOM, Role.PATIENT, "p1", "Sam")
    return ROOM


class TestAppend:

    def test_snapshot_keeps_append_order(self, aggregator, room):
        aggregator.append(room, "Alice", "hi")
        aggregator.append(room, "Bob", "hello")
        assert aggregator.snapshot(room) == "Alice: hi\nBob: hello"

    def test_order_ignores_clock_jitter(self, coordinator, room):
        times = iter([
            datetime(2026, 1, 1, 12, 0, 5, tzinfo=timezone.utc),
            datetime(2026, 1, 1, 12, 0, 1, tzinfo=timezone.utc),
        ])
        aggregator = TranscriptAggregator(coordinator, clock=lambda: next(times))
        aggregator.append(room, "Alice", "hi")
        aggregator.append(room, "Bob", "hello")
        assert aggregator.snapshot(room) == "Alice: hi\nBob: hello"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None, 42])
    def test_empty_or_invalid_text_is_noop(self, aggregator, room, text):
        aggregator.append(room, "Alice", "hi")
        assert aggregator.append(room, "Bob", text) is None
        assert len(aggregator.entries(room)) == 1
        assert aggregator.snapshot(room) == "Alice: hi"

    def test_no_deduplication(self, aggregator, room):
        aggregator.append(room, "Sam", "my head hurts")
        aggregator.append(room, "Sam", "my head hurts")
        assert aggregator.snapshot(room) == "Sam: my head hurts\nSam: my head hurts"

    def test_text_is_stored_as_sent(self, aggregator, room):
        aggregator.append(room, "Sam", "  my head hurts ")
        assert aggregator.snapshot(room) == "Sam:   my head hurts "

    def test_long_fragment_is_kept_whole(self, aggregator, room):
        text = "a" * 1999
        aggregator.append(room, "Sam", text)
        assert aggregator.snapshot(room) == "Sam: " + text

    def test_oversized_fragment_is_dropped_not_cut(self, coordinator, room):
        aggregator = TranscriptAggregator(coordinator, max_fragment_length=5)
        aggregator.append(room, "Sam", "abcde")
        assert aggregator.append(room, "Sam", "abcdefgh") is None
        assert aggregator.snapshot(room) == "Sam: abcde"

    def test_broadcast_goes_to_every_occupant(self, aggregator, room):
        delivery = aggregator.append(room, "Dr. X", "How are you feeling?")
        assert set(delivery.targets) == {"d1", "p1"}
        assert delivery.event == "transcript-update"
        assert delivery.payload["speaker"] == "Dr. X"
        assert delivery.payload["text"] == "How are you feeling?"
        assert "timestamp" in delivery.payload

    def test_server_assigns_timestamp(self, coordinator, room):
        stamp = datetime(2026, 10, 19, tzinfo=timezone.utc)
        aggregator = TranscriptAggregator(coordinator, clock=lambda: stamp)
        aggregator.append(room, "Sam", "hi")
        assert aggregator.entries(room)[0].timestamp == stamp

    def test_unknown_room(self, aggregator):
        with pytest.raises(UnknownRoomError):
            aggregator.append("consultation-404", "Sam", "hi")
        with pytest.raises(UnknownRoomError):
            aggregator.snapshot("consultation-404")

    def test_empty_room_snapshot(self, aggregator, room):
        assert aggregator.snapshot(room) == ""
