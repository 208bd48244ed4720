"""Tests for booking meetings and querying schedules."""

import threading
from datetime import datetime
from unittest.mock import patch

import pytest

from planner.directory import Directory, Person
from planner.enums import BookingStatus, EventType
from planner.exceptions import ConflictError, InvalidInputError, NotFoundError
from planner.ledger import LedgerArena
from planner.meetings import Meeting, MeetingStore, upcoming_meetings

SLOT = datetime(2024, 2, 21, 9)


@pytest.fixture
def directory():
    directory = Directory(LedgerArena())
    for name in ("a", "b", "c"):
        directory.register(name.upper(), f"{name}@x.com")
    return directory


@pytest.fixture
def events():
    return []


@pytest.fixture
def store(directory, events):
    return MeetingStore(directory, reporter=events.append)


class TestCreateMeeting:
    def test_books_every_participant(self, store, directory):
        result = store.create_meeting(SLOT, ["a@x.com", "b@x.com"])

        assert result.status == BookingStatus.created
        assert result
        assert len(store) == 1
        for email in ("a@x.com", "b@x.com"):
            ledger = directory.resolve(email).ledger
            assert ledger.booked_slots().count(SLOT) == 1
            assert ledger.meeting_at(SLOT) is result.meeting
        assert directory.resolve("c@x.com").ledger.is_free_at(SLOT)

    def test_slot_is_truncated_to_hour(self, store):
        result = store.create_meeting(datetime(2024, 2, 21, 9, 40), ["a@x.com"])
        assert result.meeting.time_slot == SLOT

    def test_participants_keep_given_order(self, store, directory):
        result = store.create_meeting(SLOT, ["c@x.com", "a@x.com", "c@x.com"])
        assert [p.email for p in result.meeting.participants] == ["c@x.com", "a@x.com"]

    def test_busy_participant_rejects_whole_booking(self, store, directory):
        store.create_meeting(SLOT, ["a@x.com"])

        result = store.create_meeting(SLOT, ["b@x.com", "a@x.com", "c@x.com"])

        assert result.status == BookingStatus.unavailable
        assert not result
        assert result.meeting is None
        assert [p.email for p in result.unavailable] == ["a@x.com"]
        assert len(store) == 1
        assert directory.resolve("b@x.com").is_free_at(SLOT)
        assert directory.resolve("c@x.com").is_free_at(SLOT)
        assert len(directory.resolve("a@x.com").ledger) == 1

    def test_reports_created_and_rejected(self, store, events):
        store.create_meeting(SLOT, ["a@x.com"])
        store.create_meeting(SLOT, ["a@x.com"])

        assert [e.type for e in events] == [EventType.meeting_created, EventType.meeting_rejected]
        assert "A|a@x.com" in events[0].message
        assert events[1].data["unavailable"] == ["a@x.com"]

    def test_no_participants(self, store):
        with pytest.raises(InvalidInputError):
            store.create_meeting(SLOT, [])
        with pytest.raises(InvalidInputError):
            store.create_meeting(SLOT, None)

    def test_unknown_participant_changes_nothing(self, store, directory):
        with pytest.raises(NotFoundError):
            store.create_meeting(SLOT, ["a@x.com", "ghost@x.com"])

        assert len(store) == 0
        assert directory.resolve("a@x.com").is_free_at(SLOT)

    def test_commit_conflict_rolls_back_and_reports(self, store, directory):
        """A ledger written behind the store's back is caught during commit."""
        directory.resolve("b@x.com").ledger.book(SLOT)

        with (
            patch.object(Person, "is_free_at", return_value=True),
            patch("planner.meetings.sentry_sdk") as mock_sentry,
        ):
            with pytest.raises(ConflictError):
                store.create_meeting(SLOT, ["a@x.com", "b@x.com"])

        mock_sentry.capture_exception.assert_called_once()
        assert directory.resolve("a@x.com").ledger.is_free_at(SLOT)
        assert len(store) == 0

    def test_reporter_may_call_back_into_store(self, directory):
        """A reporter reacting to a rejection can book elsewhere without deadlocking."""
        results = []

        def rebook_next_hour(event):
            if event.type == EventType.meeting_rejected:
                results.append(store.create_meeting(datetime(2024, 2, 21, 10), ["a@x.com"]))

        store = MeetingStore(directory, reporter=rebook_next_hour)
        store.create_meeting(SLOT, ["a@x.com"])

        worker = threading.Thread(target=store.create_meeting, args=(SLOT, ["a@x.com"]))
        worker.start()
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert [r.status for r in results] == [BookingStatus.created]
        assert len(store) == 2

    def test_concurrent_bookings_of_same_slot(self, store):
        """Two threads racing for overlapping participants: exactly one wins."""
        barrier = threading.Barrier(2)
        results = []

        def book(emails):
            barrier.wait()
            results.append(store.create_meeting(SLOT, emails))

        threads = [
            threading.Thread(target=book, args=(["a@x.com", "b@x.com"],)),
            threading.Thread(target=book, args=(["b@x.com", "c@x.com"],)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert sorted(r.status.value for r in results) == ["created", "unavailable"]
        assert len(store) == 1


class TestMeeting:
    def test_requires_a_participant(self):
        with pytest.raises(InvalidInputError):
            Meeting(SLOT, [])

    def test_add_participant_books_their_ledger(self, store, directory):
        meeting = store.create_meeting(SLOT, ["a@x.com"]).meeting
        carol = directory.resolve("c@x.com")

        meeting.add_participant(carol)

        assert meeting.participants[-1] is carol
        assert carol.ledger.meeting_at(SLOT) is meeting

    def test_add_busy_participant_raises(self, store, directory):
        store.create_meeting(SLOT, ["b@x.com"])
        meeting = store.create_meeting(SLOT, ["a@x.com"]).meeting

        with pytest.raises(ConflictError):
            meeting.add_participant(directory.resolve("b@x.com"))
        assert len(meeting.participants) == 1

    def test_add_existing_participant_is_noop(self, store, directory):
        meeting = store.create_meeting(SLOT, ["a@x.com"]).meeting
        meeting.add_participant(directory.resolve("a@x.com"))
        assert len(meeting.participants) == 1

    def test_describe(self, directory):
        meeting = Meeting(SLOT, [directory.resolve("a@x.com"), directory.resolve("b@x.com")])
        assert meeting.describe() == (
            "Meeting at 2024-02-21 09:00 (Wednesday)\n"
            "    Participants:\n"
            "    A|a@x.com\n"
            "    B|b@x.com"
        )


class TestUpcomingMeetings:
    def test_only_strictly_later_meetings(self, store, directory):
        for hour in (8, 9, 10, 11):
            store.create_meeting(datetime(2024, 2, 21, hour), ["a@x.com"])

        upcoming = upcoming_meetings(directory.resolve("a@x.com"), as_of=SLOT)

        assert [m.time_slot.hour for m in upcoming] == [10, 11]

    def test_other_peoples_meetings_excluded(self, store, directory):
        store.create_meeting(datetime(2024, 3, 1, 9), ["b@x.com"])
        assert upcoming_meetings(directory.resolve("a@x.com"), as_of=SLOT) == []

    def test_requires_as_of(self, directory):
        with pytest.raises(InvalidInputError):
            upcoming_meetings(directory.resolve("a@x.com"), as_of=None)
