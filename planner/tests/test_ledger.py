"""Tests for availability ledgers and the ledger arena."""

from datetime import datetime

import pytest

from planner.exceptions import ConflictError, DuplicateIdentifierError, NotFoundError
from planner.ledger import AvailabilityLedger, LedgerArena

SLOT = datetime(2024, 2, 21, 9)


class TestAvailabilityLedger:
    def test_new_ledger_is_free(self):
        ledger = AvailabilityLedger("a@x.com")
        assert ledger.is_free_at(SLOT)
        assert len(ledger) == 0

    def test_book_marks_slot_busy(self):
        ledger = AvailabilityLedger("a@x.com")
        ledger.book(SLOT)

        assert not ledger.is_free_at(SLOT)
        assert SLOT in ledger
        assert ledger.is_free_at(datetime(2024, 2, 21, 10))

    def test_double_booking_raises_conflict(self):
        ledger = AvailabilityLedger("a@x.com")
        ledger.book(SLOT)

        with pytest.raises(ConflictError):
            ledger.book(SLOT)
        assert ledger.booked_slots() == [SLOT]

    def test_slots_compare_at_hour_granularity(self):
        """09:30 and 09:00 are the same slot."""
        ledger = AvailabilityLedger("a@x.com")
        ledger.book(datetime(2024, 2, 21, 9, 30))

        assert not ledger.is_free_at(SLOT)
        with pytest.raises(ConflictError):
            ledger.book(datetime(2024, 2, 21, 9, 59, 59))

    def test_meetings_skip_bare_bookings(self):
        ledger = AvailabilityLedger("a@x.com")
        marker = object()
        ledger.book(SLOT)
        ledger.book(datetime(2024, 2, 21, 10), marker)

        assert ledger.meetings() == [marker]
        assert ledger.meeting_at(datetime(2024, 2, 21, 10)) is marker

    def test_discard_frees_slot(self):
        ledger = AvailabilityLedger("a@x.com")
        ledger.book(SLOT)
        ledger.discard(SLOT)
        assert ledger.is_free_at(SLOT)


class TestLedgerArena:
    def test_create_and_get(self):
        arena = LedgerArena()
        ledger = arena.create("a@x.com")

        assert arena.get("a@x.com") is ledger
        assert "a@x.com" in arena
        assert len(arena) == 1

    def test_create_twice_raises(self):
        arena = LedgerArena()
        arena.create("a@x.com")
        with pytest.raises(DuplicateIdentifierError):
            arena.create("a@x.com")

    def test_get_unknown_raises(self):
        with pytest.raises(NotFoundError):
            LedgerArena().get("nobody@x.com")

    def test_lock_holds_every_ledger_then_releases(self):
        arena = LedgerArena()
        for email in ("c@x.com", "a@x.com", "b@x.com"):
            arena.create(email)

        with arena.lock(["c@x.com", "a@x.com", "c@x.com"]) as ledgers:
            assert list(ledgers) == ["a@x.com", "c@x.com"]
            assert all(ledger.lock.locked() for ledger in ledgers.values())
            assert not arena.get("b@x.com").lock.locked()

        assert not any(arena.get(e).lock.locked() for e in ("a@x.com", "c@x.com"))

    def test_lock_releases_on_error(self):
        arena = LedgerArena()
        arena.create("a@x.com")

        with pytest.raises(RuntimeError):
            with arena.lock(["a@x.com"]):
                raise RuntimeError("boom")
        assert not arena.get("a@x.com").lock.locked()
