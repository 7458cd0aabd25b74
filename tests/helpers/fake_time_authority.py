"""FakeTimeAuthority - Controllable time authority for deterministic tests.

Case stores stamp ``updated_at`` and handlers stamp decisions, rulings
and chat messages from the time authority. Tests inject this fake so
those timestamps are known in advance and ordering can be asserted.

Usage:
    def test_decision_timestamp(fake_time_authority):
        service = ReviewService(case_store=store, time_authority=fake_time_authority)
        fake_time_authority.advance(seconds=60)
        updated = await service.decide(...)
        assert updated.decision.decided_at == fake_time_authority.now()
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from reunite.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_TEST_TIME = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Time authority that only moves when a test moves it.

    Attributes:
        _current_time: The controlled wall clock.
        _monotonic: The controlled monotonic clock, advanced with the wall clock.
    """

    def __init__(self, frozen_at: datetime | None = None) -> None:
        """Freeze time at frozen_at (default 2026-01-01T00:00:00Z).

        Naive datetimes are taken as UTC.
        """
        self._current_time = self._aware(frozen_at or DEFAULT_TEST_TIME)
        self._monotonic = 0.0

    @staticmethod
    def _aware(dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt

    def now(self) -> datetime:
        return self._current_time

    def utcnow(self) -> datetime:
        return self._current_time

    def monotonic(self) -> float:
        return self._monotonic

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Move both clocks forward.

        Raises:
            ValueError: If no amount is given or the amount is negative.
        """
        if delta is not None:
            step = delta.total_seconds()
        elif seconds is not None:
            step = float(seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")
        if step < 0:
            raise ValueError(f"Cannot advance time backwards, got {step} seconds")
        self._current_time += timedelta(seconds=step)
        self._monotonic += step

    def set_time(self, dt: datetime) -> None:
        """Jump the wall clock without touching the monotonic clock."""
        self._current_time = self._aware(dt)

    def __repr__(self) -> str:
        return (
            f"FakeTimeAuthority(current_time={self._current_time.isoformat()}, "
            f"monotonic={self._monotonic:.3f})"
        )
