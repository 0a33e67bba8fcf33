from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Callable

from .booking import NotFound, Reservation, Space
from .catalog import RateInput, SpaceCatalog, normalize_rate
from .event_log import EventJournal
from .ledger import BookingLedger, BookingOutcome

SAMPLE_SPACES: tuple[tuple[str, str, bool], ...] = (
    ("Open Desk", "10.00", True),
    ("Private Office", "25.00", False),
    ("Meeting Room", "40.00", True),
)


@dataclass(frozen=True)
class SpaceRemovalResult:
    space_id: int
    found: bool
    removed: bool = False
    affected: tuple[Reservation, ...] = field(default_factory=tuple)
    needs_acknowledgement: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "space_id": self.space_id,
            "found": self.found,
            "removed": self.removed,
            "needs_acknowledgement": self.needs_acknowledgement,
            "affected": [reservation.to_dict() for reservation in self.affected],
        }


class WorkspaceBookingService:
    def __init__(
        self,
        journal: EventJournal | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.journal = journal if journal is not None else EventJournal(clock=clock)
        self.catalog = SpaceCatalog(journal=self.journal)
        self.ledger = BookingLedger(self.catalog, journal=self.journal, clock=clock)
        self.lock = self.catalog.lock

    @classmethod
    def with_event_log(
        cls,
        event_log_path: str | Path,
        clock: Callable[[], datetime] | None = None,
    ) -> "WorkspaceBookingService":
        return cls(journal=EventJournal(event_log_path, clock=clock), clock=clock)

    def seed_sample_spaces(self) -> list[Space]:
        seeded: list[Space] = []
        with self.lock:
            for category, rate, available in SAMPLE_SPACES:
                space = self.catalog.add(category, rate)
                if not available:
                    space = self.catalog.set_available(space.space_id, False)
                seeded.append(space)
        return seeded

    def update_space(
        self,
        space_id: int,
        *,
        category: str | None = None,
        rate: RateInput | None = None,
        available: bool | None = None,
    ) -> Space:
        """Apply the given changes, leaving blank or missing fields untouched.

        All inputs are validated before anything changes, so a rejected rate
        does not leave a half-applied category edit behind.
        """
        with self.lock:
            space = self.catalog.find_by_id(space_id)
            if space is None:
                raise NotFound(f"Space {space_id} not found.")

            if rate is not None:
                normalize_rate(rate)

            if category is not None and category.strip():
                space = self.catalog.set_category(space_id, category)
            if rate is not None:
                space = self.catalog.set_rate(space_id, rate)
            if available is not None:
                space = self.catalog.set_available(space_id, available)
            return space

    def preview_space_removal(self, space_id: int) -> SpaceRemovalResult:
        with self.lock:
            if self.catalog.find_by_id(space_id) is None:
                return SpaceRemovalResult(space_id=space_id, found=False)
            affected = tuple(self.ledger.preview_cascade(space_id))
            return SpaceRemovalResult(
                space_id=space_id,
                found=True,
                affected=affected,
                needs_acknowledgement=bool(affected),
            )

    def remove_space(self, space_id: int, acknowledge_reservations: bool = False) -> SpaceRemovalResult:
        """Remove a space, purging its reservations only once acknowledged."""
        with self.lock:
            preview = self.preview_space_removal(space_id)
            if not preview.found:
                return preview
            if preview.needs_acknowledgement and not acknowledge_reservations:
                return preview

            purged = tuple(self.ledger.cascade_remove_for_space(space_id))
            removed = self.catalog.remove(space_id)
            return SpaceRemovalResult(space_id=space_id, found=True, removed=removed, affected=purged)

    def available_spaces(self, on_date: date, start: time, end: time) -> list[Space]:
        return self.ledger.compute_available(on_date, start, end)

    def book(self, customer_name: str, space_id: int, on_date: date, start: time, end: time) -> BookingOutcome:
        return self.ledger.book(customer_name, space_id, on_date, start, end)

    def reservations_for(self, customer_name: str) -> list[Reservation]:
        return self.ledger.list_by_customer(customer_name)

    def cancel_for_customer(self, customer_name: str, reservation_id: int) -> bool:
        """Cancel a reservation only when it was made by ``customer_name``."""
        with self.lock:
            reservation = self.ledger.find_by_id(reservation_id)
            if reservation is None or not reservation.belongs_to(customer_name):
                return False
            return self.ledger.cancel(reservation_id)

    def describe_reservation(self, reservation: Reservation) -> dict[str, Any]:
        space = self.catalog.find_by_id(reservation.space_id)
        payload = reservation.to_dict()
        payload["space_category"] = space.category if space is not None else None
        payload["space_hourly_rate"] = f"{space.hourly_rate:.2f}" if space is not None else None
        return payload
