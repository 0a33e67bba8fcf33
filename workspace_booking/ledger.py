from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Callable, Iterable

from .booking import (
    BookingError,
    Conflict,
    IdAllocator,
    InvalidArgument,
    InvalidWindow,
    NotFound,
    Reservation,
    Space,
    Unavailable,
    find_conflicts,
)
from .catalog import SpaceCatalog
from .event_log import EventJournal


@dataclass(frozen=True)
class BookingOutcome:
    reservation: Reservation | None = None
    error: BookingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.reservation is not None

    @property
    def conflicting(self) -> Reservation | None:
        return self.error.reservation if isinstance(self.error, Conflict) else None

    def unwrap(self) -> Reservation:
        if self.error is not None:
            raise self.error
        if self.reservation is None:
            raise BookingError("Booking outcome carries neither a reservation nor an error.")
        return self.reservation


class BookingLedger:
    """Reservations against the spaces of one catalog.

    Every check in :meth:`book` runs again at booking time under the catalog
    lock, so an earlier :meth:`compute_available` answer is never trusted.
    """

    def __init__(
        self,
        catalog: SpaceCatalog,
        journal: EventJournal | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = catalog
        self.lock = catalog.lock
        self._journal = journal
        self._clock: Callable[[], datetime] = clock or datetime.now
        self._ids = IdAllocator()
        self._reservations: dict[int, Reservation] = {}
        catalog.add_removal_listener(self._purge_removed_space)

    def compute_available(
        self,
        on_date: date,
        start: time,
        end: time,
        spaces: Iterable[Space] | None = None,
    ) -> list[Space]:
        if start >= end:
            raise InvalidWindow("start must be earlier than end.")

        with self.lock:
            if spaces is None:
                candidates = self.catalog.list_enabled()
            else:
                # callers may hold stale snapshots; the catalog's flag is authoritative
                current = (self.catalog.find_by_id(space.space_id) for space in spaces)
                candidates = [space for space in current if space is not None and space.available]
            return [space for space in candidates if not self.find_conflicts(space.space_id, on_date, start, end)]

    def book(
        self,
        customer_name: str,
        space_id: int,
        on_date: date,
        start: time,
        end: time,
    ) -> BookingOutcome:
        with self.lock:
            try:
                reservation = self._book_locked(customer_name, space_id, on_date, start, end)
            except BookingError as error:
                self._log_event(
                    "RESERVATION_REJECTED",
                    {
                        "code": error.code,
                        "reason": str(error),
                        "customer_name": customer_name,
                        "space_id": space_id,
                        "date": on_date.isoformat(),
                        "start": start.isoformat(timespec="minutes"),
                        "end": end.isoformat(timespec="minutes"),
                    },
                )
                return BookingOutcome(error=error)

            # journal first: a failed write must leave the ledger untouched
            self._log_event("RESERVATION_CREATED", reservation.to_dict())
            self._reservations[reservation.reservation_id] = reservation
            return BookingOutcome(reservation=reservation)

    def _book_locked(self, customer_name: str, space_id: int, on_date: date, start: time, end: time) -> Reservation:
        space = self.catalog.find_by_id(space_id)
        if space is None:
            raise NotFound(f"Space {space_id} not found.")
        if not space.available:
            raise Unavailable(f"Space {space_id} is currently marked as unavailable by the admin.")

        conflicts = self.find_conflicts(space_id, on_date, start, end)
        if conflicts:
            existing = conflicts[0]
            raise Conflict(
                f"Space {space_id} is already booked on {existing.date.isoformat()} "
                f"from {existing.start.isoformat(timespec='minutes')} to {existing.end.isoformat(timespec='minutes')}.",
                existing,
            )
        if start >= end:
            raise InvalidWindow("Reservation start time must be earlier than end time.")

        normalized_customer = (customer_name or "").strip()
        if not normalized_customer:
            raise InvalidArgument("customer name must not be empty")

        return Reservation(
            reservation_id=self._ids.next_id(),
            space_id=space_id,
            customer_name=normalized_customer,
            date=on_date,
            start=start,
            end=end,
            created_at=self._clock(),
        )

    def cancel(self, reservation_id: int) -> bool:
        with self.lock:
            reservation = self._reservations.get(reservation_id)
            if reservation is None:
                return False
            self._log_event("RESERVATION_CANCELLED", reservation.to_dict())
            del self._reservations[reservation_id]
        return True

    def find_by_id(self, reservation_id: int) -> Reservation | None:
        with self.lock:
            return self._reservations.get(reservation_id)

    def find_conflicts(self, space_id: int, on_date: date, start: time, end: time) -> list[Reservation]:
        return find_conflicts(on_date, start, end, self.list_by_space(space_id))

    def list_all(self) -> list[Reservation]:
        with self.lock:
            return list(self._reservations.values())

    def list_by_space(self, space_id: int) -> list[Reservation]:
        with self.lock:
            return [reservation for reservation in self._reservations.values() if reservation.space_id == space_id]

    def list_by_customer(self, customer_name: str) -> list[Reservation]:
        with self.lock:
            return [reservation for reservation in self._reservations.values() if reservation.belongs_to(customer_name)]

    def preview_cascade(self, space_id: int) -> list[Reservation]:
        """Reservations that :meth:`cascade_remove_for_space` would purge."""
        return self.list_by_space(space_id)

    def cascade_remove_for_space(self, space_id: int) -> list[Reservation]:
        with self.lock:
            removed = self.list_by_space(space_id)
            if removed:
                self._log_event(
                    "RESERVATIONS_CASCADE_REMOVED",
                    {
                        "space_id": space_id,
                        "reservation_ids": [reservation.reservation_id for reservation in removed],
                    },
                )
            for reservation in removed:
                del self._reservations[reservation.reservation_id]
        return removed

    def _purge_removed_space(self, space_id: int) -> None:
        self.cascade_remove_for_space(space_id)

    def _log_event(self, event_type: str, payload: dict[str, Any]) -> None:
        if self._journal is not None:
            self._journal.record(event_type, payload)
