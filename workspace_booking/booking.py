from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from itertools import count
from typing import Any, Iterable


class BookingError(ValueError):
    code = "booking_error"


class InvalidArgument(BookingError):
    code = "invalid_argument"


class InvalidWindow(InvalidArgument):
    code = "invalid_window"


class NotFound(BookingError):
    code = "not_found"


class Unavailable(BookingError):
    code = "unavailable"


class Conflict(BookingError):
    code = "conflict"

    def __init__(self, message: str, reservation: "Reservation") -> None:
        super().__init__(message)
        self.reservation = reservation


class IdAllocator:
    """Hand out increasing integer ids, starting over only for a new allocator."""

    def __init__(self, start: int = 1) -> None:
        self._counter = count(start)

    def next_id(self) -> int:
        return next(self._counter)


@dataclass(frozen=True)
class Space:
    space_id: int
    category: str
    hourly_rate: Decimal
    available: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "space_id": self.space_id,
            "category": self.category,
            "hourly_rate": f"{self.hourly_rate:.2f}",
            "available": self.available,
        }


@dataclass(frozen=True)
class Reservation:
    reservation_id: int
    space_id: int
    customer_name: str
    date: date
    start: time
    end: time
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidWindow("Reservation start time must be earlier than end time.")

    def belongs_to(self, customer_name: str) -> bool:
        return self.customer_name.casefold() == customer_name.strip().casefold()

    def conflicts_with(self, on_date: date, start: time, end: time) -> bool:
        return has_time_overlap(on_date, start, end, self.date, self.start, self.end)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "reservation_id": self.reservation_id,
            "space_id": self.space_id,
            "customer_name": self.customer_name,
            "date": self.date.isoformat(),
            "start": self.start.isoformat(timespec="minutes"),
            "end": self.end.isoformat(timespec="minutes"),
        }
        if self.created_at is not None:
            payload["created_at"] = self.created_at.isoformat(timespec="seconds")
        return payload


def has_time_overlap(
    new_date: date,
    new_start: time,
    new_end: time,
    exist_date: date,
    exist_start: time,
    exist_end: time,
) -> bool:
    """Return True when two same-day windows overlap by even one minute.

    Windows are half-open ranges [start, end), so touching boundaries
    (e.g. 09:00-10:00 and 10:00-11:00) do not overlap. Windows on different
    dates never overlap.
    """
    if new_date != exist_date:
        return False
    return new_start < exist_end and exist_start < new_end


def find_conflicts(
    on_date: date,
    start: time,
    end: time,
    existing_reservations: Iterable[Reservation],
) -> list[Reservation]:
    return [reservation for reservation in existing_reservations if reservation.conflicts_with(on_date, start, end)]
