from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import Callable

from .booking import IdAllocator, InvalidArgument, NotFound, Space
from .event_log import EventJournal

RateInput = Decimal | int | float | str


class SpaceCatalog:
    """Reservable spaces and their administrative availability flag.

    The catalog owns ``lock``; a ledger built on top of it shares the same
    lock so that booking checks and catalog edits never interleave.
    """

    def __init__(self, journal: EventJournal | None = None) -> None:
        self.lock = RLock()
        self._journal = journal
        self._ids = IdAllocator()
        self._spaces: dict[int, Space] = {}
        self._removal_listeners: list[Callable[[int], None]] = []

    def add(self, category: str, rate: RateInput) -> Space:
        normalized_category = normalize_category(category)
        hourly_rate = normalize_rate(rate)
        with self.lock:
            space = Space(space_id=self._ids.next_id(), category=normalized_category, hourly_rate=hourly_rate)
            self._log_event("SPACE_ADDED", space)
            self._spaces[space.space_id] = space
        return space

    def remove(self, space_id: int) -> bool:
        with self.lock:
            space = self._spaces.get(space_id)
            if space is None:
                return False
            # dependents go first so a failure here never strands them
            for listener in list(self._removal_listeners):
                listener(space_id)
            self._log_event("SPACE_REMOVED", space)
            del self._spaces[space_id]
        return True

    def find_by_id(self, space_id: int) -> Space | None:
        with self.lock:
            return self._spaces.get(space_id)

    def list_all(self) -> list[Space]:
        with self.lock:
            return list(self._spaces.values())

    def list_enabled(self) -> list[Space]:
        with self.lock:
            return [space for space in self._spaces.values() if space.available]

    def set_category(self, space_id: int, category: str) -> Space:
        return self._update(space_id, category=normalize_category(category))

    def set_rate(self, space_id: int, rate: RateInput) -> Space:
        return self._update(space_id, hourly_rate=normalize_rate(rate))

    def set_available(self, space_id: int, available: bool) -> Space:
        return self._update(space_id, available=bool(available))

    def add_removal_listener(self, listener: Callable[[int], None]) -> None:
        """Call ``listener(space_id)`` whenever a space is removed."""
        self._removal_listeners.append(listener)

    def _update(self, space_id: int, **changes: object) -> Space:
        with self.lock:
            current = self._spaces.get(space_id)
            if current is None:
                raise NotFound(f"Space {space_id} not found.")
            updated = replace(current, **changes)
            self._log_event("SPACE_UPDATED", updated)
            # dict assignment to an existing key keeps insertion order
            self._spaces[space_id] = updated
        return updated

    def _log_event(self, event_type: str, space: Space) -> None:
        if self._journal is not None:
            self._journal.record(event_type, space.to_dict())


def normalize_category(category: str | None) -> str:
    if category is None:
        raise InvalidArgument("category must not be None")

    normalized = category.strip()
    if not normalized:
        raise InvalidArgument("category must not be empty")
    return normalized


def normalize_rate(rate: RateInput | None) -> Decimal:
    if rate is None:
        raise InvalidArgument("hourly rate must not be None")
    if isinstance(rate, bool):
        raise InvalidArgument("hourly rate must be a number")

    try:
        value = rate if isinstance(rate, Decimal) else Decimal(str(rate).strip())
    except InvalidOperation as error:
        raise InvalidArgument(f"hourly rate is not a number: {rate!r}") from error

    if not value.is_finite():
        raise InvalidArgument("hourly rate must be a finite number")
    if value < 0:
        raise InvalidArgument("hourly rate cannot be negative")
    return value
