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
    has_time_overlap,
)
from .catalog import SpaceCatalog
from .event_log import EventJournal, EventLogStorageError
from .ledger import BookingLedger, BookingOutcome
from .parsing import BookingWindow, parse_date, parse_rate, parse_time, parse_window
from .service import SAMPLE_SPACES, SpaceRemovalResult, WorkspaceBookingService

__all__ = [
    "BookingError",
    "Conflict",
    "IdAllocator",
    "InvalidArgument",
    "InvalidWindow",
    "NotFound",
    "Reservation",
    "Space",
    "Unavailable",
    "has_time_overlap",
    "SpaceCatalog",
    "EventJournal",
    "EventLogStorageError",
    "BookingLedger",
    "BookingOutcome",
    "BookingWindow",
    "parse_date",
    "parse_rate",
    "parse_time",
    "parse_window",
    "SAMPLE_SPACES",
    "SpaceRemovalResult",
    "WorkspaceBookingService",
]
