import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal

from .catalog import normalize_rate

_DATE_RE = re.compile(r"^\s*(?P<date>\d{4}[/-]\d{1,2}[/-]\d{1,2})\s*$")
_TIME_RE = re.compile(r"^\s*(?P<time>(?:[01]?\d|2[0-3]):[0-5]\d)\s*$")


@dataclass(frozen=True)
class BookingWindow:
    date: date
    start: time
    end: time


def parse_date(date_text: str) -> date:
    match = _DATE_RE.match(date_text or "")
    if not match:
        raise ValueError("Invalid date format. Please use YYYY-MM-DD (e.g., 2025-04-03).")

    normalized = match.group("date").replace("/", "-")
    try:
        return datetime.strptime(normalized, "%Y-%m-%d").date()
    except ValueError as error:
        raise ValueError(f"Invalid calendar date: {date_text}") from error


def parse_time(time_text: str) -> time:
    match = _TIME_RE.match(time_text or "")
    if not match:
        raise ValueError("Invalid time format. Please use HH:MM (e.g., 09:00 or 14:30).")
    return datetime.strptime(match.group("time"), "%H:%M").time()


def parse_window(date_text: str, start_text: str, end_text: str) -> BookingWindow:
    window = BookingWindow(date=parse_date(date_text), start=parse_time(start_text), end=parse_time(end_text))
    if window.start >= window.end:
        raise ValueError("End time must be after start time.")
    return window


def parse_rate(rate_text: str) -> Decimal:
    cleaned = (rate_text or "").strip().lstrip("$").strip()
    if not cleaned:
        raise ValueError("Please enter a number (e.g., 10.50).")
    return normalize_rate(cleaned)


def parse_id(id_text: str | int, label: str = "id") -> int:
    if isinstance(id_text, bool):
        raise ValueError(f"{label} must be a whole number.")
    if isinstance(id_text, int):
        return id_text
    try:
        return int(str(id_text).strip())
    except ValueError as error:
        raise ValueError(f"{label} must be a whole number.") from error
