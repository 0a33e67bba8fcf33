from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from workspace_booking import WorkspaceBookingService, parse_window

mcp = FastMCP(
    "Workspace Booking MCP Server",
    instructions="Browse coworking spaces and book, list or cancel reservations.",
    json_response=True,
)

EVENT_LOG = Path(__file__).parent / "data" / "booking_events.yaml"
SERVICE = WorkspaceBookingService.with_event_log(EVENT_LOG)
SERVICE.seed_sample_spaces()


@mcp.resource("workspace://spaces")
async def list_spaces_resource() -> list[dict[str, Any]]:
    """List every space in the catalog."""
    return [space.to_dict() for space in SERVICE.catalog.list_all()]


@mcp.tool()
def list_spaces() -> list[dict[str, Any]]:
    """Return all spaces with their category, hourly rate and availability flag."""
    return [space.to_dict() for space in SERVICE.catalog.list_all()]


@mcp.tool()
def available_spaces(date: str, start: str, end: str) -> list[dict[str, Any]]:
    """Return spaces free for the window. Dates are YYYY-MM-DD, times HH:MM."""
    window = parse_window(date, start, end)
    return [space.to_dict() for space in SERVICE.available_spaces(window.date, window.start, window.end)]


@mcp.tool()
def book_space(customer: str, space_id: int, date: str, start: str, end: str) -> dict[str, Any]:
    """Book a space for a customer; reports the conflicting reservation on failure."""
    window = parse_window(date, start, end)
    outcome = SERVICE.book(customer, space_id, window.date, window.start, window.end)
    if outcome.error is not None:
        result: dict[str, Any] = {"ok": False, "code": outcome.error.code, "message": str(outcome.error)}
        if outcome.conflicting is not None:
            result["conflicting_reservation"] = SERVICE.describe_reservation(outcome.conflicting)
        return result
    return {"ok": True, "reservation": SERVICE.describe_reservation(outcome.unwrap())}


@mcp.tool()
def my_reservations(customer: str) -> list[dict[str, Any]]:
    """Return the customer's reservations (name match is case-insensitive)."""
    return [SERVICE.describe_reservation(item) for item in SERVICE.reservations_for(customer)]


@mcp.tool()
def cancel_reservation(customer: str, reservation_id: int) -> dict[str, Any]:
    """Cancel one of the customer's own reservations."""
    return {"ok": SERVICE.cancel_for_customer(customer, reservation_id), "reservation_id": reservation_id}


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
