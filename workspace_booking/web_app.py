from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from flask import Flask, jsonify, request

from .booking import BookingError, Conflict, InvalidArgument, NotFound, Unavailable
from .parsing import parse_id, parse_rate, parse_window
from .service import WorkspaceBookingService

_STATUS_BY_ERROR: tuple[tuple[type[BookingError], int], ...] = (
    (NotFound, 404),
    (Conflict, 409),
    (Unavailable, 409),
    (InvalidArgument, 400),
)


def create_app(
    event_log_path: str | Path | None = None,
    now_provider: Callable[[], datetime] | None = None,
    seed_samples: bool = True,
) -> Flask:
    app = Flask(__name__)
    clock: Callable[[], datetime] = now_provider or datetime.now
    if event_log_path is not None:
        service = WorkspaceBookingService.with_event_log(event_log_path, clock=clock)
    else:
        service = WorkspaceBookingService(clock=clock)
    if seed_samples:
        service.seed_sample_spaces()
    app.extensions["workspace_booking"] = service

    def _payload() -> dict[str, Any]:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}

    def _error(message: str, status: int, code: str = "invalid_argument", **extra: Any) -> Any:
        return jsonify({"ok": False, "code": code, "message": message, **extra}), status

    def _booking_error(error: BookingError) -> Any:
        status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(error, kind)), 400)
        extra: dict[str, Any] = {}
        if isinstance(error, Conflict):
            extra["conflicting_reservation"] = service.describe_reservation(error.reservation)
        return _error(str(error), status, error.code, **extra)

    @app.after_request
    def add_cors_headers(response: Any) -> Any:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/api/spaces")
    def list_spaces() -> Any:
        return jsonify({"ok": True, "spaces": [space.to_dict() for space in service.catalog.list_all()]})

    @app.get("/api/availability")
    def get_availability() -> Any:
        try:
            window = parse_window(
                str(request.args.get("date", "")),
                str(request.args.get("start", "")),
                str(request.args.get("end", "")),
            )
        except ValueError as error:
            return _error(str(error), 400)

        spaces = service.available_spaces(window.date, window.start, window.end)
        return jsonify(
            {
                "ok": True,
                "date": window.date.isoformat(),
                "start": window.start.isoformat(timespec="minutes"),
                "end": window.end.isoformat(timespec="minutes"),
                "spaces": [space.to_dict() for space in spaces],
            }
        )

    @app.post("/api/reservations")
    def create_reservation() -> Any:
        payload = _payload()
        customer = str(payload.get("customer", "")).strip()
        if not customer:
            return _error("customer is required.", 400)

        try:
            space_id = parse_id(payload.get("space_id", ""), "space_id")
            window = parse_window(
                str(payload.get("date", "")),
                str(payload.get("start", "")),
                str(payload.get("end", "")),
            )
        except ValueError as error:
            return _error(str(error), 400)

        outcome = service.book(customer, space_id, window.date, window.start, window.end)
        if outcome.error is not None:
            return _booking_error(outcome.error)

        reservation = outcome.unwrap()
        return jsonify({"ok": True, "reservation": service.describe_reservation(reservation)}), 201

    @app.get("/api/reservations")
    def list_customer_reservations() -> Any:
        customer = str(request.args.get("customer", "")).strip()
        if not customer:
            return _error("customer is required.", 400)

        reservations = service.reservations_for(customer)
        return jsonify({"ok": True, "reservations": [service.describe_reservation(item) for item in reservations]})

    @app.post("/api/reservations/<int:reservation_id>/cancel")
    def cancel_reservation(reservation_id: int) -> Any:
        customer = str(_payload().get("customer", "")).strip()
        if not customer:
            return _error("customer is required.", 400)

        existing = service.ledger.find_by_id(reservation_id)
        if existing is None:
            return _error(f"Reservation {reservation_id} not found.", 404, NotFound.code)
        if not existing.belongs_to(customer):
            return _error(f"Reservation {reservation_id} not found in your bookings.", 403, "forbidden")

        if not service.cancel_for_customer(customer, reservation_id):
            return _error(f"Reservation {reservation_id} could not be cancelled.", 404, NotFound.code)
        return jsonify({"ok": True, "reservation": existing.to_dict()})

    @app.post("/api/admin/spaces")
    def add_space() -> Any:
        payload = _payload()
        try:
            rate = parse_rate(str(payload.get("rate", "")))
            space = service.catalog.add(str(payload.get("category", "")), rate)
        except ValueError as error:
            return _error(str(error), 400)
        return jsonify({"ok": True, "space": space.to_dict()}), 201

    @app.post("/api/admin/spaces/<int:space_id>/update")
    def update_space(space_id: int) -> Any:
        payload = _payload()
        try:
            rate = parse_rate(str(payload["rate"])) if payload.get("rate") not in (None, "") else None
            available = _parse_flag(payload.get("available"))
            category = payload.get("category")
            space = service.update_space(
                space_id,
                category=str(category) if category is not None else None,
                rate=rate,
                available=available,
            )
        except BookingError as error:
            return _booking_error(error)
        except ValueError as error:
            return _error(str(error), 400)
        return jsonify({"ok": True, "space": space.to_dict()})

    @app.get("/api/admin/spaces/<int:space_id>/removal-preview")
    def preview_space_removal(space_id: int) -> Any:
        preview = service.preview_space_removal(space_id)
        if not preview.found:
            return _error(f"Space {space_id} not found.", 404, NotFound.code)
        affected = [service.describe_reservation(item) for item in preview.affected]
        return jsonify({"ok": True, **preview.to_dict(), "affected": affected})

    @app.post("/api/admin/spaces/<int:space_id>/delete")
    def delete_space(space_id: int) -> Any:
        try:
            acknowledge = _parse_flag(_payload().get("acknowledge")) is True
        except ValueError as error:
            return _error(str(error), 400)

        result = service.remove_space(space_id, acknowledge_reservations=acknowledge)
        if not result.found:
            return _error(f"Space {space_id} not found.", 404, NotFound.code)
        if result.needs_acknowledgement and not result.removed:
            return jsonify({"ok": False, "code": "needs_acknowledgement", **result.to_dict()}), 409
        return jsonify({"ok": True, **result.to_dict()})

    @app.get("/api/admin/reservations")
    def list_all_reservations() -> Any:
        reservations = service.ledger.list_all()
        return jsonify({"ok": True, "reservations": [service.describe_reservation(item) for item in reservations]})

    @app.get("/api/admin/events")
    def list_events() -> Any:
        event_type = request.args.get("type")
        return jsonify({"ok": True, "events": service.journal.events(event_type)})

    return app


def _parse_flag(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    if text in {"true", "yes", "1"}:
        return True
    if text in {"false", "no", "0"}:
        return False
    raise ValueError(f"Expected true/false, got {value!r}.")


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=5000, debug=False)
