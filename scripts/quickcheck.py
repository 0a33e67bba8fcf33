from __future__ import annotations

from datetime import date, time
from pathlib import Path
import traceback

from workspace_booking import WorkspaceBookingService


def main() -> int:
    print("[INFO] Workspace Booking Quick Check")

    event_log = Path("data/booking_events.yaml")
    service = WorkspaceBookingService.with_event_log(event_log)
    seeded = service.seed_sample_spaces()
    print(f"[OK] Sample spaces seeded: {len(seeded)}")

    day = date(2025, 4, 3)
    first = service.book("Alice", seeded[0].space_id, day, time(9, 0), time(10, 0)).unwrap()
    print(f"[OK] Reserved: #{first.reservation_id} space {first.space_id} {first.start}~{first.end}")

    clash = service.book("Bob", seeded[0].space_id, day, time(9, 30), time(10, 30))
    print(f"[OK] Overlapping request rejected: {clash.error.code if clash.error else 'accepted?!'}")

    free = service.available_spaces(day, time(9, 0), time(10, 0))
    print(f"[OK] Free 09:00-10:00: {[space.category for space in free]}")

    removal = service.remove_space(seeded[0].space_id)
    print(f"[OK] Removal without acknowledgement needs confirmation: {removal.needs_acknowledgement}")
    removal = service.remove_space(seeded[0].space_id, acknowledge_reservations=True)
    print(f"[OK] Removed with {len(removal.affected)} reservation(s) purged")

    print(f"[OK] Event Log YAML: {event_log.resolve()} ({len(service.journal)} events)")
    print("[DONE] Quick check completed successfully.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception:
        print("[ERROR] Quick check failed.")
        traceback.print_exc()
        raise SystemExit(1)
