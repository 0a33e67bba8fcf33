import unittest
from datetime import date, time

from workspace_booking import IdAllocator, InvalidWindow, Reservation, has_time_overlap
from workspace_booking.booking import find_conflicts

DAY = date(2025, 4, 3)


def _reservation(reservation_id: int, start: time, end: time, on_date: date = DAY) -> Reservation:
    return Reservation(
        reservation_id=reservation_id,
        space_id=1,
        customer_name="Alice",
        date=on_date,
        start=start,
        end=end,
    )


class TestTimeOverlap(unittest.TestCase):
    def setUp(self) -> None:
        self.exist_start = time(10, 0)
        self.exist_end = time(11, 0)

    def _overlaps(self, start: time, end: time, on_date: date = DAY) -> bool:
        return has_time_overlap(on_date, start, end, DAY, self.exist_start, self.exist_end)

    def test_non_overlapping_before_passes(self) -> None:
        self.assertFalse(self._overlaps(time(9, 0), time(9, 59)))

    def test_non_overlapping_after_passes(self) -> None:
        self.assertFalse(self._overlaps(time(11, 1), time(12, 0)))

    def test_exactly_touching_boundary_passes(self) -> None:
        self.assertFalse(self._overlaps(time(11, 0), time(12, 0)))
        self.assertFalse(self._overlaps(time(9, 0), time(10, 0)))

    def test_partially_overlapping_fails(self) -> None:
        self.assertTrue(self._overlaps(time(10, 30), time(11, 30)))

    def test_fully_contained_fails(self) -> None:
        self.assertTrue(self._overlaps(time(10, 15), time(10, 45)))

    def test_enclosing_window_fails(self) -> None:
        self.assertTrue(self._overlaps(time(9, 0), time(12, 0)))

    def test_identical_window_fails(self) -> None:
        self.assertTrue(self._overlaps(time(10, 0), time(11, 0)))

    def test_same_times_on_another_day_passes(self) -> None:
        self.assertFalse(self._overlaps(time(10, 0), time(11, 0), on_date=date(2025, 4, 4)))


class TestReservation(unittest.TestCase):
    def test_rejects_zero_length_window(self) -> None:
        with self.assertRaises(InvalidWindow):
            _reservation(1, time(10, 0), time(10, 0))

    def test_rejects_inverted_window(self) -> None:
        with self.assertRaises(InvalidWindow):
            _reservation(1, time(11, 0), time(10, 0))

    def test_customer_match_is_case_insensitive(self) -> None:
        reservation = _reservation(1, time(9, 0), time(10, 0))
        self.assertTrue(reservation.belongs_to("alice"))
        self.assertTrue(reservation.belongs_to("  ALICE "))
        self.assertFalse(reservation.belongs_to("Alicia"))

    def test_to_dict_uses_iso_formats(self) -> None:
        payload = _reservation(7, time(9, 0), time(10, 30)).to_dict()
        self.assertEqual(payload["reservation_id"], 7)
        self.assertEqual(payload["date"], "2025-04-03")
        self.assertEqual(payload["start"], "09:00")
        self.assertEqual(payload["end"], "10:30")
        self.assertNotIn("created_at", payload)


class TestFindConflicts(unittest.TestCase):
    def setUp(self) -> None:
        self.existing = [
            _reservation(1, time(9, 0), time(10, 0)),
            _reservation(2, time(10, 30), time(11, 30)),
            _reservation(3, time(11, 0), time(12, 0), on_date=date(2025, 4, 4)),
        ]

    def test_returns_every_overlapping_reservation_on_the_same_day(self) -> None:
        conflicts = find_conflicts(DAY, time(9, 30), time(11, 0), self.existing)
        self.assertEqual([reservation.reservation_id for reservation in conflicts], [1, 2])

    def test_gap_between_reservations_has_no_conflicts(self) -> None:
        self.assertEqual(find_conflicts(DAY, time(10, 0), time(10, 30), self.existing), [])


class TestIdAllocator(unittest.TestCase):
    def test_ids_increase_and_restart_per_allocator(self) -> None:
        first = IdAllocator()
        self.assertEqual([first.next_id(), first.next_id(), first.next_id()], [1, 2, 3])
        self.assertEqual(IdAllocator().next_id(), 1)


if __name__ == "__main__":
    unittest.main()
