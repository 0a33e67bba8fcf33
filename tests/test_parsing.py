import unittest
from datetime import date, time
from decimal import Decimal

from workspace_booking import parse_date, parse_rate, parse_time, parse_window
from workspace_booking.parsing import parse_id


class TestFieldParsing(unittest.TestCase):
    def test_parse_date_accepts_dash_and_slash(self) -> None:
        self.assertEqual(parse_date("2025-04-03"), date(2025, 4, 3))
        self.assertEqual(parse_date("2025/4/3"), date(2025, 4, 3))

    def test_parse_date_rejects_bad_input(self) -> None:
        for text in ("03-04-2025", "2025-02-30", "", "tomorrow"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_date(text)

    def test_parse_time(self) -> None:
        self.assertEqual(parse_time("09:00"), time(9, 0))
        self.assertEqual(parse_time("9:05"), time(9, 5))
        for text in ("24:00", "10:60", "1000", ""):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_time(text)

    def test_parse_window_requires_end_after_start(self) -> None:
        window = parse_window("2025-04-03", "09:00", "10:30")
        self.assertEqual((window.date, window.start, window.end), (date(2025, 4, 3), time(9, 0), time(10, 30)))
        with self.assertRaises(ValueError):
            parse_window("2025-04-03", "10:00", "10:00")

    def test_parse_rate(self) -> None:
        self.assertEqual(parse_rate("$10.50"), Decimal("10.50"))
        self.assertEqual(parse_rate("0"), Decimal("0"))
        for text in ("-1", "ten", ""):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_rate(text)

    def test_parse_id(self) -> None:
        self.assertEqual(parse_id(" 3 "), 3)
        self.assertEqual(parse_id(4), 4)
        with self.assertRaises(ValueError):
            parse_id("three", "space_id")


if __name__ == "__main__":
    unittest.main()
