"""
Unit tests for day label detection.

Label rule:
- full weekday name or three-letter abbreviation, any case
- followed by optional whitespace and a colon
- first occurrence of a weekday wins
"""

import unittest

from kioskday.day_labels import scan_day_labels, weekdays_in_text
from kioskday.document import linearize_parts


class TestWeekdaysInText(unittest.TestCase):
    def test_full_name_with_colon(self) -> None:
        self.assertEqual(weekdays_in_text("Monday:"), ["Monday"])

    def test_case_and_whitespace_before_colon(self) -> None:
        self.assertEqual(weekdays_in_text("  WEDNESDAY  :  open mic"), ["Wednesday"])

    def test_abbreviation_normalizes_to_full_name(self) -> None:
        self.assertEqual(weekdays_in_text("thu:"), ["Thursday"])
        self.assertEqual(weekdays_in_text("Sun :"), ["Sunday"])

    def test_without_colon_is_not_a_label(self) -> None:
        self.assertEqual(weekdays_in_text("Monday night jam"), [])
        self.assertEqual(weekdays_in_text("Mondays: closed"), [])

    def test_several_labels_in_one_text(self) -> None:
        self.assertEqual(weekdays_in_text("Fri: late, Mon: early"), ["Monday", "Friday"])

    def test_empty_text(self) -> None:
        self.assertEqual(weekdays_in_text(""), [])


class TestScanDayLabels(unittest.TestCase):
    def test_matches_ordered_by_index(self) -> None:
        nodes = linearize_parts(["Friday:", ("img", "a.png"), "Monday:"])
        matches = scan_day_labels(nodes)
        self.assertEqual([(m.weekday, m.index) for m in matches], [("Friday", 0), ("Monday", 2)])

    def test_first_occurrence_wins(self) -> None:
        nodes = linearize_parts(["intro", "Tuesday:", "Tue:", "tuesday :"])
        matches = scan_day_labels(nodes)
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].weekday, "Tuesday")
        self.assertEqual(matches[0].index, 1)

    def test_no_labels_is_empty_not_error(self) -> None:
        nodes = linearize_parts(["Open mic list", ("img", "a.png")])
        self.assertEqual(scan_day_labels(nodes), [])


if __name__ == "__main__":
    unittest.main()
