"""
Unit tests for date codes embedded in project names.
"""

from datetime import date

import pytest

from src.services.date_labels import parse_date_label


class TestPatternPriority:
    """Longer, more specific codes win over the shorter codes they contain"""

    def test_range_wins_over_full_date_and_month_year(self):
        interval = parse_date_label("05-071225")
        assert interval.start == date(2025, 12, 5)
        assert interval.end == date(2025, 12, 7)

    def test_range_inside_project_name(self):
        interval = parse_date_label("Bali Retreat 05-071225 (Final)")
        assert (interval.start, interval.end) == (date(2025, 12, 5), date(2025, 12, 7))

    def test_full_date_is_single_day(self):
        interval = parse_date_label("150625")
        assert interval.start == date(2025, 6, 15)
        assert interval.end == date(2025, 6, 15)

    def test_month_year_spans_whole_month(self):
        interval = parse_date_label("0625 Event")
        assert interval.start == date(2025, 6, 1)
        assert interval.end == date(2025, 6, 30)

    def test_month_year_february_leap_year(self):
        interval = parse_date_label("Launch 0224")
        assert interval.start == date(2024, 2, 1)
        assert interval.end == date(2024, 2, 29)

    def test_month_year_december(self):
        interval = parse_date_label("1225 Year End")
        assert interval.end == date(2025, 12, 31)


class TestInvalidCodes:

    @pytest.mark.parametrize("label", [
        "Event 1325",
        "Gala 151325",
        "Retreat 05-071325",
        "011325",
    ])
    def test_month_13_rejected_in_any_form(self, label):
        assert parse_date_label(label) is None

    def test_month_zero_rejected(self):
        assert parse_date_label("Expo 0025") is None

    def test_day_31_in_30_day_month_rejected(self):
        assert parse_date_label("310625") is None

    def test_invalid_range_end_day_falls_through(self):
        # 31 June is impossible; no shorter code stands alone in the label
        assert parse_date_label("30-310625") is None

    def test_no_digits(self):
        assert parse_date_label("Annual Company Dinner") is None

    def test_empty_and_none(self):
        assert parse_date_label("") is None
        assert parse_date_label(None) is None

    def test_longer_digit_runs_are_not_codes(self):
        # Invoice numbers and phone numbers must not parse as dates
        assert parse_date_label("INV 2025061501") is None
