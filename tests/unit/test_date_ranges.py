"""
Unit Tests - Date Range Resolution
"""
from datetime import datetime

import pytest

from storefront_analytics.analytics.date_ranges import (
    ComparisonMode,
    DateInterval,
    DateRangeSelector,
    parse_moment,
    resolve_comparison_range,
    resolve_date_range,
)


class TestSelectorParsing:
    """Tests for selector and mode parsing"""

    @pytest.mark.parametrize("value", [None, "", "all", "forever", "ALL"])
    def test_unknown_or_missing_means_all(self, value):
        assert DateRangeSelector.parse(value) == DateRangeSelector.ALL

    def test_known_selectors(self):
        assert DateRangeSelector.parse("30days") == DateRangeSelector.THIRTY_DAYS
        assert DateRangeSelector.parse(" Week ") == DateRangeSelector.WEEK

    @pytest.mark.parametrize("value", [None, "", "none", "decade"])
    def test_comparison_disabled(self, value):
        assert ComparisonMode.parse(value) is None

    def test_comparison_modes(self):
        assert ComparisonMode.parse("month") == ComparisonMode.MONTH
        assert ComparisonMode.parse("YEAR") == ComparisonMode.YEAR


class TestResolveDateRange:
    """Tests for resolve_date_range"""

    def test_all_has_no_interval(self, now):
        assert resolve_date_range(DateRangeSelector.ALL, now=now) is None

    def test_today(self, now):
        interval = resolve_date_range(DateRangeSelector.TODAY, now=now)

        assert interval.start == datetime(2025, 6, 15)
        assert interval.end == datetime(2025, 6, 15, 23, 59, 59, 999999)

    def test_week_starts_at_midnight_seven_days_back(self, now):
        interval = resolve_date_range(DateRangeSelector.WEEK, now=now)

        assert interval.start == datetime(2025, 6, 8)
        assert interval.end == now

    def test_thirty_days(self, now):
        interval = resolve_date_range(DateRangeSelector.THIRTY_DAYS, now=now)

        assert interval.start == datetime(2025, 5, 16)
        assert interval.end == now

    def test_month(self, now):
        interval = resolve_date_range(DateRangeSelector.MONTH, now=now)

        assert interval.start == datetime(2025, 6, 1)
        assert interval.end == datetime(2025, 6, 30, 23, 59, 59, 999999)

    def test_quarter(self, now):
        interval = resolve_date_range(DateRangeSelector.QUARTER, now=now)

        assert interval.start == datetime(2025, 4, 1)
        assert interval.end.date() == datetime(2025, 6, 30).date()

    def test_year(self, now):
        interval = resolve_date_range(DateRangeSelector.YEAR, now=now)

        assert interval.start == datetime(2025, 1, 1)
        assert interval.end.date() == datetime(2025, 12, 31).date()

    def test_custom_bare_dates_cover_whole_end_day(self, now):
        interval = resolve_date_range(
            DateRangeSelector.CUSTOM, "2025-03-01", "2025-03-10", now=now
        )

        assert interval.start == datetime(2025, 3, 1)
        assert interval.end == datetime(2025, 3, 10, 23, 59, 59, 999999)

    def test_custom_compact_end_date_covers_whole_day(self, now):
        interval = resolve_date_range(
            DateRangeSelector.CUSTOM, "20250301", "20250310", now=now
        )

        assert interval.start == datetime(2025, 3, 1)
        assert interval.end == datetime(2025, 3, 10, 23, 59, 59, 999999)

    def test_custom_with_times(self, now):
        interval = resolve_date_range(
            DateRangeSelector.CUSTOM, "2025-03-01T08:00:00", "2025-03-10T18:00:00", now=now
        )

        assert interval == DateInterval(datetime(2025, 3, 1, 8), datetime(2025, 3, 10, 18))

    def test_custom_defaults(self, now):
        interval = resolve_date_range(DateRangeSelector.CUSTOM, None, "not-a-date", now=now)

        assert interval.start == datetime(2025, 5, 16, 14, 30)
        assert interval.end == now


class TestParseMoment:
    """Tests for parse_moment"""

    def test_missing(self):
        assert parse_moment(None) is None
        assert parse_moment("  ") is None

    def test_malformed(self):
        assert parse_moment("15/06/2025") is None

    @pytest.mark.parametrize("value,expected", [
        ("2025-06-15", datetime(2025, 6, 15, 23, 59, 59, 999999)),
        ("20250615", datetime(2025, 6, 15, 23, 59, 59, 999999)),
        ("2025-06-15T00:00", datetime(2025, 6, 15)),
        ("2025-06-15 08:30", datetime(2025, 6, 15, 8, 30)),
    ])
    def test_end_of_day_only_for_bare_dates(self, value, expected):
        assert parse_moment(value, end_of_day_if_date=True) == expected

    def test_aware_values_become_naive(self):
        parsed = parse_moment("2025-06-15T10:00:00+00:00")

        assert parsed.tzinfo is None


class TestComparisonRange:
    """Tests for resolve_comparison_range"""

    def test_none(self, now):
        assert resolve_comparison_range(None, now) is None

    def test_previous_month(self, now):
        interval = resolve_comparison_range(ComparisonMode.MONTH, now)

        assert interval.start == datetime(2025, 5, 1)
        assert interval.end == datetime(2025, 5, 31, 23, 59, 59, 999999)

    def test_previous_month_crosses_year(self):
        interval = resolve_comparison_range(ComparisonMode.MONTH, datetime(2025, 1, 20))

        assert interval.start == datetime(2024, 12, 1)

    def test_previous_week(self, now):
        interval = resolve_comparison_range(ComparisonMode.WEEK, now)

        assert interval.start == datetime(2025, 6, 1)
        assert interval.end == datetime(2025, 6, 8, 23, 59, 59, 999999)

    def test_previous_year(self, now):
        interval = resolve_comparison_range(ComparisonMode.YEAR, now)

        assert interval.start == datetime(2024, 1, 1)
        assert interval.end.date() == datetime(2024, 12, 31).date()
