"""
Date Range Resolution

Maps the dashboard's named range selectors to concrete intervals, and
comparison modes to the prior interval of the same granularity.

All datetimes are naive and expressed in the store's local time, matching
how order timestamps are stored.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class DateRangeSelector(str, Enum):
    """Named date ranges accepted by the analytics endpoints"""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    THIRTY_DAYS = "30days"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"
    ALL = "all"

    @classmethod
    def parse(cls, value: Optional[str]) -> "DateRangeSelector":
        """Unknown or missing selectors mean no date filter."""
        try:
            return cls((value or cls.ALL.value).strip().lower())
        except ValueError:
            return cls.ALL


class ComparisonMode(str, Enum):
    """Granularity of a period-over-period comparison"""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ComparisonMode"]:
        """`none`, unknown or missing modes disable the comparison."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Days covered by selectors with a rolling window
ROLLING_WINDOW_DAYS = {
    DateRangeSelector.WEEK: 7,
    DateRangeSelector.THIRTY_DAYS: 30,
}


@dataclass(frozen=True)
class DateInterval:
    """Closed interval [start, end]"""
    start: datetime
    end: datetime

    @property
    def days(self) -> float:
        """Length of the interval in (fractional) days"""
        return (self.end - self.start).total_seconds() / 86400


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), datetime.min.time())


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), datetime.max.time())


def _month_interval(year: int, first_month: int, last_month: int) -> DateInterval:
    last_day = calendar.monthrange(year, last_month)[1]
    return DateInterval(
        start=datetime(year, first_month, 1),
        end=end_of_day(datetime(year, last_month, last_day)),
    )


def parse_moment(value: Optional[str], end_of_day_if_date: bool = False) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime string.

    Timezone-aware values are converted to naive local time. A bare date
    parses to midnight, or to the last instant of that day when
    `end_of_day_if_date` is set. Returns None for missing or malformed input.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Ignoring malformed date", value=text)
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)

    if end_of_day_if_date and is_bare_date(text):
        return end_of_day(parsed)
    return parsed


def is_bare_date(text: str) -> bool:
    """True for a date without a time part, extended (2025-06-15) or basic (20250615)."""
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def resolve_date_range(
    selector: DateRangeSelector,
    custom_start: Optional[str] = None,
    custom_end: Optional[str] = None,
    now: Optional[datetime] = None,
    lookback_days: int = 30,
) -> Optional[DateInterval]:
    """
    Resolve a named range to a concrete interval.

    Args:
        selector: Named range
        custom_start: ISO start for the `custom` selector
        custom_end: ISO end for the `custom` selector
        now: Reference time (defaults to the current local time)
        lookback_days: Start of a `custom` range when no valid start is given

    Returns:
        The interval, or None for `all` (no date filter)
    """
    now = now or datetime.now()

    if selector == DateRangeSelector.TODAY:
        return DateInterval(start_of_day(now), end_of_day(now))

    if selector in ROLLING_WINDOW_DAYS:
        days = ROLLING_WINDOW_DAYS[selector]
        return DateInterval(start_of_day(now - timedelta(days=days)), now)

    if selector == DateRangeSelector.MONTH:
        return _month_interval(now.year, now.month, now.month)

    if selector == DateRangeSelector.QUARTER:
        first_month = (now.month - 1) // 3 * 3 + 1
        return _month_interval(now.year, first_month, first_month + 2)

    if selector == DateRangeSelector.YEAR:
        return _month_interval(now.year, 1, 12)

    if selector == DateRangeSelector.CUSTOM:
        start = parse_moment(custom_start)
        end = parse_moment(custom_end, end_of_day_if_date=True)
        return DateInterval(
            start=start or now - timedelta(days=lookback_days),
            end=end or now,
        )

    return None


def resolve_comparison_range(
    mode: Optional[ComparisonMode],
    now: Optional[datetime] = None,
) -> Optional[DateInterval]:
    """
    Resolve the prior period for a comparison mode.

    - month: the previous calendar month
    - week: the 7 days preceding the current 7-day window
    - year: the previous calendar year
    """
    if mode is None:
        return None
    now = now or datetime.now()

    if mode == ComparisonMode.MONTH:
        first_of_month = date(now.year, now.month, 1)
        previous = first_of_month - timedelta(days=1)
        return _month_interval(previous.year, previous.month, previous.month)

    if mode == ComparisonMode.WEEK:
        return DateInterval(
            start=start_of_day(now - timedelta(days=14)),
            end=end_of_day(now - timedelta(days=7)),
        )

    if mode == ComparisonMode.YEAR:
        return _month_interval(now.year - 1, 1, 12)

    return None
