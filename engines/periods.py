"""
Period resolution for revenue analytics.

Maps a symbolic period ("7d", "30d", "90d", "ytd", "1y") or an explicit
CustomPeriod to concrete half-open windows: the current window and the
preceding window of identical length used for deltas. Also owns the trend
bucket-width policy and bucket boundaries.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from models.enums import BucketWidth, RevenuePeriod
from models.revenue import CustomPeriod, Period, PeriodWindow
from utils.errors import InvalidPeriod

logger = logging.getLogger(__name__)

# Windows up to this long are bucketed by day, longer ones by week
MAX_DAILY_BUCKET_SPAN = timedelta(days=31)

ROLLING_PERIOD_DAYS: dict[RevenuePeriod, int] = {
    RevenuePeriod.LAST_7_DAYS: 7,
    RevenuePeriod.LAST_30_DAYS: 30,
    RevenuePeriod.LAST_90_DAYS: 90,
    RevenuePeriod.LAST_YEAR: 365,
}


def _aware(ts: datetime) -> datetime:
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def parse_period(period: Period) -> RevenuePeriod | CustomPeriod:
    """Accept an enum member, a CustomPeriod, or a case-insensitive period string."""
    if isinstance(period, (RevenuePeriod, CustomPeriod)):
        return period
    if isinstance(period, str):
        try:
            return RevenuePeriod(period.strip().lower())
        except ValueError as e:
            raise InvalidPeriod(f"Unrecognized period: {period!r}") from e
    raise InvalidPeriod(f"Unsupported period type: {type(period).__name__}")


def period_label(period: Period) -> str:
    parsed = parse_period(period)
    return "custom" if isinstance(parsed, CustomPeriod) else parsed.value


def bucket_width_for(duration: timedelta) -> BucketWidth:
    return BucketWidth.DAY if duration <= MAX_DAILY_BUCKET_SPAN else BucketWidth.WEEK


def resolve_period(
    period: Period, now: datetime | None = None, tz: tzinfo | None = None
) -> PeriodWindow:
    """
    Resolve a period into current and previous windows.

    Args:
        period: Symbolic period or CustomPeriod.
        now: Exclusive end of the current window for symbolic periods
            (defaults to the current time).
        tz: Timezone for calendar boundaries (year-to-date); defaults to UTC.
    """
    tz = tz or timezone.utc
    now = _aware(now) if now is not None else datetime.now(timezone.utc)
    parsed = parse_period(period)

    if isinstance(parsed, CustomPeriod):
        start, end = _aware(parsed.start), _aware(parsed.end)
        if start >= end:
            raise InvalidPeriod(f"Custom period start {start.isoformat()} must be before end {end.isoformat()}")
        label = "custom"
    elif parsed is RevenuePeriod.YEAR_TO_DATE:
        end = now
        start = datetime(now.astimezone(tz).year, 1, 1, tzinfo=tz)
        label = parsed.value
    else:
        end = now
        start = now - timedelta(days=ROLLING_PERIOD_DAYS[parsed])
        label = parsed.value

    duration = end - start
    window = PeriodWindow(
        current_start=start,
        current_end=end,
        previous_start=start - duration,
        previous_end=start,
        bucket_width=bucket_width_for(duration),
        label=label,
    )
    logger.debug(
        f"Resolved period {label}: [{start.isoformat()}, {end.isoformat()}) "
        f"bucketed by {window.bucket_width.value}"
    )
    return window


def bucket_start_for(ts: datetime, width: BucketWidth, tz: tzinfo | None = None) -> datetime:
    """Start of the day (or Monday-based week) containing ``ts`` in ``tz``."""
    tz = tz or timezone.utc
    day = _aware(ts).astimezone(tz).date()
    if width is BucketWidth.WEEK:
        day -= timedelta(days=day.weekday())
    return datetime.combine(day, time.min, tzinfo=tz)


def bucket_starts(window: PeriodWindow, tz: tzinfo | None = None) -> list[datetime]:
    """Every bucket overlapping the current window, in chronological order."""
    if window.current_end <= window.current_start:
        return []
    tz = tz or timezone.utc
    step = timedelta(days=7 if window.bucket_width is BucketWidth.WEEK else 1)
    first: date = bucket_start_for(window.current_start, window.bucket_width, tz).date()
    last: date = bucket_start_for(
        window.current_end - timedelta(microseconds=1), window.bucket_width, tz
    ).date()
    starts = []
    day = first
    while day <= last:
        starts.append(datetime.combine(day, time.min, tzinfo=tz))
        day += step
    return starts


class PeriodResolver:
    """Resolves periods against an injectable clock and a fixed timezone."""

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        tz: tzinfo | None = None,
    ):
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.tz = tz or timezone.utc

    def resolve(self, period: Period) -> PeriodWindow:
        return resolve_period(period, now=self.clock(), tz=self.tz)

    def bucket_start_for(self, ts: datetime, width: BucketWidth) -> datetime:
        return bucket_start_for(ts, width, self.tz)

    def bucket_starts(self, window: PeriodWindow) -> list[datetime]:
        return bucket_starts(window, self.tz)
