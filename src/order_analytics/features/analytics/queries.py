"""Date-range resolution and order filter construction."""
import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from tortoise.expressions import Q

from ...core.config import REPORTING_TIMEZONE
from .schemas import AnalyticsQuery

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def reporting_timezone() -> ZoneInfo:
    return ZoneInfo(REPORTING_TIMEZONE)


def resolve_start_date(
    date_range: Optional[str],
    now: Optional[datetime.datetime] = None,
    tz: Optional[datetime.tzinfo] = None,
) -> datetime.datetime:
    """
    Maps a date-range token to the inclusive lower bound of the report window.

    The upper bound is always "now", so only the start is returned.

    Args:
        date_range: "today" for midnight of the current day, "7days" for
            seven calendar days back from ``now``. Any other value, including
            None, means all time and yields the epoch.
        now: The instant to resolve against. Defaults to the wall clock; a
            naive value is read in the reporting timezone.
        tz: Timezone deciding where "today" starts. Defaults to
            REPORTING_TIMEZONE.

    Returns:
        datetime.datetime: A timezone-aware start instant.
    """
    tz = tz or reporting_timezone()
    if now is None:
        now = datetime.datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    else:
        now = now.astimezone(tz)

    if date_range == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range == "7days":
        return now - datetime.timedelta(days=7)
    return EPOCH


def build_order_filter(query: AnalyticsQuery, now: Optional[datetime.datetime] = None) -> Q:
    """
    Builds the order predicate for a report: a lower bound on ``created_at``
    plus an exact status match unless the status is "all".

    Status values are not checked against OrderStatus; an unknown one just
    matches no orders.
    """
    start_date = resolve_start_date(query.date_range, now).astimezone(datetime.timezone.utc)
    order_filter = Q(created_at__gte=start_date)
    if query.status != "all":
        order_filter &= Q(status=query.status)
    return order_filter
