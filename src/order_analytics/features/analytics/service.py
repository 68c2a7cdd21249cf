"""
Analytics Service Module

Builds the admin analytics reports over the order store: the summary
(totals and status breakdown), the per-day orders chart and the paginated
order listing. Every report is a read-only query; ORM failures are
re-raised as DataStoreError and never retried.
"""

import datetime
import functools
import logging
import math
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from tortoise.exceptions import BaseORMException
from tortoise.functions import Count

from ...core.exceptions import DataStoreError
from ..orders.models import Order, OrderStatus
from .queries import build_order_filter, reporting_timezone
from .schemas import (
    AnalyticsQuery, SummaryResponse, SummaryTotals, OrderStatusCounts,
    ChartPoint, OrdersChartResponse, AnalyticsOrderSchema, OrderUserSchema,
    OrderLineSchema, PaginationSchema, OrdersListResponse
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> float:
    """Rounds a monetary amount half-up to 2 decimal places (19.999 -> 20.0)."""
    return float(_as_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def _day_key(created_at: datetime.datetime, tz: datetime.tzinfo) -> str:
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=datetime.timezone.utc)
    return created_at.astimezone(tz).date().isoformat()


def reraise_store_errors(func):
    """Turns ORM and database driver failures into DataStoreError."""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except BaseORMException as e:
            logger.error(f"{func.__name__} failed: {e}", exc_info=True)
            raise DataStoreError(error=str(e)) from e
    return wrapper


@reraise_store_errors
async def generate_summary_report(
    query: AnalyticsQuery, now: Optional[datetime.datetime] = None
) -> SummaryResponse:
    """
    Generates the order summary for a date range.

    Args:
        query: Parsed query parameters; only ``date_range`` is used.
        now: Instant the date range is resolved against (wall clock if None).

    Returns:
        SummaryResponse: with
            - summary.total_orders: number of orders in range
            - summary.total_revenue: sum of order totals, rounded to 2 places
            - summary.active_users: distinct users with an order in range
            - order_status: counts for Delivered (completed), Placed and
              Preparing. ``cancelled`` is always 0.
    """
    order_filter = build_order_filter(AnalyticsQuery(date_range=query.date_range), now)

    total_orders = await Order.filter(order_filter).count()

    totals = await Order.filter(order_filter).values_list("total", flat=True)
    total_revenue = sum((_as_decimal(total) for total in totals), Decimal("0"))

    user_ids = await Order.filter(order_filter, user_id__isnull=False).distinct().values_list("user_id", flat=True)

    status_counts = await (
        Order.filter(order_filter).annotate(count=Count("id")).group_by("status").values("status", "count")
    )
    status_map = {row["status"]: row["count"] for row in status_counts}
    logger.debug(f"Status breakdown for '{query.date_range}': {status_map}")

    return SummaryResponse(
        summary=SummaryTotals(
            total_orders=total_orders,
            total_revenue=round_money(total_revenue),
            active_users=len(set(user_ids)),
        ),
        order_status=OrderStatusCounts(
            completed=status_map.get(OrderStatus.DELIVERED.value, 0),
            cancelled=0,
            placed=status_map.get(OrderStatus.PLACED.value, 0),
            preparing=status_map.get(OrderStatus.PREPARING.value, 0),
        ),
    )


@reraise_store_errors
async def generate_orders_chart(
    query: AnalyticsQuery, now: Optional[datetime.datetime] = None
) -> OrdersChartResponse:
    """
    Groups the orders in range by calendar day (reporting timezone) with the
    order count and revenue of each day, oldest day first. Days without
    orders are not emitted, so an empty range gives an empty chart.
    """
    order_filter = build_order_filter(AnalyticsQuery(date_range=query.date_range), now)
    rows = await Order.filter(order_filter).order_by("created_at").values("created_at", "total")

    tz = reporting_timezone()
    per_day: dict[str, dict] = defaultdict(lambda: {"orders": 0, "revenue": Decimal("0")})
    for row in rows:
        day = per_day[_day_key(row["created_at"], tz)]
        day["orders"] += 1
        day["revenue"] += _as_decimal(row["total"])

    chart_data = [
        ChartPoint(date=date_key, orders=data["orders"], revenue=round_money(data["revenue"]))
        for date_key, data in sorted(per_day.items())
    ]
    return OrdersChartResponse(chart_data=chart_data)


@reraise_store_errors
async def list_orders(
    query: AnalyticsQuery, now: Optional[datetime.datetime] = None
) -> OrdersListResponse:
    """
    Lists orders in range, newest first, one page at a time.

    The status filter applies when ``query.status`` is not "all". Each order
    carries its line items and the owning user reduced to name and email.
    ``total_pages`` is ``ceil(total_orders / limit)``, 0 for no orders.
    """
    order_filter = build_order_filter(query, now)

    orders = await (
        Order.filter(order_filter)
        .order_by("-created_at", "-id")
        .offset(query.skip)
        .limit(query.limit)
        .prefetch_related("user", "items")
    )
    total_orders = await Order.filter(order_filter).count()

    return OrdersListResponse(
        orders=[_to_analytics_order_schema(order) for order in orders],
        pagination=PaginationSchema(
            current_page=query.page,
            total_pages=math.ceil(total_orders / query.limit),
            total_orders=total_orders,
            limit=query.limit,
        ),
    )


def _to_analytics_order_schema(order: Order) -> AnalyticsOrderSchema:
    # Expects "user" and "items" to be prefetched
    user = order.user
    return AnalyticsOrderSchema(
        public_id=order.public_id,
        user=OrderUserSchema(name=user.name, email=user.email) if user else None,
        items=[
            OrderLineSchema(
                public_id=item.public_id, name=item.name,
                quantity=item.quantity, price=float(item.price),
            )
            for item in order.items
        ],
        total=float(order.total),
        status=order.status,
        created_at=order.created_at,
    )
