"""Analytics API schemas

Pydantic models for the admin analytics endpoints:

1. AnalyticsQuery, the typed query-string parameters with their defaults
2. Summary report (totals plus order status breakdown)
3. Orders chart (one point per calendar day)
4. Paginated order listing

Response models serialise with camelCase keys (``totalOrders``,
``chartData``, ``currentPage``...) through the alias generator."""
import datetime
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...core.config import DEFAULT_DATE_RANGE, DEFAULT_LIMIT, DEFAULT_PAGE, DEFAULT_STATUS

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
# Upper bound for page and limit; keeps the OFFSET (page - 1) * limit inside a signed 64-bit integer
MAX_PAGING_VALUE = 2**31 - 1


def parse_int(value: Any, default: int) -> int:
    """Parse the leading integer of ``value``; fall back to ``default``.

    ``"3"``, ``" 3"``, ``"3abc"`` and ``"3.9"`` all give 3; ``"abc"``, ``""``
    and ``None`` give ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


class AnalyticsQuery(BaseModel):
    """Query parameters shared by the analytics endpoints.

    Defaults: ``date_range="7days"``, ``status="all"``, ``page=1``,
    ``limit=10``. Page and limit are coerced leniently and never rejected:
    unparsable values use the default, ``page < 1`` becomes 1 and
    ``limit < 1`` becomes the default limit. Both are capped at
    MAX_PAGING_VALUE so the offset always fits the database integer type.
    """
    date_range: str = Field(DEFAULT_DATE_RANGE, description="today, 7days, or anything else for all time")
    status: str = Field(DEFAULT_STATUS, description="Order status to match, or 'all'")
    page: int = Field(DEFAULT_PAGE, description="1-based page number")
    limit: int = Field(DEFAULT_LIMIT, description="Orders per page")

    @field_validator("page", mode="before")
    @classmethod
    def coerce_page(cls, value: Any) -> int:
        page = parse_int(value, DEFAULT_PAGE)
        return min(page, MAX_PAGING_VALUE) if page >= 1 else DEFAULT_PAGE

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> int:
        limit = parse_int(value, DEFAULT_LIMIT)
        return min(limit, MAX_PAGING_VALUE) if limit >= 1 else DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Summary
class SummaryTotals(CamelModel):
    total_orders: int
    total_revenue: float
    active_users: int


class OrderStatusCounts(CamelModel):
    completed: int = 0
    # TODO: count real cancellations once orders can reach the Cancelled status
    cancelled: int = 0
    placed: int = 0
    preparing: int = 0


class SummaryResponse(CamelModel):
    summary: SummaryTotals
    order_status: OrderStatusCounts


# Orders chart
class ChartPoint(CamelModel):
    date: str = Field(..., description="Calendar day in the reporting timezone (YYYY-MM-DD)")
    orders: int
    revenue: float


class OrdersChartResponse(CamelModel):
    chart_data: List[ChartPoint]


# Paginated orders
class OrderUserSchema(CamelModel):
    name: str
    email: str


class OrderLineSchema(CamelModel):
    public_id: str
    name: str
    quantity: int
    price: float


class AnalyticsOrderSchema(CamelModel):
    public_id: str
    user: Optional[OrderUserSchema] = None  # None once the user has been deleted
    items: List[OrderLineSchema]
    total: float
    status: str
    created_at: datetime.datetime


class PaginationSchema(CamelModel):
    current_page: int
    total_pages: int
    total_orders: int
    limit: int


class OrdersListResponse(CamelModel):
    orders: List[AnalyticsOrderSchema]
    pagination: PaginationSchema
