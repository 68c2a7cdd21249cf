import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ...core.config import DEFAULT_DATE_RANGE, DEFAULT_LIMIT, DEFAULT_PAGE, DEFAULT_STATUS
from ..auth.security import require_admin
from .schemas import AnalyticsQuery, SummaryResponse, OrdersChartResponse, OrdersListResponse
from . import service as analytics_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    # Admin guard runs before every handler in this router
    dependencies=[Depends(require_admin)],
    responses={
        403: {"description": "Admin access required"},
        500: {"description": "Report query failed"},
    },
)


def analytics_query(
    date_range: Annotated[str, Query(alias="dateRange", description="today, 7days or anything else for all time")] = DEFAULT_DATE_RANGE,
    status: Annotated[str, Query(description="Order status to match, or 'all'")] = DEFAULT_STATUS,
    # Kept as strings so malformed values fall back to defaults instead of a 422
    page: Annotated[str, Query()] = str(DEFAULT_PAGE),
    limit: Annotated[str, Query()] = str(DEFAULT_LIMIT),
) -> AnalyticsQuery:
    return AnalyticsQuery(date_range=date_range, status=status, page=page, limit=limit)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(query: Annotated[AnalyticsQuery, Depends(analytics_query)]):
    logger.info(f"Summary report requested for range '{query.date_range}'")
    return await analytics_service.generate_summary_report(query)


@router.get("/orders-chart", response_model=OrdersChartResponse)
async def get_orders_chart(query: Annotated[AnalyticsQuery, Depends(analytics_query)]):
    logger.info(f"Orders chart requested for range '{query.date_range}'")
    return await analytics_service.generate_orders_chart(query)


@router.get("/orders", response_model=OrdersListResponse)
async def get_orders(query: Annotated[AnalyticsQuery, Depends(analytics_query)]):
    logger.info(
        f"Orders page {query.page} (limit {query.limit}, status '{query.status}') "
        f"requested for range '{query.date_range}'"
    )
    return await analytics_service.list_orders(query)
