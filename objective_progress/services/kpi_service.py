"""Service for resolving the current KPI value of an objective.

The current value of an objective is the aggregate of the previous complete
calendar month, so that it is always compared on full-month data.
For example, on Feb 2nd the January figures are used; on Jan 29th the
December figures are used.
"""

import logging
from calendar import monthrange
from datetime import date
from typing import Optional, Protocol

from ..models.kpi import KpiPeriod, KpiValueResult, OrdersAggregation
from ..models.objective import Objective

logger = logging.getLogger(__name__)

MONTH_LABELS = [
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
]

# KPI type -> OrdersAggregation field
KPI_FIELD_MAP = {
    "revenue": "total_revenue",
    "orders": "total_orders",
    "avg_ticket": "avg_ticket",
    "net_revenue": "net_revenue",
    "unique_customers": "unique_customers",
    "orders_per_customer": "orders_per_customer",
    "refund_rate": "refund_rate",
    "promo_rate": "promotion_rate",
}

# Known KPI types the orders data cannot answer
UNSUPPORTED_KPI_TYPES = frozenset(
    {"new_customers", "new_customers_pct", "rating", "reviews_count"}
)


class OrdersClient(Protocol):
    """Client for the external order-management API."""

    async def fetch_orders_aggregated(
        self,
        company_ids: list[str],
        brand_ids: Optional[list[str]],
        address_ids: Optional[list[str]],
        start_date: date,
        end_date: date,
    ) -> OrdersAggregation: ...


def previous_complete_month(today: date) -> KpiPeriod:
    """
    Get the date range of the month before ``today``.

    Args:
        today: Reference date

    Returns:
        KpiPeriod with the first and last day of the previous month and a
        label such as "Enero 2026"
    """
    if today.month == 1:
        year, month = today.year - 1, 12
    else:
        year, month = today.year, today.month - 1

    last_day = monthrange(year, month)[1]
    return KpiPeriod(
        start=date(year, month, 1),
        end=date(year, month, last_day),
        label=f"{MONTH_LABELS[month - 1]} {year}",
    )


def extract_kpi_value(aggregation: OrdersAggregation, kpi_type: str) -> Optional[float]:
    """
    Pick the figure matching ``kpi_type`` out of an orders aggregation.

    Returns:
        The KPI value, or None when the orders data has no such figure
    """
    field_name = KPI_FIELD_MAP.get(kpi_type)
    if field_name is None:
        if kpi_type not in UNSUPPORTED_KPI_TYPES:
            logger.debug(f"Unknown KPI type '{kpi_type}'")
        return None
    return float(getattr(aggregation, field_name))


class KpiService:
    """Resolves the current-period KPI value of objectives."""

    def __init__(self, client: OrdersClient):
        """
        Initialize the KPI service.

        Args:
            client: Order-management client used to fetch aggregated figures
        """
        self.client = client

    async def get_current_value(self, objective: Objective, today: date) -> KpiValueResult:
        """
        Fetch the objective's KPI value for the previous complete month.

        Objectives without a KPI type or a company scope are not measurable and
        the client is not called. KPI types the orders data cannot answer are
        not measurable either. Client errors propagate to the caller.

        Args:
            objective: Objective whose KPI is requested
            today: Reference date used to pick the reporting period

        Returns:
            KpiValueResult with the value (or None) and the period label
        """
        period = previous_complete_month(today)

        if not objective.kpi_type or not objective.company_id:
            return KpiValueResult(value=None, month_label=period.label, measurable=False)

        aggregation = await self.client.fetch_orders_aggregated(
            company_ids=[objective.company_id],
            brand_ids=[objective.brand_id] if objective.brand_id else None,
            address_ids=[objective.address_id] if objective.address_id else None,
            start_date=period.start,
            end_date=period.end,
        )

        value = extract_kpi_value(aggregation, objective.kpi_type)
        logger.info(
            f"KPI '{objective.kpi_type}' for objective {objective.id} "
            f"({period.label}): {value}"
        )
        return KpiValueResult(value=value, month_label=period.label, measurable=value is not None)
