"""KPI source data models."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OrdersAggregation(BaseModel):
    """Aggregated order figures for one scope and period."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_revenue: float = Field(0.0, description="Sum of order totals")
    total_orders: int = Field(0, ge=0, description="Number of orders")
    avg_ticket: float = Field(0.0, description="total_revenue / total_orders")
    total_discounts: float = Field(0.0, description="Total promotions and discounts")
    total_refunds: float = Field(0.0, description="Total refunds")
    net_revenue: float = Field(0.0, description="total_revenue - total_refunds")
    promotion_rate: float = Field(0.0, description="Discounts as % of revenue")
    refund_rate: float = Field(0.0, description="Refunds as % of revenue")
    avg_discount_per_order: float = Field(0.0, description="total_discounts / total_orders")
    unique_customers: int = Field(0, ge=0, description="Distinct customers")
    orders_per_customer: float = Field(0.0, description="total_orders / unique_customers")


class KpiPeriod(BaseModel):
    """Date range the current KPI value is aggregated over."""

    start: date
    end: date
    label: str


class KpiValueResult(BaseModel):
    """Current KPI value of an objective and the period it covers."""

    value: Optional[float] = None
    month_label: str
    measurable: bool = Field(
        True,
        description=(
            "False when the objective has no KPI configured or the orders data "
            "cannot answer its KPI type, so no value will ever arrive"
        ),
    )
