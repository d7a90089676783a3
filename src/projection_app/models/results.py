from __future__ import annotations

from enum import Enum
from typing import List

from .common import ProjectionModel, TrafficSource


class MonthlyData(ProjectionModel):
    revenue: List[float]
    cumulative_profit: List[float]
    cash_flow: List[float]


class CogsSummary(ProjectionModel):
    per_unit: float
    total: float


class MarketingMetrics(ProjectionModel):
    cac: float
    ltv: float
    monthly_churn: float
    organic_sales: float
    paid_sales: float
    acquisition_spend: float
    retention_spend: float
    customer_lifespan: float
    organic_percentage: float


class Margins(ProjectionModel):
    gross: float
    net: float


class ExpenseBreakdown(ProjectionModel):
    product_materials: float
    shipping: float
    marketing: float
    operational: float
    misc: float


class CalculatedMetrics(ProjectionModel):
    revenue: List[float]
    gross_profit: List[float]
    net_profit: List[float]
    break_even_month: int
    monthly_data: MonthlyData
    cogs: CogsSummary
    marketing_metrics: MarketingMetrics
    ltv_cac_ratio: float
    margins: Margins
    expense_breakdown: ExpenseBreakdown


class ConversionRating(str, Enum):
    BELOW_AVERAGE = "belowAverage"
    AVERAGE = "average"
    GOOD = "good"
    GREAT = "great"


class AllocationState(str, Enum):
    UNDER = "under"
    BALANCED = "balanced"
    OVER = "over"


class AllocationStatus(ProjectionModel):
    total_percentage: float
    state: AllocationState


class SourceMetrics(ProjectionModel):
    source: TrafficSource
    budget: float
    clicks: int
    conversions: int
    revenue: float
    cost_per_sale: float
    roas: float
    poas: float
    profit: float
    rating: ConversionRating


class CampaignTotals(ProjectionModel):
    budget: float
    clicks: int
    conversions: int
    revenue: float
    net_profit: float
    surplus: float


class ChannelSplit(ProjectionModel):
    acquisition: float
    retargeting: float
    total: float
    organic_sales: float
    paid_sales: float
    organic_percentage: float
    monthly_units: float


class CampaignPlan(ProjectionModel):
    sources: List[SourceMetrics]
    totals: CampaignTotals
    split: ChannelSplit
    acquisition_cost: float
    allocation: AllocationStatus


class CampaignEstimate(ProjectionModel):
    source: TrafficSource
    ad_spend: float
    cpc: float
    clicks: int
    conversions: int
    rating: ConversionRating
