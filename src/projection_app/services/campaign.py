"""Per-channel campaign planning on top of the monthly marketing budget.

Everything here is advisory: the projection engine only consumes the total
budget, never the channel split computed below.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List

from ..models.assumptions import AssumptionSet
from ..models.common import TrafficSource
from ..models.results import (
    AllocationState,
    AllocationStatus,
    CampaignEstimate,
    CampaignPlan,
    CampaignTotals,
    ChannelSplit,
    ConversionRating,
    SourceMetrics,
)
from .calculator import MONTHS_IN_YEAR, paid_sales_capacity


@dataclass(frozen=True)
class ConversionBenchmark:
    below_average: float
    average: float
    good: float
    great: float


CONVERSION_BENCHMARKS: Dict[TrafficSource, ConversionBenchmark] = {
    TrafficSource.META: ConversionBenchmark(below_average=0.5, average=1.5, good=3, great=5),
    TrafficSource.GOOGLE: ConversionBenchmark(below_average=1, average=3, good=5, great=8),
    TrafficSource.TIKTOK: ConversionBenchmark(below_average=0.2, average=1, good=2.5, great=4),
    TrafficSource.INFLUENCER: ConversionBenchmark(below_average=1, average=3, good=6, great=10),
    TrafficSource.RETARGETING: ConversionBenchmark(below_average=2, average=5, good=10, great=15),
}

CPC_ESTIMATES: Dict[TrafficSource, float] = {
    TrafficSource.META: 1.5,
    TrafficSource.GOOGLE: 2.5,
    TrafficSource.TIKTOK: 1.0,
    TrafficSource.INFLUENCER: 2.0,
    TrafficSource.RETARGETING: 0.5,
}


def _whole(value: float) -> int:
    return math.floor(value) if math.isfinite(value) else 0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5) if math.isfinite(value) else 0


def rate_conversion(source: TrafficSource, conversion_rate: float) -> ConversionRating:
    benchmark = CONVERSION_BENCHMARKS[source]
    if conversion_rate >= benchmark.great:
        return ConversionRating.GREAT
    if conversion_rate >= benchmark.good:
        return ConversionRating.GOOD
    if conversion_rate >= benchmark.average:
        return ConversionRating.AVERAGE
    return ConversionRating.BELOW_AVERAGE


def allocation_status(assumptions: AssumptionSet) -> AllocationStatus:
    total = assumptions.marketing.budget_allocation.total_percentage()
    if total > 100:
        state = AllocationState.OVER
    elif total < 100:
        state = AllocationState.UNDER
    else:
        state = AllocationState.BALANCED
    return AllocationStatus(total_percentage=total, state=state)


def campaign_estimate(source: TrafficSource, ad_spend: float, conversion_rate: float) -> CampaignEstimate:
    cpc = CPC_ESTIMATES[source]
    clicks = _round_half_up(ad_spend / cpc)
    conversions = _round_half_up(clicks * (conversion_rate / 100))
    return CampaignEstimate(
        source=source,
        ad_spend=ad_spend,
        cpc=cpc,
        clicks=clicks,
        conversions=conversions,
        rating=rate_conversion(source, conversion_rate),
    )


class CampaignPlanner:
    def plan(self, assumptions: AssumptionSet, cogs_per_unit: float) -> CampaignPlan:
        sources = self._source_metrics(assumptions, cogs_per_unit)
        monthly_target = assumptions.units_sold_year1 / MONTHS_IN_YEAR
        conversions = sum(metric.conversions for metric in sources)
        totals = CampaignTotals(
            budget=sum(metric.budget for metric in sources),
            clicks=sum(metric.clicks for metric in sources),
            conversions=conversions,
            revenue=sum(metric.revenue for metric in sources),
            net_profit=sum(metric.profit for metric in sources),
            surplus=max(0.0, conversions - monthly_target),
        )
        return CampaignPlan(
            sources=sources,
            totals=totals,
            split=self._channel_split(assumptions, cogs_per_unit),
            acquisition_cost=self._acquisition_cost(sources),
            allocation=allocation_status(assumptions),
        )

    def _source_metrics(self, assumptions: AssumptionSet, cogs_per_unit: float) -> List[SourceMetrics]:
        allocation = assumptions.marketing.budget_allocation
        misc = assumptions.misc
        units = assumptions.units_sold_year1
        labor_per_unit = assumptions.operational.labor / units if units else 0.0

        metrics: List[SourceMetrics] = []
        for source in TrafficSource:
            channel = allocation.sources[source]
            budget = channel.percentage / 100 * allocation.total_budget
            clicks = _whole(budget / channel.cpc) if channel.cpc > 0 else 0
            conversions = _whole(clicks * (channel.conversion_rate / 100))
            revenue = conversions * assumptions.price_per_unit

            profit = (
                revenue
                - conversions * cogs_per_unit
                - conversions * labor_per_unit
                - revenue * (misc.payment_processing_fee / 100)
                - revenue * (misc.returns_refunds_percent / 100)
                - budget
            )
            metrics.append(
                SourceMetrics(
                    source=source,
                    budget=budget,
                    clicks=clicks,
                    conversions=conversions,
                    revenue=revenue,
                    cost_per_sale=budget / conversions if conversions > 0 else 0.0,
                    roas=revenue / budget if budget > 0 else 0.0,
                    poas=profit / budget if budget > 0 else 0.0,
                    profit=profit,
                    rating=rate_conversion(source, channel.conversion_rate),
                )
            )
        return metrics

    def _channel_split(self, assumptions: AssumptionSet, cogs_per_unit: float) -> ChannelSplit:
        allocation = assumptions.marketing.budget_allocation
        monthly_units = assumptions.units_sold_year1 / MONTHS_IN_YEAR
        retargeting = allocation.sources[TrafficSource.RETARGETING].percentage / 100 * allocation.total_budget
        acquisition = allocation.total_budget - retargeting

        potential_paid_sales = paid_sales_capacity(acquisition, assumptions.price_per_unit - cogs_per_unit)
        paid_sales = min(monthly_units, potential_paid_sales)
        organic_sales = max(0.0, monthly_units - paid_sales)
        return ChannelSplit(
            acquisition=acquisition,
            retargeting=retargeting,
            total=allocation.total_budget,
            organic_sales=organic_sales,
            paid_sales=paid_sales,
            organic_percentage=organic_sales / monthly_units * 100 if monthly_units else 0.0,
            monthly_units=monthly_units,
        )

    def _acquisition_cost(self, sources: List[SourceMetrics]) -> float:
        prospecting = [metric for metric in sources if metric.source != TrafficSource.RETARGETING]
        budget = sum(metric.budget for metric in prospecting)
        conversions = sum(metric.conversions for metric in prospecting)
        return budget / conversions if conversions > 0 else 0.0
