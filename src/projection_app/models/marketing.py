from __future__ import annotations

from typing import Iterator

from pydantic import Field

from .common import ProjectionModel, TrafficSource


class TrafficSourceAllocation(ProjectionModel):
    percentage: float = Field(0.0, description="Share of the monthly budget, in percent")
    cpc: float = Field(0.0, description="Cost per click")
    conversion_rate: float = Field(0.0, description="Percent of clicks that purchase")


class SourceAllocations(ProjectionModel):
    """One allocation per traffic source; channels left out of the input default to zero.

    Percentages are kept as entered and never normalized.
    """

    meta: TrafficSourceAllocation = Field(default_factory=TrafficSourceAllocation)
    google: TrafficSourceAllocation = Field(default_factory=TrafficSourceAllocation)
    tiktok: TrafficSourceAllocation = Field(default_factory=TrafficSourceAllocation)
    influencer: TrafficSourceAllocation = Field(default_factory=TrafficSourceAllocation)
    retargeting: TrafficSourceAllocation = Field(default_factory=TrafficSourceAllocation)

    def __getitem__(self, source: TrafficSource) -> TrafficSourceAllocation:
        return getattr(self, TrafficSource(source).value)

    def values(self) -> Iterator[TrafficSourceAllocation]:
        return (self[source] for source in TrafficSource)


class BudgetAllocation(ProjectionModel):
    total_budget: float = Field(0.0, description="Total monthly marketing budget")
    sources: SourceAllocations = Field(default_factory=SourceAllocations)

    def total_percentage(self) -> float:
        return sum(allocation.percentage for allocation in self.sources.values())


class MarketingModel(ProjectionModel):
    paid_ads: float = 0.0
    influencer_budget: float = 0.0
    content_budget: float = 0.0
    acquisition_percent: float = Field(0.0, description="Legacy acquisition vs retention split")
    budget_allocation: BudgetAllocation = Field(default_factory=BudgetAllocation)
