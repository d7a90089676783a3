from __future__ import annotations

from typing import Tuple

from pydantic import Field

from .common import ProjectionModel, SoftwareItem


class SoftwareSubscriptions(ProjectionModel):
    shopify: float = 0.0
    klaviyo: float = 0.0
    quickbooks: float = 0.0
    tidio: float = 0.0
    custom_software: Tuple[SoftwareItem, ...] = ()

    def monthly_total(self) -> float:
        custom = sum(item.cost for item in self.custom_software)
        return self.shopify + self.klaviyo + self.quickbooks + self.tidio + custom


class OperationalModel(ProjectionModel):
    """Annual fixed operating costs plus monthly software subscriptions."""

    labor: float = 0.0
    rent_utilities: float = 0.0
    office_expenses: float = 0.0
    work_tools: float = 0.0
    tech_fees: float = 0.0
    travel: float = 0.0
    software: SoftwareSubscriptions = Field(default_factory=SoftwareSubscriptions)

    def annual_fixed_total(self) -> float:
        return (
            self.labor
            + self.rent_utilities
            + self.office_expenses
            + self.work_tools
            + self.tech_fees
            + self.travel
        )


class MiscModel(ProjectionModel):
    payment_processing_fee: float = Field(0.0, description="Percent of revenue")
    tax_rate: float = Field(0.0, description="Percent of pre-tax profit")
    returns_refunds_percent: float = Field(0.0, description="Percent of revenue")
    monthly_churn_rate: float = Field(0.0, description="Percent of customers lost per month")
    legal_compliance: float = 0.0
    research_development: float = 0.0
