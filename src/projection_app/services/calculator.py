from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models.assumptions import AssumptionSet
from ..models.common import FulfillmentType
from ..models.results import (
    CalculatedMetrics,
    CogsSummary,
    ExpenseBreakdown,
    Margins,
    MarketingMetrics,
    MonthlyData,
)


logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12
PROJECTION_YEARS = 5
PROJECTION_MONTHS = MONTHS_IN_YEAR * PROJECTION_YEARS
UNITS_PER_CONTAINER = 5000
TARGET_POAS = 1.5
# Reported when cumulative profit never turns non-negative inside the horizon.
NO_BREAK_EVEN_MONTH = PROJECTION_MONTHS


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _finite_series(values: Sequence[float]) -> List[float]:
    return [_finite(value) for value in values]


def _growth_factor(base: float, exponent: float) -> float:
    try:
        return base ** exponent
    except OverflowError:
        return math.inf


def _percent_of(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return _finite(numerator / denominator * 100)


def monthly_growth_rate(annual_growth_rate: float) -> float:
    """Monthly rate that compounds to ``annual_growth_rate`` (percent) over twelve months.

    Growth below -100% has no real twelfth root; it is floored at -100%, so
    volume collapses to zero after the first month.
    """
    base = max(0.0, 1 + annual_growth_rate / 100)
    return _growth_factor(base, 1 / MONTHS_IN_YEAR) - 1


def paid_sales_capacity(ad_budget: float, profit_per_unit: float) -> float:
    """Units per month the budget can buy while holding the target profit on ad spend."""
    if profit_per_unit <= 0:
        return 0.0
    return ad_budget * TARGET_POAS / profit_per_unit


def find_break_even_month(cumulative_profit: Sequence[float]) -> int:
    """1-based month in which cumulative profit first reaches zero.

    Saturates at the last month of the horizon when the investment is never
    recouped, so a return of 60 is ambiguous by construction.
    """
    for index, profit in enumerate(cumulative_profit):
        if profit >= 0:
            return index + 1
    return NO_BREAK_EVEN_MONTH


@dataclass(frozen=True)
class UnitCosts:
    product_materials: float
    inbound_shipping: float
    outbound_shipping: float
    cogs_per_unit: float

    @property
    def shipping(self) -> float:
        return self.inbound_shipping + self.outbound_shipping


@dataclass
class AnnualProjection:
    revenue: List[float]
    gross_profit: List[float]
    net_profit: List[float]


class ProjectionCalculator:
    def run(self, assumptions: AssumptionSet) -> CalculatedMetrics:
        unit_costs = self.resolve_unit_costs(assumptions)
        cogs_per_unit = unit_costs.cogs_per_unit
        logger.debug("Resolved COGS per unit for %r: %.4f", assumptions.model_name, cogs_per_unit)

        units = assumptions.units_sold_year1
        year_one_revenue = assumptions.price_per_unit * units
        year_one_cogs = cogs_per_unit * units
        year_one_returns = year_one_revenue * (assumptions.misc.returns_refunds_percent / 100)
        year_one_gross_profit = year_one_revenue - year_one_cogs - year_one_returns

        monthly_revenue, cumulative_profit, cash_flow = self._compute_monthly_data(assumptions, cogs_per_unit)
        marketing_metrics = self._compute_marketing_metrics(assumptions, cogs_per_unit)
        annual = self._compute_annual_metrics(assumptions, cogs_per_unit)
        expense_breakdown = self._compute_expense_breakdown(
            assumptions,
            unit_costs,
            year_one_revenue,
            year_one_cogs,
        )

        break_even_month = find_break_even_month(cumulative_profit)
        logger.debug("Break-even month for %r: %d", assumptions.model_name, break_even_month)

        ltv_cac_ratio = marketing_metrics.ltv / marketing_metrics.cac if marketing_metrics.cac > 0 else 0.0

        return CalculatedMetrics(
            revenue=_finite_series(annual.revenue),
            gross_profit=_finite_series(annual.gross_profit),
            net_profit=_finite_series(annual.net_profit),
            break_even_month=break_even_month,
            monthly_data=MonthlyData(
                revenue=_finite_series(monthly_revenue),
                cumulative_profit=_finite_series(cumulative_profit),
                cash_flow=_finite_series(cash_flow),
            ),
            cogs=CogsSummary(per_unit=_finite(cogs_per_unit), total=_finite(year_one_cogs)),
            marketing_metrics=marketing_metrics,
            ltv_cac_ratio=_finite(ltv_cac_ratio),
            margins=Margins(
                gross=_percent_of(year_one_gross_profit, year_one_revenue),
                net=_percent_of(annual.net_profit[0], year_one_revenue),
            ),
            expense_breakdown=expense_breakdown,
        )

    def resolve_unit_costs(self, assumptions: AssumptionSet) -> UnitCosts:
        product_materials = self._product_materials_per_unit(assumptions)
        inbound, outbound = self._shipping_cost_per_unit(assumptions)
        return UnitCosts(
            product_materials=product_materials,
            inbound_shipping=inbound,
            outbound_shipping=outbound,
            cogs_per_unit=product_materials + inbound + outbound,
        )

    def _product_materials_per_unit(self, assumptions: AssumptionSet) -> float:
        costs = assumptions.costs
        return sum(amount for _, amount in costs.fixed_components()) + costs.custom_total()

    def _shipping_cost_per_unit(self, assumptions: AssumptionSet) -> Tuple[float, float]:
        shipping = assumptions.shipping
        inbound = shipping.inbound
        inbound_cost = (
            inbound.container_cost / UNITS_PER_CONTAINER
            + assumptions.price_per_unit * (inbound.customs_duty / 100)
            + inbound.freight_forwarding / UNITS_PER_CONTAINER
            + inbound.port_handling / UNITS_PER_CONTAINER
        )

        if shipping.fulfillment_type == FulfillmentType.THIRD_PARTY:
            third_party = shipping.third_party
            outbound_cost = third_party.pick_and_pack + third_party.storage + third_party.postage
        else:
            in_house = shipping.in_house
            monthly_units = assumptions.units_sold_year1 / MONTHS_IN_YEAR
            rent_per_unit = in_house.warehouse_rent / monthly_units if monthly_units else 0.0
            outbound_cost = in_house.labor + in_house.postage + rent_per_unit
        return inbound_cost, outbound_cost

    def _compute_monthly_data(
        self,
        assumptions: AssumptionSet,
        cogs_per_unit: float,
    ) -> Tuple[List[float], List[float], List[float]]:
        misc = assumptions.misc
        growth = monthly_growth_rate(assumptions.annual_growth_rate)
        base_monthly_units = assumptions.units_sold_year1 / MONTHS_IN_YEAR

        monthly_fixed_costs = (
            assumptions.operational.annual_fixed_total() / MONTHS_IN_YEAR
            + misc.legal_compliance / MONTHS_IN_YEAR
            + misc.research_development / MONTHS_IN_YEAR
        )
        monthly_software_costs = assumptions.operational.software.monthly_total()
        # Marketing spend is flat; it does not scale with volume.
        monthly_marketing_costs = assumptions.marketing.budget_allocation.total_budget

        revenue_series: List[float] = []
        cumulative_series: List[float] = []
        cash_flow_series: List[float] = []
        cumulative_profit = -assumptions.initial_investment

        for month_index in range(PROJECTION_MONTHS):
            units = base_monthly_units * _growth_factor(1 + growth, month_index)
            revenue = units * assumptions.price_per_unit

            cogs = units * cogs_per_unit
            processing_fees = revenue * (misc.payment_processing_fee / 100)
            returns_refunds = revenue * (misc.returns_refunds_percent / 100)
            total_expenses = (
                cogs
                + processing_fees
                + returns_refunds
                + monthly_fixed_costs
                + monthly_software_costs
                + monthly_marketing_costs
            )
            monthly_profit = revenue - total_expenses
            cumulative_profit += monthly_profit

            revenue_series.append(revenue)
            cumulative_series.append(cumulative_profit)
            cash_flow_series.append(monthly_profit)

        return revenue_series, cumulative_series, cash_flow_series

    def _compute_annual_metrics(self, assumptions: AssumptionSet, cogs_per_unit: float) -> AnnualProjection:
        misc = assumptions.misc
        # Fixed, marketing and software costs are projected flat across every year.
        yearly_fixed_costs = (
            assumptions.operational.annual_fixed_total() + misc.legal_compliance + misc.research_development
        )
        yearly_marketing_costs = assumptions.marketing.budget_allocation.total_budget * MONTHS_IN_YEAR
        yearly_software_costs = assumptions.operational.software.monthly_total() * MONTHS_IN_YEAR

        projection = AnnualProjection(revenue=[], gross_profit=[], net_profit=[])
        for year in range(PROJECTION_YEARS):
            yearly_units = assumptions.units_sold_year1 * _growth_factor(
                1 + assumptions.annual_growth_rate / 100, year
            )
            yearly_revenue = yearly_units * assumptions.price_per_unit
            yearly_cogs = yearly_units * cogs_per_unit
            yearly_returns = yearly_revenue * (misc.returns_refunds_percent / 100)
            yearly_gross_profit = yearly_revenue - yearly_cogs - yearly_returns

            yearly_processing_fees = yearly_revenue * (misc.payment_processing_fee / 100)
            yearly_pre_tax_profit = (
                yearly_gross_profit
                - yearly_processing_fees
                - yearly_fixed_costs
                - yearly_marketing_costs
                - yearly_software_costs
            )
            yearly_taxes = max(0.0, yearly_pre_tax_profit * (misc.tax_rate / 100))
            yearly_net_profit = yearly_pre_tax_profit - yearly_taxes

            projection.revenue.append(yearly_revenue)
            projection.gross_profit.append(yearly_gross_profit)
            projection.net_profit.append(yearly_net_profit)
        return projection

    def _compute_marketing_metrics(self, assumptions: AssumptionSet, cogs_per_unit: float) -> MarketingMetrics:
        marketing = assumptions.marketing
        monthly_units = assumptions.units_sold_year1 / MONTHS_IN_YEAR
        total_budget = marketing.budget_allocation.total_budget

        # Legacy split; the per-channel allocation may disagree with it.
        acquisition_spend = total_budget * (marketing.acquisition_percent / 100)
        retention_spend = total_budget - acquisition_spend

        profit_per_unit = assumptions.price_per_unit - cogs_per_unit
        potential_paid_sales = paid_sales_capacity(total_budget, profit_per_unit)
        paid_sales = min(monthly_units, potential_paid_sales)
        organic_sales = max(0.0, monthly_units - paid_sales)
        organic_percentage = organic_sales / monthly_units * 100 if monthly_units else 0.0

        cac = acquisition_spend / paid_sales if paid_sales > 0 else 0.0

        monthly_churn_rate = assumptions.misc.monthly_churn_rate / 100
        customer_lifespan = 1 / monthly_churn_rate if monthly_churn_rate > 0 else 0.0
        ltv = profit_per_unit * customer_lifespan

        return MarketingMetrics(
            cac=_finite(cac),
            ltv=_finite(ltv),
            monthly_churn=_finite(monthly_churn_rate * 100),
            organic_sales=_finite(organic_sales),
            paid_sales=_finite(paid_sales),
            acquisition_spend=_finite(acquisition_spend),
            retention_spend=_finite(retention_spend),
            customer_lifespan=_finite(customer_lifespan),
            organic_percentage=_finite(organic_percentage),
        )

    def _compute_expense_breakdown(
        self,
        assumptions: AssumptionSet,
        unit_costs: UnitCosts,
        yearly_revenue: float,
        yearly_total_cogs: float,
    ) -> ExpenseBreakdown:
        misc = assumptions.misc
        yearly_units = assumptions.units_sold_year1

        product_materials = unit_costs.product_materials * yearly_units
        shipping = unit_costs.shipping * yearly_units
        marketing = assumptions.marketing.budget_allocation.total_budget * MONTHS_IN_YEAR
        # Software is folded into operational here, unlike the annual projection.
        operational = (
            assumptions.operational.annual_fixed_total()
            + assumptions.operational.software.monthly_total() * MONTHS_IN_YEAR
        )

        processing_fees = yearly_revenue * (misc.payment_processing_fee / 100)
        returns_refunds = yearly_revenue * (misc.returns_refunds_percent / 100)
        pre_tax_profit = (
            yearly_revenue - yearly_total_cogs - marketing - operational - processing_fees - returns_refunds
        )
        taxes = max(0.0, pre_tax_profit * (misc.tax_rate / 100))
        misc_total = (
            taxes + processing_fees + returns_refunds + misc.legal_compliance + misc.research_development
        )

        return ExpenseBreakdown(
            product_materials=_finite(product_materials),
            shipping=_finite(shipping),
            marketing=_finite(marketing),
            operational=_finite(operational),
            misc=_finite(misc_total),
        )


_calculator = ProjectionCalculator()


def compute_metrics(assumptions: AssumptionSet) -> CalculatedMetrics:
    return _calculator.run(assumptions)
