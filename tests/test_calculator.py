from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from projection_app.models.common import CostItem, FulfillmentType, SoftwareItem, TrafficSource
from projection_app.models.marketing import TrafficSourceAllocation
from projection_app.services.calculator import (
    NO_BREAK_EVEN_MONTH,
    ProjectionCalculator,
    compute_metrics,
    find_break_even_month,
    monthly_growth_rate,
)


def _all_values(metrics):
    values = list(metrics.revenue) + list(metrics.gross_profit) + list(metrics.net_profit)
    values += metrics.monthly_data.revenue + metrics.monthly_data.cumulative_profit + metrics.monthly_data.cash_flow
    values += [metrics.cogs.per_unit, metrics.cogs.total, metrics.ltv_cac_ratio]
    values += [metrics.margins.gross, metrics.margins.net]
    values += list(metrics.marketing_metrics.model_dump().values())
    values += list(metrics.expense_breakdown.model_dump().values())
    return values


def test_default_assumptions_generate_results(default_assumptions):
    result = ProjectionCalculator().run(default_assumptions)

    assert len(result.revenue) == 5
    assert len(result.gross_profit) == 5
    assert len(result.net_profit) == 5
    assert len(result.monthly_data.revenue) == 60
    assert len(result.monthly_data.cumulative_profit) == 60
    assert len(result.monthly_data.cash_flow) == 60
    assert result.cogs.per_unit == pytest.approx(24.75)
    assert result.cogs.total == pytest.approx(198000)
    assert 1 <= result.break_even_month <= 60


def test_reference_scenario_year_one(reference_assumptions):
    result = compute_metrics(reference_assumptions)

    assert result.cogs.per_unit == 15
    assert result.cogs.total == 120000
    assert result.revenue[0] == 520000
    assert result.gross_profit[0] == 400000
    assert result.net_profit[0] == 400000
    assert result.revenue[1] == pytest.approx(780000)
    assert result.margins.gross == pytest.approx(400000 / 520000 * 100)
    assert result.monthly_data.revenue[0] == pytest.approx(8000 / 12 * 65)
    assert result.break_even_month == 3


def test_monthly_and_annual_growth_are_independent(reference_assumptions):
    result = compute_metrics(reference_assumptions)

    # Monthly compounding inside year one lifts its total above the flat annual figure.
    assert sum(result.monthly_data.revenue[:12]) > result.revenue[0]
    assert monthly_growth_rate(50) == pytest.approx(1.5 ** (1 / 12) - 1)


def test_cumulative_profit_starts_from_initial_investment(reference_assumptions):
    result = compute_metrics(reference_assumptions)
    monthly = result.monthly_data

    assert monthly.cumulative_profit[0] == pytest.approx(-100000 + monthly.cash_flow[0])
    for index in range(1, 60):
        assert monthly.cumulative_profit[index] == pytest.approx(
            monthly.cumulative_profit[index - 1] + monthly.cash_flow[index]
        )


def test_default_marketing_metrics(default_assumptions):
    metrics = compute_metrics(default_assumptions).marketing_metrics

    paid_sales = 10000 * 1.5 / (65 - 24.75)
    assert metrics.paid_sales == pytest.approx(paid_sales)
    assert metrics.organic_sales == pytest.approx(8000 / 12 - paid_sales)
    assert metrics.acquisition_spend == pytest.approx(7000)
    assert metrics.retention_spend == pytest.approx(3000)
    assert metrics.cac == pytest.approx(7000 / paid_sales)
    assert metrics.customer_lifespan == pytest.approx(20)
    assert metrics.ltv == pytest.approx((65 - 24.75) * 20)
    assert metrics.monthly_churn == pytest.approx(5)


def test_ltv_cac_ratio(default_assumptions):
    result = compute_metrics(default_assumptions)
    marketing = result.marketing_metrics

    assert result.ltv_cac_ratio == pytest.approx(marketing.ltv / marketing.cac)


def test_zero_volume_degrades_to_zero(reference_assumptions):
    assumptions = reference_assumptions.model_copy(update={"units_sold_year1": 0})
    result = compute_metrics(assumptions)
    marketing = result.marketing_metrics

    assert marketing.paid_sales == 0
    assert marketing.organic_sales == 0
    assert marketing.organic_percentage == 0
    assert result.margins.gross == 0
    assert result.margins.net == 0
    assert all(math.isfinite(value) for value in _all_values(result))


def test_non_positive_unit_margin_supports_no_paid_sales(default_assumptions):
    assumptions = default_assumptions.model_copy(update={"price_per_unit": 10})
    result = compute_metrics(assumptions)
    marketing = result.marketing_metrics

    assert marketing.paid_sales == 0
    assert marketing.cac == 0
    assert marketing.organic_sales == pytest.approx(8000 / 12)
    assert marketing.organic_percentage == pytest.approx(100)
    assert result.ltv_cac_ratio == 0


def test_zero_churn_means_no_lifetime_value(default_assumptions):
    misc = default_assumptions.misc.model_copy(update={"monthly_churn_rate": 0})
    result = compute_metrics(default_assumptions.model_copy(update={"misc": misc}))

    assert result.marketing_metrics.customer_lifespan == 0
    assert result.marketing_metrics.ltv == 0
    assert result.ltv_cac_ratio == 0


def test_zero_budget_is_all_organic(reference_assumptions):
    marketing = compute_metrics(reference_assumptions).marketing_metrics

    assert marketing.acquisition_spend == 0
    assert marketing.paid_sales == 0
    assert marketing.organic_sales == pytest.approx(8000 / 12)
    assert marketing.organic_percentage == pytest.approx(100)


def test_in_house_warehouse_rent_without_volume(default_assumptions):
    shipping = default_assumptions.shipping.model_copy(update={"fulfillment_type": FulfillmentType.IN_HOUSE})
    assumptions = default_assumptions.model_copy(update={"shipping": shipping, "units_sold_year1": 0})
    calculator = ProjectionCalculator()

    unit_costs = calculator.resolve_unit_costs(assumptions)

    assert unit_costs.outbound_shipping == pytest.approx(0.75 + 4.5)
    assert math.isfinite(unit_costs.cogs_per_unit)
    assert all(math.isfinite(value) for value in _all_values(calculator.run(assumptions)))


def test_in_house_warehouse_rent_amortized(default_assumptions):
    shipping = default_assumptions.shipping.model_copy(update={"fulfillment_type": FulfillmentType.IN_HOUSE})
    assumptions = default_assumptions.model_copy(update={"shipping": shipping})

    unit_costs = ProjectionCalculator().resolve_unit_costs(assumptions)

    assert unit_costs.outbound_shipping == pytest.approx(0.75 + 4.5 + 2000 / (8000 / 12))
    assert unit_costs.inbound_shipping == pytest.approx(0.6 + 3.25 + 0.1 + 0.05)


def test_custom_costs_and_software_are_included(reference_assumptions):
    costs = reference_assumptions.costs.model_copy(
        update={"custom_costs": (CostItem(name="Sticker", amount=0.5), CostItem(name="Sticker", amount=0.25))}
    )
    operational = reference_assumptions.operational
    software = operational.software.model_copy(update={"custom_software": (SoftwareItem(name="CRM", cost=50),)})
    assumptions = reference_assumptions.model_copy(
        update={"costs": costs, "operational": operational.model_copy(update={"software": software})}
    )

    result = compute_metrics(assumptions)

    assert result.cogs.per_unit == pytest.approx(15.75)
    assert result.expense_breakdown.operational == pytest.approx(600)
    assert result.monthly_data.cash_flow[0] == pytest.approx(8000 / 12 * (65 - 15.75) - 50)


def test_losses_are_not_taxed(reference_assumptions):
    operational = reference_assumptions.operational.model_copy(update={"labor": 1_000_000})
    misc = reference_assumptions.misc.model_copy(update={"tax_rate": 20})
    result = compute_metrics(reference_assumptions.model_copy(update={"operational": operational, "misc": misc}))

    assert result.net_profit[0] == pytest.approx(400000 - 1_000_000)


def test_profits_are_taxed(reference_assumptions):
    misc = reference_assumptions.misc.model_copy(update={"tax_rate": 25})
    result = compute_metrics(reference_assumptions.model_copy(update={"misc": misc}))

    assert result.net_profit[0] == pytest.approx(300000)
    assert result.margins.net == pytest.approx(300000 / 520000 * 100)


def test_expense_breakdown(default_assumptions):
    breakdown = compute_metrics(default_assumptions).expense_breakdown

    assert breakdown.product_materials == pytest.approx(15.25 * 8000)
    assert breakdown.shipping == pytest.approx(9.5 * 8000)
    assert breakdown.marketing == pytest.approx(120000)
    assert breakdown.operational == pytest.approx(117600 + 360 * 12)
    pre_tax = 520000 - 198000 - 120000 - 121920 - 5200 - 10400
    assert breakdown.misc == pytest.approx(pre_tax * 0.2 + 5200 + 10400 + 5000 + 20000)


def test_compute_is_idempotent(default_assumptions):
    assert compute_metrics(default_assumptions) == compute_metrics(default_assumptions)


def test_assumption_containers_cannot_be_mutated(default_assumptions):
    sources = default_assumptions.marketing.budget_allocation.sources

    with pytest.raises(AttributeError):
        default_assumptions.costs.custom_costs.append(CostItem(name="Sticker", amount=0.5))
    with pytest.raises(AttributeError):
        default_assumptions.operational.software.custom_software.append(SoftwareItem(name="CRM", cost=50))
    with pytest.raises(ValidationError):
        sources.meta = TrafficSourceAllocation(percentage=100)
    with pytest.raises(TypeError):
        sources[TrafficSource.META] = TrafficSourceAllocation(percentage=100)


def test_break_even_never_earlier_with_more_investment(default_assumptions):
    months = [
        compute_metrics(default_assumptions.model_copy(update={"initial_investment": investment})).break_even_month
        for investment in (0, 50_000, 100_000, 250_000, 1_000_000, 10_000_000)
    ]

    assert months == sorted(months)


def test_break_even_saturates_at_horizon(default_assumptions):
    assumptions = default_assumptions.model_copy(update={"initial_investment": 1e12})

    assert compute_metrics(assumptions).break_even_month == NO_BREAK_EVEN_MONTH == 60


def test_find_break_even_month():
    assert find_break_even_month([-10.0, -1.0, 0.0, 5.0]) == 3
    assert find_break_even_month([1.0]) == 1
    assert find_break_even_month([-1.0] * 60) == 60


@pytest.mark.parametrize("growth", [-100, -150, 1e300])
def test_extreme_growth_stays_finite(default_assumptions, growth):
    result = compute_metrics(default_assumptions.model_copy(update={"annual_growth_rate": growth}))

    assert len(result.monthly_data.revenue) == 60
    assert all(math.isfinite(value) for value in _all_values(result))


def test_collapsing_growth_keeps_first_month(reference_assumptions):
    result = compute_metrics(reference_assumptions.model_copy(update={"annual_growth_rate": -100}))

    assert result.monthly_data.revenue[0] == pytest.approx(8000 / 12 * 65)
    assert result.monthly_data.revenue[1] == 0
    assert result.revenue[1] == 0
