from __future__ import annotations

import pytest

from projection_app.models.assumptions import AssumptionSet
from projection_app.models.costs import ProductCosts
from projection_app.sample_data import build_default_assumptions


@pytest.fixture
def default_assumptions() -> AssumptionSet:
    return build_default_assumptions()


@pytest.fixture
def reference_assumptions() -> AssumptionSet:
    """Unit economics only: no shipping, marketing, operational or misc costs."""
    return AssumptionSet(
        model_name="Reference",
        price_per_unit=65,
        units_sold_year1=8000,
        annual_growth_rate=50,
        initial_investment=100000,
        costs=ProductCosts(
            product_box=2.0,
            bottle_sprayer=3.5,
            concentrate=5.0,
            nfc_chip=1.0,
            print_materials=0.5,
            shipping_box=1.5,
            manufacturing_labor=1.5,
        ),
    )
