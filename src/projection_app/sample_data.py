from __future__ import annotations

from .models.assumptions import AssumptionSet
from .models.common import FulfillmentType
from .models.costs import ProductCosts
from .models.marketing import BudgetAllocation, MarketingModel, SourceAllocations, TrafficSourceAllocation
from .models.operational import MiscModel, OperationalModel, SoftwareSubscriptions
from .models.shipping import InboundShipping, InHouseFulfillment, ShippingModel, ThirdPartyFulfillment


def build_default_assumptions() -> AssumptionSet:
    costs = ProductCosts(
        product_box=2.00,
        bottle_sprayer=3.50,
        concentrate=5.00,
        nfc_chip=1.00,
        print_materials=0.75,
        shipping_box=1.50,
        manufacturing_labor=1.50,
    )

    marketing = MarketingModel(
        paid_ads=10000,
        influencer_budget=2500,
        content_budget=1000,
        acquisition_percent=70,
        budget_allocation=BudgetAllocation(
            total_budget=10000,
            sources=SourceAllocations(
                meta=TrafficSourceAllocation(percentage=30, cpc=1.50, conversion_rate=2.0),
                google=TrafficSourceAllocation(percentage=25, cpc=2.50, conversion_rate=3.5),
                tiktok=TrafficSourceAllocation(percentage=20, cpc=1.00, conversion_rate=1.5),
                influencer=TrafficSourceAllocation(percentage=15, cpc=2.00, conversion_rate=4.0),
                retargeting=TrafficSourceAllocation(percentage=10, cpc=0.50, conversion_rate=8.0),
            ),
        ),
    )

    operational = OperationalModel(
        labor=60000,
        rent_utilities=24000,
        office_expenses=6000,
        work_tools=12000,
        tech_fees=3600,
        travel=12000,
        software=SoftwareSubscriptions(shopify=80, klaviyo=80, quickbooks=100, tidio=100),
    )

    shipping = ShippingModel(
        fulfillment_type=FulfillmentType.THIRD_PARTY,
        inbound=InboundShipping(container_cost=3000, customs_duty=5, freight_forwarding=500, port_handling=250),
        third_party=ThirdPartyFulfillment(pick_and_pack=2.5, storage=0.5, postage=2.5),
        in_house=InHouseFulfillment(labor=0.75, postage=4.5, warehouse_rent=2000),
    )

    misc = MiscModel(
        payment_processing_fee=1.0,
        tax_rate=20,
        returns_refunds_percent=2.0,
        monthly_churn_rate=5,
        legal_compliance=5000,
        research_development=20000,
    )

    return AssumptionSet(
        model_name="Untitled Model",
        model_description="Describe your model",
        price_per_unit=65,
        units_sold_year1=8000,
        annual_growth_rate=50,
        initial_investment=100000,
        costs=costs,
        marketing=marketing,
        operational=operational,
        shipping=shipping,
        misc=misc,
    )
