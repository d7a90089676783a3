from __future__ import annotations

from pydantic import Field

from .common import ProjectionModel
from .costs import ProductCosts
from .marketing import MarketingModel
from .operational import MiscModel, OperationalModel
from .shipping import ShippingModel


class AssumptionSet(ProjectionModel):
    model_name: str = "Untitled Model"
    model_description: str = ""
    price_per_unit: float = 0.0
    units_sold_year1: float = 0.0
    annual_growth_rate: float = Field(0.0, description="Annual unit growth, in percent")
    initial_investment: float = 0.0
    costs: ProductCosts = Field(default_factory=ProductCosts)
    marketing: MarketingModel = Field(default_factory=MarketingModel)
    operational: OperationalModel = Field(default_factory=OperationalModel)
    shipping: ShippingModel = Field(default_factory=ShippingModel)
    misc: MiscModel = Field(default_factory=MiscModel)
