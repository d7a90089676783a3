from __future__ import annotations

from pydantic import Field

from .common import FulfillmentType, ProjectionModel


class InboundShipping(ProjectionModel):
    container_cost: float = 0.0
    customs_duty: float = Field(0.0, description="Percent of unit price charged as duty")
    freight_forwarding: float = 0.0
    port_handling: float = 0.0


class ThirdPartyFulfillment(ProjectionModel):
    pick_and_pack: float = 0.0
    storage: float = 0.0
    postage: float = 0.0


class InHouseFulfillment(ProjectionModel):
    labor: float = 0.0
    postage: float = 0.0
    warehouse_rent: float = Field(0.0, description="Monthly rent, amortized over monthly volume")


class ShippingModel(ProjectionModel):
    fulfillment_type: FulfillmentType = FulfillmentType.THIRD_PARTY
    inbound: InboundShipping = Field(default_factory=InboundShipping)
    third_party: ThirdPartyFulfillment = Field(default_factory=ThirdPartyFulfillment)
    in_house: InHouseFulfillment = Field(default_factory=InHouseFulfillment)
