from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectionModel(BaseModel):
    """Immutable base for every input and output structure.

    Fields are snake_case in Python and camelCase on the wire, so blobs written
    by the browser client validate without translation.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),
    )


class FulfillmentType(str, Enum):
    THIRD_PARTY = "thirdParty"
    IN_HOUSE = "inHouse"


class TrafficSource(str, Enum):
    META = "meta"
    GOOGLE = "google"
    TIKTOK = "tiktok"
    INFLUENCER = "influencer"
    RETARGETING = "retargeting"


class ScenarioLabel(str, Enum):
    BEST = "best"
    BASE = "base"
    WORST = "worst"


class CostItem(ProjectionModel):
    name: str
    amount: float = Field(0.0, description="Per-unit cost")


class SoftwareItem(ProjectionModel):
    name: str
    cost: float = Field(0.0, description="Monthly subscription cost")
