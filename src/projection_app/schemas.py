from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .models.assumptions import AssumptionSet
from .models.common import ProjectionModel, ScenarioLabel, TrafficSource
from .models.results import CalculatedMetrics
from .models.saved import SavedModel


class ModelSaveRequest(ProjectionModel):
    name: str
    description: Optional[str] = None
    data: AssumptionSet


class ModelSaveResponse(ProjectionModel):
    id: str


class ModelListResponse(ProjectionModel):
    models: List[SavedModel]


class ModelDetailResponse(ProjectionModel):
    model: SavedModel
    metrics: CalculatedMetrics


class ExportRequest(ProjectionModel):
    inputs: AssumptionSet
    scenario: ScenarioLabel = ScenarioLabel.BASE


class CampaignEstimateRequest(ProjectionModel):
    source: TrafficSource
    ad_spend: float = Field(..., description="Monthly spend for the campaign")
    conversion_rate: float = Field(..., description="Expected conversion rate, in percent")
