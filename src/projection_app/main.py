from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from .config import configure_logging, get_settings
from .models.assumptions import AssumptionSet
from .models.results import CalculatedMetrics, CampaignEstimate, CampaignPlan
from .schemas import (
    CampaignEstimateRequest,
    ExportRequest,
    ModelDetailResponse,
    ModelListResponse,
    ModelSaveRequest,
    ModelSaveResponse,
)
from .services.calculator import ProjectionCalculator
from .services.campaign import CampaignPlanner, campaign_estimate
from .services.export import ExportData, export_filename, export_to_csv
from .services.storage import AuthenticationRequired, LastInputsCache, ModelNotFound, ModelRepository


settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="DTC Projection Engine", version="0.1.0")

calculator = ProjectionCalculator()
planner = CampaignPlanner()
repository = ModelRepository()
cache = LastInputsCache(settings.cache_path)


@app.exception_handler(AuthenticationRequired)
def handle_authentication_required(request: Request, exc: AuthenticationRequired) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(ModelNotFound)
def handle_model_not_found(request: Request, exc: ModelNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.post("/metrics", response_model=CalculatedMetrics)
def compute(assumptions: AssumptionSet) -> CalculatedMetrics:
    return calculator.run(assumptions)


@app.post("/campaign", response_model=CampaignPlan)
def plan_campaign(assumptions: AssumptionSet) -> CampaignPlan:
    # The marketing panel prices campaign sales at materials cost only.
    unit_costs = calculator.resolve_unit_costs(assumptions)
    return planner.plan(assumptions, unit_costs.product_materials)


@app.post("/campaign/estimate", response_model=CampaignEstimate)
def estimate_campaign(payload: CampaignEstimateRequest) -> CampaignEstimate:
    return campaign_estimate(payload.source, payload.ad_spend, payload.conversion_rate)


@app.post("/models", response_model=ModelSaveResponse)
def save_model(payload: ModelSaveRequest, x_user_id: Optional[str] = Header(default=None)) -> ModelSaveResponse:
    saved = repository.save(x_user_id, payload.name, payload.description, payload.data)
    return ModelSaveResponse(id=saved.id)


@app.put("/models/{model_id}", response_model=ModelSaveResponse)
def update_model(
    model_id: str,
    payload: ModelSaveRequest,
    x_user_id: Optional[str] = Header(default=None),
) -> ModelSaveResponse:
    saved = repository.update(x_user_id, model_id, payload.name, payload.description, payload.data)
    return ModelSaveResponse(id=saved.id)


@app.get("/models", response_model=ModelListResponse)
def list_models(x_user_id: Optional[str] = Header(default=None)) -> ModelListResponse:
    return ModelListResponse(models=repository.list(x_user_id))


@app.get("/models/{model_id}", response_model=ModelDetailResponse)
def get_model(model_id: str, x_user_id: Optional[str] = Header(default=None)) -> ModelDetailResponse:
    saved = repository.get(x_user_id, model_id)
    return ModelDetailResponse(model=saved, metrics=calculator.run(saved.data))


@app.delete("/models/{model_id}")
def delete_model(model_id: str, x_user_id: Optional[str] = Header(default=None)) -> Dict[str, bool]:
    repository.delete(x_user_id, model_id)
    return {"success": True}


@app.get("/inputs/last", response_model=AssumptionSet)
def load_last_inputs() -> AssumptionSet:
    assumptions = cache.load()
    if assumptions is None:
        raise HTTPException(status_code=404, detail="No cached inputs")
    return assumptions


@app.put("/inputs/last")
def store_last_inputs(assumptions: AssumptionSet) -> Dict[str, bool]:
    cache.store(assumptions)
    return {"success": True}


@app.post("/export/csv")
def export_csv(payload: ExportRequest) -> Response:
    metrics = calculator.run(payload.inputs)
    data = ExportData(inputs=payload.inputs, metrics=metrics, scenario=payload.scenario)
    filename = export_filename(payload.inputs.model_name)
    logger.info("Exporting %r (%s) as %s", payload.inputs.model_name, payload.scenario.value, filename)
    return Response(
        content=export_to_csv(data),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
