from __future__ import annotations

from datetime import datetime
from typing import Optional

from .assumptions import AssumptionSet
from .common import ProjectionModel


class SavedModel(ProjectionModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    data: AssumptionSet
    created_at: datetime
    updated_at: datetime
