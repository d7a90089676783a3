from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from ..models.assumptions import AssumptionSet
from ..models.saved import SavedModel


logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class AuthenticationRequired(StorageError):
    pass


class ModelNotFound(StorageError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModelRepository:
    """Named assumption sets keyed by id and owned by a single user.

    The assumption set is kept as an opaque JSON blob and revalidated on every
    read. Metrics are never stored.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._records: Dict[str, Dict[str, object]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def save(self, user_id: Optional[str], name: str, description: Optional[str], data: AssumptionSet) -> SavedModel:
        owner = self._require_user(user_id, "You must be logged in to save models")
        now = self._clock()
        model_id = str(uuid.uuid4())
        record = {
            "id": model_id,
            "user_id": owner,
            "name": name,
            "description": description,
            "data": data.model_dump_json(by_alias=True),
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._records[model_id] = record
        logger.info("Saved model %s for user %s", model_id, owner)
        return self._to_model(record)

    def update(
        self,
        user_id: Optional[str],
        model_id: str,
        name: str,
        description: Optional[str],
        data: AssumptionSet,
    ) -> SavedModel:
        owner = self._require_user(user_id, "You must be logged in to update models")
        blob = data.model_dump_json(by_alias=True)
        with self._lock:
            record = self._owned_record(model_id, owner)
            record = dict(record, name=name, description=description, data=blob, updated_at=self._clock())
            self._records[model_id] = record
        logger.info("Updated model %s for user %s", model_id, owner)
        return self._to_model(record)

    def get(self, user_id: Optional[str], model_id: str) -> SavedModel:
        owner = self._require_user(user_id, "You must be logged in to view models")
        with self._lock:
            record = self._owned_record(model_id, owner)
        return self._to_model(record)

    def list(self, user_id: Optional[str]) -> List[SavedModel]:
        owner = self._require_user(user_id, "You must be logged in to view models")
        with self._lock:
            records = [record for record in self._records.values() if record["user_id"] == owner]
        records.sort(key=lambda record: record["updated_at"], reverse=True)
        return [self._to_model(record) for record in records]

    def delete(self, user_id: Optional[str], model_id: str) -> None:
        owner = self._require_user(user_id, "You must be logged in to delete models")
        with self._lock:
            self._owned_record(model_id, owner)
            self._records.pop(model_id)
        logger.info("Deleted model %s for user %s", model_id, owner)

    def _require_user(self, user_id: Optional[str], message: str) -> str:
        if not user_id:
            raise AuthenticationRequired(message)
        return user_id

    def _owned_record(self, model_id: str, owner: str) -> Dict[str, object]:
        # Callers hold the lock.
        record = self._records.get(model_id)
        # Another user's model is reported as missing rather than forbidden.
        if record is None or record["user_id"] != owner:
            raise ModelNotFound(f"Model {model_id} not found")
        return record

    def _to_model(self, record: Dict[str, object]) -> SavedModel:
        return SavedModel(
            id=record["id"],
            user_id=record["user_id"],
            name=record["name"],
            description=record["description"],
            data=AssumptionSet.model_validate_json(record["data"]),
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


class LastInputsCache:
    """Keeps the most recently edited assumption set in a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def store(self, assumptions: AssumptionSet) -> None:
        self.path.write_text(assumptions.model_dump_json(by_alias=True), encoding="utf-8")

    def load(self) -> Optional[AssumptionSet]:
        if not self.path.exists():
            return None
        try:
            return AssumptionSet.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable inputs cache at %s: %s", self.path, exc)
            return None

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
