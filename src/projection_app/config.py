from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    environment: str
    log_level: str
    cache_path: Path


def get_settings() -> Settings:
    return Settings(
        environment=os.getenv("PROJECTION_ENV", "local"),
        log_level=os.getenv("PROJECTION_LOG_LEVEL", "INFO").upper(),
        cache_path=Path(os.getenv("PROJECTION_CACHE_PATH", ".projection_cache.json")),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
