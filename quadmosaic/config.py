"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

from quadmosaic.engine.config import DEFAULT_MAX_FRAGMENTS
from quadmosaic.engine.sources import DEFAULT_IMAGE_FILES, SourceId

_BUNDLED_IMAGES = Path(__file__).parent / "data" / "images"


class Settings(BaseSettings):
    quadmosaic_env: str = "development"
    quadmosaic_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Refinement
    max_fragments: int = DEFAULT_MAX_FRAGMENTS
    ticks_per_step: int = 2

    # Image sources: identifier → file name under images_dir
    images_dir: Path = _BUNDLED_IMAGES
    image_sources: dict[SourceId, str] = dict(DEFAULT_IMAGE_FILES)
    default_source: SourceId = SourceId.IMAGE1

    # SSE stream cadence
    stream_tick_ms: float = 16.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
