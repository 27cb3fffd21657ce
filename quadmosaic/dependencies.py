"""FastAPI dependency injection."""

from __future__ import annotations

from quadmosaic.config import Settings, settings
from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.sources import ImageSourceSwitch, SourceCatalog

_switch: ImageSourceSwitch | None = None


def get_settings() -> Settings:
    return settings


def build_switch(cfg: Settings) -> ImageSourceSwitch:
    """Catalog of configured images plus an engine primed on the default one."""
    catalog = SourceCatalog.from_directory(cfg.images_dir, cfg.image_sources)
    switch = ImageSourceSwitch(
        catalog,
        EngineConfig(max_fragments=cfg.max_fragments, ticks_per_step=cfg.ticks_per_step),
    )
    switch.select_source(cfg.default_source)
    return switch


def get_switch() -> ImageSourceSwitch:
    """Get or create the process-wide ImageSourceSwitch."""
    global _switch
    if _switch is None:
        _switch = build_switch(settings)
    return _switch


def set_switch(switch: ImageSourceSwitch | None) -> None:
    """Replace the process-wide switch (tests install their own catalog)."""
    global _switch
    _switch = switch
