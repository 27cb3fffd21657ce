"""Image source switch: select a pixel buffer and restart refinement.

Sources are looked up by identifier in a ``SourceCatalog``; files are decoded
on first use and cached. ``ImageSourceSwitch`` pairs a catalog with one
``RefinementEngine`` and serializes every mutation behind a lock, so an HTTP
host can call it from worker threads.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from quadmosaic.engine.buffer import PixelBuffer, load_pixel_buffer
from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.errors import UnknownSource
from quadmosaic.engine.scheduler import (
    ActiveFragment,
    Pacer,
    RefinementEngine,
    Snapshot,
    StepResult,
)

logger = logging.getLogger(__name__)


class SourceId(str, enum.Enum):
    """Identifiers of the bundled sample images."""

    IMAGE1 = "image1"
    IMAGE2 = "image2"
    IMAGE3 = "image3"


# Bundled sample files, keyed by identifier
DEFAULT_IMAGE_FILES: dict[SourceId, str] = {
    SourceId.IMAGE1: "image1.ppm",
    SourceId.IMAGE2: "image2.ppm",
    SourceId.IMAGE3: "image3.ppm",
}


def _key(source_id: str) -> str:
    return source_id.value if isinstance(source_id, SourceId) else str(source_id)


class SourceCatalog:
    """Identifier → PixelBuffer, resolving file paths lazily."""

    def __init__(self) -> None:
        self._buffers: dict[str, PixelBuffer] = {}
        self._paths: dict[str, Path] = {}

    @classmethod
    def from_directory(cls, directory: str | Path, files: Mapping[str, str]) -> SourceCatalog:
        catalog = cls()
        base = Path(directory)
        for source_id, filename in files.items():
            catalog.register_path(source_id, base / filename)
        return catalog

    def register(self, source_id: str, buffer: PixelBuffer) -> None:
        key = _key(source_id)
        self._paths.pop(key, None)
        self._buffers[key] = buffer

    def register_path(self, source_id: str, path: str | Path) -> None:
        key = _key(source_id)
        self._buffers.pop(key, None)
        self._paths[key] = Path(path)

    def ids(self) -> list[str]:
        return sorted(set(self._buffers) | set(self._paths))

    def __contains__(self, source_id: object) -> bool:
        return isinstance(source_id, str) and _key(source_id) in self.ids()

    def resolve(self, source_id: str) -> PixelBuffer:
        key = _key(source_id)
        if key in self._buffers:
            return self._buffers[key]
        if key not in self._paths:
            raise UnknownSource(key)
        path = self._paths[key]
        buffer = load_pixel_buffer(path)
        logger.info("Decoded source %s from %s (%dx%d)", key, path, buffer.width, buffer.height)
        self._buffers[key] = buffer
        return buffer


@dataclass(frozen=True)
class SwitchProgress:
    """Steps taken under one lock hold, with the engine state they left behind."""

    results: tuple[StepResult, ...]
    generation: int
    count: int
    saturated: bool
    queued: int
    size: tuple[int, int] | None

    @property
    def progressed(self) -> bool:
        return bool(self.results)

    @property
    def exhausted(self) -> bool:
        """No further split is possible for this generation."""
        return self.saturated or self.queued == 0


class ImageSourceSwitch:
    """Owns the engine for one viewer and swaps its source atomically."""

    def __init__(
        self,
        catalog: SourceCatalog,
        config: EngineConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.engine = RefinementEngine(config)
        self.pacer = Pacer(self.engine.config.ticks_per_step)
        self.selected: str | None = None
        self._lock = threading.Lock()

    def select_source(self, source_id: str) -> Snapshot:
        """Replace the whole partition with a fresh root for ``source_id``.

        Resolution and the reset both happen before anything observable
        changes; a reader sees either the old partition or the new one.
        """
        key = _key(source_id)
        buffer = self.catalog.resolve(key)
        with self._lock:
            self.engine.reset(buffer)
            self.pacer.restart()
            self.selected = key
            logger.info("Selected source %s", key)
            return self.engine.snapshot()

    def step(self) -> SwitchProgress:
        with self._lock:
            return self._progress(self.engine.step())

    def tick(self) -> SwitchProgress:
        with self._lock:
            return self._progress(self.pacer.tick(self.engine))

    def run(self, max_steps: int | None = None) -> SwitchProgress:
        with self._lock:
            return self._progress(*self.engine.run(max_steps))

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self.engine.snapshot()

    def fragment(self, fragment_id: int) -> tuple[ActiveFragment, tuple[int, int] | None]:
        """An active fragment and the size of the image it belongs to."""
        with self._lock:
            fragment = self.engine.fragment(fragment_id)
            return fragment, self._size()

    def _size(self) -> tuple[int, int] | None:
        buffer = self.engine.buffer
        return (buffer.width, buffer.height) if buffer is not None else None

    def _progress(self, *results: StepResult) -> SwitchProgress:
        engine = self.engine
        return SwitchProgress(
            results=tuple(r for r in results if r.progressed),
            generation=engine.generation,
            count=engine.count,
            saturated=engine.saturated,
            queued=engine.queued,
            size=self._size(),
        )
