"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.layout import fragment_box
from quadmosaic.engine.scheduler import ActiveFragment, Snapshot, StepResult


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    source: str | None = None
    fragment_count: int = 0


class RegionModel(BaseModel):
    left: float
    top: float
    right: float
    bottom: float


class BoxModel(BaseModel):
    position: tuple[float, float, float]
    scale: tuple[float, float, float]
    color: tuple[float, float, float]


class FragmentModel(BaseModel):
    id: int
    region: RegionModel
    avg_color: tuple[float, float, float]
    score: float
    weighted_score: float
    box: BoxModel | None = None

    @classmethod
    def from_fragment(
        cls,
        fragment: ActiveFragment,
        size: tuple[int, int] | None = None,
        config: EngineConfig | None = None,
    ) -> FragmentModel:
        """Serialize a fragment; ``size`` (width, height) enables box layout."""
        box = None
        if size is not None:
            laid = fragment_box(fragment, size[0], size[1], config)
            box = BoxModel(position=laid.position, scale=laid.scale, color=laid.color)
        return cls(
            id=fragment.id,
            region=RegionModel(**fragment.region.as_dict()),
            avg_color=fragment.avg_color,
            score=fragment.score,
            weighted_score=fragment.weighted_score,
            box=box,
        )


class SnapshotResponse(BaseModel):
    source: str | None = None
    generation: int = 0
    width: int = 0
    height: int = 0
    count: int = 0
    max_fragments: int = 0
    fragments: list[FragmentModel] = Field(default_factory=list)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Snapshot,
        source: str | None,
        config: EngineConfig,
        include_boxes: bool = False,
    ) -> SnapshotResponse:
        size = (snapshot.width, snapshot.height) if include_boxes else None
        return cls(
            source=source,
            generation=snapshot.generation,
            width=snapshot.width,
            height=snapshot.height,
            count=snapshot.count,
            max_fragments=config.max_fragments,
            fragments=[FragmentModel.from_fragment(f, size, config) for f in snapshot.fragments],
        )


class DeltaModel(BaseModel):
    removed: int
    added: list[FragmentModel]
    count: int

    @classmethod
    def from_step(
        cls,
        result: StepResult,
        size: tuple[int, int] | None = None,
        config: EngineConfig | None = None,
    ) -> DeltaModel:
        if result.removed is None:
            raise ValueError("Only a progressed step carries a delta")
        return cls(
            removed=result.removed.id,
            added=[FragmentModel.from_fragment(f, size, config) for f in result.added],
            count=result.count,
        )


class StepResponse(BaseModel):
    steps_taken: int = 0
    count: int = 0
    saturated: bool = False
    deltas: list[DeltaModel] = Field(default_factory=list)


class SourcesResponse(BaseModel):
    sources: list[str] = Field(default_factory=list)
    selected: str | None = None
