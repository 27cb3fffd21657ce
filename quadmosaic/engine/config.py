"""Engine configuration: refinement bounds and presentation tunables."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_FRAGMENTS = 2000


@dataclass(frozen=True)
class EngineConfig:
    """Knobs for the refinement scheduler and its presentation helpers."""

    # Upper bound on simultaneously active fragments; splitting stops there.
    max_fragments: int = DEFAULT_MAX_FRAGMENTS

    # Pacer: one structural change every N ticks (1 = every tick)
    ticks_per_step: int = 2

    # Box layout: gap between neighbouring boxes, in unit-square coordinates
    box_gap: float = 0.002
    # Box layout: depth = mean lightness × depth_scale
    depth_scale: float = 0.1

    def __post_init__(self) -> None:
        if self.max_fragments < 1:
            raise ValueError(f"max_fragments must be >= 1, got {self.max_fragments}")
        if self.ticks_per_step < 1:
            raise ValueError(f"ticks_per_step must be >= 1, got {self.ticks_per_step}")
