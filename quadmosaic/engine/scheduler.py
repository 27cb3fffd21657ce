"""Refinement scheduler — greedy, anytime quadtree subdivision.

The engine owns a max-heap of active fragments keyed by weighted score. Each
``step()`` pops the worst-approximated fragment and replaces it with its four
quadrants, so the active set is always an exact partition of the image:

    reset(buffer)  →  1 fragment (whole image)
    step()         →  −1 popped, +4 children  (net +3)

Only the popped fragment and its children touch the heap, keeping a step at
O(log n) plus the pixel work of the four children.
"""

from __future__ import annotations

import heapq
import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field

from quadmosaic.engine.buffer import PixelBuffer
from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.errors import InvalidBuffer
from quadmosaic.engine.quadrants import can_split, split
from quadmosaic.engine.region import Region
from quadmosaic.engine.stats import RegionStats, compute_stats

logger = logging.getLogger(__name__)

# One fragment out, four in.
FRAGMENT_GROWTH = 3


@dataclass(frozen=True)
class ActiveFragment:
    """A leaf of the current decomposition with its cached statistics."""

    id: int
    region: Region
    stats: RegionStats
    weighted_score: float

    @property
    def avg_color(self) -> tuple[float, float, float]:
        return self.stats.avg_color

    @property
    def score(self) -> float:
        return self.stats.score


@dataclass(frozen=True)
class StepResult:
    """Outcome of one ``step()``: the delta a renderer needs to apply."""

    progressed: bool
    removed: ActiveFragment | None = None
    added: tuple[ActiveFragment, ...] = ()
    count: int = 0


@dataclass(frozen=True)
class Snapshot:
    """The whole active partition at one instant."""

    generation: int
    width: int
    height: int
    fragments: tuple[ActiveFragment, ...] = ()

    @property
    def count(self) -> int:
        return len(self.fragments)


def weighted_score(stats: RegionStats, region: Region, width: int, height: int) -> float:
    """Scale the score by √(area fraction) so large regions are not starved."""
    return stats.score * math.sqrt(region.area_fraction(width, height))


@dataclass
class _State:
    """Everything one generation of refinement owns. Replaced wholesale on reset."""

    buffer: PixelBuffer
    generation: int
    fragments: dict[int, ActiveFragment] = field(default_factory=dict)
    # (−weighted_score, id): heapq is a min-heap; equal scores pop oldest first
    heap: list[tuple[float, int]] = field(default_factory=list)
    next_id: int = 0

    def make_fragment(self, region: Region, stats: RegionStats) -> ActiveFragment:
        fragment = ActiveFragment(
            id=self.next_id,
            region=region,
            stats=stats,
            weighted_score=weighted_score(stats, region, self.buffer.width, self.buffer.height),
        )
        self.next_id += 1
        return fragment

    def admit(self, fragment: ActiveFragment) -> None:
        self.fragments[fragment.id] = fragment
        if can_split(fragment.region):
            heapq.heappush(self.heap, (-fragment.weighted_score, fragment.id))
        else:
            logger.debug("Fragment %d is at pixel resolution; not queued", fragment.id)


NO_PROGRESS = StepResult(progressed=False)


def _ordered(state: _State) -> tuple[ActiveFragment, ...]:
    return tuple(state.fragments[k] for k in sorted(state.fragments))


class RefinementEngine:
    """Owns the fragment queue, the active pixel buffer and the config.

    Not reentrant: ``reset`` and ``step`` must be serialized by the caller.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        buffer: PixelBuffer | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._state: _State | None = None
        self._generation = 0
        self._saturation_logged = False
        if buffer is not None:
            self.reset(buffer)

    # ── Lifecycle ──

    def reset(self, buffer: PixelBuffer) -> ActiveFragment:
        """Discard all fragments and start over from one root fragment.

        The new state is built off to the side and swapped in with a single
        assignment, so a failed reset leaves the previous partition intact.
        """
        if buffer.is_empty:
            raise InvalidBuffer(f"Pixel buffer has zero extent: {buffer.width}x{buffer.height}")

        root_region = Region.full(buffer.width, buffer.height)
        root_stats = compute_stats(buffer, root_region)

        state = _State(buffer=buffer, generation=self._generation + 1)
        root = state.make_fragment(root_region, root_stats)
        state.admit(root)

        self._generation = state.generation
        self._state = state
        self._saturation_logged = False
        logger.info(
            "Reset: %dx%d image, root score %.4f (generation %d)",
            buffer.width,
            buffer.height,
            root_stats.score,
            state.generation,
        )
        return root

    # ── Stepping ──

    def step(self) -> StepResult:
        """Split the highest-priority fragment into its four quadrants.

        Returns ``NO_PROGRESS`` when another split would exceed
        ``max_fragments`` or nothing is left to split. ``EmptyRegion`` from the
        statistics calculator propagates with the state untouched.
        """
        state = self._state
        if state is None or not state.heap:
            return NO_PROGRESS
        if self.saturated:
            if not self._saturation_logged:
                logger.info("Fragment limit reached: %d active", len(state.fragments))
                self._saturation_logged = True
            return NO_PROGRESS

        _, parent_id = state.heap[0]
        parent = state.fragments[parent_id]
        child_regions = split(parent.region)
        # All fallible work happens before the heap is touched.
        child_stats = [compute_stats(state.buffer, region) for region in child_regions]

        heapq.heappop(state.heap)
        del state.fragments[parent_id]
        added = tuple(
            state.make_fragment(region, stats)
            for region, stats in zip(child_regions, child_stats)
        )
        for child in added:
            state.admit(child)

        logger.debug(
            "Split fragment %d (weighted %.5f) → %d active",
            parent.id,
            parent.weighted_score,
            len(state.fragments),
        )
        return StepResult(
            progressed=True,
            removed=parent,
            added=added,
            count=len(state.fragments),
        )

    def iter_steps(self, max_steps: int | None = None) -> Iterator[StepResult]:
        """Yield successful steps until no progress or ``max_steps`` is spent."""
        taken = 0
        while max_steps is None or taken < max_steps:
            result = self.step()
            if not result.progressed:
                return
            taken += 1
            yield result

    def run(self, max_steps: int | None = None) -> list[StepResult]:
        """Eager refinement: step in a tight loop."""
        return list(self.iter_steps(max_steps))

    # ── Inspection ──

    @property
    def buffer(self) -> PixelBuffer | None:
        return self._state.buffer if self._state else None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def count(self) -> int:
        return len(self._state.fragments) if self._state else 0

    @property
    def queued(self) -> int:
        return len(self._state.heap) if self._state else 0

    @property
    def saturated(self) -> bool:
        """True once another split would push the count past the maximum."""
        return self.count + FRAGMENT_GROWTH > self.config.max_fragments

    def fragment(self, fragment_id: int) -> ActiveFragment:
        if self._state is None:
            raise KeyError(fragment_id)
        return self._state.fragments[fragment_id]

    def fragments(self) -> tuple[ActiveFragment, ...]:
        state = self._state
        if state is None:
            return ()
        return _ordered(state)

    def snapshot(self) -> Snapshot:
        state = self._state
        if state is None:
            return Snapshot(generation=0, width=0, height=0)
        return Snapshot(
            generation=state.generation,
            width=state.buffer.width,
            height=state.buffer.height,
            fragments=_ordered(state),
        )


class Pacer:
    """Throttle structural changes to one every ``ticks_per_step`` ticks.

    Purely a presentation concern; the engine itself has no notion of time.
    """

    def __init__(self, ticks_per_step: int = 2) -> None:
        if ticks_per_step < 1:
            raise ValueError(f"ticks_per_step must be >= 1, got {ticks_per_step}")
        self.ticks_per_step = ticks_per_step
        self._ticks = 0

    def tick(self, engine: RefinementEngine) -> StepResult:
        due = self._ticks % self.ticks_per_step == 0
        self._ticks += 1
        if not due:
            return NO_PROGRESS
        return engine.step()

    def restart(self) -> None:
        self._ticks = 0
