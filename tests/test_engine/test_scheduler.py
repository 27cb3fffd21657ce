"""Tests for the refinement scheduler."""

from __future__ import annotations

import math

import numpy as np
import pytest

from quadmosaic.engine import scheduler as scheduler_module
from quadmosaic.engine.buffer import PixelBuffer
from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.errors import EmptyRegion, InvalidBuffer
from quadmosaic.engine.region import Region
from quadmosaic.engine.scheduler import NO_PROGRESS, Pacer, RefinementEngine
from tests.conftest import (
    BLACK,
    WHITE,
    assert_partition,
    checker_buffer,
    noisy_buffer,
    uniform_buffer,
)


def test_reset_creates_single_root(checker8):
    engine = RefinementEngine()
    root = engine.reset(checker8)
    assert engine.count == 1
    assert root.region == Region.full(8, 8)
    assert root.score == pytest.approx(1.5)
    assert root.weighted_score == pytest.approx(1.5)
    assert engine.fragments() == (root,)


def test_reset_rejects_empty_buffer(checker8):
    engine = RefinementEngine(buffer=checker8)
    before = engine.snapshot()
    with pytest.raises(InvalidBuffer):
        engine.reset(PixelBuffer(np.zeros((0, 4, 3))))
    with pytest.raises(InvalidBuffer):
        engine.reset(PixelBuffer(np.zeros((4, 0, 3))))
    assert engine.snapshot() == before


def test_step_before_reset_is_noop():
    engine = RefinementEngine()
    assert engine.step() is NO_PROGRESS
    assert engine.snapshot().count == 0


def test_scenario_a_two_by_two(diagonal_2x2):
    engine = RefinementEngine(buffer=diagonal_2x2)
    result = engine.step()

    assert result.progressed
    assert result.removed.region == Region.full(2, 2)
    assert [f.region for f in result.added] == [
        Region(0.0, 0.0, 1.0, 1.0),
        Region(1.0, 0.0, 2.0, 1.0),
        Region(0.0, 1.0, 1.0, 2.0),
        Region(1.0, 1.0, 2.0, 2.0),
    ]
    assert [f.avg_color for f in result.added] == [WHITE, BLACK, BLACK, WHITE]
    assert all(f.score == 0.0 for f in result.added)
    assert engine.count == 4

    # 1×1 leaves cannot be split further
    assert engine.queued == 0
    assert engine.step() is NO_PROGRESS
    assert engine.count == 4


def test_scenario_b_uniform_image_grows_by_three():
    buffer = uniform_buffer(16, 16)
    engine = RefinementEngine(EngineConfig(max_fragments=40), buffer=buffer)

    counts = [engine.count]
    while True:
        result = engine.step()
        if not result.progressed:
            break
        assert result.count == counts[-1] + 3
        counts.append(engine.count)
        assert_partition(engine.fragments(), 16, 16)

    assert counts == list(range(1, 41, 3))
    assert all(f.score == 0.0 for f in engine.fragments())


def test_scenario_c_second_reset_discards_first(checker8):
    engine = RefinementEngine(buffer=checker8)
    engine.run(5)
    assert engine.count == 16

    other = uniform_buffer(10, 6)
    root = engine.reset(other)
    assert engine.count == 1
    assert engine.fragments() == (root,)
    assert root.region == Region.full(10, 6)
    assert engine.buffer is other
    assert engine.generation == 2


def test_scenario_d_saturated_step_is_noop(checker8):
    engine = RefinementEngine(EngineConfig(max_fragments=10), buffer=checker8)
    results = engine.run()
    assert len(results) == 3
    assert engine.count == 10
    assert engine.saturated

    before = engine.snapshot()
    for _ in range(5):
        assert engine.step() is NO_PROGRESS
    assert engine.snapshot() == before


def test_count_never_exceeds_maximum():
    buffer = checker_buffer(16)
    engine = RefinementEngine(EngineConfig(max_fragments=12), buffer=buffer)
    engine.run()
    # 1 → 4 → 7 → 10; one more split would make 13
    assert engine.count == 10
    assert engine.count <= engine.config.max_fragments


def test_default_maximum_on_larger_image(noisy64):
    engine = RefinementEngine(buffer=noisy64)
    results = engine.run()
    assert engine.config.max_fragments == 2000
    assert engine.count == 1999
    assert len(results) == 666
    assert_partition(engine.fragments(), 64, 64, pairwise=False)


def test_partition_holds_after_every_step():
    buffer = noisy_buffer(13, 9, seed=3)
    engine = RefinementEngine(EngineConfig(max_fragments=60), buffer=buffer)
    assert_partition(engine.fragments(), 13, 9)
    for _ in engine.iter_steps():
        assert_partition(engine.fragments(), 13, 9)


def test_highest_weighted_score_pops_first():
    pixels = np.full((8, 8, 3), 0.5)
    yy, xx = np.mgrid[0:4, 0:4]
    pixels[0:4, 0:4] = ((xx + yy) % 2)[:, :, None]
    engine = RefinementEngine(buffer=PixelBuffer(pixels))

    first = engine.step()
    scores = {f.region: f.weighted_score for f in first.added}
    assert scores[Region(0.0, 0.0, 4.0, 4.0)] == pytest.approx(1.5 * math.sqrt(0.25))
    assert scores[Region(4.0, 4.0, 8.0, 8.0)] == 0.0

    second = engine.step()
    assert second.removed.region == Region(0.0, 0.0, 4.0, 4.0)


def test_weighted_score_scales_by_root_area_fraction(checker8):
    engine = RefinementEngine(buffer=checker8)
    result = engine.step()
    for child in result.added:
        assert child.score == pytest.approx(1.5)
        assert child.weighted_score == pytest.approx(1.5 * 0.5)


def test_ties_pop_in_creation_order():
    engine = RefinementEngine(buffer=uniform_buffer(16, 16))
    assert engine.step().removed.id == 0
    assert engine.step().removed.id == 1
    assert engine.step().removed.id == 2


def test_step_reports_delta(checker8):
    engine = RefinementEngine(buffer=checker8)
    root = engine.fragments()[0]
    result = engine.step()
    assert result.removed == root
    assert len(result.added) == 4
    assert {f.id for f in result.added} == {f.id for f in engine.fragments()}
    assert root.id not in {f.id for f in engine.fragments()}


def test_determinism():
    buffer = noisy_buffer(40, 30, seed=7)
    first = RefinementEngine(EngineConfig(max_fragments=300), buffer=buffer)
    second = RefinementEngine(EngineConfig(max_fragments=300), buffer=buffer)
    first.run()
    second.run()
    assert first.snapshot() == second.snapshot()

    second.reset(buffer)
    second.run()
    assert second.snapshot().fragments == first.snapshot().fragments


def test_empty_region_leaves_state_unchanged(checker8, monkeypatch):
    engine = RefinementEngine(buffer=checker8)
    engine.step()
    before = engine.snapshot()
    queued = engine.queued

    def explode(buffer, region):
        raise EmptyRegion(region)

    monkeypatch.setattr(scheduler_module, "compute_stats", explode)
    with pytest.raises(EmptyRegion):
        engine.step()

    assert engine.snapshot() == before
    assert engine.queued == queued


def test_run_respects_step_budget(checker8):
    engine = RefinementEngine(buffer=checker8)
    assert len(engine.run(2)) == 2
    assert engine.count == 7


def test_odd_sized_image_stops_at_pixel_resolution():
    engine = RefinementEngine(buffer=noisy_buffer(3, 3, seed=1))
    engine.run()
    assert engine.queued == 0
    assert_partition(engine.fragments(), 3, 3)
    assert engine.count < engine.config.max_fragments


def test_pacer_steps_every_other_tick(checker8):
    engine = RefinementEngine(buffer=checker8)
    pacer = Pacer(2)
    progressed = [pacer.tick(engine).progressed for _ in range(6)]
    assert progressed == [True, False, True, False, True, False]
    assert engine.count == 10

    pacer.restart()
    assert pacer.tick(engine).progressed


def test_pacer_rejects_zero():
    with pytest.raises(ValueError):
        Pacer(0)


def test_config_validation():
    with pytest.raises(ValueError):
        EngineConfig(max_fragments=0)
    with pytest.raises(ValueError):
        EngineConfig(ticks_per_step=0)
