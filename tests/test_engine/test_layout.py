"""Tests for fragment box layout."""

from __future__ import annotations

import pytest

from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.layout import fragment_box, srgb_to_linear
from quadmosaic.engine.scheduler import RefinementEngine
from tests.conftest import WHITE, uniform_buffer


def test_srgb_to_linear_endpoints():
    assert srgb_to_linear(0.0) == 0.0
    assert srgb_to_linear(1.0) == pytest.approx(1.0)
    assert srgb_to_linear(0.5) == pytest.approx(0.2140, abs=1e-4)
    assert srgb_to_linear(0.02) == pytest.approx(0.02 / 12.92)


def test_root_box_covers_unit_square():
    engine = RefinementEngine(buffer=uniform_buffer(8, 4, color=WHITE))
    box = fragment_box(engine.fragments()[0], 8, 4)
    assert box.position == pytest.approx((0.0, 0.0, 0.05))
    assert box.scale == pytest.approx((0.998, 0.998, 0.1))
    assert box.color == pytest.approx((1.0, 1.0, 1.0))


def test_child_boxes_sit_in_their_quadrants():
    config = EngineConfig(box_gap=0.0, depth_scale=1.0)
    engine = RefinementEngine(config, buffer=uniform_buffer(8, 8))
    result = engine.step()
    tl, tr, bl, br = (fragment_box(f, 8, 8, config) for f in result.added)

    assert tl.position[:2] == pytest.approx((-0.25, 0.25))
    assert tr.position[:2] == pytest.approx((0.25, 0.25))
    assert bl.position[:2] == pytest.approx((-0.25, -0.25))
    assert br.position[:2] == pytest.approx((0.25, -0.25))
    assert tl.scale == pytest.approx((0.5, 0.5, 0.5))
    assert tl.fragment_id == result.added[0].id
