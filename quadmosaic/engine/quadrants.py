"""Split a region into four equal-area children with real-valued midpoints."""

from __future__ import annotations

from quadmosaic.engine.region import Region


def midpoint(region: Region) -> tuple[float, float]:
    return (
        region.left + (region.right - region.left) / 2,
        region.top + (region.bottom - region.top) / 2,
    )


def split(region: Region) -> tuple[Region, Region, Region, Region]:
    """Children in order: top-left, top-right, bottom-left, bottom-right.

    The order is part of the contract; renderers index into it.
    """
    mid_x, mid_y = midpoint(region)
    return (
        Region(region.left, region.top, mid_x, mid_y),
        Region(mid_x, region.top, region.right, mid_y),
        Region(region.left, mid_y, mid_x, region.bottom),
        Region(mid_x, mid_y, region.right, region.bottom),
    )


def can_split(region: Region) -> bool:
    """True when every quadrant would enclose at least one pixel."""
    return all(not child.is_empty for child in split(region))
