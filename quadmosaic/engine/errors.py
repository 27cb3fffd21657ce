"""Engine error taxonomy.

All failures are deterministic: the same inputs fail the same way, so nothing
here is retried. Callers see the error immediately.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for refinement engine failures."""


class EmptyRegion(EngineError, ValueError):
    """A region enclosing zero pixels was passed to the statistics calculator."""

    def __init__(self, region: object) -> None:
        super().__init__(f"Region encloses no pixels: {region}")
        self.region = region


class InvalidBuffer(EngineError, ValueError):
    """A pixel buffer with zero width or height was handed to the scheduler."""


class UnknownSource(EngineError, KeyError):
    """A source identifier is not registered in the catalog."""

    def __init__(self, source_id: str) -> None:
        super().__init__(source_id)
        self.source_id = source_id

    def __str__(self) -> str:
        return f"Unknown image source: {self.source_id!r}"
