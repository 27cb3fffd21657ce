"""Progressive quadtree decomposition of raster images."""

__version__ = "0.1.0"
