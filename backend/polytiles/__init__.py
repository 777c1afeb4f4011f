"""polytiles: cut polygon shapefiles into quadtree GeoJSON tiles."""

__version__ = "0.1.0"
