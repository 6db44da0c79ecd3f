"""
osmsf: OpenStreetMap entities to simple-features geometries

Converts nodes, ways and relations into points, line strings, polygons,
multipolygons and multilinestrings, each paired with an attribute table.
"""

from .config import get_config, validate_config, OSMDataConfig
from .errors import OSMDataError, UnresolvedReference, UnclosedRing, ShapeMismatch, InvalidCategory
from .pipeline import OSMDataPipeline, OSMData

__version__ = "0.1.0"

__all__ = [
    "get_config",
    "validate_config",
    "OSMDataConfig",
    "OSMDataError",
    "UnresolvedReference",
    "UnclosedRing",
    "ShapeMismatch",
    "InvalidCategory",
    "OSMDataPipeline",
    "OSMData",
]
