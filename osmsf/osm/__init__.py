"""
OpenStreetMap entity module

Components:
- Models: Data structures (OSMNode, OSMWay, OSMRelation, EntityStore)
- Parser: Overpass JSON and OSM XML parsing
"""

from .models import (
    OSMNode,
    OSMWay,
    OSMRelation,
    RelationMember,
    KeyUniverse,
    BoundingBox,
    EntityStore,
)
from .parser import OSMResponseParser, OSMXmlParser, parse_file

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMRelation",
    "RelationMember",
    "KeyUniverse",
    "BoundingBox",
    "EntityStore",
    "OSMResponseParser",
    "OSMXmlParser",
    "parse_file",
]
