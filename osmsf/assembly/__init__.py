"""
Geometry assembly for OSM entities

- WayTracer: node references to coordinates
- RingAssembler: way fragments to closed rings
- MultipolygonComposer / MultilinestringComposer: relations to geometries
- AttributeTableBuilder: tags to dense attribute tables
- ShapeValidator: alignment of geometry, label and attribute arrays
"""

from .geometry import (
    GeometryType,
    WayGeometry,
    TracedWay,
    Ring,
    OpenChain,
    Point,
    LineString,
    Polygon,
    MultiPolygon,
    MultiLineString,
    GeometryCollection,
    OSMLayer,
)
from .tracer import WayTracer, trace_way
from .rings import RingAssembler, RingAssemblyResult, assemble_rings
from .multipolygon import MultipolygonComposer
from .multilinestring import MultilinestringComposer, RoleFeature
from .attributes import AttributeTableBuilder, build_table
from .validator import ShapeValidator
from .report import AssemblyIssue, AssemblyReport
from .features import FeatureProcessor
from .relations import RelationProcessor

__all__ = [
    "GeometryType",
    "WayGeometry",
    "TracedWay",
    "Ring",
    "OpenChain",
    "Point",
    "LineString",
    "Polygon",
    "MultiPolygon",
    "MultiLineString",
    "GeometryCollection",
    "OSMLayer",
    "WayTracer",
    "trace_way",
    "RingAssembler",
    "RingAssemblyResult",
    "assemble_rings",
    "MultipolygonComposer",
    "MultilinestringComposer",
    "RoleFeature",
    "AttributeTableBuilder",
    "build_table",
    "ShapeValidator",
    "AssemblyIssue",
    "AssemblyReport",
    "FeatureProcessor",
    "RelationProcessor",
]
