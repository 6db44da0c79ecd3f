"""
Geometry types produced by the assembly engine

Every coordinate sequence keeps the node ids of its vertices and every
ring or line keeps the way id(s) it was traced from, so that the shape
validator can check the parallel arrays at each nesting level.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Dict, Any, Optional, Union

from shapely import geometry as sg

from ..errors import InvalidCategory
from ..osm.models import BoundingBox

Coord = Tuple[float, float]


class GeometryType(str, Enum):
    POINT = "POINT"
    LINESTRING = "LINESTRING"
    POLYGON = "POLYGON"
    MULTIPOLYGON = "MULTIPOLYGON"
    MULTILINESTRING = "MULTILINESTRING"


class WayGeometry(str, Enum):
    """The two geometry kinds a single way can be emitted as"""
    POLYGON = "POLYGON"
    LINESTRING = "LINESTRING"

    @classmethod
    def coerce(cls, value: Union["WayGeometry", str]) -> "WayGeometry":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise InvalidCategory(value)


@dataclass
class TracedWay:
    """Coordinates of a way in node order"""
    way_id: int
    coords: List[Coord]
    node_ids: List[int]

    @property
    def start(self) -> Coord:
        return self.coords[0]

    @property
    def end(self) -> Coord:
        return self.coords[-1]

    def reversed(self) -> "TracedWay":
        return TracedWay(self.way_id, self.coords[::-1], self.node_ids[::-1])


@dataclass
class Ring:
    """Closed coordinate sequence (first coordinate repeated as last)"""
    coords: List[Coord]
    node_ids: List[int]
    way_ids: List[int]

    @property
    def is_closed(self) -> bool:
        return len(self.coords) > 1 and self.coords[0] == self.coords[-1]

    @property
    def label(self) -> str:
        return "-".join(str(w) for w in self.way_ids)

    def to_shapely(self) -> sg.Polygon:
        return sg.Polygon(self.coords)


@dataclass
class OpenChain:
    """Chain of ways that could not be closed into a valid ring"""
    coords: List[Coord]
    node_ids: List[int]
    way_ids: List[int]
    reason: str = "unclosed"


@dataclass
class Point:
    coord: Coord
    node_id: int

    geometry_type = GeometryType.POINT

    def to_shapely(self) -> sg.Point:
        return sg.Point(self.coord)


@dataclass
class LineString:
    coords: List[Coord]
    node_ids: List[int]
    way_id: int

    geometry_type = GeometryType.LINESTRING

    def to_shapely(self) -> sg.LineString:
        if len(self.coords) < 2:
            return sg.LineString()
        return sg.LineString(self.coords)


@dataclass
class Polygon:
    """Exterior ring followed by zero or more holes"""
    rings: List[Ring]

    geometry_type = GeometryType.POLYGON

    @property
    def exterior(self) -> Ring:
        return self.rings[0]

    @property
    def holes(self) -> List[Ring]:
        return self.rings[1:]

    def to_shapely(self) -> sg.Polygon:
        return sg.Polygon(self.exterior.coords, [h.coords for h in self.holes])


@dataclass
class MultiPolygon:
    polygons: List[Polygon]

    geometry_type = GeometryType.MULTIPOLYGON

    @property
    def ring_labels(self) -> List[str]:
        return [ring.label for poly in self.polygons for ring in poly.rings]

    def to_shapely(self) -> sg.MultiPolygon:
        return sg.MultiPolygon([
            (p.exterior.coords, [h.coords for h in p.holes]) for p in self.polygons
        ])


@dataclass
class MultiLineString:
    lines: List[LineString]

    geometry_type = GeometryType.MULTILINESTRING

    @property
    def way_ids(self) -> List[int]:
        return [line.way_id for line in self.lines]

    def to_shapely(self) -> sg.MultiLineString:
        return sg.MultiLineString([line.coords for line in self.lines if len(line.coords) > 1])


Geometry = Union[Point, LineString, Polygon, MultiPolygon, MultiLineString]


@dataclass
class GeometryCollection:
    """
    Ordered geometries of one category with one label per geometry

    Carries the bounding box and crs of the input unchanged, plus the
    precision and empty-geometry count of a simple-features column.
    """
    geometry_type: GeometryType
    bbox: BoundingBox
    crs: Dict[str, Any]
    geometries: List[Geometry] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    precision: float = 0.0

    def append(self, label: str, geometry: Geometry) -> None:
        if geometry.geometry_type != self.geometry_type:
            raise TypeError(f"Cannot add {geometry.geometry_type.value} to {self.geometry_type.value} collection")
        self.labels.append(label)
        self.geometries.append(geometry)

    @property
    def n_empty(self) -> int:
        return sum(1 for g in self.geometries if _is_empty(g))

    def __len__(self) -> int:
        return len(self.geometries)

    def __iter__(self):
        return iter(zip(self.labels, self.geometries))


def _is_empty(geometry: Geometry) -> bool:
    if isinstance(geometry, MultiPolygon):
        return not geometry.polygons
    if isinstance(geometry, MultiLineString):
        return not geometry.lines
    if isinstance(geometry, Polygon):
        return not geometry.rings
    if isinstance(geometry, LineString):
        return not geometry.coords
    return False


@dataclass
class OSMLayer:
    """A geometry collection paired with its attribute table"""
    geometries: GeometryCollection
    attributes: Any  # pandas.DataFrame
    roles: Optional[List[str]] = None  # multilinestrings only

    @property
    def name(self) -> str:
        return self.geometries.geometry_type.value.lower()

    def __len__(self) -> int:
        return len(self.geometries)


def label_for(entity_id: int, suffix: Optional[str] = None) -> str:
    """String label of a feature, optionally suffixed ("<id>-<suffix>")"""
    if suffix is None:
        return str(entity_id)
    return f"{entity_id}-{suffix}"
