"""
Shape consistency checks

Verifies that coordinate arrays, node-id labels, way-id labels and
attribute rows stay aligned at every nesting level. Any disagreement is a
defect in the assembly code, not bad input, and aborts the pass.
"""

from typing import Sequence

from ..errors import ShapeMismatch
from .geometry import (
    Geometry, GeometryCollection, Point, LineString, Polygon, MultiPolygon, MultiLineString, Ring
)


class ShapeValidator:
    """Checks one output category"""

    def __init__(self, category: str):
        self.category = category

    def _fail(self, index, detail: str):
        raise ShapeMismatch(self.category, index, detail)

    def _check_sequence(self, index: int, coords: Sequence, node_ids: Sequence, what: str) -> None:
        if len(coords) != len(node_ids):
            self._fail(index, f"{what} has {len(coords)} coordinates but {len(node_ids)} node ids")

    def _check_ring(self, index: int, ring: Ring, what: str) -> None:
        self._check_sequence(index, ring.coords, ring.node_ids, what)
        if not ring.way_ids:
            self._fail(index, f"{what} has no way id")
        if not ring.is_closed:
            self._fail(index, f"{what} is not closed")

    def _check_polygon(self, index: int, polygon: Polygon, what: str) -> None:
        if not polygon.rings:
            self._fail(index, f"{what} has no exterior ring")
        for j, ring in enumerate(polygon.rings):
            self._check_ring(index, ring, f"{what} ring {j}")

    def check_feature(self, index: int, geometry: Geometry) -> None:
        """Check the nested arrays of one feature"""
        if isinstance(geometry, Point):
            if len(geometry.coord) != 2:
                self._fail(index, f"point has {len(geometry.coord)} ordinates")
        elif isinstance(geometry, LineString):
            self._check_sequence(index, geometry.coords, geometry.node_ids, "line")
        elif isinstance(geometry, Polygon):
            self._check_polygon(index, geometry, "polygon")
        elif isinstance(geometry, MultiPolygon):
            if not geometry.polygons:
                self._fail(index, "multipolygon has no polygons")
            for j, polygon in enumerate(geometry.polygons):
                self._check_polygon(index, polygon, f"polygon {j}")
        elif isinstance(geometry, MultiLineString):
            for j, line in enumerate(geometry.lines):
                if line.way_id is None:
                    self._fail(index, f"line {j} has no way id")
                self._check_sequence(index, line.coords, line.node_ids, f"line {j}")
        else:
            self._fail(index, f"unsupported geometry {type(geometry).__name__}")

    def check_collection(self, collection: GeometryCollection, table) -> None:
        """Check collection length against labels and attribute rows"""
        n = len(collection.geometries)
        labels = collection.labels
        rows = list(table.index)
        if len(labels) != n:
            self._fail(min(n, len(labels)), f"{n} geometries but {len(labels)} labels")
        if len(rows) != n:
            self._fail(min(n, len(rows)), f"{n} geometries but {len(rows)} attribute rows")
        for i, (label, row) in enumerate(zip(labels, rows)):
            if label != row:
                self._fail(i, f"attribute row '{row}' does not match geometry label '{label}'")
