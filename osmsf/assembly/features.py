"""
Way and node feature processing

Emits single ways as line strings or polygons and nodes as points, each
with its attribute table.
"""

from typing import Iterable, List, Optional, Tuple, Union
from loguru import logger

from ..config import OSMDataConfig, get_config
from ..osm.models import EntityStore
from .attributes import AttributeTableBuilder
from .geometry import (
    GeometryCollection, GeometryType, WayGeometry, OSMLayer,
    Point, LineString, Polygon, Ring, label_for
)
from .tracer import WayTracer
from .validator import ShapeValidator


class FeatureProcessor:
    """Processes ways and nodes of an entity store"""

    def __init__(self, store: EntityStore, config: Optional[OSMDataConfig] = None):
        self.store = store
        self.config = config or get_config()
        self.tracer = WayTracer(store)

    def _collection(self, geometry_type: GeometryType) -> GeometryCollection:
        return GeometryCollection(
            geometry_type=geometry_type,
            bbox=self.store.bbox,
            crs=self.config.crs.as_dict(),
            precision=self.config.output.precision,
        )

    def split_ways(self, exclude: Iterable[int] = ()) -> Tuple[List[int], List[int]]:
        """
        Split way ids into polygon ways and line ways

        Closed ways become polygons, unless they are too short to form a
        ring, in which case they are emitted as lines.

        Returns:
            (polygon way ids, line way ids) in store order
        """
        excluded = set(exclude)
        polygon_ids = []
        line_ids = []
        for way_id, way in self.store.ways.items():
            if way_id in excluded:
                continue
            if way.is_closed and len(way.node_ids) >= self.config.assembly.min_ring_coords:
                polygon_ids.append(way_id)
            else:
                if way.is_closed:
                    logger.debug(f"Way {way_id} is closed but has {len(way.node_ids)} nodes, emitted as line")
                line_ids.append(way_id)
        return polygon_ids, line_ids

    def way_layer(self, way_ids: Iterable[int], geometry_type: Union[WayGeometry, str]) -> OSMLayer:
        """
        Trace ways into line strings or single-ring polygons

        Args:
            way_ids: Ids of ways to trace, in output order
            geometry_type: WayGeometry.POLYGON or WayGeometry.LINESTRING

        Raises:
            InvalidCategory: geometry_type is neither polygon nor linestring
            UnresolvedReference: a way or node id is not in the store
        """
        kind = WayGeometry.coerce(geometry_type)
        collection = self._collection(GeometryType(kind.value))
        validator = ShapeValidator(f"{kind.value.lower()}s")
        rows = []

        for way_id in way_ids:
            traced = self.tracer.trace_id(way_id, referrer=f"{kind.value.lower()} output")
            if kind is WayGeometry.POLYGON:
                geometry = Polygon([Ring(traced.coords, traced.node_ids, [way_id])])
            else:
                geometry = LineString(traced.coords, traced.node_ids, way_id)
            label = label_for(way_id)
            collection.append(label, geometry)
            validator.check_feature(len(collection) - 1, geometry)
            rows.append((label, self.store.ways[way_id].tags))

        table = AttributeTableBuilder(self.store.key_universe.ways).build(rows)
        validator.check_collection(collection, table)
        return OSMLayer(collection, table)

    def point_layer(self) -> OSMLayer:
        """Pass every node through as a point"""
        collection = self._collection(GeometryType.POINT)
        validator = ShapeValidator("points")
        rows = []

        for node_id, node in self.store.nodes.items():
            geometry = Point(node.coord, node_id)
            label = label_for(node_id)
            collection.append(label, geometry)
            validator.check_feature(len(collection) - 1, geometry)
            rows.append((label, node.tags))

        table = AttributeTableBuilder(self.store.key_universe.nodes).build(rows)
        validator.check_collection(collection, table)
        return OSMLayer(collection, table)
