"""
Way tracing

Resolves a way's node references into an ordered coordinate sequence
"""

from typing import List

from ..errors import UnresolvedReference
from ..osm.models import OSMWay, EntityStore
from .geometry import TracedWay


class WayTracer:
    """Traces ways against the nodes of an entity store"""

    def __init__(self, store: EntityStore):
        self.store = store

    def trace(self, way: OSMWay) -> TracedWay:
        """
        Trace a way into coordinates in node order

        Raises:
            UnresolvedReference: if a node id is not in the store
        """
        nodes = self.store.nodes
        coords = []
        for node_id in way.node_ids:
            node = nodes.get(node_id)
            if node is None:
                raise UnresolvedReference("node", node_id, referrer=f"way {way.id}")
            coords.append((node.lon, node.lat))
        return TracedWay(way.id, coords, list(way.node_ids))

    def trace_id(self, way_id: int, referrer: str) -> TracedWay:
        """Look up a way by id and trace it"""
        way = self.store.ways.get(way_id)
        if way is None:
            raise UnresolvedReference("way", way_id, referrer=referrer)
        return self.trace(way)

    def trace_ids(self, way_ids: List[int], referrer: str) -> List[TracedWay]:
        return [self.trace_id(way_id, referrer) for way_id in way_ids]


def trace_way(way: OSMWay, store: EntityStore) -> TracedWay:
    """Trace a single way against a store"""
    return WayTracer(store).trace(way)
