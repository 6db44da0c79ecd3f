"""Unit tests for way tracing."""

import pytest

from osmsf.assembly.tracer import WayTracer, trace_way
from osmsf.errors import UnresolvedReference
from osmsf.osm.models import OSMWay, EntityStore


class TestWayTracer:
    """Tests for WayTracer.trace / trace_id."""

    def test_coordinates_follow_node_order(self, square_nodes) -> None:
        """Coordinates are (lon, lat) in the order of the way's node ids."""
        way = OSMWay(id=1, node_ids=[3, 1, 2])
        store = EntityStore.build(square_nodes, [way])
        traced = WayTracer(store).trace(way)
        assert traced.coords == [(1.0, 1.0), (0.0, 0.0), (1.0, 0.0)]
        assert traced.node_ids == [3, 1, 2]
        assert traced.way_id == 1

    def test_closed_way_repeats_first_coordinate(self, closed_way_store) -> None:
        """A closed way traces to a sequence whose first and last coordinates agree."""
        traced = trace_way(closed_way_store.ways[1], closed_way_store)
        assert len(traced.coords) == 5
        assert traced.start == traced.end

    def test_missing_node_names_the_id(self, square_nodes) -> None:
        """An absent node id is an unresolved reference naming the node and the way."""
        way = OSMWay(id=9, node_ids=[1, 2, 99])
        store = EntityStore.build(square_nodes, [way])
        with pytest.raises(UnresolvedReference) as exc:
            WayTracer(store).trace(way)
        assert exc.value.kind == "node"
        assert exc.value.ref_id == 99
        assert "99" in str(exc.value)
        assert "way 9" in str(exc.value)

    def test_missing_way_names_the_id(self, closed_way_store) -> None:
        """Tracing an absent way id raises with the referrer in the message."""
        with pytest.raises(UnresolvedReference) as exc:
            WayTracer(closed_way_store).trace_id(404, referrer="relation 3")
        assert exc.value.kind == "way"
        assert exc.value.ref_id == 404
        assert "relation 3" in str(exc.value)

    def test_reversed_flips_coords_and_node_ids(self, closed_way_store) -> None:
        """reversed() keeps the way id and flips both parallel arrays."""
        way = OSMWay(id=2, node_ids=[1, 2, 3])
        traced = trace_way(way, closed_way_store).reversed()
        assert traced.node_ids == [3, 2, 1]
        assert traced.coords == [(1.0, 1.0), (1.0, 0.0), (0.0, 0.0)]
        assert traced.way_id == 2
