"""Unit tests for Overpass JSON and OSM XML parsing."""

import math

import pytest

from osmsf.osm.models import BoundingBox
from osmsf.osm.parser import OSMResponseParser, OSMXmlParser, parse_file


class TestOSMResponseParser:
    """Tests for OSMResponseParser.parse_elements."""

    def test_entities_and_key_universe(self, overpass_response) -> None:
        store = OSMResponseParser().parse_elements(overpass_response)
        assert list(store.nodes) == [1, 2, 3, 4]
        assert list(store.ways) == [10, 11]
        assert [r.id for r in store.relations] == [50]
        assert store.key_universe.nodes == ("amenity",)
        assert store.key_universe.ways == ("building", "highway", "name")
        assert store.key_universe.relations == ("building", "type")

    def test_non_way_members_are_skipped(self, overpass_response) -> None:
        store = OSMResponseParser().parse_elements(overpass_response)
        relation = store.relations[0]
        assert [m.way_id for m in relation.members] == [10]
        assert relation.is_polygon

    def test_bbox_from_nodes(self, overpass_response) -> None:
        store = OSMResponseParser().parse_elements(overpass_response)
        assert store.bbox == BoundingBox(0.0, 0.0, 1.0, 1.0)

    def test_polygon_relation_types_override(self, overpass_response) -> None:
        store = OSMResponseParser(polygon_relation_types=("boundary",)).parse_elements(overpass_response)
        assert not store.relations[0].is_polygon

    def test_inline_geometry_supplies_missing_nodes(self) -> None:
        """'out geom' way geometry registers nodes absent from the response."""
        data = {"elements": [{
            "type": "way", "id": 5, "nodes": [7, 8],
            "geometry": [{"lat": 1.5, "lon": 2.5}, {"lat": 3.5, "lon": 4.5}],
        }]}
        store = OSMResponseParser().parse_elements(data)
        assert store.nodes[7].coord == (2.5, 1.5)
        assert store.nodes[8].coord == (4.5, 3.5)

    def test_explicit_node_wins_over_inline_geometry(self) -> None:
        data = {"elements": [
            {"type": "node", "id": 7, "lat": 0.0, "lon": 0.0, "tags": {"a": "b"}},
            {"type": "way", "id": 5, "nodes": [7], "geometry": [{"lat": 9.0, "lon": 9.0}]},
        ]}
        store = OSMResponseParser().parse_elements(data)
        assert store.nodes[7].coord == (0.0, 0.0)
        assert store.nodes[7].tags == {"a": "b"}

    def test_missing_elements_is_an_error(self) -> None:
        with pytest.raises(ValueError):
            OSMResponseParser().parse_elements({"remark": "runtime error"})

    def test_malformed_element_is_an_error(self) -> None:
        with pytest.raises(ValueError) as exc:
            OSMResponseParser().parse_elements({"elements": [{"type": "node", "id": 3, "lat": 1.0}]})
        assert "node element 3" in str(exc.value)

    def test_empty_response(self) -> None:
        store = OSMResponseParser().parse_elements({"elements": []})
        assert not store.nodes
        assert math.isnan(store.bbox.xmin)


class TestOSMXmlParser:
    """Tests for OSMXmlParser.parse."""

    def test_entities_and_tags(self, osm_xml) -> None:
        store = OSMXmlParser().parse(osm_xml)
        assert list(store.nodes) == [1, 2, 3, 4]
        assert store.nodes[1].tags == {"natural": "tree"}
        assert store.ways[10].node_ids == [1, 2, 3]
        assert store.ways[10].tags == {"highway": "residential"}
        assert store.key_universe.relations == ("landuse", "type")

    def test_bounds_element_sets_bbox(self, osm_xml) -> None:
        store = OSMXmlParser().parse(osm_xml)
        assert store.bbox == BoundingBox(-1.0, -1.0, 2.0, 2.0)

    def test_relation_members_and_roles(self, osm_xml) -> None:
        store = OSMXmlParser().parse(osm_xml)
        polygon, route = store.relations
        assert polygon.is_polygon
        assert [(m.way_id, m.role) for m in polygon.members] == [(10, "outer"), (11, "outer")]
        assert not route.is_polygon
        assert route.roles() == [""]

    def test_invalid_xml(self) -> None:
        with pytest.raises(ValueError):
            OSMXmlParser().parse("<osm><node id='1'")

    def test_malformed_node(self) -> None:
        with pytest.raises(ValueError):
            OSMXmlParser().parse("<osm><node id='1' lat='x' lon='0'/></osm>")


class TestParseFile:
    """Tests for parse_file dispatch."""

    def test_json_file(self, overpass_file) -> None:
        assert list(parse_file(overpass_file).ways) == [10, 11]

    def test_osm_file(self, osm_file) -> None:
        assert list(parse_file(osm_file).ways) == [10, 11]

    def test_unsupported_extension(self, tmp_path) -> None:
        path = tmp_path / "area.csv"
        path.write_text("id,lat,lon\n", encoding="utf-8")
        with pytest.raises(ValueError):
            parse_file(str(path))
