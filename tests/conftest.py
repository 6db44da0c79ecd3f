"""Shared pytest fixtures for osmsf tests.

COORDINATES:
    Fixtures use small integer lon/lat grids so ring closure and containment
    are easy to check by hand. The unit square is nodes 1..4:

        4 (0,1) ---- 3 (1,1)
        |            |
        1 (0,0) ---- 2 (1,0)
"""

import json
import sys

import pytest
from loguru import logger

from osmsf.config import OSMDataConfig
from osmsf.osm.models import OSMNode, OSMWay, OSMRelation, RelationMember, EntityStore


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep loguru output to warnings during tests"""
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
    yield
    logger.remove()


def make_nodes(coords):
    """Build nodes from {id: (lon, lat)}"""
    return [OSMNode(id=node_id, lat=lat, lon=lon) for node_id, (lon, lat) in coords.items()]


def make_relation(relation_id, members, is_polygon=True, tags=None):
    """Build a relation from (way id, role) pairs"""
    return OSMRelation(
        id=relation_id,
        members=[RelationMember(way_id=w, role=r) for w, r in members],
        is_polygon=is_polygon,
        tags=tags or {}
    )


SQUARE = {1: (0.0, 0.0), 2: (1.0, 0.0), 3: (1.0, 1.0), 4: (0.0, 1.0)}

# Outer square 0..10 (nodes 10-13), hole 2..4 (nodes 20-23), second
# outer 20..30 (nodes 30-33) with hole 22..24 (nodes 40-43)
NESTED = {
    10: (0.0, 0.0), 11: (10.0, 0.0), 12: (10.0, 10.0), 13: (0.0, 10.0),
    20: (2.0, 2.0), 21: (4.0, 2.0), 22: (4.0, 4.0), 23: (2.0, 4.0),
    30: (20.0, 0.0), 31: (30.0, 0.0), 32: (30.0, 10.0), 33: (20.0, 10.0),
    40: (22.0, 2.0), 41: (24.0, 2.0), 42: (24.0, 4.0), 43: (22.0, 4.0),
}


@pytest.fixture
def config():
    """Fresh default configuration"""
    return OSMDataConfig()


@pytest.fixture
def square_nodes():
    return make_nodes(SQUARE)


@pytest.fixture
def closed_way_store(square_nodes):
    """Single closed way W1 tagged highway=residential"""
    way = OSMWay(id=1, node_ids=[1, 2, 3, 4, 1], tags={"highway": "residential"})
    return EntityStore.build(square_nodes, [way])


@pytest.fixture
def split_square_store(square_nodes):
    """
    Polygon relation R1 whose outer ring is split over two ways

    W10 runs 1-2-3 and W11 runs 1-4-3, so W11 must be reversed to close.
    """
    ways = [
        OSMWay(id=10, node_ids=[1, 2, 3]),
        OSMWay(id=11, node_ids=[1, 4, 3]),
    ]
    relation = make_relation(1, [(10, "outer"), (11, "outer")], tags={"type": "multipolygon", "landuse": "forest"})
    return EntityStore.build(square_nodes, ways, [relation])


@pytest.fixture
def nested_store():
    """
    Polygon relation R5 with two outer squares and one hole inside each

    The first outer (W100) is the right-hand square, so the first hole
    (W102) lies inside the second outer (W101).
    """
    nodes = make_nodes(NESTED)
    ways = [
        OSMWay(id=100, node_ids=[30, 31, 32, 33, 30]),
        OSMWay(id=101, node_ids=[10, 11, 12, 13, 10]),
        OSMWay(id=102, node_ids=[20, 21, 22, 23, 20]),
        OSMWay(id=103, node_ids=[40, 41, 42, 43, 40]),
    ]
    relation = make_relation(5, [
        (100, "outer"), (101, "outer"), (102, "inner"), (103, "inner")
    ], tags={"type": "multipolygon"})
    return EntityStore.build(nodes, ways, [relation])


@pytest.fixture
def route_store(square_nodes):
    """Non-polygon relation R7 with outer, inner and role-less members"""
    ways = [
        OSMWay(id=20, node_ids=[1, 2]),
        OSMWay(id=21, node_ids=[2, 3]),
        OSMWay(id=22, node_ids=[3, 4]),
        OSMWay(id=23, node_ids=[4, 1]),
    ]
    relation = make_relation(7, [
        (20, "outer"), (21, "inner"), (22, ""), (23, "outer")
    ], is_polygon=False, tags={"type": "route", "name": "Loop"})
    return EntityStore.build(square_nodes, ways, [relation])


@pytest.fixture
def overpass_response():
    """Overpass 'out body' response with a node, a closed way and a multipolygon"""
    return {
        "version": 0.6,
        "elements": [
            {"type": "node", "id": 1, "lat": 0.0, "lon": 0.0, "tags": {"amenity": "bench"}},
            {"type": "node", "id": 2, "lat": 0.0, "lon": 1.0},
            {"type": "node", "id": 3, "lat": 1.0, "lon": 1.0},
            {"type": "node", "id": 4, "lat": 1.0, "lon": 0.0},
            {"type": "way", "id": 10, "nodes": [1, 2, 3, 4, 1], "tags": {"building": "yes", "name": "Hall"}},
            {"type": "way", "id": 11, "nodes": [1, 3], "tags": {"highway": "path"}},
            {
                "type": "relation", "id": 50,
                "members": [
                    {"type": "way", "ref": 10, "role": "outer"},
                    {"type": "node", "ref": 1, "role": "label"},
                ],
                "tags": {"type": "multipolygon", "building": "yes"},
            },
        ],
    }


@pytest.fixture
def overpass_file(tmp_path, overpass_response):
    path = tmp_path / "area.json"
    path.write_text(json.dumps(overpass_response), encoding="utf-8")
    return str(path)


OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <bounds minlat="-1.0" minlon="-1.0" maxlat="2.0" maxlon="2.0"/>
  <node id="1" lat="0.0" lon="0.0"><tag k="natural" v="tree"/></node>
  <node id="2" lat="0.0" lon="1.0"/>
  <node id="3" lat="1.0" lon="1.0"/>
  <node id="4" lat="1.0" lon="0.0"/>
  <way id="10">
    <nd ref="1"/><nd ref="2"/><nd ref="3"/>
    <tag k="highway" v="residential"/>
  </way>
  <way id="11">
    <nd ref="3"/><nd ref="4"/><nd ref="1"/>
  </way>
  <relation id="60">
    <member type="way" ref="10" role="outer"/>
    <member type="way" ref="11" role="outer"/>
    <member type="node" ref="1" role="admin_centre"/>
    <tag k="type" v="multipolygon"/>
    <tag k="landuse" v="meadow"/>
  </relation>
  <relation id="61">
    <member type="way" ref="10" role=""/>
    <tag k="type" v="route"/>
  </relation>
</osm>
"""


@pytest.fixture
def osm_xml():
    return OSM_XML


@pytest.fixture
def osm_file(tmp_path):
    path = tmp_path / "area.osm"
    path.write_text(OSM_XML, encoding="utf-8")
    return str(path)
