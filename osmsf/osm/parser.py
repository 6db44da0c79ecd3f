"""
OSM document parser

Parses Overpass API JSON responses and OSM XML documents into an EntityStore
"""

import json
import os
import xml.etree.ElementTree as ET
from typing import Dict, Any, List, Optional, Sequence
from loguru import logger

from ..config import get_config
from .models import OSMNode, OSMWay, OSMRelation, RelationMember, EntityStore, BoundingBox


def _is_polygon_relation(tags: Dict[str, str], polygon_types: Sequence[str]) -> bool:
    return tags.get("type") in polygon_types


class OSMResponseParser:
    """Parses Overpass API JSON responses"""

    def __init__(self, polygon_relation_types: Optional[Sequence[str]] = None):
        self.config = get_config()
        self.polygon_relation_types = tuple(
            polygon_relation_types or self.config.assembly.polygon_relation_types
        )

    def parse_elements(self, data: Dict[str, Any]) -> EntityStore:
        """
        Parse Overpass response into an entity store

        Handles both 'out body' (node references) and 'out geom' (inline
        geometry) formats. With 'out geom', coordinates of referenced nodes
        that are not themselves part of the response are taken from the way
        geometry.

        Args:
            data: JSON response from Overpass API

        Returns:
            EntityStore with nodes, ways, relations, key universe and bbox
        """
        if "elements" not in data:
            raise ValueError("Overpass response has no 'elements' list")

        nodes: Dict[int, OSMNode] = {}
        inline_nodes: Dict[int, OSMNode] = {}
        ways: Dict[int, OSMWay] = {}
        relations: List[OSMRelation] = []
        skipped_members = 0

        for element in data["elements"]:
            element_type = element.get("type")
            try:
                if element_type == "node":
                    nodes[element["id"]] = OSMNode(
                        id=element["id"],
                        lat=float(element["lat"]),
                        lon=float(element["lon"]),
                        tags=element.get("tags", {})
                    )
                elif element_type == "way":
                    node_ids = list(element.get("nodes", []))
                    # 'out geom' lists {lat, lon} objects aligned with node ids
                    for node_id, point in zip(node_ids, element.get("geometry") or []):
                        if isinstance(point, dict) and point.get("lat") is not None:
                            inline_nodes.setdefault(node_id, OSMNode(
                                id=node_id,
                                lat=float(point["lat"]),
                                lon=float(point["lon"])
                            ))
                    ways[element["id"]] = OSMWay(
                        id=element["id"],
                        node_ids=node_ids,
                        tags=element.get("tags", {})
                    )
                elif element_type == "relation":
                    members = []
                    for member in element.get("members", []):
                        if member.get("type") != "way":
                            skipped_members += 1
                            continue
                        members.append(RelationMember(way_id=member["ref"], role=member.get("role") or ""))
                    tags = element.get("tags", {})
                    relations.append(OSMRelation(
                        id=element["id"],
                        members=members,
                        is_polygon=_is_polygon_relation(tags, self.polygon_relation_types),
                        tags=tags
                    ))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Malformed {element_type} element {element.get('id')}: {e}") from e

        for node_id, node in inline_nodes.items():
            nodes.setdefault(node_id, node)

        if skipped_members:
            logger.debug(f"Skipped {skipped_members} non-way relation members")

        store = EntityStore.build(nodes.values(), ways.values(), relations)
        logger.info(f"Parsed {len(store.nodes)} nodes, {len(store.ways)} ways, {len(store.relations)} relations")
        return store


class OSMXmlParser:
    """Parses OSM XML documents"""

    def __init__(self, polygon_relation_types: Optional[Sequence[str]] = None):
        self.config = get_config()
        self.polygon_relation_types = tuple(
            polygon_relation_types or self.config.assembly.polygon_relation_types
        )

    @staticmethod
    def _tags(elem: ET.Element) -> Dict[str, str]:
        return {t.attrib["k"]: t.attrib.get("v", "") for t in elem.findall("tag")}

    def parse(self, text: str) -> EntityStore:
        """
        Parse an OSM XML document into an entity store

        The <bounds> element, when present, supplies the bounding box;
        otherwise it is computed from the nodes.
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ValueError(f"Invalid OSM XML: {e}") from e

        nodes = []
        ways = []
        relations = []
        bbox = None
        skipped_members = 0

        for elem in root:
            try:
                if elem.tag == "bounds":
                    bbox = BoundingBox(
                        xmin=float(elem.attrib["minlon"]),
                        ymin=float(elem.attrib["minlat"]),
                        xmax=float(elem.attrib["maxlon"]),
                        ymax=float(elem.attrib["maxlat"])
                    )
                elif elem.tag == "node":
                    nodes.append(OSMNode(
                        id=int(elem.attrib["id"]),
                        lat=float(elem.attrib["lat"]),
                        lon=float(elem.attrib["lon"]),
                        tags=self._tags(elem)
                    ))
                elif elem.tag == "way":
                    ways.append(OSMWay(
                        id=int(elem.attrib["id"]),
                        node_ids=[int(nd.attrib["ref"]) for nd in elem.findall("nd")],
                        tags=self._tags(elem)
                    ))
                elif elem.tag == "relation":
                    members = []
                    for member in elem.findall("member"):
                        if member.attrib.get("type") != "way":
                            skipped_members += 1
                            continue
                        members.append(RelationMember(
                            way_id=int(member.attrib["ref"]),
                            role=member.attrib.get("role", "")
                        ))
                    tags = self._tags(elem)
                    relations.append(OSMRelation(
                        id=int(elem.attrib["id"]),
                        members=members,
                        is_polygon=_is_polygon_relation(tags, self.polygon_relation_types),
                        tags=tags
                    ))
            except (KeyError, ValueError) as e:
                raise ValueError(f"Malformed {elem.tag} element {elem.attrib.get('id')}: {e}") from e

        if skipped_members:
            logger.debug(f"Skipped {skipped_members} non-way relation members")

        store = EntityStore.build(nodes, ways, relations, bbox=bbox)
        logger.info(f"Parsed {len(store.nodes)} nodes, {len(store.ways)} ways, {len(store.relations)} relations")
        return store


def parse_file(path: str, polygon_relation_types: Optional[Sequence[str]] = None) -> EntityStore:
    """Parse an Overpass JSON (.json) or OSM XML (.osm, .xml) file"""
    ext = os.path.splitext(path)[1].lower()
    with open(path, "r", encoding="utf-8") as f:
        if ext == ".json":
            return OSMResponseParser(polygon_relation_types).parse_elements(json.load(f))
        if ext in (".osm", ".xml"):
            return OSMXmlParser(polygon_relation_types).parse(f.read())
    raise ValueError(f"Unsupported input format '{ext}' for {path}")
