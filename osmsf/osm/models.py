"""
OSM data models

Data classes for the entity store consumed by the assembly engine
"""

import math
from typing import List, Dict, Optional, Tuple, Iterable
from dataclasses import dataclass, field


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def coord(self) -> Tuple[float, float]:
        return (self.lon, self.lat)


@dataclass
class OSMWay:
    """Represents an OSM way (ordered node references)"""
    id: int
    node_ids: List[int]
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        """A way is closed when its first and last node ids are equal"""
        return len(self.node_ids) > 1 and self.node_ids[0] == self.node_ids[-1]


@dataclass
class RelationMember:
    """A way member of a relation with its role"""
    way_id: int
    role: str = ""


@dataclass
class OSMRelation:
    """Represents an OSM relation over ways"""
    id: int
    members: List[RelationMember]
    is_polygon: bool = False
    tags: Dict[str, str] = field(default_factory=dict)

    def roles(self) -> List[str]:
        """Distinct member roles, sorted"""
        return sorted({m.role for m in self.members})

    def members_with_role(self, role: str) -> List[RelationMember]:
        return [m for m in self.members if m.role == role]


@dataclass(frozen=True)
class KeyUniverse:
    """Sorted attribute keys observed across all entities of each kind"""
    nodes: Tuple[str, ...] = ()
    ways: Tuple[str, ...] = ()
    relations: Tuple[str, ...] = ()

    @staticmethod
    def _collect(tag_dicts: Iterable[Dict[str, str]]) -> Tuple[str, ...]:
        keys = set()
        for tags in tag_dicts:
            keys.update(tags.keys())
        return tuple(sorted(keys))

    @classmethod
    def from_entities(
        cls,
        nodes: Iterable[OSMNode],
        ways: Iterable[OSMWay],
        relations: Iterable[OSMRelation]
    ) -> "KeyUniverse":
        return cls(
            nodes=cls._collect(n.tags for n in nodes),
            ways=cls._collect(w.tags for w in ways),
            relations=cls._collect(r.tags for r in relations),
        )


@dataclass(frozen=True)
class BoundingBox:
    """Bounding extent of the input document (xmin, ymin, xmax, ymax)"""
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def empty(cls) -> "BoundingBox":
        return cls(math.nan, math.nan, math.nan, math.nan)

    @classmethod
    def from_nodes(cls, nodes: Iterable[OSMNode]) -> "BoundingBox":
        lons = []
        lats = []
        for node in nodes:
            lons.append(node.lon)
            lats.append(node.lat)
        if not lons:
            return cls.empty()
        return cls(min(lons), min(lats), max(lons), max(lats))

    @property
    def is_empty(self) -> bool:
        return any(math.isnan(v) for v in self.as_tuple())

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)

    def as_dict(self) -> Dict[str, float]:
        return {"xmin": self.xmin, "ymin": self.ymin, "xmax": self.xmax, "ymax": self.ymax}


@dataclass
class EntityStore:
    """
    Read-only collection of parsed OSM entities

    Nodes and ways are keyed by id in document order, relations keep
    document order. The key universe and bounding box are computed once
    by the parser.
    """
    nodes: Dict[int, OSMNode] = field(default_factory=dict)
    ways: Dict[int, OSMWay] = field(default_factory=dict)
    relations: List[OSMRelation] = field(default_factory=list)
    key_universe: KeyUniverse = field(default_factory=KeyUniverse)
    bbox: Optional[BoundingBox] = None

    @classmethod
    def build(
        cls,
        nodes: Iterable[OSMNode],
        ways: Iterable[OSMWay] = (),
        relations: Iterable[OSMRelation] = (),
        bbox: Optional[BoundingBox] = None
    ) -> "EntityStore":
        """Build a store, computing the key universe and bbox from the entities"""
        node_map = {n.id: n for n in nodes}
        way_map = {w.id: w for w in ways}
        relation_list = list(relations)
        return cls(
            nodes=node_map,
            ways=way_map,
            relations=relation_list,
            key_universe=KeyUniverse.from_entities(node_map.values(), way_map.values(), relation_list),
            bbox=bbox or BoundingBox.from_nodes(node_map.values()),
        )

    def polygon_member_way_ids(self) -> set:
        """Ids of all ways referenced by polygon relations"""
        return {m.way_id for r in self.relations if r.is_polygon for m in r.members}
