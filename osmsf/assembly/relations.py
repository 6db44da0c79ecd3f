"""
Relation processing

Builds the multipolygon layer (polygon-forming relations) and the
multilinestring layer (all other relations, one feature per role).
"""

from typing import Optional
from loguru import logger

from ..config import OSMDataConfig, get_config
from ..errors import UnclosedRing
from ..osm.models import EntityStore
from .attributes import AttributeTableBuilder
from .geometry import GeometryCollection, GeometryType, OSMLayer, label_for
from .multilinestring import MultilinestringComposer
from .multipolygon import MultipolygonComposer
from .report import AssemblyReport
from .tracer import WayTracer
from .validator import ShapeValidator


class RelationProcessor:
    """Processes the relations of an entity store"""

    def __init__(
        self,
        store: EntityStore,
        config: Optional[OSMDataConfig] = None,
        report: Optional[AssemblyReport] = None
    ):
        self.store = store
        self.config = config or get_config()
        self.report = report if report is not None else AssemblyReport()
        tracer = WayTracer(store)
        self.multipolygons = MultipolygonComposer(tracer, self.config.assembly, self.report)
        self.multilinestrings = MultilinestringComposer(tracer, self.config.assembly)

    def _collection(self, geometry_type: GeometryType) -> GeometryCollection:
        return GeometryCollection(
            geometry_type=geometry_type,
            bbox=self.store.bbox,
            crs=self.config.crs.as_dict(),
            precision=self.config.output.precision,
        )

    def multipolygon_layer(self) -> OSMLayer:
        """
        One multipolygon per polygon relation, labelled by relation id

        Relations whose rings cannot be closed are excluded and reported.
        """
        collection = self._collection(GeometryType.MULTIPOLYGON)
        validator = ShapeValidator("multipolygons")
        rows = []

        for relation in self.store.relations:
            if not relation.is_polygon:
                continue
            try:
                geometry = self.multipolygons.compose(relation)
            except UnclosedRing as e:
                kind = "missing_exterior" if not e.chains else "unclosed_ring"
                ways = sorted({w for chain in e.chains for w in chain.way_ids})
                logger.warning(f"Excluding relation {relation.id}: {e.reason}" + (f" over ways {ways}" if ways else ""))
                self.report.add(kind, f"relation {relation.id}", e.reason if not ways else f"ways {ways}")
                self.report.excluded_relations.append(relation.id)
                continue

            label = label_for(relation.id)
            collection.append(label, geometry)
            validator.check_feature(len(collection) - 1, geometry)
            rows.append((label, relation.tags))

        table = AttributeTableBuilder(self.store.key_universe.relations).build(rows)
        validator.check_collection(collection, table)
        return OSMLayer(collection, table)

    def multilinestring_layer(self) -> OSMLayer:
        """One multilinestring per (relation, role) for non-polygon relations"""
        collection = self._collection(GeometryType.MULTILINESTRING)
        validator = ShapeValidator("multilinestrings")
        rows = []
        roles = []

        for relation in self.store.relations:
            if relation.is_polygon:
                continue
            for feature in self.multilinestrings.compose(relation):
                collection.append(feature.label, feature.geometry)
                validator.check_feature(len(collection) - 1, feature.geometry)
                rows.append((feature.label, relation.tags))
                roles.append(feature.role)

        table = AttributeTableBuilder(self.store.key_universe.relations).build(rows)
        validator.check_collection(collection, table)
        return OSMLayer(collection, table, roles=roles)
