"""
Conversion pipeline

Runs one pass over an entity store:

  1. Relations: multipolygons and role-grouped multilinestrings
  2. Ways not referenced by polygon relations: polygons (closed) and lines
  3. Nodes: points

and returns the five (geometry collection, attribute table) layers with
the bounding box, crs and assembly report of the pass.
"""

import json
import os
from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional, List
from loguru import logger

from .config import get_config, OSMDataConfig
from .assembly import FeatureProcessor, RelationProcessor, AssemblyReport, OSMLayer, WayGeometry
from .osm.models import EntityStore, BoundingBox
from .osm.parser import parse_file


@dataclass
class OSMData:
    """Result of one conversion pass"""
    points: OSMLayer
    lines: OSMLayer
    polygons: OSMLayer
    multipolygons: OSMLayer
    multilinestrings: OSMLayer
    bbox: BoundingBox
    crs: Dict[str, Any]
    report: AssemblyReport = field(default_factory=AssemblyReport)

    LAYER_NAMES = ("points", "lines", "polygons", "multipolygons", "multilinestrings")

    def layers(self) -> Dict[str, OSMLayer]:
        return {name: getattr(self, name) for name in self.LAYER_NAMES}

    def summary(self) -> Dict[str, Any]:
        return {
            "bbox": None if self.bbox.is_empty else self.bbox.as_dict(),
            "crs": self.crs,
            "layers": {
                name: {"features": len(layer), "columns": len(layer.attributes.columns)}
                for name, layer in self.layers().items()
            },
            "issues": self.report.summary(),
            "excluded_relations": list(self.report.excluded_relations),
        }


class OSMDataPipeline:
    """
    Converts an entity store into simple-features layers

    Usage:
        pipeline = OSMDataPipeline()
        result = pipeline.run_file("area.osm")
        pipeline.save(result, "output/area.json")
    """

    def __init__(self, config: Optional[OSMDataConfig] = None):
        self.config = config or get_config()

    def run(self, store: EntityStore) -> OSMData:
        """
        Run the complete conversion

        Args:
            store: Parsed entities, key universe and bbox

        Returns:
            OSMData with all five layers

        Raises:
            UnresolvedReference: a referenced way or node is missing
            ShapeMismatch: internal alignment invariant violated
        """
        report = AssemblyReport()
        if store.bbox is None:
            store = replace(store, bbox=BoundingBox.from_nodes(store.nodes.values()))
        bbox = store.bbox

        logger.info(f"Converting {len(store.nodes)} nodes, {len(store.ways)} ways, {len(store.relations)} relations")

        # Step 1: relations
        relations = RelationProcessor(store, self.config, report)
        multipolygons = relations.multipolygon_layer()
        multilinestrings = relations.multilinestring_layer()
        logger.info(f"Relations: {len(multipolygons)} multipolygons, {len(multilinestrings)} multilinestrings")

        # Step 2: ways
        features = FeatureProcessor(store, self.config)
        exclude = store.polygon_member_way_ids() if self.config.assembly.exclude_polygon_members else set()
        polygon_ids, line_ids = features.split_ways(exclude)
        polygons = features.way_layer(polygon_ids, WayGeometry.POLYGON)
        lines = features.way_layer(line_ids, WayGeometry.LINESTRING)
        logger.info(f"Ways: {len(polygons)} polygons, {len(lines)} lines ({len(exclude)} relation member ways skipped)")

        # Step 3: nodes
        points = features.point_layer()
        logger.info(f"Nodes: {len(points)} points")

        if report.has_issues:
            logger.warning(f"Conversion finished with issues: {report.summary()}")

        return OSMData(
            points=points,
            lines=lines,
            polygons=polygons,
            multipolygons=multipolygons,
            multilinestrings=multilinestrings,
            bbox=bbox,
            crs=self.config.crs.as_dict(),
            report=report,
        )

    def run_file(self, path: str) -> OSMData:
        """Parse an input file and convert it"""
        store = parse_file(path, self.config.assembly.polygon_relation_types)
        return self.run(store)

    def save(self, result: OSMData, output_path: str, layers: Optional[List[str]] = None) -> str:
        """
        Save the conversion result

        ".gpkg" paths are written as a GeoPackage with one layer per
        category; anything else as a JSON document of GeoJSON feature
        collections.
        """
        from .export import to_geojson, write_geopackage

        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        if output_path.lower().endswith(".gpkg"):
            write_geopackage(result, output_path, layers)
        else:
            document = to_geojson(result, layers)
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(document.model_dump(), f, indent=self.config.output.json_indent, ensure_ascii=False)

        logger.info(f"Saved OSM data to {output_path}")
        return output_path
