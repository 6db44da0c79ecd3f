"""
Packaging of conversion results

Turns layers into consumer formats: restructured attribute tables, a
GeoJSON document (pydantic models) and GeoDataFrames / GeoPackage files.
"""

from typing import List, Optional, Dict, Any
from loguru import logger
import pandas as pd
import geopandas as gpd

from .assembly.geometry import (
    OSMLayer, Point, LineString, Polygon, MultiPolygon, MultiLineString, Ring, Geometry
)
from .models import (
    GeoJSONPoint, GeoJSONLineString, GeoJSONPolygon, GeoJSONMultiPolygon, GeoJSONMultiLineString,
    GeoJSONFeature, GeoJSONFeatureCollection, CRS, Issue, OSMDataDocument
)

TAG_PREFIX = "tag:"


def restructure_table(layer: OSMLayer) -> pd.DataFrame:
    """
    Consumer view of a layer's attribute table

    Columns: osm_id first, role second for multilinestrings, then name
    when present, then the remaining keys in key order. Tag keys that
    collide with osm_id or role are renamed to "tag:<key>".
    """
    table = layer.attributes
    keys = list(table.columns)
    if "name" in keys:
        keys.remove("name")
        keys.insert(0, "name")

    reserved = {"osm_id", "role"} if layer.roles is not None else {"osm_id"}
    result = table[keys].copy()
    result = result.rename(columns={k: f"{TAG_PREFIX}{k}" for k in keys if k in reserved})
    if layer.roles is not None:
        result.insert(0, "role", list(layer.roles))
    result.insert(0, "osm_id", list(table.index))
    return result.reset_index(drop=True)


def _ring_coords(ring: Ring) -> List[List[float]]:
    return [list(c) for c in ring.coords]


def to_geojson_geometry(geometry: Geometry):
    """Convert an assembled geometry to its GeoJSON model"""
    if isinstance(geometry, Point):
        return GeoJSONPoint(coordinates=list(geometry.coord))
    if isinstance(geometry, LineString):
        return GeoJSONLineString(coordinates=[list(c) for c in geometry.coords])
    if isinstance(geometry, Polygon):
        return GeoJSONPolygon(coordinates=[_ring_coords(r) for r in geometry.rings])
    if isinstance(geometry, MultiPolygon):
        return GeoJSONMultiPolygon(coordinates=[
            [_ring_coords(r) for r in polygon.rings] for polygon in geometry.polygons
        ])
    if isinstance(geometry, MultiLineString):
        return GeoJSONMultiLineString(coordinates=[
            [list(c) for c in line.coords] for line in geometry.lines
        ])
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def _bbox_list(bbox) -> Optional[List[float]]:
    if bbox.is_empty:
        return None
    return list(bbox.as_tuple())


def layer_to_geojson(layer: OSMLayer) -> GeoJSONFeatureCollection:
    """Convert one layer into a GeoJSON feature collection"""
    collection = layer.geometries
    table = restructure_table(layer)
    records = table.to_dict(orient="records")

    features = []
    for (label, geometry), record in zip(collection, records):
        properties = {k: v for k, v in record.items() if k != "osm_id"}
        features.append(GeoJSONFeature(
            id=label,
            geometry=to_geojson_geometry(geometry),
            properties=properties
        ))

    return GeoJSONFeatureCollection(
        geometry_type=collection.geometry_type.value,
        bbox=_bbox_list(collection.bbox),
        crs=CRS(**collection.crs),
        precision=collection.precision,
        n_empty=collection.n_empty,
        columns=list(layer.attributes.columns),
        features=features
    )


def to_geojson(result, layers: Optional[List[str]] = None) -> OSMDataDocument:
    """
    Build the output document for an OSMData result

    Args:
        result: OSMData from OSMDataPipeline.run
        layers: Layer names to include (default: all five)
    """
    names = layers or list(result.LAYER_NAMES)
    unknown = [n for n in names if n not in result.LAYER_NAMES]
    if unknown:
        raise ValueError(f"Unknown layer name(s): {unknown}")

    return OSMDataDocument(
        layers={name: layer_to_geojson(getattr(result, name)) for name in names},
        issues=[Issue(**issue.to_dict()) for issue in result.report.issues],
        excluded_relations=list(result.report.excluded_relations)
    )


def to_geodataframe(layer: OSMLayer) -> gpd.GeoDataFrame:
    """Convert a layer to a GeoDataFrame with restructured attributes"""
    table = restructure_table(layer)
    if "geometry" in table.columns:
        table = table.rename(columns={"geometry": f"{TAG_PREFIX}geometry"})
    geometries = [geometry.to_shapely() for geometry in layer.geometries.geometries]
    crs = f"EPSG:{layer.geometries.crs['epsg']}"
    return gpd.GeoDataFrame(table, geometry=geometries, crs=crs)


def write_geopackage(result, output_path: str, layers: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Write each non-empty layer of a result to a GeoPackage

    Returns:
        Dict of layer name -> feature count written
    """
    names = layers or list(result.LAYER_NAMES)
    written = {}
    for name in names:
        layer = getattr(result, name)
        if not len(layer):
            logger.debug(f"Skipping empty layer '{name}'")
            continue
        gdf = to_geodataframe(layer)
        gdf.to_file(output_path, layer=name, driver="GPKG")
        written[name] = len(gdf)
        logger.info(f"Wrote {len(gdf)} features to layer '{name}' of {output_path}")
    return written
