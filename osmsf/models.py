"""
Pydantic models for the GeoJSON output document
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Literal, Union
from pydantic import BaseModel, Field


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]  # [[lon, lat], ...]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...]]


class GeoJSONMultiPolygon(BaseModel):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: List[List[List[List[float]]]]


class GeoJSONMultiLineString(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: List[List[List[float]]]


GeoJSONGeometry = Union[
    GeoJSONPoint, GeoJSONLineString, GeoJSONPolygon, GeoJSONMultiPolygon, GeoJSONMultiLineString
]


# ============================================================
# Features
# ============================================================

class GeoJSONFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: str
    geometry: GeoJSONGeometry
    properties: Dict[str, Optional[str]] = Field(default_factory=dict)


class CRS(BaseModel):
    epsg: int
    proj4string: str


class GeoJSONFeatureCollection(BaseModel):
    """One output category"""
    type: Literal["FeatureCollection"] = "FeatureCollection"
    geometry_type: str
    bbox: Optional[List[float]] = None  # [xmin, ymin, xmax, ymax]
    crs: CRS
    precision: float = 0.0
    n_empty: int = 0
    columns: List[str] = Field(default_factory=list)
    features: List[GeoJSONFeature] = Field(default_factory=list)


# ============================================================
# Output Document
# ============================================================

class Issue(BaseModel):
    kind: str
    entity: str
    detail: str = ""


class OSMDataDocument(BaseModel):
    """All converted layers of one input document"""
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    data_version: str = "1.0"
    layers: Dict[str, GeoJSONFeatureCollection]
    issues: List[Issue] = Field(default_factory=list)
    excluded_relations: List[int] = Field(default_factory=list)

    def feature_counts(self) -> Dict[str, Any]:
        return {name: len(layer.features) for name, layer in self.layers.items()}
