"""
Configuration settings for the OSM simple-features converter
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, Any


HOLE_ASSIGNMENT_MODES = ("containment", "first_exterior")
OUTPUT_FORMATS = ("json", "gpkg")


@dataclass
class CRSConfig:
    """Coordinate reference descriptor attached to every geometry collection"""
    epsg: int = 4326
    proj4string: str = "+proj=longlat +datum=WGS84 +no_defs"

    def as_dict(self) -> Dict[str, Any]:
        return {"epsg": self.epsg, "proj4string": self.proj4string}


@dataclass
class AssemblyConfig:
    """Relation and way assembly settings"""
    # Relation member roles used for multipolygon rings
    outer_role: str = "outer"
    inner_role: str = "inner"

    # Label suffix for multilinestring members without a role
    no_role_label: str = "(no role)"

    # Relation "type" tag values that make a relation polygon-forming
    polygon_relation_types: Tuple[str, ...] = ("multipolygon",)

    # "containment": holes go to the exterior that contains them
    # "first_exterior": every hole goes to the first exterior ring
    hole_assignment: str = "containment"

    # Skip ways referenced by polygon relations when emitting way geometries
    exclude_polygon_members: bool = True

    # Minimum coordinates of an accepted ring, closing duplicate included
    min_ring_coords: int = 4


@dataclass
class OutputConfig:
    """Output settings"""
    output_dir: str = "output"
    default_format: str = "json"
    precision: float = 0.0
    json_indent: int = 2


@dataclass
class OSMDataConfig:
    """Converter configuration"""
    crs: CRSConfig = field(default_factory=CRSConfig)
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# Global config instance
config = OSMDataConfig()


def get_config() -> OSMDataConfig:
    """Get global configuration"""
    return config


def validate_config(config: OSMDataConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.crs is None:
        errors.append("crs configuration is required but not set")
    elif not config.crs.proj4string:
        errors.append("crs.proj4string is required but not set")

    assembly = config.assembly
    if assembly is None:
        errors.append("assembly configuration is required but not set")
    else:
        if not assembly.outer_role:
            errors.append("assembly.outer_role must be a non-empty string")
        if not assembly.inner_role:
            errors.append("assembly.inner_role must be a non-empty string")
        if assembly.outer_role and assembly.outer_role == assembly.inner_role:
            errors.append(f"assembly.outer_role and assembly.inner_role must differ, both are '{assembly.outer_role}'")
        if assembly.hole_assignment not in HOLE_ASSIGNMENT_MODES:
            errors.append(f"assembly.hole_assignment must be one of {HOLE_ASSIGNMENT_MODES}, got '{assembly.hole_assignment}'")
        if not assembly.polygon_relation_types:
            errors.append("assembly.polygon_relation_types must name at least one relation type")
        if assembly.min_ring_coords < 4:
            errors.append(f"assembly.min_ring_coords must be at least 4, got {assembly.min_ring_coords}")

    output = config.output
    if output is None:
        errors.append("output configuration is required but not set")
    else:
        if output.default_format not in OUTPUT_FORMATS:
            errors.append(f"output.default_format must be one of {OUTPUT_FORMATS}, got '{output.default_format}'")
        if output.precision < 0:
            errors.append(f"output.precision must not be negative, got {output.precision}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
