#!/usr/bin/env python
"""
Command-line interface for the OSM simple-features converter

Usage:
    python cli.py convert --input area.osm --output area.json
    python cli.py summary --input area.json
    python cli.py batch --input ./osm/ --output ./converted/ --format gpkg
"""

import os
import sys
import json
import argparse
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from osmsf.config import get_config, validate_config, HOLE_ASSIGNMENT_MODES, OSMDataConfig
from osmsf.errors import OSMDataError
from osmsf.pipeline import OSMDataPipeline


INPUT_EXTENSIONS = (".json", ".osm", ".xml")


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_config(args) -> OSMDataConfig:
    """Apply command-line overrides to a copy of the global config"""
    base = get_config()
    assembly = base.assembly
    if getattr(args, "hole_assignment", None):
        assembly = replace(assembly, hole_assignment=args.hole_assignment)
    if getattr(args, "include_member_ways", False):
        assembly = replace(assembly, exclude_polygon_members=False)
    if getattr(args, "polygon_type", None):
        assembly = replace(assembly, polygon_relation_types=tuple(args.polygon_type))
    config = replace(base, assembly=assembly)
    validate_config(config)
    return config


def cmd_convert(args):
    """Convert a single OSM file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        pipeline = OSMDataPipeline(build_config(args))
        result = pipeline.run_file(args.input)
        pipeline.save(result, args.output, args.layer)

        logger.info(f"✓ Converted: {args.input} -> {args.output}")
        for name, layer in result.layers().items():
            logger.info(f"  {name}: {len(layer)} features")

        if args.summary:
            print(json.dumps(result.summary(), indent=2))

        return 0

    except (OSMDataError, ValueError, OSError) as e:
        logger.error(f"Failed to convert {args.input}: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def cmd_summary(args):
    """Print layer sizes of a converted OSM file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        pipeline = OSMDataPipeline(build_config(args))
        result = pipeline.run_file(args.input)
    except (OSMDataError, ValueError, OSError) as e:
        logger.error(f"Failed to convert {args.input}: {e}")
        return 1

    print(json.dumps(result.summary(), indent=2))
    return 0


def cmd_batch(args):
    """Convert every OSM file of a directory"""
    setup_logging(args.verbose)

    if not os.path.isdir(args.input):
        logger.error(f"Input directory not found: {args.input}")
        return 1

    files = sorted(
        f for f in os.listdir(args.input)
        if os.path.splitext(f)[1].lower() in INPUT_EXTENSIONS
    )
    if not files:
        logger.error(f"No OSM files found in {args.input}")
        return 1

    logger.info(f"Processing {len(files)} files...")
    os.makedirs(args.output, exist_ok=True)

    try:
        pipeline = OSMDataPipeline(build_config(args))
    except ValueError as e:
        logger.error(str(e))
        return 1

    success = 0
    failed = 0
    for i, filename in enumerate(files, 1):
        logger.info(f"[{i}/{len(files)}] {filename}")
        output_name = f"{os.path.splitext(filename)[0]}.{args.format}"
        try:
            result = pipeline.run_file(os.path.join(args.input, filename))
            pipeline.save(result, os.path.join(args.output, output_name))
            logger.info(f"  ✓ {output_name}")
            success += 1
        except (OSMDataError, ValueError, OSError) as e:
            logger.error(f"  ✗ Failed: {e}")
            failed += 1

    logger.info(f"Complete: {success} succeeded, {failed} failed")
    return 0 if failed == 0 else 1


def add_assembly_arguments(parser):
    parser.add_argument(
        "--hole-assignment", choices=HOLE_ASSIGNMENT_MODES,
        help="How multipolygon holes are matched to exterior rings"
    )
    parser.add_argument(
        "--include-member-ways", action="store_true",
        help="Also emit ways that belong to polygon relations as lines/polygons"
    )
    parser.add_argument(
        "--polygon-type", action="append",
        help="Relation 'type' tag value treated as polygon-forming (repeatable)"
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="OSM simple-features converter CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Convert an OSM XML file to GeoJSON layers:
    python cli.py convert --input area.osm --output area.json

  Convert an Overpass response to a GeoPackage:
    python cli.py convert --input response.json --output area.gpkg

  Print layer sizes:
    python cli.py summary --input area.osm
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert one OSM file")
    convert_parser.add_argument("--input", "-i", required=True, help="Input file (.osm, .xml or Overpass .json)")
    convert_parser.add_argument("--output", "-o", required=True, help="Output file (.json or .gpkg)")
    convert_parser.add_argument("--layer", action="append", help="Only write this layer (repeatable)")
    convert_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    add_assembly_arguments(convert_parser)
    convert_parser.set_defaults(func=cmd_convert)

    # Summary command
    summary_parser = subparsers.add_parser("summary", help="Print layer sizes of an OSM file")
    summary_parser.add_argument("--input", "-i", required=True, help="Input file")
    add_assembly_arguments(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Convert every OSM file in a directory")
    batch_parser.add_argument("--input", "-i", required=True, help="Input directory")
    batch_parser.add_argument("--output", "-o", default=get_config().output.output_dir, help="Output directory")
    batch_parser.add_argument("--format", choices=("json", "gpkg"), default=get_config().output.default_format, help="Output format")
    add_assembly_arguments(batch_parser)
    batch_parser.set_defaults(func=cmd_batch)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
