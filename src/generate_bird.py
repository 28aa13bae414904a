#!/usr/bin/env python3
"""
Bird-o-matic - Orchestrator

Generate the head and body meshes of a bird and export them with metadata.

Usage:
    python src/generate_bird.py --output outputs/
    python src/generate_bird.py --params my_bird.json --set tail_pitch=60 --format stl
    python src/generate_bird.py --list-params
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Tuple
from datetime import datetime

import trimesh

# Add src to path
sys.path.insert(0, str(Path(__file__).parent))

from bird_common.config import Config, UnitMode
from bird_common.params import BirdParams, ParamField, FIELD_SPECS
from bird_common.io import load_params, save_mesh, build_metadata
from bird_common.normalize import normalize_meshes
from bird_head.build import generate_head
from bird_body.build import generate_body

logger = logging.getLogger(__name__)

PART_GENERATORS = {
    "head": generate_head,
    "body": generate_body,
}

EXPORT_FORMATS = ["glb", "stl", "obj", "ply"]


def parse_override(text: str) -> Tuple[ParamField, float]:
    """Parse a NAME=VALUE override, e.g. "tail_pitch=60"."""
    name, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        param = ParamField.from_name(name.strip())
        return param, float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def format_param_table(params: BirdParams) -> str:
    """Render the reflection table as text, grouped like a slider panel."""
    lines = []
    group = None
    for spec in FIELD_SPECS:
        if spec.group != group:
            group = spec.group
            lines.append(f"[{group}]")
        lines.append(
            f"  {spec.field.value:<20} {spec.label:<20} "
            f"{spec.get(params):>7.1f}  [{spec.minimum:g}, {spec.maximum:g}]  {spec.description}"
        )
    return "\n".join(lines)


def run_parts(
    parts: List[str],
    params: BirdParams,
    config: Config
) -> dict:
    """
    Generate and export the requested parts.

    A failing part is logged and recorded; the remaining parts still run.

    Args:
        parts: Part names ("head", "body")
        params: Bird parameters
        config: Configuration (output dir, format, unit mode)

    Returns:
        Summary dictionary
    """
    summary = {
        "timestamp": datetime.now().isoformat(),
        "config": config.to_dict(),
        "params": params.to_dict(),
        "parts": {},
        "errors": []
    }

    meshes: Dict[str, trimesh.Trimesh] = {}
    for part in parts:
        logger.info(f"\n--- Part: {part} ---")
        try:
            meshes[part] = PART_GENERATORS[part](params, config)
        except Exception as e:
            logger.error(f"Part {part} failed: {e}")
            summary["parts"][part] = {"status": "error", "error": str(e)}
            summary["errors"].append({"part": part, "error": str(e)})

    if not meshes:
        return summary

    names = list(meshes)
    scale_factor = None
    if config.unit_mode == UnitMode.NORMALIZED:
        scaled, norm_result = normalize_meshes([meshes[n] for n in names], config.normalized_max_dim)
        meshes = dict(zip(names, scaled))
        scale_factor = norm_result.scale_factor

    for part in names:
        mesh = meshes[part]
        metadata = build_metadata(part, mesh, params, config, scale_factor=scale_factor)
        save_mesh(mesh, config.get_output_path(part), metadata)
        summary["parts"][part] = {"status": "success", "metadata": metadata.to_dict()}

    return summary


def main():
    parser = argparse.ArgumentParser(
        description="Bird-o-matic - Generate parametric bird head and body meshes"
    )
    parser.add_argument(
        "--params", "-p",
        type=Path,
        help="JSON parameter file (missing names keep defaults)"
    )
    parser.add_argument(
        "--set", "-s",
        dest="overrides",
        type=parse_override,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Override one parameter (repeatable)"
    )
    parser.add_argument(
        "--parts",
        nargs="+",
        choices=sorted(PART_GENERATORS),
        default=["head", "body"],
        help="Parts to generate"
    )
    parser.add_argument(
        "--format", "-f",
        choices=EXPORT_FORMATS,
        default="glb",
        help="Mesh export format"
    )
    parser.add_argument(
        "--unit-mode", "-u",
        choices=[m.value for m in UnitMode],
        default="model",
        help="Output unit mode"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("outputs"),
        help="Output directory"
    )
    parser.add_argument(
        "--resolution", "-r",
        type=int,
        default=16,
        help="Sphere resolution unit"
    )
    parser.add_argument(
        "--clamp",
        action="store_true",
        help="Clamp every parameter to its documented range"
    )
    parser.add_argument(
        "--list-params",
        action="store_true",
        help="Print the parameter table and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    # Build parameters
    try:
        params = load_params(args.params) if args.params else BirdParams()
    except (OSError, ValueError) as e:
        parser.error(f"cannot load parameters: {e}")
    for param, value in args.overrides:
        params = params.with_value(param, value)
    if args.clamp:
        params = params.clamped()

    if args.list_params:
        print(format_param_table(params))
        return

    # Build config
    config = Config(
        resolution=args.resolution,
        unit_mode=UnitMode(args.unit_mode),
        export_format=args.format,
        output_dir=args.output
    )

    logger.info(f"Generating {args.parts} at resolution {config.resolution}")
    logger.info(f"Unit mode: {config.unit_mode.value}")
    logger.info(f"Output: {args.output}")

    summary = run_parts(args.parts, params, config)

    # Save summary
    summary_path = args.output / "run_summary.json"
    summary_path.parent.mkdir(parents=True, exist_ok=True)
    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2)

    logger.info(f"\nSummary saved to: {summary_path}")

    n_success = sum(1 for p in summary["parts"].values() if p.get("status") == "success")
    n_errors = len(summary["errors"])

    logger.info(f"\n{'='*60}")
    logger.info(f"COMPLETE: {n_success} successful, {n_errors} errors")
    logger.info(f"{'='*60}")

    if n_errors > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
