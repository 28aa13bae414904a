"""
Bird body: neck -> chest -> bottom -> tail, lofted with a chained hull.

Algorithm:
1. Neck sphere at the head attachment point
2. Chest ellipsoid (belly_length x belly_fat)
3. body = hull{neck, chest}
4. body = hull{body, bottom}
5. body = hull{body, tail disc}, then recompute normals
6. Optional flat base: subtract an oversized slab below the cut level
7. Z-up -> Y-up reorientation (always last)

Each stop is folded into the accumulated body one at a time, in loft order.
The sequence must not be reordered.
"""

from typing import List, Optional
import logging

import trimesh

from bird_common.config import Config, DEFAULT_CONFIG
from bird_common.params import BirdParams
from bird_common import mesh_ops

logger = logging.getLogger(__name__)

# base_flat at or below this disables the base cut
BASE_FLAT_DISABLED = -100.0

# Cut slab footprint, in multiples of the nose-to-tail length
CUT_FOOTPRINT = 10.0


def build_neck(params: BirdParams, config: Config) -> trimesh.Trimesh:
    """Neck stop, placed where the head is attached so both move together."""
    neck = mesh_ops.sphere(
        params.head_size / 2.0,
        config.sphere_segments // 2 + 1,
        config.sphere_stacks // 2 + 1
    )
    return mesh_ops.translate(neck, 0.0, params.head_lateral_offset, params.head_level)


def build_chest(params: BirdParams, config: Config) -> trimesh.Trimesh:
    chest = mesh_ops.sphere(
        params.belly_size / 2.0,
        config.sphere_segments + 2,
        config.sphere_stacks + 2
    )
    chest = mesh_ops.scale(
        chest,
        params.belly_length / params.belly_size,
        params.belly_fat / 100.0,
        1.0
    )
    return mesh_ops.translate(chest, params.head_to_belly, 0.0, 0.0)


def bottom_position(params: BirdParams) -> float:
    """X coordinate of the bottom stop (and tail root)."""
    return params.head_to_belly + params.belly_to_bottom


def build_bottom(params: BirdParams, config: Config) -> trimesh.Trimesh:
    bottom = mesh_ops.sphere(
        params.bottom_size / 2.0,
        config.sphere_segments + 1,
        config.sphere_stacks + 1
    )
    return mesh_ops.translate(bottom, bottom_position(params), 0.0, 0.0)


def build_tail(params: BirdParams, config: Config) -> trimesh.Trimesh:
    """Thin tail disc at the tail tip; the hull with the bottom makes the fan."""
    eps = config.nonzero_thickness
    tail = mesh_ops.cylinder(params.tail_width, eps, config.sphere_segments + 1, eps)
    tail = mesh_ops.scale(tail, params.tail_roundness / 100.0, 1.0, 1.0)
    tail = mesh_ops.translate(tail, params.tail_length, 0.0, 0.0)
    tail = mesh_ops.rotate(tail, 0.0, -params.tail_pitch, params.tail_yaw)
    return mesh_ops.translate(tail, bottom_position(params), 0.0, 0.0)


def chained_hull(stops: List[trimesh.Trimesh]) -> trimesh.Trimesh:
    """
    Loft through a sequence of shapes.

    Hulls the first two stops, then hulls the accumulated body with each
    following stop in order:
    hull(...hull(hull(s0, s1), s2)..., sn)

    Args:
        stops: At least two shapes, in loft order

    Returns:
        Lofted mesh (normals not yet recomputed)
    """
    if len(stops) < 2:
        raise ValueError(f"chained_hull needs at least 2 stops, got {len(stops)}")

    body = mesh_ops.convex_hull(stops[0], stops[1])
    for i, stop in enumerate(stops[2:], start=2):
        body = mesh_ops.convex_hull(body, stop)
        logger.debug(f"Loft stop {i}: {len(body.faces)} faces")
    return body


def build_body_shell(params: BirdParams, config: Config) -> trimesh.Trimesh:
    """Steps 1-5: the lofted body in the authoring frame, before any cut."""
    logger.info("Body step 1, neck and chest")
    neck = build_neck(params, config)
    chest = build_chest(params, config)

    logger.info("Body step 2, bottom")
    bottom = build_bottom(params, config)

    logger.info("Body step 3, tail")
    tail = build_tail(params, config)

    body = chained_hull([neck, chest, bottom, tail])
    return mesh_ops.recompute_normals(body)


def compute_cut_height(params: BirdParams) -> float:
    """Z of the underside of the cut slab."""
    return params.belly_size * (-1.5 + params.base_flat / 200.0)


def compute_cut_level(params: BirdParams) -> float:
    """Z of the flat base after the cut (top face of the slab)."""
    return compute_cut_height(params) + params.belly_size


def flatten_base(
    body: trimesh.Trimesh,
    params: BirdParams,
    config: Config
) -> trimesh.Trimesh:
    """
    Step 6: cut the body flat for printing.

    Disabled when base_flat <= -100. The slab footprint follows the
    nose-to-tail length but never drops below belly_size, since that length
    can be zero or negative with a forward-leaning head.
    """
    if params.base_flat <= BASE_FLAT_DISABLED:
        logger.info("Base flattening disabled")
        return body

    cut_height = compute_cut_height(params)
    footprint = max(abs(params.total_length), params.belly_size) * CUT_FOOTPRINT
    logger.info(f"Flattening base: cut height z={cut_height:.2f}, base level z={cut_height + params.belly_size:.2f}")

    slab = mesh_ops.cuboid(footprint, footprint, params.belly_size)
    slab = mesh_ops.translate(slab, -footprint / 2.0, -footprint / 2.0, cut_height)

    flattened = mesh_ops.difference(body, slab, engine=config.boolean_engine)
    return mesh_ops.recompute_normals(flattened)


def generate_body(
    params: BirdParams,
    config: Optional[Config] = None
) -> trimesh.Trimesh:
    """
    Generate the body mesh (neck, chest, bottom, tail) in the Y-up display frame.

    Args:
        params: Bird parameters (read only)
        config: Tessellation / kernel settings, DEFAULT_CONFIG if omitted

    Returns:
        New body mesh, owned by the caller
    """
    config = config or DEFAULT_CONFIG

    body = build_body_shell(params, config)
    body = flatten_base(body, params, config)

    body = mesh_ops.orient_y_up(body)
    logger.info(f"Body done: {len(body.vertices)} vertices, {len(body.faces)} faces")
    return body
