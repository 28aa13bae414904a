"""
Bird head: skull + beak + eyes.

Algorithm:
1. Skull sphere
2. Beak skeleton (thin tip disc) unioned with the skull
3. Convex hull of the skeleton, tapered in Y/Z by beak_size -> working head
4. Eyes, the second one mirrored from the first
5. Pose (pitch, yaw, lateral offset, level) and 1.1x inflation
6. One subdivision pass for smoother shading
7. Z-up -> Y-up reorientation (always last)

Every union / hull is followed by a normal recompute; the boolean engine is
sensitive to inconsistent winding in its inputs.
"""

from typing import Optional
import logging

import trimesh

from bird_common.config import Config, DEFAULT_CONFIG
from bird_common.params import BirdParams
from bird_common import mesh_ops

logger = logging.getLogger(__name__)

# Beak tip tilt about Y
BEAK_TILT_DEG = 15.0

# Eye placement on the skull
EYE_ROTATION_DEG = (50.0, -40.0, 0.0)
EYE_SQUASH = 0.5

# Symmetry plane of the head in the authoring frame
SYMMETRY_NORMAL = (0.0, 1.0, 0.0)
SYMMETRY_OFFSET = 0.0


def build_skull(params: BirdParams, config: Config) -> trimesh.Trimesh:
    return mesh_ops.sphere(
        params.head_size / 2.0,
        2 * config.sphere_segments,
        config.sphere_stacks
    )


def build_beak_skeleton(
    params: BirdParams,
    config: Config,
    skull: Optional[trimesh.Trimesh] = None
) -> trimesh.Trimesh:
    """
    Union of the skull and the beak tip disc.

    The tip radius falls back to config.nonzero_thickness when beak_width is
    zero; a zero-radius primitive breaks the later hull and booleans.
    """
    if skull is None:
        skull = build_skull(params, config)

    eps = config.nonzero_thickness
    tip_radius = params.beak_width if params.beak_width > 0 else eps

    # way less resolution since it only feeds the convex hull
    tip = mesh_ops.cylinder(tip_radius, eps, max(config.sphere_segments // 4, 3), eps)
    tip = mesh_ops.scale(tip, params.beak_roundness / 100.0, 1.0, 1.0)
    tip = mesh_ops.translate(tip, -params.beak_length - params.head_size / 2.0, 0.0, 0.0)
    tip = mesh_ops.rotate(tip, 0.0, BEAK_TILT_DEG, 0.0)

    skeleton = mesh_ops.union(tip, skull, engine=config.boolean_engine)
    return mesh_ops.recompute_normals(skeleton)


def build_beak_hull(params: BirdParams, config: Config) -> trimesh.Trimesh:
    """Hull of skull + beak tip, tapered by beak_size. This is the bare head."""
    skeleton = build_beak_skeleton(params, config)
    logger.debug(f"Beak skeleton: {len(skeleton.faces)} faces")

    taper = params.beak_size / 100.0
    beak = mesh_ops.scale(mesh_ops.convex_hull(skeleton), 1.0, taper, taper)
    return mesh_ops.recompute_normals(beak)


def build_eye(params: BirdParams, config: Config) -> trimesh.Trimesh:
    """
    One eye on the -Y side of the head, in head-local coordinates.

    Half resolution compared to the skull.
    """
    eye = mesh_ops.sphere(
        params.eye_size / 2.0,
        config.sphere_segments // 2 + 2,
        config.sphere_stacks // 2 + 2
    )
    eye = mesh_ops.scale(eye, 1.0, 1.0, EYE_SQUASH)
    eye = mesh_ops.translate(eye, 0.0, 0.0, params.head_size / 2.0 - params.eye_size / 8.0)
    return mesh_ops.rotate(eye, *EYE_ROTATION_DEG)


def attach_eyes(
    head: trimesh.Trimesh,
    params: BirdParams,
    config: Config
) -> trimesh.Trimesh:
    """
    Union both eyes onto the head. No-op when eye_size <= 0.

    The +Y eye is the mirror image of the finished -Y eye, reflected across
    the head's symmetry plane (not a negative scale).
    """
    if params.eye_size <= 0:
        logger.info("No eyes (eye_size <= 0)")
        return head

    eye = build_eye(params, config)
    for side in (-1, 1):
        logger.info(f"Putting eye on head (side {side:+d})")
        if side == -1:
            placed = mesh_ops.mirror(eye, SYMMETRY_NORMAL, SYMMETRY_OFFSET)
        else:
            placed = eye
        head = mesh_ops.union(head, placed, engine=config.boolean_engine)
        head = mesh_ops.recompute_normals(head)

    return head


def pose_head(
    head: trimesh.Trimesh,
    params: BirdParams,
    config: Config
) -> trimesh.Trimesh:
    """Rotate, move to the neck attachment point, then inflate."""
    posed = mesh_ops.rotate(head, 0.0, params.head_pitch, params.head_yaw)
    posed = mesh_ops.translate(posed, 0.0, params.head_lateral_offset, params.head_level)
    s = config.head_inflation
    posed = mesh_ops.scale(posed, s, s, s)
    return mesh_ops.recompute_normals(posed)


def generate_head(
    params: BirdParams,
    config: Optional[Config] = None
) -> trimesh.Trimesh:
    """
    Generate the head mesh (skull, beak and eyes) in the Y-up display frame.

    Args:
        params: Bird parameters (read only)
        config: Tessellation / kernel settings, DEFAULT_CONFIG if omitted

    Returns:
        New head mesh, owned by the caller
    """
    config = config or DEFAULT_CONFIG

    logger.info("Head step 1-3: skull and beak")
    head = build_beak_hull(params, config)

    logger.info("Head step 4: eyes")
    head = attach_eyes(head, params, config)

    logger.info("Head step 5: pose")
    head = pose_head(head, params, config)

    logger.info(f"Head step 6: subdivide x{config.subdivision_levels}")
    head = mesh_ops.subdivide(head, config.subdivision_levels)

    head = mesh_ops.orient_y_up(head)
    logger.info(f"Head done: {len(head.vertices)} vertices, {len(head.faces)} faces")
    return head
