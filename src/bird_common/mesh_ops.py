"""
Mesh operation utilities.

Thin layer over trimesh providing the primitives, transforms and boolean /
hull operations the bird generators compose. Every function returns a new
mesh and leaves its inputs untouched.

Conventions:
- Angles are in degrees. rotate() applies X, then Y, then Z about fixed axes.
- Cylinders stand on z = 0 and extend along +Z.
- Cuboids span [0, x] x [0, y] x [0, z].
- Booleans run through manifold3d (trimesh's "manifold" engine).
"""

import numpy as np
from typing import Dict, Any, Sequence
import logging

import trimesh
from trimesh import transformations

logger = logging.getLogger(__name__)


def _revolve(profile: np.ndarray, sections: int) -> trimesh.Trimesh:
    """
    Revolve a closed (radius, z) profile about the Z axis.

    Both profile end points must lie on the axis so the result is watertight.
    """
    solid = trimesh.creation.revolve(linestring=profile, sections=int(sections))
    if solid.volume < 0:
        solid.invert()
    return solid


def sphere(radius: float, segments: int, stacks: int) -> trimesh.Trimesh:
    """
    UV sphere centered on the origin.

    Args:
        radius: Sphere radius
        segments: Longitudinal slices around Z
        stacks: Latitudinal bands from pole to pole

    Returns:
        Watertight sphere mesh
    """
    theta = np.linspace(0.0, np.pi, int(stacks) + 1)
    profile = np.column_stack([np.sin(theta), -np.cos(theta)]) * radius
    # pin the poles exactly on the axis
    profile[[0, -1], 0] = 0.0
    return _revolve(profile, segments)


def cylinder(
    top_radius: float,
    bottom_radius: float,
    segments: int,
    height: float
) -> trimesh.Trimesh:
    """
    Capped cylinder, or a single-ended cone when the radii differ.

    Args:
        top_radius: Radius of the cap at z = height
        bottom_radius: Radius of the cap at z = 0
        segments: Number of sides
        height: Extent along +Z

    Returns:
        Watertight frustum mesh
    """
    profile = np.array([
        [0.0, 0.0],
        [bottom_radius, 0.0],
        [top_radius, height],
        [0.0, height]
    ], dtype=np.float64)
    return _revolve(profile, segments)


def cuboid(x: float, y: float, z: float) -> trimesh.Trimesh:
    """Axis-aligned box with one corner at the origin."""
    box = trimesh.creation.box(extents=[x, y, z])
    box.apply_translation([x / 2.0, y / 2.0, z / 2.0])
    return box


def _transformed(mesh: trimesh.Trimesh, matrix: np.ndarray) -> trimesh.Trimesh:
    result = mesh.copy()
    # trimesh flips face winding itself when the matrix is a reflection
    result.apply_transform(matrix)
    return result


def scale(mesh: trimesh.Trimesh, sx: float, sy: float, sz: float) -> trimesh.Trimesh:
    """Non-uniform scale about the origin."""
    matrix = np.diag([sx, sy, sz, 1.0])
    return _transformed(mesh, matrix)


def translate(mesh: trimesh.Trimesh, dx: float, dy: float, dz: float) -> trimesh.Trimesh:
    return _transformed(mesh, transformations.translation_matrix([dx, dy, dz]))


def rotate(
    mesh: trimesh.Trimesh,
    degrees_x: float,
    degrees_y: float,
    degrees_z: float
) -> trimesh.Trimesh:
    """Rotate about the fixed X, Y then Z axes (R = Rz @ Ry @ Rx)."""
    matrix = transformations.euler_matrix(
        np.radians(degrees_x),
        np.radians(degrees_y),
        np.radians(degrees_z),
        axes="sxyz"
    )
    return _transformed(mesh, matrix)


def mirror(
    mesh: trimesh.Trimesh,
    normal: Sequence[float],
    offset: float = 0.0
) -> trimesh.Trimesh:
    """
    Reflect a mesh across the plane {p : p . n = offset}.

    Args:
        mesh: Input mesh
        normal: Plane normal (need not be unit length)
        offset: Signed distance of the plane from the origin along the normal

    Returns:
        Mirrored copy with outward-facing winding
    """
    n = np.asarray(normal, dtype=np.float64)
    n = n / np.linalg.norm(n)
    matrix = transformations.reflection_matrix(n * offset, n)
    return _transformed(mesh, matrix)


def union(a: trimesh.Trimesh, b: trimesh.Trimesh, engine: str = "manifold") -> trimesh.Trimesh:
    """Boolean union of two volumes."""
    result = trimesh.boolean.union([a, b], engine=engine)
    logger.debug(f"Union: {len(a.faces)} + {len(b.faces)} -> {len(result.faces)} faces")
    return result


def difference(a: trimesh.Trimesh, b: trimesh.Trimesh, engine: str = "manifold") -> trimesh.Trimesh:
    """Boolean difference a - b."""
    result = trimesh.boolean.difference([a, b], engine=engine)
    logger.debug(f"Difference: {len(a.faces)} - {len(b.faces)} -> {len(result.faces)} faces")
    return result


def convex_hull(*meshes: trimesh.Trimesh) -> trimesh.Trimesh:
    """
    Convex hull of the vertices of one or more meshes.

    Hulling several meshes at once is the same as hulling their union, without
    running a boolean first.
    """
    points = np.vstack([m.vertices for m in meshes])
    return trimesh.convex.convex_hull(points)


def recompute_normals(mesh: trimesh.Trimesh) -> trimesh.Trimesh:
    """
    Make winding consistent and outward, then rebuild face/vertex normals.

    Booleans can leave inconsistent winding behind, which corrupts later hulls
    and shading, so the generators call this after every topology change.
    """
    fixed = mesh.copy()
    fixed.fix_normals()
    # populate the normal caches for the current faces
    _ = fixed.face_normals
    _ = fixed.vertex_normals
    return fixed


def subdivide(mesh: trimesh.Trimesh, levels: int = 1) -> trimesh.Trimesh:
    """Split every triangle into four, `levels` times."""
    result = mesh.copy()
    for _ in range(levels):
        result = result.subdivide()
    return result


def orient_y_up(mesh: trimesh.Trimesh) -> trimesh.Trimesh:
    """
    Convert from the Z-up authoring frame to the Y-up display frame.

    Maps (x, y, z) -> (-x, z, y). Must be the last transform applied so that
    pose parameters keep their authoring-frame meaning.
    """
    return rotate(mesh, -90.0, 180.0, 0.0)


def compute_mesh_stats(mesh: trimesh.Trimesh) -> Dict[str, Any]:
    """
    Compute comprehensive mesh statistics.

    Args:
        mesh: Trimesh mesh object

    Returns:
        Dictionary of mesh statistics
    """
    bounds = mesh.bounds
    extents = mesh.extents

    return {
        "n_vertices": len(mesh.vertices),
        "n_faces": len(mesh.faces),
        "bounds": {
            "min": bounds[0].tolist(),
            "max": bounds[1].tolist()
        },
        "extents": extents.tolist(),
        "max_extent": float(max(extents)),
        "volume": float(mesh.volume) if mesh.is_watertight else None,
        "surface_area": float(mesh.area),
        "is_watertight": bool(mesh.is_watertight),
        "is_winding_consistent": bool(mesh.is_winding_consistent),
        "euler_number": int(mesh.euler_number)
    }
