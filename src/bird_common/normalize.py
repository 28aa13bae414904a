"""
Mesh normalization utilities.

Normalization happens AFTER generation and only on export. Head and body are
separate meshes that must stay aligned, so they are scaled together by one
factor computed from their combined bounding box, about the origin.
"""

import numpy as np
from typing import Tuple, Dict, List
from dataclasses import dataclass
import logging

import trimesh

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Result of mesh normalization."""
    scale_factor: float
    bbox_before: Dict[str, Tuple[float, float]]
    bbox_after: Dict[str, Tuple[float, float]]
    max_dim_before: float
    max_dim_after: float


def get_mesh_bounds(vertices: np.ndarray) -> Dict[str, Tuple[float, float]]:
    """Get bounding box of vertices."""
    return {
        'x': (float(vertices[:, 0].min()), float(vertices[:, 0].max())),
        'y': (float(vertices[:, 1].min()), float(vertices[:, 1].max())),
        'z': (float(vertices[:, 2].min()), float(vertices[:, 2].max()))
    }


def get_max_dimension(bounds: Dict[str, Tuple[float, float]]) -> float:
    """Get maximum dimension from bounds."""
    extents = [b[1] - b[0] for b in bounds.values()]
    return max(extents) if extents else 0.0


def normalize_meshes(
    meshes: List[trimesh.Trimesh],
    target_max_dim: float = 2.0
) -> Tuple[List[trimesh.Trimesh], NormalizationResult]:
    """
    Scale meshes uniformly so their combined max dimension == target_max_dim.

    Args:
        meshes: Meshes sharing one coordinate frame (e.g. head and body)
        target_max_dim: Target maximum dimension (default 2.0)

    Returns:
        Tuple of (scaled copies in input order, NormalizationResult)
    """
    if not meshes:
        raise ValueError("normalize_meshes needs at least one mesh")

    all_vertices = np.vstack([m.vertices for m in meshes])
    bbox_before = get_mesh_bounds(all_vertices)
    max_dim_before = get_max_dimension(bbox_before)

    if max_dim_before < 1e-10:
        logger.warning("Meshes have zero extent, cannot normalize")
        return [m.copy() for m in meshes], NormalizationResult(
            scale_factor=1.0,
            bbox_before=bbox_before,
            bbox_after=bbox_before,
            max_dim_before=max_dim_before,
            max_dim_after=max_dim_before
        )

    scale_factor = target_max_dim / max_dim_before

    normalized = []
    for mesh in meshes:
        scaled = mesh.copy()
        scaled.apply_scale(scale_factor)
        normalized.append(scaled)

    bbox_after = get_mesh_bounds(np.vstack([m.vertices for m in normalized]))
    max_dim_after = get_max_dimension(bbox_after)

    logger.info(f"Normalized {len(meshes)} meshes: {max_dim_before:.2f} → {max_dim_after:.2f} units (scale={scale_factor:.6f})")

    return normalized, NormalizationResult(
        scale_factor=scale_factor,
        bbox_before=bbox_before,
        bbox_after=bbox_after,
        max_dim_before=max_dim_before,
        max_dim_after=max_dim_after
    )
