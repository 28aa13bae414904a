"""
Data I/O utilities.

Handles parameter files and saving meshes with proper metadata.
Parameter files are flat JSON objects: {"beak_length": 15, "tail_pitch": 40, ...}
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import trimesh

from .config import Config, MeshMetadata, UnitMode
from .mesh_ops import compute_mesh_stats
from .params import BirdParams

logger = logging.getLogger(__name__)


def load_params(path: Path) -> BirdParams:
    """
    Load bird parameters from a JSON file.

    Names missing from the file keep their default values.

    Raises:
        ValueError: if the file holds an unknown parameter name or a non-numeric value
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Parameter file {path} must contain a JSON object")

    params = BirdParams.from_dict(data)
    logger.info(f"Loaded {len(data)} parameters from {path}")
    return params


def save_params(params: BirdParams, path: Path) -> None:
    """Save bird parameters to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(params.to_dict(), f, indent=2)


def build_metadata(
    part: str,
    mesh: trimesh.Trimesh,
    params: BirdParams,
    config: Config,
    scale_factor: Optional[float] = None
) -> MeshMetadata:
    """Describe an exported part."""
    stats = compute_mesh_stats(mesh)
    return MeshMetadata(
        part=part,
        unit_mode=config.unit_mode.value,
        bbox_max_dimension=stats["max_extent"],
        normalization_applied=config.unit_mode == UnitMode.NORMALIZED,
        n_triangles=stats["n_faces"],
        n_vertices=stats["n_vertices"],
        is_watertight=stats["is_watertight"],
        scale_factor=scale_factor,
        bounds=stats["bounds"],
        generation_params={
            "params": params.to_dict(),
            "config": config.to_dict()
        }
    )


def save_mesh(
    mesh: trimesh.Trimesh,
    path: Path,
    metadata: MeshMetadata
) -> None:
    """
    Save mesh with metadata sidecar.

    Args:
        mesh: Trimesh mesh object
        path: Output path; the suffix picks the format (.glb, .stl, .obj, .ply)
        metadata: MeshMetadata object (will be saved as .json sidecar)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Save mesh
    mesh.export(str(path))
    logger.info(f"Saved mesh: {path} ({metadata.n_vertices} verts, {metadata.n_triangles} tris)")

    # Save metadata sidecar
    meta_path = path.with_suffix('.json')
    metadata.save(meta_path)
    logger.info(f"Saved metadata: {meta_path}")


def load_mesh(path: Path) -> Tuple[trimesh.Trimesh, Optional[MeshMetadata]]:
    """
    Load mesh and its metadata sidecar.

    Args:
        path: Path to mesh file

    Returns:
        Tuple of (mesh, metadata) - metadata may be None if not found
    """
    path = Path(path)
    mesh = trimesh.load(str(path), force="mesh")

    meta_path = path.with_suffix('.json')
    metadata = None
    if meta_path.exists():
        with open(meta_path) as f:
            metadata = MeshMetadata.from_dict(json.load(f))

    return mesh, metadata
