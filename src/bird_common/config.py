"""
Configuration and constants for bird mesh generation.

Unit Model:
- Geometry is authored in model units (1 unit = 1 mm when printed), Z-up
- Mode A (default): model units, untouched
- Mode B: normalized, head and body share one scale factor so that
  max(bbox dimension) of the combined bird = 2.0 units
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import json
from pathlib import Path


class UnitMode(Enum):
    """
    Output unit modes.

    MODEL (default): authoring units, ready for slicing / printing
    NORMALIZED: combined head+body max dimension = normalized_max_dim
    """
    MODEL = "model"
    NORMALIZED = "normalized"


# Sphere resolution unit. Every primitive's tessellation derives from it.
RESOLUTION_UNIT = 16

# Used in place of 0 for radii and heights that approach an edge
NONZERO_THICKNESS = 0.1


@dataclass
class MeshMetadata:
    """
    Metadata written next to every exported part.
    """
    part: str  # "head" or "body"
    unit_mode: str
    bbox_max_dimension: float
    normalization_applied: bool
    n_triangles: int
    n_vertices: int
    is_watertight: bool
    scale_factor: Optional[float] = None
    bounds: Optional[Dict[str, Any]] = None
    generation_params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "part": self.part,
            "unit_mode": self.unit_mode,
            "bbox_max_dimension": self.bbox_max_dimension,
            "normalization_applied": self.normalization_applied,
            "n_triangles": self.n_triangles,
            "n_vertices": self.n_vertices,
            "is_watertight": self.is_watertight,
            "scale_factor": self.scale_factor,
            "bounds": self.bounds,
            "generation_params": self.generation_params
        }

    def save(self, path: Path) -> None:
        """Save metadata to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeshMetadata":
        return cls(**data)


@dataclass
class Config:
    """
    Global configuration for bird generation.

    The generators only read this object. Tessellation counts for every
    primitive are derived from `resolution`; 16 keeps regeneration
    interactive, higher values are for final prints.
    """

    # Sphere resolution unit
    resolution: int = RESOLUTION_UNIT

    # Epsilon radius/height replacing zero-sized features
    nonzero_thickness: float = NONZERO_THICKNESS

    # Uniform inflation of the posed head (hulls shrink curved surfaces)
    head_inflation: float = 1.1

    # Triangle subdivision passes applied to the head
    subdivision_levels: int = 1

    # trimesh boolean backend
    boolean_engine: str = "manifold"

    # Export settings
    unit_mode: UnitMode = UnitMode.MODEL
    normalized_max_dim: float = 2.0
    export_format: str = "glb"
    output_dir: Path = field(default_factory=lambda: Path("outputs"))

    @property
    def sphere_segments(self) -> int:
        return self.resolution

    @property
    def sphere_stacks(self) -> int:
        return self.resolution * 2

    def get_output_path(self, part: str) -> Path:
        """Get mesh output path for a part ("head" or "body")."""
        return self.output_dir / f"{part}.{self.export_format}"

    def get_meta_path(self, part: str) -> Path:
        """Get metadata sidecar path for a part."""
        return self.output_dir / f"{part}.json"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resolution": self.resolution,
            "nonzero_thickness": self.nonzero_thickness,
            "head_inflation": self.head_inflation,
            "subdivision_levels": self.subdivision_levels,
            "boolean_engine": self.boolean_engine,
            "unit_mode": self.unit_mode.value,
            "normalized_max_dim": self.normalized_max_dim,
            "export_format": self.export_format,
            "output_dir": str(self.output_dir)
        }

    @classmethod
    def from_json(cls, path: Path) -> "Config":
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
        data["unit_mode"] = UnitMode(data.get("unit_mode", "model"))
        data["output_dir"] = Path(data.get("output_dir", "outputs"))
        return cls(**data)

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


# Global default config
DEFAULT_CONFIG = Config()
