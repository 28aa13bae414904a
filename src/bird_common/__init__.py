"""
Common modules for bird generation.

Authoring frame (all generation): Z-up, X along the body from head (-X beak)
to tail (+X), Y lateral. Generated meshes are converted to the Y-up display
frame as their very last step.
"""

__version__ = "1.0.0"

from .config import Config, UnitMode, MeshMetadata, DEFAULT_CONFIG
from .params import (
    BirdParams,
    ParamField,
    FieldSpec,
    FIELD_SPECS,
    DEFAULT_PARAMS,
    field_spec,
    field_label,
    iter_fields,
    get_value,
    set_value,
)
from .io import load_params, save_params, save_mesh, load_mesh, build_metadata
from .normalize import normalize_meshes, NormalizationResult
from .mesh_ops import compute_mesh_stats

__all__ = [
    'Config', 'UnitMode', 'MeshMetadata', 'DEFAULT_CONFIG',
    'BirdParams', 'ParamField', 'FieldSpec', 'FIELD_SPECS', 'DEFAULT_PARAMS',
    'field_spec', 'field_label', 'iter_fields', 'get_value', 'set_value',
    'load_params', 'save_params', 'save_mesh', 'load_mesh', 'build_metadata',
    'normalize_meshes', 'NormalizationResult',
    'compute_mesh_stats',
]
