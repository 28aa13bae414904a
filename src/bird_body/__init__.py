"""Bird body generator - chained-hull loft from neck to tail with optional flat base."""

__version__ = "1.0.0"

from .build import (
    generate_body,
    build_body_shell,
    chained_hull,
    flatten_base,
    compute_cut_height,
    compute_cut_level,
)

__all__ = [
    "generate_body",
    "build_body_shell",
    "chained_hull",
    "flatten_base",
    "compute_cut_height",
    "compute_cut_level",
]
