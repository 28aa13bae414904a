"""Bird head generator - skull, convex-hulled beak and mirrored eyes."""

__version__ = "1.0.0"

from .build import (
    generate_head,
    build_skull,
    build_beak_skeleton,
    build_beak_hull,
    build_eye,
    attach_eyes,
    pose_head,
)

__all__ = [
    "generate_head",
    "build_skull",
    "build_beak_skeleton",
    "build_beak_hull",
    "build_eye",
    "attach_eyes",
    "pose_head",
]
