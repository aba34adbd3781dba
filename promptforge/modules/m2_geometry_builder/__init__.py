"""
#WHERE
    Imported by pipeline.py, m7_assembler, m5_skinning tests and
    test_geometry_builder.py.

#WHAT
    Geometry Builder Module (Module 2): parametric primitives, procedural
    generators (twisted / organic / extrusion / fractal / text), composable
    displacement modifiers and placeholder character bodies.

#INPUT
    BaseShape, scale vec3, GeometryModifiers, horror level, seed.

#OUTPUT
    Mesh (vertices, faces, normals, warnings).
"""

from .mesh import GeometryBuildError, Mesh, merge_meshes
from .builder import GeometryBuilder
from .modifiers import DISTORTIONS, apply_modifiers, distortion_offsets
from .noise import hash_noise
from .procedural import GrowthBudget
from .character_mesh import build_character_mesh

__all__ = [
    "GeometryBuilder", "GeometryBuildError", "Mesh", "merge_meshes",
    "apply_modifiers", "distortion_offsets", "DISTORTIONS", "hash_noise",
    "GrowthBudget", "build_character_mesh",
]
