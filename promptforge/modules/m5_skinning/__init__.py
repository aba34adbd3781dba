"""
#WHERE
    Imported by the character assembler and test_skinning.py.

#WHAT
    Skinning Module (Module 5): per-vertex bone influences (top 4,
    normalised) from an inverse-distance heuristic.

#INPUT
    Mesh or (N, 3) vertices, SkeletonConfig.

#OUTPUT
    SkinnedMesh / (indices, weights) arrays.
"""

from .weights import SkinnedMesh, compute_skin_weights, skin_mesh

__all__ = ["SkinnedMesh", "compute_skin_weights", "skin_mesh"]
