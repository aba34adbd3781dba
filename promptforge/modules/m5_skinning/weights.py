"""
#WHERE
    Called by m7_assembler/character_assembler.py after the body mesh and
    skeleton are built.

#WHAT
    Inverse-distance bone weights.  For every vertex each bone scores
    ``bone.weight / (1 + |vertex - bone.position|)``; the four best bones
    are kept and their scores renormalised to sum to 1.  Slots beyond the
    bone count are padded with index 0 and weight 0.

    This is a heuristic, not linear-blend skinning: bone positions are
    treated as rest positions in model space and there are no bind-pose
    inverse matrices.

#INPUT
    (N, 3) vertices, SkeletonConfig.

#OUTPUT
    (N, 4) int64 bone indices, (N, 4) float64 weights.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from promptforge.modules.m2_geometry_builder.mesh import Mesh
from promptforge.modules.m4_skeleton_generator.models import SkeletonConfig
from promptforge.shared.constants import MAX_BONE_INFLUENCES
from promptforge.shared.mem_profile import profile_memory

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SkinnedMesh:
    mesh: Mesh
    skin_indices: np.ndarray
    skin_weights: np.ndarray
    bone_names: List[str]

    @property
    def influence_counts(self) -> np.ndarray:
        return np.count_nonzero(self.skin_weights, axis=1)


@profile_memory
def compute_skin_weights(vertices: np.ndarray, skeleton: SkeletonConfig,
                         max_influences: int = MAX_BONE_INFLUENCES) -> Tuple[np.ndarray, np.ndarray]:
    if len(skeleton) == 0:
        raise ValueError("Cannot skin against an empty skeleton")

    vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    rest = np.array([b.position for b in skeleton.bones], dtype=np.float64)
    base = np.array([b.weight for b in skeleton.bones], dtype=np.float64)

    scores = base[None, :] / (1.0 + cdist(vertices, rest))

    keep = min(max_influences, len(skeleton))
    # stable sort keeps skeleton order among equal scores
    order = np.argsort(-scores, axis=1, kind="stable")[:, :keep]
    picked = np.take_along_axis(scores, order, axis=1)

    totals = picked.sum(axis=1, keepdims=True)
    weights = np.zeros_like(picked)
    np.divide(picked, totals, out=weights, where=totals > 0)
    # all selected bones had zero base weight: hand the vertex to its top bone
    weights[totals[:, 0] <= 0, 0] = 1.0

    indices = np.zeros((len(vertices), max_influences), dtype=np.int64)
    padded = np.zeros((len(vertices), max_influences), dtype=np.float64)
    indices[:, :keep] = order
    padded[:, :keep] = weights
    return indices, padded


def skin_mesh(mesh: Mesh, skeleton: SkeletonConfig) -> SkinnedMesh:
    indices, weights = compute_skin_weights(mesh.vertices, skeleton)
    log.info("[M5] skinned %d vertices against %d bones", mesh.vertex_count, len(skeleton))
    return SkinnedMesh(mesh=mesh, skin_indices=indices, skin_weights=weights, bone_names=skeleton.names)
