"""Placeholder character bodies, built from merged primitives.

The body is sized for a unit-scale skeleton and then stretched by the
character's scale vector, so bone rest positions and body vertices share
one model space for skinning.
"""
from __future__ import annotations

import logging

import numpy as np
from scipy.spatial.transform import Rotation

from promptforge.modules.m1_prompt_parser.models import CharacterFeatures, Vec3
from promptforge.shared.vocabulary import CharacterType
from .mesh import Mesh, merge_meshes
from .primitives import box, cylinder, sphere

log = logging.getLogger(__name__)

_BODY_SEGMENTS = 16
_LIMB_SEGMENTS = 8


def _rot(axis: str, angle: float) -> np.ndarray:
    return Rotation.from_euler(axis, angle).as_matrix()


def humanoid_body() -> Mesh:
    arm = cylinder(0.1, 0.1, 0.8, _LIMB_SEGMENTS).translated((-0.5, 0.6, 0.0)).transformed(_rot("z", np.pi / 6))
    leg = cylinder(0.15, 0.12, 1.0, _LIMB_SEGMENTS).translated((-0.2, -0.5, 0.0))
    return merge_meshes([
        box(0.8, 1.2, 0.4, 1).translated((0.0, 0.6, 0.0)),
        sphere(0.3, _BODY_SEGMENTS, _BODY_SEGMENTS).translated((0.0, 1.4, 0.0)),
        arm,
        arm.translated((1.0, 0.0, 0.0)),
        leg,
        leg.translated((0.4, 0.0, 0.0)),
    ])


def creature_body(has_tail: bool = False, limb_count: int = 4) -> Mesh:
    leg = cylinder(0.08, 0.06, 0.5, _LIMB_SEGMENTS).translated((-0.25, 0.0, 0.4))
    parts = [
        box(0.6, 0.5, 1.2, 1).translated((0.0, 0.3, 0.0)),
        sphere(0.4, _BODY_SEGMENTS, _BODY_SEGMENTS).scaled((1.0, 0.8, 1.2)).translated((0.0, 0.5, 0.8)),
        leg,
        leg.translated((0.5, 0.0, 0.0)),
        leg.translated((0.0, 0.0, -0.6)),
        leg.translated((0.5, 0.0, -0.6)),
    ]
    if limb_count >= 6:
        parts += [leg.translated((0.0, 0.0, -0.3)), leg.translated((0.5, 0.0, -0.3))]
    if has_tail:
        tail = cylinder(0.12, 0.04, 0.8, _LIMB_SEGMENTS).transformed(_rot("x", np.pi / 3))
        parts.append(tail.translated((0.0, 0.2, -0.8)))
    return merge_meshes(parts)


def object_body() -> Mesh:
    return box(1.0, 2.0, 0.5, 1)


def build_character_mesh(character_type: CharacterType, features: CharacterFeatures,
                         scale: Vec3 = (1.0, 1.0, 1.0)) -> Mesh:
    if character_type is CharacterType.HUMANOID:
        body = humanoid_body()
    elif character_type is CharacterType.CREATURE:
        body = creature_body(features.has_tail, features.limb_count)
    else:
        body = object_body()
    mesh = body.scaled(scale).compute_normals()
    mesh.validate()
    log.debug("[M2] %s body: %d vertices", character_type.value, mesh.vertex_count)
    return mesh
