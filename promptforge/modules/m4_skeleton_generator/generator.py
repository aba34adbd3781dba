"""
#WHERE
    Called by m7_assembler/character_assembler.py; skeletons feed M5
    skinning and M6 animation.

#WHAT
    Type-specific bone topologies.  Each rig is a table of centre-line and
    left-side bones in unit space (2-unit tall character); right-side bones
    are mirrored from the left (x negated, weight copied) and every
    position and length is multiplied by height / 2.

#INPUT
    CharacterType, CharacterFeatures, height.

#OUTPUT
    SkeletonConfig with a single root and resolvable parents.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from promptforge.modules.m1_prompt_parser.models import CharacterFeatures
from promptforge.shared.vocabulary import CharacterType
from .models import BoneConfig, BoneType, SkeletonConfig

log = logging.getLogger(__name__)

# (name, type, unit position, parent, unit length, weight)
BoneRow = Tuple[str, BoneType, Tuple[float, float, float], Optional[str], float, float]

HUMANOID_BONES: Sequence[BoneRow] = (
    ("root",        BoneType.ROOT,      (0.0, 0.0, 0.0),     None,          0.1,  1.0),
    ("spine",       BoneType.SPINE,     (0.0, 0.3, 0.0),     "root",        0.3,  1.0),
    ("chest",       BoneType.CHEST,     (0.0, 0.6, 0.0),     "spine",       0.3,  1.0),
    ("neck",        BoneType.NECK,      (0.0, 0.9, 0.0),     "chest",       0.15, 1.0),
    ("head",        BoneType.HEAD,      (0.0, 1.05, 0.0),    "neck",        0.25, 1.0),
    ("shoulder_l",  BoneType.SHOULDER,  (-0.2, 0.85, 0.0),   "chest",       0.1,  1.0),
    ("arm_upper_l", BoneType.ARM_UPPER, (-0.4, 0.85, 0.0),   "shoulder_l",  0.3,  1.0),
    ("arm_lower_l", BoneType.ARM_LOWER, (-0.7, 0.85, 0.0),   "arm_upper_l", 0.25, 1.0),
    ("hand_l",      BoneType.HAND,      (-0.95, 0.85, 0.0),  "arm_lower_l", 0.15, 1.0),
    ("hip_l",       BoneType.HIP,       (-0.15, 0.0, 0.0),   "root",        0.1,  1.0),
    ("leg_upper_l", BoneType.LEG_UPPER, (-0.15, -0.4, 0.0),  "hip_l",       0.4,  1.0),
    ("leg_lower_l", BoneType.LEG_LOWER, (-0.15, -0.8, 0.0),  "leg_upper_l", 0.4,  1.0),
    ("foot_l",      BoneType.FOOT,      (-0.15, -1.1, 0.0),  "leg_lower_l", 0.2,  1.0),
)
HUMANOID_WINGS: Sequence[BoneRow] = (
    ("wing_l",      BoneType.WING,      (-0.3, 0.7, -0.2),   "chest",       0.8,  0.8),
)

CREATURE_BONES: Sequence[BoneRow] = (
    ("root",              BoneType.ROOT,      (0.0, 0.0, 0.0),    None,                0.1,  1.0),
    ("spine",             BoneType.SPINE,     (0.0, 0.3, 0.0),    "root",              0.4,  1.0),
    ("chest",             BoneType.CHEST,     (0.0, 0.3, 0.4),    "spine",             0.3,  1.0),
    ("neck",              BoneType.NECK,      (0.0, 0.4, 0.7),    "chest",             0.2,  1.0),
    ("head",              BoneType.HEAD,      (0.0, 0.5, 0.9),    "neck",              0.3,  1.0),
    ("jaw",               BoneType.JAW,       (0.0, 0.4, 1.0),    "head",              0.15, 0.5),
    ("leg_front_upper_l", BoneType.LEG_UPPER, (-0.2, 0.3, 0.5),   "chest",             0.3,  1.0),
    ("leg_front_lower_l", BoneType.LEG_LOWER, (-0.2, 0.0, 0.5),   "leg_front_upper_l", 0.3,  1.0),
    ("foot_front_l",      BoneType.FOOT,      (-0.2, -0.2, 0.5),  "leg_front_lower_l", 0.15, 1.0),
    ("leg_back_upper_l",  BoneType.LEG_UPPER, (-0.2, 0.3, -0.2),  "root",              0.35, 1.0),
    ("leg_back_lower_l",  BoneType.LEG_LOWER, (-0.2, 0.0, -0.2),  "leg_back_upper_l",  0.3,  1.0),
    ("foot_back_l",       BoneType.FOOT,      (-0.2, -0.2, -0.2), "leg_back_lower_l",  0.15, 1.0),
)
CREATURE_MIDDLE_LEGS: Sequence[BoneRow] = (
    ("leg_mid_upper_l",   BoneType.LEG_UPPER, (-0.2, 0.3, 0.15),  "spine",             0.3,  1.0),
    ("leg_mid_lower_l",   BoneType.LEG_LOWER, (-0.2, 0.0, 0.15),  "leg_mid_upper_l",   0.3,  1.0),
    ("foot_mid_l",        BoneType.FOOT,      (-0.2, -0.2, 0.15), "leg_mid_lower_l",   0.15, 1.0),
)
CREATURE_TAIL: Sequence[BoneRow] = (
    ("tail_base",         BoneType.TAIL,      (0.0, 0.2, -0.3),   "root",              0.3,  0.7),
    ("tail_mid",          BoneType.TAIL,      (0.0, 0.15, -0.6),  "tail_base",         0.3,  0.5),
    ("tail_tip",          BoneType.TAIL,      (0.0, 0.1, -0.9),   "tail_mid",          0.25, 0.3),
)
CREATURE_WINGS: Sequence[BoneRow] = (
    ("wing_l",            BoneType.WING,      (-0.3, 0.5, 0.2),   "chest",             0.8,  0.8),
)

# Root-only rig: unit length 1.0 so the bone spans half the object height.
ROOT_ONLY: Sequence[BoneRow] = (
    ("root", BoneType.ROOT, (0.0, 0.0, 0.0), None, 1.0, 1.0),
)

DEFAULT_HEIGHT = 2.0
_SIX_LIMBS = 6


def _mirror_name(name: Optional[str]) -> Optional[str]:
    if name is not None and name.endswith("_l"):
        return name[:-2] + "_r"
    return name


def mirror_bone(bone: BoneConfig) -> BoneConfig:
    x, y, z = bone.position
    return BoneConfig(
        name=_mirror_name(bone.name),
        type=bone.type,
        position=(-x, y, z),
        length=bone.length,
        weight=bone.weight,
        parent=_mirror_name(bone.parent),
        rotation=bone.rotation,
    )


class SkeletonGenerator:

    def generate(self, character_type: CharacterType, features: Optional[CharacterFeatures] = None,
                 height: float = DEFAULT_HEIGHT) -> SkeletonConfig:
        features = features or CharacterFeatures()
        if height <= 0:
            raise ValueError(f"Skeleton height must be positive, got {height!r}")

        rows: List[BoneRow] = []
        if character_type is CharacterType.HUMANOID:
            rows += HUMANOID_BONES
            if features.has_wings:
                rows += HUMANOID_WINGS
        elif character_type is CharacterType.CREATURE:
            rows += CREATURE_BONES
            if features.limb_count >= _SIX_LIMBS:
                rows += CREATURE_MIDDLE_LEGS
            if features.has_tail:
                rows += CREATURE_TAIL
            if features.has_wings:
                rows += CREATURE_WINGS
        else:
            rows += ROOT_ONLY

        symmetrical = character_type in (CharacterType.HUMANOID, CharacterType.CREATURE)
        skeleton = SkeletonConfig(
            bones=self._expand(rows, height / 2),
            character_type=character_type,
            auto_rig=True,
            symmetrical=symmetrical,
        )

        problems = skeleton.validate()
        if problems:
            raise ValueError(f"Generated skeleton is malformed: {problems}")
        log.info("[M4] %s skeleton: %d bones", character_type.value, len(skeleton))
        return skeleton

    @staticmethod
    def _expand(rows: Sequence[BoneRow], scale: float) -> List[BoneConfig]:
        """Scale unit rows and append the mirrored right side of every left bone."""
        left_side: List[BoneConfig] = []
        bones: List[BoneConfig] = []
        for name, btype, (x, y, z), parent, length, weight in rows:
            bone = BoneConfig(name, btype, (x * scale, y * scale, z * scale), length * scale, weight, parent,
                              rotation=(0.0, 0.0, 0.0) if parent is None else None)
            bones.append(bone)
            if bone.side == "l":
                left_side.append(bone)
        bones.extend(mirror_bone(b) for b in left_side)
        return bones

