"""
#WHERE
    Imported by the character assembler, M5 skinning, M6 animation and
    test_skeleton_generator.py.

#WHAT
    Skeleton Generator Module (Module 4): humanoid, creature (4/6 legs,
    optional tail and wings) and root-only rigs with integrity checks.

#INPUT
    CharacterType, CharacterFeatures, height.

#OUTPUT
    SkeletonConfig (ordered BoneConfig list).
"""

from .models import BoneConfig, BoneType, SkeletonConfig
from .generator import SkeletonGenerator, mirror_bone

__all__ = ["SkeletonGenerator", "SkeletonConfig", "BoneConfig", "BoneType", "mirror_bone"]
