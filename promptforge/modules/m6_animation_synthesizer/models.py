from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from promptforge.modules.m1_prompt_parser.models import Vec3
from promptforge.shared.vocabulary import CharacterAnimationPreset


class BlendMode(str, Enum):
    OVERRIDE = "override"
    ADDITIVE = "additive"


@dataclass(slots=True)
class Keyframe:
    """Pose delta for one bone at ``time`` seconds into the clip."""
    time: float
    bone: str
    position: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    scale: Optional[Vec3] = None


@dataclass(slots=True)
class AnimationClip:
    name: str
    duration: float
    loop: bool
    keyframes: List[Keyframe] = field(default_factory=list)
    preset: Optional[CharacterAnimationPreset] = None
    blend_mode: BlendMode = BlendMode.OVERRIDE
    weight: float = 1.0

    @property
    def bones(self) -> List[str]:
        seen: List[str] = []
        for kf in self.keyframes:
            if kf.bone not in seen:
                seen.append(kf.bone)
        return seen

    def track(self, bone: str) -> List[Keyframe]:
        return [kf for kf in self.keyframes if kf.bone == bone]
