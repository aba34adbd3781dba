from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from promptforge.modules.m1_prompt_parser.models import Vec3
from promptforge.shared.vocabulary import CharacterType


class BoneType(str, Enum):
    ROOT      = "root"
    SPINE     = "spine"
    CHEST     = "chest"
    NECK      = "neck"
    HEAD      = "head"
    JAW       = "jaw"
    SHOULDER  = "shoulder"
    ARM_UPPER = "arm_upper"
    ARM_LOWER = "arm_lower"
    HAND      = "hand"
    HIP       = "hip"
    LEG_UPPER = "leg_upper"
    LEG_LOWER = "leg_lower"
    FOOT      = "foot"
    TAIL      = "tail"
    WING      = "wing"


@dataclass(slots=True)
class BoneConfig:
    name: str
    type: BoneType
    position: Vec3
    length: float
    weight: float = 1.0
    parent: Optional[str] = None
    rotation: Optional[Vec3] = None

    @property
    def side(self) -> Optional[str]:
        """'l' or 'r' for bilateral bones, None on the centre line."""
        if self.name.endswith("_l"):
            return "l"
        if self.name.endswith("_r"):
            return "r"
        return None


@dataclass(slots=True)
class SkeletonConfig:
    bones: List[BoneConfig] = field(default_factory=list)
    character_type: CharacterType = CharacterType.CREATURE
    auto_rig: bool = True
    symmetrical: bool = False

    def __len__(self) -> int:
        return len(self.bones)

    @property
    def names(self) -> List[str]:
        return [b.name for b in self.bones]

    def bone(self, name: str) -> Optional[BoneConfig]:
        return next((b for b in self.bones if b.name == name), None)

    def has_bone(self, name: str) -> bool:
        return self.bone(name) is not None

    def children(self, name: str) -> List[BoneConfig]:
        return [b for b in self.bones if b.parent == name]

    @property
    def root(self) -> Optional[BoneConfig]:
        roots = [b for b in self.bones if b.parent is None]
        return roots[0] if len(roots) == 1 else None

    def validate(self) -> List[str]:
        """Structural violations; empty when the hierarchy is a single rooted tree."""
        problems: List[str] = []
        if not self.bones:
            return ["skeleton has no bones"]

        by_name: Dict[str, BoneConfig] = {}
        for b in self.bones:
            if b.name in by_name:
                problems.append(f"duplicate bone name: {b.name}")
            by_name[b.name] = b
            if not 0.0 <= b.weight <= 1.0:
                problems.append(f"bone {b.name} weight {b.weight} outside [0, 1]")

        roots = [b.name for b in self.bones if b.parent is None]
        if len(roots) != 1:
            problems.append(f"expected exactly one root bone, found {len(roots)}: {roots}")

        for b in self.bones:
            if b.parent is not None and b.parent not in by_name:
                problems.append(f"bone {b.name} has unknown parent {b.parent}")

        for b in self.bones:
            seen, current = set(), b
            while current is not None and current.parent is not None:
                if current.name in seen:
                    problems.append(f"cycle through bone {b.name}")
                    break
                seen.add(current.name)
                current = by_name.get(current.parent)
        return problems
