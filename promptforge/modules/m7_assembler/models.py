"""
#WHERE
    Returned by scene_assembler.py / character_assembler.py, consumed by
    pipeline.py, main.py and the tests.

#WHAT
    Final descriptors: GenerationResult (success flag, config, error,
    warnings, timing), CharacterConfig with its mesh-extraction tier and
    collision boxes, and the typed collision event handed to physics
    consumers.

#INPUT
    Products of M1–M6.

#OUTPUT
    Dataclasses only; no behaviour beyond small constructors.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from promptforge.modules.m1_prompt_parser.models import CharacterIntent, SceneConfig, Vec3
from promptforge.modules.m2_geometry_builder.mesh import Mesh
from promptforge.modules.m3_material_composer.models import CharacterMaterial, RenderableMaterial
from promptforge.modules.m4_skeleton_generator.models import SkeletonConfig
from promptforge.modules.m5_skinning.weights import SkinnedMesh
from promptforge.modules.m6_animation_synthesizer.models import AnimationClip
from promptforge.shared.constants import MESH_QUALITY_TIERS
from promptforge.shared.vocabulary import CharacterAnimationPreset, CharacterType


class CollisionBoxType(str, Enum):
    HITBOX  = "hitbox"
    HURTBOX = "hurtbox"
    TRIGGER = "trigger"


class CollisionTag(str, Enum):
    PLAYER      = "player"
    CHARACTER   = "character"
    OBJECT      = "object"
    PROJECTILE  = "projectile"
    ENVIRONMENT = "environment"


@dataclass(slots=True, frozen=True)
class CollisionBox:
    name: str
    position: Vec3
    size: Vec3
    type: CollisionBoxType = CollisionBoxType.HITBOX
    bone: Optional[str] = None
    rotation: Optional[Vec3] = None
    enabled: bool = True


@dataclass(slots=True, frozen=True)
class CollisionEvent:
    box: str
    other_id: str
    other_tag: CollisionTag


def collision_event(box: CollisionBox, other_id: str, other_tag) -> Optional[CollisionEvent]:
    """Event for a contact on ``box``; None when the box is disabled."""
    if not box.enabled:
        return None
    return CollisionEvent(box=box.name, other_id=other_id, other_tag=CollisionTag(other_tag))


@dataclass(slots=True, frozen=True)
class MeshExtractionConfig:
    mesh_quality: str
    vertex_count: int
    texture_size: int
    smoothness: float = 0.7
    preserve_details: bool = True
    generate_uvs: bool = True
    bake_textures: bool = True

    @classmethod
    def for_quality(cls, quality: str) -> "MeshExtractionConfig":
        tier = MESH_QUALITY_TIERS.get(quality)
        if tier is None:
            raise ValueError(f"Unknown mesh quality {quality!r}; expected one of {sorted(MESH_QUALITY_TIERS)}")
        return cls(mesh_quality=quality, **tier)


@dataclass(slots=True, frozen=True)
class CharacterConfig:
    id: str
    name: str
    description: str
    character_type: CharacterType
    mesh_extraction: MeshExtractionConfig
    materials: CharacterMaterial
    skeleton: SkeletonConfig
    animations: List[AnimationClip]
    collision_boxes: List[CollisionBox]
    mass: float
    friction: float
    restitution: float
    interaction_radius: float
    default_animation: CharacterAnimationPreset = CharacterAnimationPreset.IDLE
    interactive: bool = True
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)
    tags: List[str] = field(default_factory=list)
    skinned_mesh: Optional[SkinnedMesh] = None
    created_at: float = field(default_factory=time.time)


@dataclass(slots=True)
class GenerationResult:
    success: bool
    config: Optional[Any] = None          # SceneConfig | CharacterConfig
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0          # milliseconds
    mesh: Optional[Mesh] = None
    material: Optional[RenderableMaterial] = None
    parsed: Optional[CharacterIntent] = None
    template_id: Optional[str] = None
    component_code: Optional[str] = None

    @property
    def scene(self) -> Optional[SceneConfig]:
        return self.config if isinstance(self.config, SceneConfig) else None

    @property
    def character(self) -> Optional[CharacterConfig]:
        return self.config if isinstance(self.config, CharacterConfig) else None
