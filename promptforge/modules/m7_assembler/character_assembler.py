"""
#WHERE
    Called by pipeline.py (character path) and main.py --character.

#WHAT
    Character pipeline:
        1. CharacterPromptParser      → CharacterIntent
        2. SkeletonGenerator          → SkeletonConfig (height = scale.y * 2)
        3. AnimationSynthesizer       → one clip per suggested preset
        4. MeshExtractionConfig       → vertex / texture budget for the tier
        5. MaterialComposer           → CharacterMaterial
        6. collision boxes, mass, friction, restitution
        7. placeholder body mesh + skin weights (optional)
    Any build error becomes GenerationResult(success=False).

#INPUT
    Prompt string, mesh quality tier.

#OUTPUT
    GenerationResult carrying a CharacterConfig.
"""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import replace
from typing import List, Optional, Sequence

from promptforge.modules.m1_prompt_parser import CharacterPromptParser
from promptforge.modules.m1_prompt_parser.models import CharacterIntent, Vec3
from promptforge.modules.m2_geometry_builder import build_character_mesh
from promptforge.modules.m3_material_composer import MaterialComposer
from promptforge.modules.m4_skeleton_generator import SkeletonConfig, SkeletonGenerator
from promptforge.modules.m5_skinning import skin_mesh
from promptforge.modules.m6_animation_synthesizer import AnimationSynthesizer
from promptforge.shared.constants import (
    CHARACTER_BASE_MASS,
    DEFAULT_FRICTION,
    DEFAULT_INTERACTION_RADIUS,
    DEFAULT_MESH_QUALITY,
    DEFAULT_RESTITUTION,
    FALLBACK_BASE_MASS,
    SPECIAL_FEATURE_WARNING_THRESHOLD,
)
from promptforge.shared.vocabulary import CharacterAnimationPreset, CharacterType
from .models import CharacterConfig, CollisionBox, CollisionBoxType, GenerationResult, MeshExtractionConfig

log = logging.getLogger(__name__)

MANY_FEATURES_WARNING = "Character has many special features - this may affect performance"


def character_mass(character_type: CharacterType, scale: Vec3) -> float:
    sx, sy, sz = scale
    return CHARACTER_BASE_MASS.get(character_type.value, FALLBACK_BASE_MASS) * sx * sy * sz


def collision_boxes(skeleton: SkeletonConfig) -> List[CollisionBox]:
    boxes = [CollisionBox("body", (0.0, 0.0, 0.0), (0.8, 1.2, 0.6), CollisionBoxType.HITBOX, bone="spine")]
    if skeleton.has_bone("head"):
        boxes.append(CollisionBox("head", (0.0, 0.15, 0.0), (0.4, 0.4, 0.4), CollisionBoxType.HITBOX, bone="head"))
    boxes.append(CollisionBox("interaction_trigger", (0.0, 0.0, 0.0), (2.0, 2.0, 2.0),
                              CollisionBoxType.TRIGGER, bone="root"))
    return boxes


def new_character_id() -> str:
    return f"char_{uuid.uuid4().hex}"


class CharacterAssembler:

    def __init__(self, parser: Optional[CharacterPromptParser] = None,
                 skeletons: Optional[SkeletonGenerator] = None,
                 animator: Optional[AnimationSynthesizer] = None,
                 composer: Optional[MaterialComposer] = None,
                 interaction_radius: float = DEFAULT_INTERACTION_RADIUS,
                 enable_physics: bool = True,
                 build_mesh: bool = True):
        self.parser = parser or CharacterPromptParser()
        self.skeletons = skeletons or SkeletonGenerator()
        self.animator = animator or AnimationSynthesizer()
        self.composer = composer or MaterialComposer()
        self.interaction_radius = interaction_radius
        self.enable_physics = enable_physics
        self.build_mesh = build_mesh

    def assemble(self, prompt: str, mesh_quality: str = DEFAULT_MESH_QUALITY,
                 intensity: Optional[float] = None, scale: Optional[Sequence[float]] = None) -> GenerationResult:
        start = time.perf_counter()
        intent = self.parser.parse(prompt or "")
        try:
            if scale is not None:
                intent = replace(intent, scale=tuple(float(s) for s in scale))
            config = self._build(intent, mesh_quality, intensity)
        except Exception as exc:
            log.error("[M7] character generation failed: %s", exc)
            return GenerationResult(
                success=False,
                error=f"Generation failed: {exc}",
                processing_time=(time.perf_counter() - start) * 1000.0,
                parsed=intent,
            )

        warnings = []
        if len(intent.features.special_features) > SPECIAL_FEATURE_WARNING_THRESHOLD:
            warnings.append(MANY_FEATURES_WARNING)
            log.warning("[M7] %s: %s", config.name, MANY_FEATURES_WARNING)

        elapsed = (time.perf_counter() - start) * 1000.0
        log.info("[M7] character %s (%s) ready in %.1f ms: %d bones, %d clips",
                 config.name, config.character_type.value, elapsed, len(config.skeleton), len(config.animations))
        return GenerationResult(success=True, config=config, warnings=warnings,
                                processing_time=elapsed, parsed=intent,
                                mesh=config.skinned_mesh.mesh if config.skinned_mesh else None)

    def _build(self, intent: CharacterIntent, mesh_quality: str, intensity: Optional[float]) -> CharacterConfig:
        extraction = MeshExtractionConfig.for_quality(mesh_quality)
        skeleton = self.skeletons.generate(intent.character_type, intent.features, height=intent.scale[1] * 2)
        presets = intent.suggested_animations or [CharacterAnimationPreset.IDLE]
        animations = self.animator.synthesize_library(skeleton, presets, intensity)
        materials = self.composer.compose_character(intent)

        skinned = None
        if self.build_mesh:
            body = build_character_mesh(intent.character_type, intent.features, intent.scale)
            skinned = skin_mesh(body, skeleton)

        physical = self.enable_physics
        return CharacterConfig(
            id=new_character_id(),
            name=intent.name,
            description=intent.description,
            character_type=intent.character_type,
            mesh_extraction=extraction,
            materials=materials,
            skeleton=skeleton,
            animations=animations,
            collision_boxes=collision_boxes(skeleton) if physical else [],
            mass=character_mass(intent.character_type, intent.scale) if physical else 0.0,
            friction=DEFAULT_FRICTION,
            restitution=DEFAULT_RESTITUTION,
            interaction_radius=self.interaction_radius,
            scale=intent.scale,
            tags=list(intent.tags),
            skinned_mesh=skinned,
        )
