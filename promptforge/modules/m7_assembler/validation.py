"""Structural post-checks.  Each validator returns human-readable violations
and never raises; an empty list means the config is acceptable."""
from __future__ import annotations

import math
from typing import List

from promptforge.modules.m1_prompt_parser.models import SceneConfig
from promptforge.shared.constants import SCORE_MAX, SCORE_MIN
from .models import CharacterConfig


def validate_scene_config(config: SceneConfig) -> List[str]:
    errors: List[str] = []
    if not config.base_shape:
        errors.append("Missing base shape")
    scale = config.scale
    if scale is None or len(scale) != 3 or not all(isinstance(s, (int, float)) and math.isfinite(s) for s in scale):
        errors.append("Invalid scale")
    if config.materials is None:
        errors.append("Missing materials configuration")
    if config.complexity > SCORE_MAX:
        errors.append(f"Complexity too high (max: {SCORE_MAX})")
    if not SCORE_MIN <= config.horror_level <= SCORE_MAX:
        errors.append(f"Horror level outside [{SCORE_MIN}, {SCORE_MAX}]")
    return errors


def validate_character_config(config: CharacterConfig) -> List[str]:
    errors: List[str] = []
    if not config.id:
        errors.append("Missing character ID")
    if not config.name:
        errors.append("Missing character name")
    if config.skeleton is None or len(config.skeleton) == 0:
        errors.append("Invalid skeleton configuration")
    else:
        errors.extend(f"Skeleton: {problem}" for problem in config.skeleton.validate())
    if not config.animations:
        errors.append("No animations configured")
    for clip in config.animations or ():
        if clip.duration <= 0:
            errors.append(f"Animation {clip.name} has non-positive duration")
        elif any(not 0.0 <= kf.time <= clip.duration for kf in clip.keyframes):
            errors.append(f"Animation {clip.name} has keyframes outside [0, {clip.duration}]")
    return errors


def validate(config) -> List[str]:
    if isinstance(config, CharacterConfig):
        return validate_character_config(config)
    if isinstance(config, SceneConfig):
        return validate_scene_config(config)
    return [f"Unsupported config type: {type(config).__name__}"]
