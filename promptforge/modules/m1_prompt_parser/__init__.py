"""
#WHERE
    Imported by pipeline.py, the M7 assemblers, main.py and test_prompt_parser.py.

#WHAT
    Prompt Parser Module (Module 1): rule-table driven lexical analysis of a
    free-text prompt into a SceneConfig (static object) or a CharacterIntent
    (rigged character), plus the creation-template library.

#INPUT
    Prompt string.

#OUTPUT
    SceneConfig / CharacterIntent dataclasses.  Parsing never raises.
"""

from .models import (
    AnimationSpec,
    AtmosphereConfig,
    CharacterFeatures,
    CharacterIntent,
    DistortionSpec,
    FogConfig,
    GeometryModifiers,
    LightConfig,
    MaterialConfig,
    MaterialHints,
    ParticleConfig,
    PostProcessingConfig,
    SceneConfig,
)
from .scene_parser import ScenePromptParser, enhance_prompt, extract_text_content, parse_scene_prompt
from .character_parser import CharacterPromptParser, extract_character_name, parse_character_prompt
from .templates import ALL_TEMPLATES, CreationTemplate, find_best_template, get_template_by_id, merge_configs

__all__ = [
    "ScenePromptParser", "CharacterPromptParser",
    "parse_scene_prompt", "parse_character_prompt",
    "enhance_prompt", "extract_text_content", "extract_character_name",
    "SceneConfig", "MaterialConfig", "GeometryModifiers", "DistortionSpec",
    "AtmosphereConfig", "FogConfig", "LightConfig", "ParticleConfig", "PostProcessingConfig",
    "AnimationSpec", "CharacterIntent", "CharacterFeatures", "MaterialHints",
    "CreationTemplate", "ALL_TEMPLATES", "find_best_template", "get_template_by_id", "merge_configs",
]
