"""
#WHERE
    Imported by pipeline.py, main.py and test_assembler.py.

#WHAT
    Assembler Module (Module 7): runs M1→M6 for one request, measures
    wall-clock time, collects warnings and converts build failures into a
    failed GenerationResult.  Also hosts structural validation and the
    renderer snippet generator.

#INPUT
    Prompt string, mesh quality tier.

#OUTPUT
    GenerationResult (SceneConfig or CharacterConfig inside).
"""

from .models import (
    CharacterConfig,
    CollisionBox,
    CollisionBoxType,
    CollisionEvent,
    CollisionTag,
    GenerationResult,
    MeshExtractionConfig,
    collision_event,
)
from .scene_assembler import SceneAssembler
from .character_assembler import CharacterAssembler, character_mass, collision_boxes
from .snippet import generate_component_code
from .validation import validate, validate_character_config, validate_scene_config

__all__ = [
    "SceneAssembler", "CharacterAssembler", "GenerationResult", "CharacterConfig",
    "CollisionBox", "CollisionBoxType", "CollisionEvent", "CollisionTag", "collision_event",
    "MeshExtractionConfig", "character_mass", "collision_boxes", "generate_component_code",
    "validate", "validate_character_config", "validate_scene_config",
]
