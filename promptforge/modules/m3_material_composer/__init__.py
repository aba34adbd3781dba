"""
#WHERE
    Imported by the M7 assemblers, pipeline.py and test_material_composer.py.

#WHAT
    Material Composer Module (Module 3): resolves MaterialConfig into
    renderer-ready parameters, named preset libraries (horror, editorial)
    and clock-driven animated material variants.

#INPUT
    MaterialConfig, preset name, animated kind + external time value.

#OUTPUT
    RenderableMaterial, AnimatedMaterial, CharacterMaterial.
"""

from .models import (
    AnimatedMaterialKind,
    CharacterMaterial,
    MaterialError,
    RenderableMaterial,
    parse_color,
    to_hex,
)
from .composer import AnimatedMaterial, MaterialComposer
from .presets import EDITORIAL_MATERIAL_PRESETS, HORROR_MATERIAL_PRESETS, get_material_preset, preset_names

__all__ = [
    "MaterialComposer", "AnimatedMaterial", "AnimatedMaterialKind", "RenderableMaterial",
    "CharacterMaterial", "MaterialError", "parse_color", "to_hex",
    "HORROR_MATERIAL_PRESETS", "EDITORIAL_MATERIAL_PRESETS", "get_material_preset", "preset_names",
]
