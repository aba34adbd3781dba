"""
#WHERE
    Imported by every pipeline module (M1–M7) and by tests.

#WHAT
    Shared lexicon tables, enums and constants.

#INPUT
    None (constant registries).

#OUTPUT
    Enums and keyword tables from vocabulary.py; lookup helpers.
"""

from .vocabulary import (
    # Enums
    AnimationType,
    BaseShape,
    CharacterAnimationPreset,
    CharacterType,
    DistortionType,
    TextureHint,
    ThemeCategory,

    # Tables
    SHAPE_KEYWORDS,
    HORROR_KEYWORDS,
    COLOR_KEYWORDS,
    MODIFIER_KEYWORDS,
    ANIMATION_KEYWORDS,
    ATMOSPHERE_PRESETS,
    CHARACTER_TYPE_KEYWORDS,
    CHARACTER_FEATURE_KEYWORDS,
    CHARACTER_SCALE_WORDS,

    # Helpers
    get_shape_by_keyword,
    get_horror_intensity,
    get_character_type_by_keyword,
)

__all__ = [
    "AnimationType",
    "BaseShape",
    "CharacterAnimationPreset",
    "CharacterType",
    "DistortionType",
    "TextureHint",
    "ThemeCategory",
    "SHAPE_KEYWORDS",
    "HORROR_KEYWORDS",
    "COLOR_KEYWORDS",
    "MODIFIER_KEYWORDS",
    "ANIMATION_KEYWORDS",
    "ATMOSPHERE_PRESETS",
    "CHARACTER_TYPE_KEYWORDS",
    "CHARACTER_FEATURE_KEYWORDS",
    "CHARACTER_SCALE_WORDS",
    "get_shape_by_keyword",
    "get_horror_intensity",
    "get_character_type_by_keyword",
]
