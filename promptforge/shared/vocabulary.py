"""
#WHERE
    Imported by shared/__init__.py → re-exported to the scene parser,
    character parser, geometry builder, skeleton generator and assemblers.

#WHAT
    Single source of truth for every keyword → concept table used by the
    prompt parsers: shapes, horror intensity, colors, geometry modifiers,
    animation types, atmosphere presets, character types/features/textures
    and scale words.  Tables are read-only process-wide constants; their
    declaration order is the tie-break order used by the parsers.

#INPUT
    None (constant definitions).

#OUTPUT
    Enums (BaseShape, ThemeCategory, DistortionType, AnimationType,
    CharacterType, CharacterAnimationPreset, TextureHint), keyword tables,
    ordered rule tables and lookup helpers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BaseShape(str, Enum):
    BOX       = "box"
    SPHERE    = "sphere"
    CYLINDER  = "cylinder"
    TORUS     = "torus"
    CONE      = "cone"
    TEXT      = "text"
    EXTRUSION = "extrusion"
    TWISTED   = "twisted"
    FRACTAL   = "fractal"
    ORGANIC   = "organic"


class ThemeCategory(str, Enum):
    HORROR    = "horror"
    EDITORIAL = "editorial"
    CINEMATIC = "cinematic"
    ABSTRACT  = "abstract"
    HYBRID    = "hybrid"


class DistortionType(str, Enum):
    NOISE   = "noise"
    TWIST   = "twist"
    DECAY   = "decay"
    EROSION = "erosion"
    STRETCH = "stretch"
    MELT    = "melt"
    SHATTER = "shatter"
    PULSE   = "pulse"
    GLITCH  = "glitch"


class AnimationType(str, Enum):
    ROTATE      = "rotate"
    FLOAT       = "float"
    PULSE       = "pulse"
    GLITCH      = "glitch"
    PHASE_SHIFT = "phase-shift"
    BREATHE     = "breathe"
    DRIFT       = "drift"
    FLICKER     = "flicker"


class CharacterType(str, Enum):
    HUMANOID = "humanoid"
    CREATURE = "creature"
    OBJECT   = "object"
    CUSTOM   = "custom"


class CharacterAnimationPreset(str, Enum):
    IDLE     = "idle"
    WALK     = "walk"
    RUN      = "run"
    JUMP     = "jump"
    WAVE     = "wave"
    DANCE    = "dance"
    ATTACK   = "attack"
    INTERACT = "interact"
    EMOTE    = "emote"
    CUSTOM   = "custom"


class TextureHint(str, Enum):
    SMOOTH   = "smooth"
    ROUGH    = "rough"
    SCALY    = "scaly"
    FURRY    = "furry"
    METALLIC = "metallic"


# ── Scene lexicon ────────────────────────────────────────────────────────

# Declaration order matters: the parser walks this table top to bottom and
# the first keyword present in the prompt wins.
SHAPE_KEYWORDS: dict[str, BaseShape] = {
    "box":          BaseShape.BOX,
    "cube":         BaseShape.BOX,
    "square":       BaseShape.BOX,
    "sphere":       BaseShape.SPHERE,
    "ball":         BaseShape.SPHERE,
    "orb":          BaseShape.SPHERE,
    "globe":        BaseShape.SPHERE,
    "cylinder":     BaseShape.CYLINDER,
    "tube":         BaseShape.CYLINDER,
    "pillar":       BaseShape.CYLINDER,
    "column":       BaseShape.CYLINDER,
    "torus":        BaseShape.TORUS,
    "ring":         BaseShape.TORUS,
    "donut":        BaseShape.TORUS,
    "cone":         BaseShape.CONE,
    "pyramid":      BaseShape.CONE,
    "spike":        BaseShape.CONE,
    "tree":         BaseShape.ORGANIC,
    "forest":       BaseShape.ORGANIC,
    "branch":       BaseShape.ORGANIC,
    "root":         BaseShape.ORGANIC,
    "tentacle":     BaseShape.ORGANIC,
    "vine":         BaseShape.ORGANIC,
    "cathedral":    BaseShape.EXTRUSION,
    "building":     BaseShape.EXTRUSION,
    "architecture": BaseShape.EXTRUSION,
    "structure":    BaseShape.EXTRUSION,
    "letter":       BaseShape.TEXT,
    "text":         BaseShape.TEXT,
    "word":         BaseShape.TEXT,
    "typewriter":   BaseShape.TEXT,
    "typography":   BaseShape.TEXT,
    "twisted":      BaseShape.TWISTED,
    "spiral":       BaseShape.TWISTED,
    "helix":        BaseShape.TWISTED,
    "fractal":      BaseShape.FRACTAL,
    "recursive":    BaseShape.FRACTAL,
}

# Substring fallbacks checked when no whole word matched SHAPE_KEYWORDS.
SHAPE_CONTEXT_RULES: list[tuple[tuple[str, ...], BaseShape]] = [
    (("letter", "word", "text"),           BaseShape.TEXT),
    (("tree", "vine", "tentacle"),         BaseShape.ORGANIC),
    (("building", "cathedral", "tower"),   BaseShape.EXTRUSION),
]

# Curated 1-10 intensity per word.
HORROR_KEYWORDS: dict[str, int] = {
    # subtle
    "eerie": 2, "mysterious": 2, "strange": 2, "uncanny": 3, "odd": 2,
    # atmospheric
    "haunted": 4, "ghostly": 4, "spectral": 4, "shadowy": 4, "foggy": 3,
    "misty": 3, "dark": 4, "gloomy": 4,
    # unsettling
    "disturbing": 6, "unsettling": 6, "creepy": 6, "sinister": 6,
    "ominous": 6, "dread": 7, "nightmare": 7, "cursed": 7,
    # intense
    "terrifying": 8, "horrifying": 8, "macabre": 8, "grotesque": 8,
    "twisted": 8, "warped": 8, "corrupted": 8, "diseased": 8,
    # visceral
    "gore": 10, "visceral": 10, "flesh": 9, "bone": 8, "blood": 9,
    "decay": 8, "rot": 9, "decompose": 9,
}

# Fixed boosts for high-salience substrings, applied after averaging.
HORROR_BOOSTS: list[tuple[tuple[str, ...], int]] = [
    (("nightmare", "terror"), 2),
    (("blood", "gore"),       3),
    (("death", "corpse"),     2),
]

HORROR_THRESHOLD: int = 3   # horror theme when level > threshold

EDITORIAL_PATTERN: str = r"article|newspaper|text|typography|editorial|quote|headline"
CINEMATIC_PATTERN: str = r"cinematic|dramatic|scene|film|movie"

COLOR_KEYWORDS: dict[str, str] = {
    "red": "#ff0000",     "crimson": "#dc143c", "blood": "#8b0000",
    "scarlet": "#ff2400", "blue": "#0000ff",    "azure": "#007fff",
    "navy": "#000080",    "cyan": "#00ffff",    "green": "#00ff00",
    "emerald": "#50c878", "forest": "#228b22",  "lime": "#00ff00",
    "yellow": "#ffff00",  "gold": "#ffd700",    "amber": "#ffbf00",
    "purple": "#800080",  "violet": "#8f00ff",  "magenta": "#ff00ff",
    "pink": "#ffc0cb",    "orange": "#ffa500",  "white": "#ffffff",
    "black": "#000000",   "gray": "#808080",    "grey": "#808080",
    "silver": "#c0c0c0",  "brown": "#a52a2a",   "bronze": "#cd7f32",
}

COMPOUND_COLORS: list[tuple[tuple[str, ...], str]] = [
    (("dark red", "deep red"),    "#8b0000"),
    (("pale blue", "light blue"), "#add8e6"),
]

# word → modifier flag name on GeometryModifiers
MODIFIER_KEYWORDS: dict[str, str] = {
    "twisted": "twisted",    "spiral": "twisted",
    "decayed": "decayed",    "rotting": "decayed",
    "eroded": "decayed",     "weathered": "decayed",
    "fractured": "fractured", "shattered": "fractured",
    "broken": "fractured",
    "organic": "organic",    "natural": "organic",   "living": "organic",
    "hollow": "hollow",      "empty": "hollow",
    "sharp": "sharp",        "jagged": "sharp",
    "smooth": "smooth",      "polished": "smooth",
}

# Flag → distortion type attached automatically; first flag set wins.
AUTO_DISTORTION: list[tuple[str, DistortionType]] = [
    ("twisted",   DistortionType.TWIST),
    ("decayed",   DistortionType.DECAY),
    ("fractured", DistortionType.SHATTER),
]

ANIMATION_KEYWORDS: dict[str, AnimationType] = {
    "rotating":   AnimationType.ROTATE,
    "spinning":   AnimationType.ROTATE,
    "floating":   AnimationType.FLOAT,
    "hovering":   AnimationType.FLOAT,
    "pulsing":    AnimationType.PULSE,
    "beating":    AnimationType.PULSE,
    "glitching":  AnimationType.GLITCH,
    "flickering": AnimationType.FLICKER,
    "breathing":  AnimationType.BREATHE,
    "drifting":   AnimationType.DRIFT,
    "phasing":    AnimationType.PHASE_SHIFT,
}

FLOAT_HINTS: tuple[str, ...] = ("float", "hover", "levitate")


@dataclass(slots=True, frozen=True)
class FogPreset:
    color: str
    near: float
    far: float
    density: float


ATMOSPHERE_PRESETS: dict[str, FogPreset] = {
    "fog":   FogPreset("#888888", 1, 20, 0.05),
    "mist":  FogPreset("#cccccc", 5, 30, 0.03),
    "haze":  FogPreset("#aaaaaa", 3, 25, 0.04),
    "smoke": FogPreset("#333333", 2, 15, 0.07),
}

# Material flag → substring pattern (regex alternation).
MATERIAL_FLAG_PATTERNS: dict[str, str] = {
    "glowing":     r"glow|luminous|emit|radiant|shining",
    "transparent": r"transparent|translucent|ghost|spectral|ethereal|see-through",
    "metal":       r"metal|metallic|chrome|steel|iron",
    "glass":       r"glass|crystal|ice",
    "rough":       r"rough|coarse|textured|rusty",
}

LIGHTING_PATTERN:  str = r"dramatic|cinematic|spotlight"
PARTICLE_PATTERN:  str = r"particle|dust|sparkle|firefly|ember"
BLOOM_PATTERN:     str = r"glow|bloom"

SCENE_SCALE_WORDS: dict[str, float] = {
    "tiny": 0.5, "small": 1.0, "large": 2.0, "huge": 3.0,
    "massive": 3.0, "giant": 5.0, "enormous": 5.0,
}
DEFAULT_SCENE_SCALE: float = 1.5

# Contextual substring → tag, applied after theme/shape/modifier tags.
CONTEXT_TAGS: list[tuple[str, str]] = [
    ("dark",  "dark"),
    ("light", "light"),
    ("glow",  "glowing"),
    ("float", "floating"),
]

PROMPT_ENHANCEMENTS: tuple[str, ...] = (
    " with dramatic lighting",
    " surrounded by ethereal fog",
    " with a haunting glow",
    " floating in darkness",
    " with spectral particles",
)


# ── Character lexicon ────────────────────────────────────────────────────

CHARACTER_TYPE_KEYWORDS: dict[str, CharacterType] = {
    "person": CharacterType.HUMANOID,   "human": CharacterType.HUMANOID,
    "man": CharacterType.HUMANOID,      "woman": CharacterType.HUMANOID,
    "child": CharacterType.HUMANOID,    "humanoid": CharacterType.HUMANOID,
    "robot": CharacterType.HUMANOID,    "android": CharacterType.HUMANOID,
    "toad": CharacterType.CREATURE,     "frog": CharacterType.CREATURE,
    "lizard": CharacterType.CREATURE,   "dragon": CharacterType.CREATURE,
    "creature": CharacterType.CREATURE, "monster": CharacterType.CREATURE,
    "beast": CharacterType.CREATURE,    "animal": CharacterType.CREATURE,
    "bird": CharacterType.CREATURE,     "fish": CharacterType.CREATURE,
    "cat": CharacterType.CREATURE,      "dog": CharacterType.CREATURE,
    "wolf": CharacterType.CREATURE,     "bear": CharacterType.CREATURE,
    "spider": CharacterType.CREATURE,   "insect": CharacterType.CREATURE,
    "alien": CharacterType.CREATURE,
    "object": CharacterType.OBJECT,     "prop": CharacterType.OBJECT,
    "furniture": CharacterType.OBJECT,
}

DEFAULT_CHARACTER_TYPE: CharacterType = CharacterType.CREATURE

# phrase → feature key; "hasTail"/"hasWings"/"extraLimbs" are structural,
# texture-like features are consumed by texture detection instead.
CHARACTER_FEATURE_KEYWORDS: dict[str, str] = {
    "tail": "hasTail",        "with tail": "hasTail",
    "tailed": "hasTail",      "long tail": "hasTail",
    "wings": "hasWings",      "winged": "hasWings",
    "with wings": "hasWings", "flying": "hasWings",
    "tentacles": "tentacles", "horns": "horns",
    "spikes": "spikes",       "claws": "claws",
    "fangs": "fangs",
    "scales": "scaly",        "fur": "furry",       "feathers": "feathery",
    "multiple arms": "extraLimbs", "four arms": "extraLimbs",
    "six legs": "extraLimbs",
}

TEXTURE_FEATURES: frozenset[str] = frozenset({"scaly", "furry", "feathery"})

CHARACTER_ANIMATION_KEYWORDS: dict[str, CharacterAnimationPreset] = {
    "walking":  CharacterAnimationPreset.WALK,
    "running":  CharacterAnimationPreset.RUN,
    "jumping":  CharacterAnimationPreset.JUMP,
    "flying":   CharacterAnimationPreset.IDLE,
    "swimming": CharacterAnimationPreset.WALK,
    "dancing":  CharacterAnimationPreset.DANCE,
    "fighting": CharacterAnimationPreset.ATTACK,
    "waving":   CharacterAnimationPreset.WAVE,
    "sitting":  CharacterAnimationPreset.IDLE,
    "standing": CharacterAnimationPreset.IDLE,
}

DEFAULT_CHARACTER_ANIMATIONS: tuple[CharacterAnimationPreset, ...] = (
    CharacterAnimationPreset.IDLE,
    CharacterAnimationPreset.WALK,
)

CHARACTER_COLOR_WORDS: tuple[str, ...] = (
    "red", "blue", "green", "yellow", "orange", "purple", "pink",
    "black", "white", "gray", "brown", "gold", "silver", "bronze",
    "crimson", "azure", "emerald", "violet", "cyan", "magenta",
)

# Checked in order; first rule with any substring hit decides the texture.
TEXTURE_RULES: list[tuple[tuple[str, ...], TextureHint]] = [
    (("scaly", "scales", "reptile"),     TextureHint.SCALY),
    (("furry", "fur", "hairy"),          TextureHint.FURRY),
    (("rough", "rocky"),                 TextureHint.ROUGH),
    (("metallic", "metal", "shiny"),     TextureHint.METALLIC),
]

CHARACTER_SCALE_WORDS: dict[str, float] = {
    "tiny": 0.3, "small": 0.6, "medium": 1.0,
    "large": 1.5, "huge": 2.5, "giant": 4.0,
}

# Words that end an extracted display name ("a toad with a tail" → "Toad").
NAME_STOPWORDS: frozenset[str] = frozenset({
    "with", "and", "that", "who", "which", "of", "in", "on", "from", "having",
})


def get_shape_by_keyword(keyword: str) -> Optional[BaseShape]:
    """Return the shape mapped to a single keyword, if any."""
    return SHAPE_KEYWORDS.get(keyword.lower())


def get_horror_intensity(keyword: str) -> int:
    return HORROR_KEYWORDS.get(keyword.lower(), 0)


def get_character_type_by_keyword(keyword: str) -> Optional[CharacterType]:
    return CHARACTER_TYPE_KEYWORDS.get(keyword.lower())
