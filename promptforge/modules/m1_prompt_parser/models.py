"""
#WHERE
    Used by scene_parser.py, character_parser.py, templates.py, the geometry
    builder, the material composer, the assemblers and the tests.

#WHAT
    M1 → M2/M3/M4 contract: the scene descriptor (SceneConfig and its
    material / modifier / atmosphere / animation parts) and the character
    descriptor (CharacterIntent).

#INPUT
    Values derived by the parsers from a prompt string.

#OUTPUT
    SceneConfig and CharacterIntent dataclass instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

from promptforge.shared.constants import BASE_COMPLEXITY, DEFAULT_COLOR, SCORE_MAX, SCORE_MIN
from promptforge.shared.vocabulary import (
    AnimationType,
    BaseShape,
    CharacterAnimationPreset,
    CharacterType,
    DistortionType,
    TextureHint,
    ThemeCategory,
)

Vec3 = Tuple[float, float, float]


def clamp_score(value: float) -> int:
    return int(min(SCORE_MAX, max(SCORE_MIN, value)))


@dataclass(slots=True)
class MaterialConfig:
    color: str = DEFAULT_COLOR
    roughness: float = 0.5
    metalness: float = 0.1
    emissive: Optional[str] = None
    emissive_intensity: Optional[float] = None
    transparent: bool = False
    opacity: Optional[float] = None
    transmission: Optional[float] = None
    ior: Optional[float] = None
    thickness: Optional[float] = None
    clearcoat: Optional[float] = None
    wireframe: bool = False


@dataclass(slots=True)
class DistortionSpec:
    type: DistortionType
    intensity: float = 0.5
    frequency: float = 1.0
    seed: int = 0
    animate: bool = False


_MODIFIER_FLAGS = ("twisted", "decayed", "fractured", "organic", "hollow", "sharp", "smooth")


@dataclass(slots=True)
class GeometryModifiers:
    twisted: bool = False
    decayed: bool = False
    fractured: bool = False
    organic: bool = False
    hollow: bool = False
    sharp: bool = False
    smooth: bool = False
    distortion: Optional[DistortionSpec] = None

    def active_flags(self) -> List[str]:
        return [name for name in _MODIFIER_FLAGS if getattr(self, name)]

    def set_flag(self, name: str) -> None:
        if name not in _MODIFIER_FLAGS:
            raise ValueError(f"Unknown modifier: {name}")
        setattr(self, name, True)

    @property
    def is_empty(self) -> bool:
        return not self.active_flags() and self.distortion is None


@dataclass(slots=True)
class FogConfig:
    color: str
    near: float
    far: float
    density: Optional[float] = None


@dataclass(slots=True)
class LightConfig:
    type: str                       # point | spot | directional | ambient
    color: str
    intensity: float
    position: Optional[Vec3] = None
    cast_shadow: bool = False


@dataclass(slots=True)
class ParticleConfig:
    count: int
    color: str
    size: float
    opacity: float
    speed: float
    spread: float
    emissive: bool = False


@dataclass(slots=True)
class PostProcessingConfig:
    bloom: bool = False
    vignette: bool = False
    chromatic_aberration: bool = False
    glitch: bool = False

    def active_count(self) -> int:
        return sum(bool(getattr(self, f.name)) for f in fields(self))


@dataclass(slots=True)
class AtmosphereConfig:
    fog: Optional[FogConfig] = None
    particles: Optional[ParticleConfig] = None
    lighting: List[LightConfig] = field(default_factory=list)
    post_processing: Optional[PostProcessingConfig] = None


@dataclass(slots=True)
class AnimationSpec:
    type: AnimationType
    speed: float = 1.0
    intensity: float = 1.0
    loop: bool = True


@dataclass(slots=True)
class SceneConfig:
    """Scene descriptor.  Scores are clamped to [0, 10] on construction."""
    base_shape: BaseShape = BaseShape.SPHERE
    scale: Vec3 = (1.5, 1.5, 1.5)
    position: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    materials: MaterialConfig = field(default_factory=MaterialConfig)
    modifiers: GeometryModifiers = field(default_factory=GeometryModifiers)
    atmosphere: AtmosphereConfig = field(default_factory=AtmosphereConfig)
    animations: List[AnimationSpec] = field(default_factory=list)
    theme: ThemeCategory = ThemeCategory.ABSTRACT
    horror_level: int = 0
    complexity: int = BASE_COMPLEXITY
    tags: List[str] = field(default_factory=list)
    text: Optional[str] = None
    prompt: str = ""

    def __post_init__(self) -> None:
        self.horror_level = clamp_score(self.horror_level)
        self.complexity = clamp_score(self.complexity)
        if self.base_shape is None:
            self.base_shape = BaseShape.SPHERE


@dataclass(slots=True)
class CharacterFeatures:
    has_tail: bool = False
    has_wings: bool = False
    limb_count: int = 4
    special_features: List[str] = field(default_factory=list)


@dataclass(slots=True)
class MaterialHints:
    colors: List[str] = field(default_factory=list)
    texture: TextureHint = TextureHint.SMOOTH


@dataclass(slots=True)
class CharacterIntent:
    description: str = ""
    character_type: CharacterType = CharacterType.CREATURE
    features: CharacterFeatures = field(default_factory=CharacterFeatures)
    suggested_animations: List[CharacterAnimationPreset] = field(default_factory=list)
    material_hints: MaterialHints = field(default_factory=MaterialHints)
    scale: Vec3 = (1.0, 1.0, 1.0)
    tags: List[str] = field(default_factory=list)
    name: str = "Character"
