from __future__ import annotations

import logging
import math
import re
import zlib
from typing import List, Optional, Tuple

import numpy as np

from promptforge.shared.constants import BASE_COMPLEXITY
from promptforge.shared.vocabulary import (
    ANIMATION_KEYWORDS,
    ATMOSPHERE_PRESETS,
    AUTO_DISTORTION,
    BLOOM_PATTERN,
    CINEMATIC_PATTERN,
    COLOR_KEYWORDS,
    COMPOUND_COLORS,
    CONTEXT_TAGS,
    DEFAULT_SCENE_SCALE,
    EDITORIAL_PATTERN,
    FLOAT_HINTS,
    HORROR_BOOSTS,
    HORROR_KEYWORDS,
    HORROR_THRESHOLD,
    LIGHTING_PATTERN,
    MATERIAL_FLAG_PATTERNS,
    MODIFIER_KEYWORDS,
    PARTICLE_PATTERN,
    PROMPT_ENHANCEMENTS,
    SCENE_SCALE_WORDS,
    SHAPE_CONTEXT_RULES,
    SHAPE_KEYWORDS,
    AnimationType,
    BaseShape,
    ThemeCategory,
)
from .models import (
    AnimationSpec,
    AtmosphereConfig,
    DistortionSpec,
    FogConfig,
    GeometryModifiers,
    LightConfig,
    MaterialConfig,
    ParticleConfig,
    PostProcessingConfig,
    SceneConfig,
    Vec3,
    clamp_score,
)
from .rules import (
    PromptContext,
    Rule,
    all_matches,
    any_substring,
    first_match,
    matches,
    word_rules,
)

log = logging.getLogger(__name__)

# Tag emitted for each active modifier flag.
_MODIFIER_TAGS = {
    "twisted": "twisted", "decayed": "decay", "fractured": "fractured",
    "organic": "organic", "hollow": "hollow", "sharp": "sharp", "smooth": "smooth",
}

_QUOTED = re.compile(r"\"([^\"]+)\"|'([^']+)'")
_LETTER = re.compile(r"letter\s+[\"']?(\w)[\"']?", re.IGNORECASE)
_WORD   = re.compile(r"word\s+[\"']?(\w+)[\"']?", re.IGNORECASE)


def prompt_seed(text: str) -> int:
    """Stable 32-bit seed for a prompt; identical prompts give identical seeds."""
    return zlib.crc32(text.encode("utf-8", "surrogatepass")) & 0xFFFFFFFF


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScenePromptParser:
    """Rules-based prompt → SceneConfig parser.  Never raises."""

    def __init__(self) -> None:
        self._shape_rules: List[Rule[BaseShape]] = word_rules(SHAPE_KEYWORDS) + [
            Rule(any_substring(*subs), shape, "context") for subs, shape in SHAPE_CONTEXT_RULES
        ]
        self._boost_rules: List[Rule[int]] = [
            Rule(any_substring(*subs), boost) for subs, boost in HORROR_BOOSTS
        ]
        self._editorial = matches(EDITORIAL_PATTERN)
        self._cinematic = matches(CINEMATIC_PATTERN)
        self._material_flags = {name: matches(p) for name, p in MATERIAL_FLAG_PATTERNS.items()}
        self._compound_rules: List[Rule[str]] = [
            Rule(any_substring(*subs), hex_) for subs, hex_ in COMPOUND_COLORS
        ]
        self._tag_rules: List[Rule[str]] = [
            Rule(any_substring(sub), tag) for sub, tag in CONTEXT_TAGS
        ]
        self._lighting = matches(LIGHTING_PATTERN)
        self._particles = matches(PARTICLE_PATTERN)
        self._bloom = matches(BLOOM_PATTERN)

    def parse(self, prompt: Optional[str]) -> SceneConfig:
        ctx = PromptContext.from_prompt(prompt)

        shape = self.detect_shape(ctx)
        horror_level = self.score_horror(ctx)
        theme = self.resolve_theme(ctx, horror_level)
        colors = self.detect_colors(ctx)
        modifiers = self.detect_modifiers(ctx)
        materials = self.build_materials(ctx, colors, horror_level)
        animations = self.detect_animations(ctx)
        atmosphere = self.detect_atmosphere(ctx, horror_level)
        config = SceneConfig(
            base_shape=shape,
            scale=self.detect_scale(ctx),
            materials=materials,
            modifiers=modifiers,
            atmosphere=atmosphere,
            animations=animations,
            theme=theme,
            horror_level=horror_level,
            complexity=self.score_complexity(modifiers, animations, atmosphere),
            tags=self.generate_tags(ctx, theme, shape, modifiers),
            text=extract_text_content(ctx.prompt) if shape is BaseShape.TEXT else None,
            prompt=ctx.prompt,
        )
        log.debug("[M1] scene parse: shape=%s theme=%s horror=%d complexity=%d",
                  shape.value, theme.value, config.horror_level, config.complexity)
        return config

    # -- shape / theme -------------------------------------------------------

    def detect_shape(self, ctx: PromptContext) -> BaseShape:
        return first_match(self._shape_rules, ctx, BaseShape.SPHERE)

    def score_horror(self, ctx: PromptContext) -> int:
        hits = [HORROR_KEYWORDS[tok] for tok in ctx.tokens if tok in HORROR_KEYWORDS]
        level = _round_half_up(sum(hits) / len(hits)) if hits else 0
        level += sum(all_matches(self._boost_rules, ctx))
        return clamp_score(level)

    def resolve_theme(self, ctx: PromptContext, horror_level: int) -> ThemeCategory:
        editorial = self._editorial(ctx)
        cinematic = self._cinematic(ctx)
        horror = horror_level > HORROR_THRESHOLD
        if editorial and horror:
            return ThemeCategory.HYBRID
        if editorial:
            return ThemeCategory.EDITORIAL
        if cinematic:
            return ThemeCategory.CINEMATIC
        if horror:
            return ThemeCategory.HORROR
        return ThemeCategory.ABSTRACT

    # -- appearance ----------------------------------------------------------

    def detect_colors(self, ctx: PromptContext) -> List[str]:
        colors = [COLOR_KEYWORDS[tok] for tok in ctx.tokens if tok in COLOR_KEYWORDS]
        colors.extend(all_matches(self._compound_rules, ctx))
        return colors

    def detect_modifiers(self, ctx: PromptContext) -> GeometryModifiers:
        modifiers = GeometryModifiers()
        for tok in ctx.tokens:
            flag = MODIFIER_KEYWORDS.get(tok)
            if flag:
                modifiers.set_flag(flag)

        for flag, dtype in AUTO_DISTORTION:
            if getattr(modifiers, flag):
                modifiers.distortion = DistortionSpec(
                    type=dtype, intensity=0.5, frequency=1.0, seed=prompt_seed(ctx.text),
                )
                break
        return modifiers

    def build_materials(self, ctx: PromptContext, colors: List[str], horror_level: int) -> MaterialConfig:
        flags = {name: pred(ctx) for name, pred in self._material_flags.items()}
        base = colors[0] if colors else "#ffffff"

        if flags["rough"]:
            roughness = 0.9
        elif flags["metal"]:
            roughness = 0.2
        elif flags["glass"]:
            roughness = 0.1
        else:
            roughness = 0.5

        material = MaterialConfig(
            color=base,
            roughness=roughness,
            metalness=0.9 if flags["metal"] else 0.1,
        )
        if flags["glowing"]:
            material.emissive = colors[1] if len(colors) > 1 else base
            material.emissive_intensity = 2.0 if horror_level > 5 else 1.0
        if flags["transparent"]:
            material.transparent = True
            material.opacity = 0.7
        if flags["glass"]:
            material.transparent = True
            material.opacity = 0.3
            material.transmission = 1.0
            material.ior = 1.5
            material.thickness = 0.5
        return material

    def detect_animations(self, ctx: PromptContext) -> List[AnimationSpec]:
        animations = [
            AnimationSpec(type=ANIMATION_KEYWORDS[tok])
            for tok in ctx.tokens if tok in ANIMATION_KEYWORDS
        ]
        if any(ctx.contains(h) for h in FLOAT_HINTS) and \
                not any(a.type is AnimationType.FLOAT for a in animations):
            animations.append(AnimationSpec(type=AnimationType.FLOAT, speed=0.5, intensity=0.3))
        return animations

    def detect_atmosphere(self, ctx: PromptContext, horror_level: int) -> AtmosphereConfig:
        atmosphere = AtmosphereConfig()

        for keyword, preset in ATMOSPHERE_PRESETS.items():
            if ctx.contains(keyword):
                atmosphere.fog = FogConfig(preset.color, preset.near, preset.far, preset.density)
                break
        if atmosphere.fog and horror_level > 5:
            atmosphere.fog.color = "#111111"
            atmosphere.fog.density = 0.08

        if horror_level > 4 or self._lighting(ctx):
            atmosphere.lighting.append(LightConfig(
                type="spot",
                color="#ff0033" if horror_level > 6 else "#ffffff",
                intensity=3.0,
                position=(5.0, 10.0, 5.0),
                cast_shadow=True,
            ))

        if self._particles(ctx):
            atmosphere.particles = ParticleConfig(
                count=100, color="#ffffff", size=0.05, opacity=0.6, speed=0.5, spread=10.0,
            )

        if horror_level > 5 or self._bloom(ctx):
            atmosphere.post_processing = PostProcessingConfig(
                bloom=True,
                vignette=horror_level > 6,
                chromatic_aberration=horror_level > 7,
                glitch=ctx.contains("glitch"),
            )
        return atmosphere

    def detect_scale(self, ctx: PromptContext) -> Vec3:
        size = next((SCENE_SCALE_WORDS[t] for t in ctx.tokens if t in SCENE_SCALE_WORDS),
                    DEFAULT_SCENE_SCALE)
        return (size, size, size)

    # -- scores / tags -------------------------------------------------------

    @staticmethod
    def score_complexity(modifiers: GeometryModifiers, animations: List[AnimationSpec],
                         atmosphere: AtmosphereConfig) -> int:
        complexity = BASE_COMPLEXITY
        complexity += int(modifiers.twisted) + int(modifiers.decayed)
        complexity += 2 * (int(modifiers.fractured) + int(modifiers.organic)
                           + int(modifiers.distortion is not None))
        complexity += len(animations)
        if atmosphere.fog:
            complexity += 1
        if atmosphere.particles:
            complexity += 2
        if atmosphere.lighting:
            complexity += 1
        if atmosphere.post_processing:
            complexity += atmosphere.post_processing.active_count()
        return clamp_score(complexity)

    def generate_tags(self, ctx: PromptContext, theme: ThemeCategory, shape: BaseShape,
                      modifiers: GeometryModifiers) -> List[str]:
        tags = [theme.value, shape.value]
        tags += [_MODIFIER_TAGS[flag] for flag in modifiers.active_flags()]
        tags += all_matches(self._tag_rules, ctx)
        return list(dict.fromkeys(tags))


def extract_text_content(prompt: str) -> str:
    """Text to render for the ``text`` shape: quoted text > letter X > word Y > "A"."""
    if quoted := _QUOTED.search(prompt):
        return quoted.group(1) or quoted.group(2)
    if letter := _LETTER.search(prompt):
        return letter.group(1)
    if word := _WORD.search(prompt):
        return word.group(1)
    return "A"


def enhance_prompt(prompt: str, rng: Optional[np.random.Generator] = None) -> str:
    """Append one atmospheric phrase picked by a seeded generator."""
    rng = rng if rng is not None else np.random.default_rng(prompt_seed(prompt.lower()))
    return prompt + PROMPT_ENHANCEMENTS[int(rng.integers(len(PROMPT_ENHANCEMENTS)))]


_DEFAULT_PARSER: Optional[ScenePromptParser] = None


def parse_scene_prompt(prompt: Optional[str]) -> SceneConfig:
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = ScenePromptParser()
    return _DEFAULT_PARSER.parse(prompt)
