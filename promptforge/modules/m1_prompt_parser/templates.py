"""
#WHERE
    Used by m7_assembler/scene_assembler.py when PipelineConfig.use_templates
    is on; browsable through pipeline.Pipeline.templates().

#WHAT
    Curated creation templates (horror / editorial / hybrid).  Each template
    is a keyword-scored SceneConfig fragment that the scene assembler lays
    under the parsed config.

#INPUT
    Prompt string (scoring) or (template config, parsed config) pair (merge).

#OUTPUT
    CreationTemplate | None, merged SceneConfig.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, fields, replace
from typing import List, Optional

from promptforge.shared.vocabulary import AnimationType, BaseShape, DistortionType, ThemeCategory
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
)

log = logging.getLogger(__name__)

KEYWORD_SCORE = 2
NAME_SCORE = 3
MIN_TEMPLATE_SCORE = 2


@dataclass(slots=True, frozen=True)
class CreationTemplate:
    id: str
    name: str
    description: str
    category: ThemeCategory
    keywords: tuple[str, ...]
    base_config: SceneConfig
    suggested_prompts: tuple[str, ...] = field(default_factory=tuple)

    def score(self, prompt: str) -> int:
        text = prompt.lower()
        total = sum(KEYWORD_SCORE for kw in self.keywords if kw in text)
        if self.name.lower() in text:
            total += NAME_SCORE
        return total


def _anim(kind: AnimationType, speed: float, intensity: float) -> AnimationSpec:
    return AnimationSpec(type=kind, speed=speed, intensity=intensity, loop=True)


# ── Horror ───────────────────────────────────────────────────────────────

HORROR_TEMPLATES: tuple[CreationTemplate, ...] = (
    CreationTemplate(
        id="spectral-orb",
        name="Spectral Orb",
        description="A ghostly glowing sphere with ethereal particles",
        category=ThemeCategory.HORROR,
        keywords=("ghost", "spectral", "ethereal", "spirit", "orb", "glow"),
        base_config=SceneConfig(
            base_shape=BaseShape.SPHERE,
            scale=(1.5, 1.5, 1.5),
            materials=MaterialConfig(color="#00ffaa", roughness=0.1, metalness=0.0,
                                     emissive="#00ffaa", emissive_intensity=2.0,
                                     transparent=True, opacity=0.7),
            atmosphere=AtmosphereConfig(
                particles=ParticleConfig(count=50, color="#00ffaa", size=0.05, opacity=0.6,
                                         speed=0.3, spread=3.0, emissive=True),
                post_processing=PostProcessingConfig(bloom=True),
            ),
            animations=[_anim(AnimationType.FLOAT, 0.5, 0.3), _anim(AnimationType.PULSE, 2.0, 0.2)],
            theme=ThemeCategory.HORROR, horror_level=4, complexity=5,
            tags=["spectral", "glowing", "floating"],
        ),
        suggested_prompts=("A glowing spectral orb floating in darkness",
                           "An ethereal green sphere with ghostly particles"),
    ),
    CreationTemplate(
        id="twisted-tree",
        name="Twisted Dead Tree",
        description="A gnarled, corrupted tree with decaying bark",
        category=ThemeCategory.HORROR,
        keywords=("tree", "twisted", "dead", "gnarled", "decay", "forest"),
        base_config=SceneConfig(
            base_shape=BaseShape.ORGANIC,
            scale=(1.0, 2.5, 1.0),
            materials=MaterialConfig(color="#2a1a0f", roughness=0.95, metalness=0.0),
            modifiers=GeometryModifiers(twisted=True, decayed=True,
                                        distortion=DistortionSpec(DistortionType.NOISE, 0.4, 1.5)),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#1a1a1a", 2, 15, 0.06),
                lighting=[LightConfig("point", "#ff6600", 2.0, (0.0, 3.0, 2.0), True)],
            ),
            theme=ThemeCategory.HORROR, horror_level=7, complexity=7,
            tags=["organic", "twisted", "decay", "tree"],
        ),
        suggested_prompts=("A twisted dead tree in haunted fog",),
    ),
    CreationTemplate(
        id="cursed-cube",
        name="Cursed Monolith",
        description="A dark metallic cube with pulsing red veins",
        category=ThemeCategory.HORROR,
        keywords=("cube", "monolith", "cursed", "metal", "dark", "ominous"),
        base_config=SceneConfig(
            base_shape=BaseShape.BOX,
            scale=(1.5, 2.0, 1.5),
            materials=MaterialConfig(color="#0a0a0a", roughness=0.2, metalness=0.95,
                                     emissive="#330000", emissive_intensity=1.5),
            modifiers=GeometryModifiers(sharp=True,
                                        distortion=DistortionSpec(DistortionType.NOISE, 0.1, 2.0)),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#0d0000", 1, 20),
                lighting=[LightConfig("spot", "#ff0033", 4.0, (0.0, 5.0, 0.0), True)],
                post_processing=PostProcessingConfig(bloom=True, vignette=True),
            ),
            animations=[_anim(AnimationType.PULSE, 1.5, 0.3), _anim(AnimationType.ROTATE, 0.2, 1.0)],
            theme=ThemeCategory.HORROR, horror_level=8, complexity=6,
            tags=["cursed", "monolith", "metallic", "glowing"],
        ),
        suggested_prompts=("A dark cursed monolith with glowing red cracks",),
    ),
    CreationTemplate(
        id="blood-sphere",
        name="Blood Moon",
        description="A deep red sphere with dripping texture",
        category=ThemeCategory.HORROR,
        keywords=("blood", "red", "moon", "drip", "crimson"),
        base_config=SceneConfig(
            base_shape=BaseShape.SPHERE,
            scale=(2.0, 2.0, 2.0),
            materials=MaterialConfig(color="#8b0000", roughness=0.4, metalness=0.3,
                                     emissive="#ff0000", emissive_intensity=0.8),
            modifiers=GeometryModifiers(distortion=DistortionSpec(DistortionType.MELT, 0.5, 1.0)),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#2a0000", 3, 25),
                lighting=[LightConfig("point", "#ff0000", 3.0, (0.0, 0.0, 0.0))],
                post_processing=PostProcessingConfig(bloom=True, vignette=True),
            ),
            animations=[_anim(AnimationType.PULSE, 0.8, 0.2)],
            theme=ThemeCategory.HORROR, horror_level=9, complexity=5,
            tags=["blood", "red", "glowing", "dripping"],
        ),
        suggested_prompts=("A blood moon with dripping texture",),
    ),
    CreationTemplate(
        id="gothic-arch",
        name="Gothic Cathedral Arch",
        description="A towering gothic archway shrouded in darkness",
        category=ThemeCategory.HORROR,
        keywords=("gothic", "cathedral", "arch", "architecture", "church"),
        base_config=SceneConfig(
            base_shape=BaseShape.EXTRUSION,
            scale=(2.0, 3.0, 1.0),
            materials=MaterialConfig(color="#1a1a1a", roughness=0.8, metalness=0.1),
            modifiers=GeometryModifiers(decayed=True, sharp=True),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#0a0a0a", 2, 20, 0.08),
                lighting=[LightConfig("spot", "#6666ff", 2.0, (0.0, 8.0, 5.0), True)],
                post_processing=PostProcessingConfig(vignette=True),
            ),
            theme=ThemeCategory.HORROR, horror_level=6, complexity=7,
            tags=["gothic", "architecture", "dark"],
        ),
        suggested_prompts=("A gothic cathedral arch in darkness",),
    ),
    CreationTemplate(
        id="fractal-nightmare",
        name="Fractal Nightmare",
        description="An impossible recursive structure that defies geometry",
        category=ThemeCategory.HORROR,
        keywords=("fractal", "impossible", "recursive", "cosmic", "eldritch"),
        base_config=SceneConfig(
            base_shape=BaseShape.FRACTAL,
            scale=(1.5, 1.5, 1.5),
            materials=MaterialConfig(color="#660066", roughness=0.3, metalness=0.7,
                                     emissive="#ff00ff", emissive_intensity=1.0),
            atmosphere=AtmosphereConfig(
                lighting=[LightConfig("point", "#ff00ff", 3.0, (0.0, 0.0, 0.0))],
                post_processing=PostProcessingConfig(bloom=True, chromatic_aberration=True),
            ),
            animations=[_anim(AnimationType.ROTATE, 0.3, 1.0), _anim(AnimationType.PHASE_SHIFT, 2.0, 1.0)],
            theme=ThemeCategory.HORROR, horror_level=10, complexity=9,
            tags=["fractal", "cosmic", "impossible", "eldritch"],
        ),
        suggested_prompts=("An impossible fractal structure from another dimension",),
    ),
    CreationTemplate(
        id="shadow-hands",
        name="Grasping Shadows",
        description="Ethereal shadow hands reaching from darkness",
        category=ThemeCategory.HORROR,
        keywords=("shadow", "hands", "reach", "grasp", "dark"),
        base_config=SceneConfig(
            base_shape=BaseShape.ORGANIC,
            scale=(1.0, 2.0, 0.3),
            materials=MaterialConfig(color="#000000", roughness=0.9, metalness=0.0,
                                     transparent=True, opacity=0.6),
            modifiers=GeometryModifiers(organic=True, twisted=True),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#000000", 1, 10, 0.1),
                particles=ParticleConfig(count=100, color="#000000", size=0.03, opacity=0.4,
                                         speed=0.2, spread=5.0),
            ),
            animations=[_anim(AnimationType.DRIFT, 0.3, 0.5)],
            theme=ThemeCategory.HORROR, horror_level=7, complexity=6,
            tags=["shadow", "organic", "ethereal"],
        ),
        suggested_prompts=("Shadow hands reaching from the darkness",),
    ),
)

# ── Editorial ────────────────────────────────────────────────────────────

EDITORIAL_TEMPLATES: tuple[CreationTemplate, ...] = (
    CreationTemplate(
        id="floating-quote",
        name="Floating Quote Block",
        description="An elegant 3D quote block with soft lighting",
        category=ThemeCategory.EDITORIAL,
        keywords=("quote", "text", "block", "pullquote", "editorial"),
        base_config=SceneConfig(
            base_shape=BaseShape.BOX,
            scale=(2.5, 1.5, 0.3),
            materials=MaterialConfig(color="#f5f5f0", roughness=0.7, metalness=0.0),
            atmosphere=AtmosphereConfig(
                lighting=[LightConfig("spot", "#ffffff", 2.0, (3.0, 5.0, 3.0), True)],
            ),
            animations=[_anim(AnimationType.FLOAT, 0.5, 0.2)],
            theme=ThemeCategory.EDITORIAL, horror_level=0, complexity=3,
            tags=["editorial", "quote", "floating"],
        ),
        suggested_prompts=("A floating quote block with elegant typography",),
    ),
    CreationTemplate(
        id="data-column",
        name="Data Visualization Column",
        description="A 3D bar chart column representing data",
        category=ThemeCategory.EDITORIAL,
        keywords=("data", "chart", "infographic", "column", "visualization"),
        base_config=SceneConfig(
            base_shape=BaseShape.CYLINDER,
            scale=(0.5, 2.0, 0.5),
            materials=MaterialConfig(color="#0066cc", roughness=0.3, metalness=0.2,
                                     emissive="#0099ff", emissive_intensity=0.3),
            atmosphere=AtmosphereConfig(
                lighting=[LightConfig("directional", "#ffffff", 1.5, (5.0, 5.0, 5.0))],
            ),
            theme=ThemeCategory.EDITORIAL, horror_level=0, complexity=3,
            tags=["data", "chart", "infographic"],
        ),
        suggested_prompts=("A glowing data column",),
    ),
    CreationTemplate(
        id="paper-stack",
        name="Layered Paper Stack",
        description="Stacked paper sheets representing content layers",
        category=ThemeCategory.EDITORIAL,
        keywords=("paper", "stack", "layers", "document", "sheets"),
        base_config=SceneConfig(
            base_shape=BaseShape.BOX,
            scale=(2.0, 0.1, 1.5),
            position=(0.0, 0.0, 0.0),
            materials=MaterialConfig(color="#ffffff", roughness=0.8, metalness=0.0),
            atmosphere=AtmosphereConfig(
                lighting=[LightConfig("directional", "#ffffee", 1.2, (5.0, 8.0, 3.0), True)],
            ),
            theme=ThemeCategory.EDITORIAL, horror_level=0, complexity=3,
            tags=["paper", "document", "layers"],
        ),
        suggested_prompts=("A stack of paper documents",),
    ),
    CreationTemplate(
        id="highlight-marker",
        name="Highlight Marker Stroke",
        description="A translucent highlighter mark emphasizing content",
        category=ThemeCategory.EDITORIAL,
        keywords=("highlight", "marker", "emphasize", "yellow", "accent"),
        base_config=SceneConfig(
            base_shape=BaseShape.BOX,
            scale=(3.0, 0.3, 0.1),
            materials=MaterialConfig(color="#ffff00", roughness=0.2, metalness=0.0,
                                     transparent=True, opacity=0.5),
            theme=ThemeCategory.EDITORIAL, horror_level=0, complexity=2,
            tags=["highlight", "accent", "editorial"],
        ),
        suggested_prompts=("A yellow highlighter mark",),
    ),
)

# ── Hybrid ───────────────────────────────────────────────────────────────

HYBRID_TEMPLATES: tuple[CreationTemplate, ...] = (
    CreationTemplate(
        id="bleeding-text",
        name="Bleeding Typography",
        description="Text that appears to bleed ink into darkness",
        category=ThemeCategory.HYBRID,
        keywords=("text", "blood", "ink", "bleed", "typography", "horror"),
        base_config=SceneConfig(
            base_shape=BaseShape.TEXT,
            scale=(1.2, 1.2, 0.4),
            materials=MaterialConfig(color="#8b0000", roughness=0.5, metalness=0.2,
                                     emissive="#ff0000", emissive_intensity=0.8),
            modifiers=GeometryModifiers(distortion=DistortionSpec(DistortionType.MELT, 0.4, 1.0)),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#0a0000", 2, 15),
                particles=ParticleConfig(count=80, color="#8b0000", size=0.04, opacity=0.7,
                                         speed=0.2, spread=4.0),
                lighting=[LightConfig("spot", "#ff0000", 2.5, (0.0, 5.0, 3.0), True)],
                post_processing=PostProcessingConfig(bloom=True, vignette=True),
            ),
            theme=ThemeCategory.HYBRID, horror_level=8, complexity=7,
            tags=["text", "horror", "bleeding", "typography"],
            text="HORROR",
        ),
        suggested_prompts=("Typography that bleeds ink", "Melting letters in crimson"),
    ),
    CreationTemplate(
        id="haunted-newspaper",
        name="Haunted Newspaper",
        description="An old newspaper page with spectral text",
        category=ThemeCategory.HYBRID,
        keywords=("newspaper", "haunted", "paper", "old", "spectral"),
        base_config=SceneConfig(
            base_shape=BaseShape.BOX,
            scale=(2.0, 2.8, 0.1),
            materials=MaterialConfig(color="#d4c4a8", roughness=0.9, metalness=0.0),
            modifiers=GeometryModifiers(decayed=True,
                                        distortion=DistortionSpec(DistortionType.NOISE, 0.2, 3.0)),
            atmosphere=AtmosphereConfig(
                fog=FogConfig("#3a3a3a", 3, 20),
                particles=ParticleConfig(count=60, color="#00ff88", size=0.03, opacity=0.4,
                                         speed=0.15, spread=3.0, emissive=True),
                lighting=[LightConfig("spot", "#88ff88", 1.5, (0.0, 3.0, 2.0))],
            ),
            animations=[_anim(AnimationType.FLOAT, 0.3, 0.25), _anim(AnimationType.FLICKER, 3.0, 0.3)],
            theme=ThemeCategory.HYBRID, horror_level=5, complexity=6,
            tags=["newspaper", "haunted", "spectral", "editorial"],
        ),
        suggested_prompts=("A haunted newspaper from the past",),
    ),
    CreationTemplate(
        id="data-corruption",
        name="Corrupted Data Visualization",
        description="An infographic twisted by digital corruption",
        category=ThemeCategory.HYBRID,
        keywords=("data", "corruption", "glitch", "infographic", "digital"),
        base_config=SceneConfig(
            base_shape=BaseShape.CYLINDER,
            scale=(0.6, 2.5, 0.6),
            materials=MaterialConfig(color="#00ffff", roughness=0.2, metalness=0.8,
                                     emissive="#ff00ff", emissive_intensity=1.2),
            modifiers=GeometryModifiers(
                fractured=True,
                distortion=DistortionSpec(DistortionType.GLITCH, 0.6, 2.0, animate=True),
            ),
            atmosphere=AtmosphereConfig(
                lighting=[LightConfig("point", "#ff00ff", 3.0, (0.0, 0.0, 0.0))],
                post_processing=PostProcessingConfig(bloom=True, chromatic_aberration=True, glitch=True),
            ),
            animations=[_anim(AnimationType.GLITCH, 5.0, 0.8), _anim(AnimationType.ROTATE, 1.0, 1.0)],
            theme=ThemeCategory.HYBRID, horror_level=7, complexity=8,
            tags=["data", "glitch", "corruption", "digital"],
        ),
        suggested_prompts=("A glitching data visualization",),
    ),
)

ALL_TEMPLATES: tuple[CreationTemplate, ...] = HORROR_TEMPLATES + EDITORIAL_TEMPLATES + HYBRID_TEMPLATES


def get_templates_by_category(category: ThemeCategory) -> List[CreationTemplate]:
    return [t for t in ALL_TEMPLATES if t.category is category]


def get_template_by_id(template_id: str) -> Optional[CreationTemplate]:
    return next((t for t in ALL_TEMPLATES if t.id == template_id), None)


def search_templates(query: str) -> List[CreationTemplate]:
    """Templates whose name, description or any keyword contains *query*."""
    q = query.lower()
    return [
        t for t in ALL_TEMPLATES
        if q in t.name.lower() or q in t.description.lower() or any(q in kw for kw in t.keywords)
    ]


def find_best_template(prompt: Optional[str]) -> Optional[CreationTemplate]:
    """Highest-scoring template, or None below MIN_TEMPLATE_SCORE.  Earlier templates win ties."""
    best, best_score = None, 0
    for template in ALL_TEMPLATES:
        score = template.score(prompt or "")
        if score > best_score:
            best, best_score = template, score
    if best_score < MIN_TEMPLATE_SCORE:
        return None
    log.debug("[M1] template match: %s (score %d)", best.id, best_score)
    return best


def _merge_defaults(base, override):
    """Field-wise merge of two dataclasses: fields left at their default in
    *override* are taken from *base*."""
    blank = type(override)()
    changes = {
        f.name: copy.deepcopy(getattr(base, f.name))
        for f in fields(override)
        if getattr(override, f.name) == getattr(blank, f.name)
    }
    return replace(override, **changes)


def merge_configs(template: SceneConfig, parsed: SceneConfig) -> SceneConfig:
    """Lay *parsed* over a template's base config.

    The parsed prompt wins wherever it says something; template values fill
    shape, scale, material and modifier fields the prompt left at their
    defaults, plus fog, lighting, particles, post-processing and animations
    when the prompt produced none.  Tags are the ordered union of both.
    The template itself is never mutated.
    """
    blank = SceneConfig()
    atmosphere = AtmosphereConfig(
        fog=parsed.atmosphere.fog or copy.deepcopy(template.atmosphere.fog),
        particles=parsed.atmosphere.particles or copy.deepcopy(template.atmosphere.particles),
        lighting=parsed.atmosphere.lighting or copy.deepcopy(template.atmosphere.lighting),
        post_processing=parsed.atmosphere.post_processing
        or copy.deepcopy(template.atmosphere.post_processing),
    )
    return replace(
        parsed,
        base_shape=template.base_shape if parsed.base_shape == blank.base_shape else parsed.base_shape,
        scale=template.scale if parsed.scale == blank.scale else parsed.scale,
        position=parsed.position or template.position,
        rotation=parsed.rotation or template.rotation,
        materials=_merge_defaults(template.materials, parsed.materials),
        modifiers=_merge_defaults(template.modifiers, parsed.modifiers),
        atmosphere=atmosphere,
        animations=parsed.animations or copy.deepcopy(template.animations),
        tags=list(dict.fromkeys(template.tags + parsed.tags)),
        text=parsed.text or template.text,
    )
